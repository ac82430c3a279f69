"""Visual tree, card layout and rasterizers."""

from ghcard.render.tree import Node, NodeKind, Style, TextRun
from ghcard.render.layout import build_profile_card, build_error_card
from ghcard.render.backend import RenderBackend, PillowBackend

__all__ = [
    "Node",
    "NodeKind",
    "Style",
    "TextRun",
    "build_profile_card",
    "build_error_card",
    "RenderBackend",
    "PillowBackend",
]
