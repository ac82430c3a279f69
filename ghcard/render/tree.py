"""Declarative visual tree handed to a rendering backend.

Nodes carry absolute geometry (pixels from the canvas origin) and style
attributes only. Nothing here knows how to draw; see ``ghcard.render.backend``.
"""

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel


class NodeKind(str, Enum):
    """Kind of visual node."""
    BOX = "box"
    TEXT = "text"
    IMAGE = "image"


class Style(BaseModel):
    """Paint attributes of a node."""

    model_config = {"frozen": True}

    background: str | None = None
    color: str | None = None
    border_color: str | None = None
    border_width: int = 0
    radius: int = 0
    # top-left, top-right, bottom-right, bottom-left
    rounded_corners: tuple[bool, bool, bool, bool] = (True, True, True, True)
    font_size: int = 0
    bold: bool = False


class TextRun(BaseModel):
    """A span of text on a single line, optionally recolored."""

    model_config = {"frozen": True}

    text: str
    color: str | None = None
    emoji: bool = False


class Node(BaseModel):
    """A box, a single line of text, or an image."""

    kind: NodeKind
    name: str | None = None
    x: int
    y: int
    width: int
    height: int
    style: Style = Style()
    runs: list[TextRun] = []
    src: str | None = None
    children: list["Node"] = []

    @property
    def text(self) -> str:
        """Concatenated text of the node's runs."""
        return "".join(run.text for run in self.runs)

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all descendants, depth first in paint order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> "Node | None":
        """First node in the subtree with the given name."""
        for node in self.walk():
            if node.name == name:
                return node
        return None

    def texts(self) -> list[str]:
        """Text of every text node in the subtree, in paint order."""
        return [node.text for node in self.walk() if node.kind == NodeKind.TEXT]


def box(x: int, y: int, width: int, height: int, style: Style | None = None,
        children: list[Node] | None = None, name: str | None = None) -> Node:
    return Node(
        kind=NodeKind.BOX,
        name=name,
        x=x,
        y=y,
        width=width,
        height=height,
        style=style or Style(),
        children=children or [],
    )


def text(x: int, y: int, width: int, height: int, runs: list[TextRun],
         style: Style, name: str | None = None) -> Node:
    return Node(
        kind=NodeKind.TEXT,
        name=name,
        x=x,
        y=y,
        width=width,
        height=height,
        style=style,
        runs=runs,
    )


def image(x: int, y: int, width: int, height: int, src: str,
          style: Style | None = None, name: str | None = None) -> Node:
    return Node(
        kind=NodeKind.IMAGE,
        name=name,
        x=x,
        y=y,
        width=width,
        height=height,
        style=style or Style(),
        src=src,
    )
