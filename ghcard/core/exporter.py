"""Export utilities for visual trees and rendered images."""

import json
from pathlib import Path

from ghcard.models.result import ImageResult
from ghcard.render.tree import Node


def to_json(tree: Node, indent: int = 2) -> str:
    """
    Convert a visual tree to a JSON string.

    Args:
        tree: Root node
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return tree.model_dump_json(indent=indent)


def to_dict(tree: Node) -> dict:
    """Convert a visual tree to a JSON-compatible dictionary."""
    return tree.model_dump(mode="json")


def load_json(filepath: str | Path) -> Node:
    """
    Load a visual tree from a JSON file.

    Args:
        filepath: Path to JSON file

    Returns:
        Node tree
    """
    data = json.loads(Path(filepath).read_text(encoding="utf-8"))
    return Node.model_validate(data)


def save_json(tree: Node, filepath: str | Path, indent: int = 2) -> Path:
    """
    Save a visual tree to a JSON file.

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(tree, indent=indent), encoding="utf-8")
    return path


def save_image(result: ImageResult, filepath: str | Path) -> Path:
    """
    Write rendered image bytes to disk.

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(result.content)
    return path
