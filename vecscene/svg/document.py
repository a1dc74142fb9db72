"""Parsed document tree handed to the flattener.

Transient: built by the parser, consumed once by ``flatten``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np

from vecscene.utils.geometry import Affine
from vecscene.utils.path import PathElement


@dataclass(frozen=True)
class FlatPaint:
    """Flat color paint. Channels are 0-255."""

    red: int
    green: int
    blue: int
    alpha: int = 255


@dataclass(frozen=True)
class LinearGradientPaint:
    id: str


@dataclass(frozen=True)
class RadialGradientPaint:
    id: str


@dataclass(frozen=True)
class PatternPaint:
    id: str


Paint = Union[FlatPaint, LinearGradientPaint, RadialGradientPaint, PatternPaint]


@dataclass
class PathNode:
    segments: list[PathElement] = field(default_factory=list)
    fill: Paint | None = None
    stroke: Paint | None = None
    # None when the node declares no stroke width
    stroke_width: float | None = None
    id: str = ""


@dataclass
class ImageNode:
    href: str = ""
    id: str = ""


@dataclass
class TextNode:
    text: str = ""
    id: str = ""


@dataclass
class GroupNode:
    # Relative to the parent group; the flattener composes these
    transform: Affine = field(default_factory=lambda: np.identity(3))
    children: list["Node"] = field(default_factory=list)
    id: str = ""


Node = Union[GroupNode, PathNode, ImageNode, TextNode]


@dataclass
class SvgDocument:
    """Represents a parsed SVG file."""

    root: GroupNode
    width: float = 0.0
    height: float = 0.0
    viewbox: tuple[float, float, float, float] | None = None


def count_paths(root: GroupNode) -> int:
    """Number of path nodes anywhere under ``root``."""
    count = 0
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, GroupNode):
            stack.extend(node.children)
        elif isinstance(node, PathNode):
            count += 1
    return count
