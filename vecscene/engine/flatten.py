"""Scene tree flattening: document tree → FlattenedScene.

Groups compose their transform onto the parent's (parent outer, child inner)
and paths become DrawablePath records in depth-first pre-order. Image and text
nodes, and any non-flat paint, abort the whole flatten.
"""

from __future__ import annotations

import logging

from vecscene.config import settings
from vecscene.engine.paint import resolve_paint
from vecscene.engine.reconstruct import reconstruct_outline
from vecscene.engine.scene import DrawablePath, FlattenedScene, StrokeStyle
from vecscene.errors import UnsupportedFeatureError
from vecscene.svg.document import GroupNode, ImageNode, Node, PathNode, TextNode
from vecscene.svg.parser import parse_document
from vecscene.utils.geometry import Affine, compose, identity

logger = logging.getLogger(__name__)


def parse(data: bytes) -> FlattenedScene:
    """Parse document bytes and flatten them in one step.

    Raises DocumentParseError for malformed input and UnsupportedFeatureError
    for documents using text, images or non-flat paint.
    """
    document = parse_document(data)
    return flatten(document.root)


def flatten(root: GroupNode, transform: Affine | None = None) -> FlattenedScene:
    """Flatten a document tree.

    ``transform`` is applied outside the root group's own transform.
    """
    records: list[DrawablePath] = []
    # Children are pushed in reverse so they pop in document order
    stack: list[tuple[Node, Affine]] = [(root, identity() if transform is None else transform)]

    while stack:
        node, parent_transform = stack.pop()
        if isinstance(node, GroupNode):
            composed = compose(parent_transform, node.transform)
            for child in reversed(node.children):
                stack.append((child, composed))
        elif isinstance(node, PathNode):
            records.append(_drawable(node, parent_transform))
        elif isinstance(node, ImageNode):
            logger.error("Image node %r cannot be flattened", node.id)
            raise UnsupportedFeatureError("image", node.href or node.id)
        elif isinstance(node, TextNode):
            logger.error("Text node %r cannot be flattened", node.id)
            raise UnsupportedFeatureError("text", node.id)
        else:
            raise UnsupportedFeatureError(type(node).__name__)

    logger.info("Flattened scene: %d records", len(records))
    return FlattenedScene(records)


def _drawable(node: PathNode, transform: Affine) -> DrawablePath:
    outline = reconstruct_outline(node.segments, transform)
    fill = resolve_paint(node.fill)
    stroke = resolve_paint(node.stroke)
    if node.stroke is not None and node.stroke_width is not None:
        style = StrokeStyle(width=node.stroke_width)
    elif node.stroke is not None:
        style = StrokeStyle(width=settings.default_stroke_width)
    else:
        style = StrokeStyle()
    return DrawablePath(outline=outline, fill=fill, stroke=stroke, stroke_style=style)

