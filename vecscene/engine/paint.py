"""Paint resolution: document paint → flat drawing color."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from vecscene.errors import UnsupportedFeatureError
from vecscene.svg.document import (
    FlatPaint,
    LinearGradientPaint,
    Paint,
    PatternPaint,
    RadialGradientPaint,
)

logger = logging.getLogger(__name__)

_PAINT_FEATURES = {
    LinearGradientPaint: "linear-gradient",
    RadialGradientPaint: "radial-gradient",
    PatternPaint: "pattern",
}


@dataclass(frozen=True)
class Color:
    """8-bit RGBA color."""

    r: int
    g: int
    b: int
    a: int = 255

    def to_rgba(self) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


def resolve_paint(paint: Paint | None) -> Color | None:
    """Map a document paint to a color.

    None means the node does not paint that aspect. Only flat colors are
    supported; their alpha is dropped and the result is fully opaque.
    Anything else raises UnsupportedFeatureError.
    """
    if paint is None:
        return None
    if isinstance(paint, FlatPaint):
        return Color(paint.red, paint.green, paint.blue, 255)
    feature = _PAINT_FEATURES.get(type(paint), type(paint).__name__)
    logger.error("Unsupported paint %s (%r)", feature, getattr(paint, "id", ""))
    raise UnsupportedFeatureError(feature, f"paint reference {getattr(paint, 'id', '')!r}")
