"""Drawable object kinds placed on a canvas at a position.

A vector sprite flattens its document once; clones share the immutable scene.
Motion is the host's business: objects only know how to draw themselves.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, ClassVar

from vecscene.engine.flatten import parse
from vecscene.engine.paint import Color
from vecscene.engine.scene import FillRule, FlattenedScene
from vecscene.render.sink import PaintSink
from vecscene.utils import geometry
from vecscene.utils.path import OutlineBuilder

ORANGE = Color(255, 165, 0)


class DrawMode(enum.Enum):
    FILL = "fill"
    STROKE = "stroke"
    FILL_STROKE = "fill_stroke"


@dataclass(frozen=True)
class Primitive:
    """A flat orange rectangle."""

    SIZE: ClassVar[tuple[float, float]] = (20.0, 40.0)

    def draw(self, sink: PaintSink, pos: tuple[float, float]) -> None:
        w, h = self.SIZE
        builder = OutlineBuilder()
        builder.move_to((0.0, 0.0))
        builder.line_to((w, 0.0))
        builder.line_to((w, h))
        builder.line_to((0.0, h))
        builder.close_path()
        sink.fill(FillRule.NON_ZERO, geometry.translate(*pos), ORANGE, None, builder.build())

    def clone(self) -> "Primitive":
        return self


@dataclass(frozen=True)
class Bitmap:
    """A pre-decoded image blitted at its natural size."""

    image: Any
    size: tuple[float, float]

    def draw(self, sink: PaintSink, pos: tuple[float, float]) -> None:
        sink.draw_image(self.image, geometry.translate(*pos))

    def clone(self) -> "Bitmap":
        return self


@dataclass(frozen=True)
class VectorSprite:
    """A flattened vector document drawn with one draw mode."""

    scene: FlattenedScene
    size: tuple[float, float]
    mode: DrawMode = DrawMode.FILL_STROKE
    scale: float = 1.0

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        size: tuple[float, float],
        mode: DrawMode = DrawMode.FILL_STROKE,
        scale: float = 1.0,
    ) -> "VectorSprite":
        return cls(scene=parse(data), size=size, mode=mode, scale=scale)

    def draw(self, sink: PaintSink, pos: tuple[float, float]) -> None:
        transform = geometry.then_translate(geometry.scale(self.scale), *pos)
        if self.mode is DrawMode.FILL:
            self.scene.fill(sink, transform)
        elif self.mode is DrawMode.STROKE:
            self.scene.stroke(sink, transform)
        else:
            self.scene.fill_stroke(sink, transform)

    def clone(self) -> "VectorSprite":
        return VectorSprite(self.scene.copy(), self.size, self.mode, self.scale)
