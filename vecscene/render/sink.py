"""Paint sink contract consumed by FlattenedScene and drawable objects.

Any backend with these three methods can be drawn into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

import numpy as np

from vecscene.engine.paint import Color
from vecscene.engine.scene import FillRule, StrokeStyle
from vecscene.utils.geometry import Affine
from vecscene.utils.path import Outline


class PaintSink(Protocol):
    def fill(
        self,
        rule: FillRule,
        transform: Affine,
        color: Color,
        clip: Affine | None,
        outline: Outline,
    ) -> None: ...

    def stroke(
        self,
        style: StrokeStyle,
        transform: Affine,
        color: Color,
        clip: Affine | None,
        outline: Outline,
    ) -> None: ...

    def draw_image(self, image: Any, transform: Affine) -> None: ...


@dataclass(frozen=True)
class DrawCall:
    kind: Literal["fill", "stroke", "image"]
    transform: Affine
    color: Color | None = None
    outline: Outline | None = None
    rule: FillRule | None = None
    style: StrokeStyle | None = None
    image: Any = None


@dataclass
class RecordingSink:
    """Keeps every request in call order."""

    calls: list[DrawCall] = field(default_factory=list)

    def fill(self, rule, transform, color, clip, outline) -> None:
        self.calls.append(
            DrawCall("fill", np.array(transform, copy=True), color=color, outline=outline, rule=rule)
        )

    def stroke(self, style, transform, color, clip, outline) -> None:
        self.calls.append(
            DrawCall("stroke", np.array(transform, copy=True), color=color, outline=outline, style=style)
        )

    def draw_image(self, image, transform) -> None:
        self.calls.append(DrawCall("image", np.array(transform, copy=True), image=image))

    @property
    def fills(self) -> list[DrawCall]:
        return [c for c in self.calls if c.kind == "fill"]

    @property
    def strokes(self) -> list[DrawCall]:
        return [c for c in self.calls if c.kind == "stroke"]

    def clear(self) -> None:
        self.calls.clear()
