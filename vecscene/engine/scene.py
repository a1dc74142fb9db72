"""Flattened scene — the immutable, draw-ready result of flattening a document.

Records keep document order, which is paint order: later records paint over
earlier ones. Outlines are already in the document's coordinate space; draw
calls only add the caller's final transform.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from vecscene.engine.paint import Color
from vecscene.utils.geometry import Affine, union_bbox
from vecscene.utils.path import Outline

if TYPE_CHECKING:
    from vecscene.render.sink import PaintSink


class FillRule(enum.Enum):
    NON_ZERO = "nonzero"
    EVEN_ODD = "evenodd"


class Join(enum.Enum):
    BEVEL = "bevel"
    MITER = "miter"
    ROUND = "round"


class Cap(enum.Enum):
    BUTT = "butt"
    SQUARE = "square"
    ROUND = "round"


@dataclass(frozen=True)
class StrokeStyle:
    width: float = 1.0
    join: Join = Join.ROUND
    miter_limit: float = 4.0
    start_cap: Cap = Cap.ROUND
    end_cap: Cap = Cap.ROUND


@dataclass(frozen=True)
class DrawablePath:
    """One flattened primitive: outline plus resolved paint."""

    outline: Outline
    fill: Color | None = None
    stroke: Color | None = None
    stroke_style: StrokeStyle = StrokeStyle()


class FlattenedScene:
    """Ordered, read-only sequence of drawable path records."""

    __slots__ = ("_records",)

    def __init__(self, records: tuple[DrawablePath, ...] | list[DrawablePath] = ()) -> None:
        self._records = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DrawablePath]:
        return iter(self._records)

    def __getitem__(self, index: int) -> DrawablePath:
        return self._records[index]

    def __repr__(self) -> str:
        return f"FlattenedScene({len(self._records)} records)"

    @property
    def records(self) -> tuple[DrawablePath, ...]:
        return self._records

    def copy(self) -> "FlattenedScene":
        """Records are immutable, so copies share them."""
        return FlattenedScene(self._records)

    def bounds(self) -> tuple[float, float, float, float] | None:
        """Union of outline bounds, ignoring stroke width."""
        boxes = [b for b in (r.outline.bounds() for r in self._records) if b is not None]
        return union_bbox(boxes)

    def fill(self, sink: "PaintSink", transform: Affine) -> None:
        """Fill every record that has a fill color. Strokes are not drawn."""
        for record in self._records:
            if record.fill is not None:
                sink.fill(FillRule.NON_ZERO, transform, record.fill, None, record.outline)

    def stroke(self, sink: "PaintSink", transform: Affine) -> None:
        """Stroke every record, falling back to the fill color when there is no stroke color."""
        for record in self._records:
            brush = record.stroke if record.stroke is not None else record.fill
            if brush is not None:
                sink.stroke(record.stroke_style, transform, brush, None, record.outline)

    def fill_stroke(self, sink: "PaintSink", transform: Affine) -> None:
        """Fill then stroke each record.

        Unlike ``stroke`` there is no fill-color fallback: a record without a
        stroke color is only filled.
        """
        for record in self._records:
            if record.fill is not None:
                sink.fill(FillRule.NON_ZERO, transform, record.fill, None, record.outline)
            if record.stroke is not None:
                sink.stroke(record.stroke_style, transform, record.stroke, None, record.outline)
