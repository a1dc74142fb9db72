"""Segment stream → transformed outline.

A Close ends the current subpath but does not start a new one. A drawing
command that follows a Close without its own MoveTo starts a new subpath at the
most recent MoveTo point, so an implicit MoveTo is emitted before it.
"""

from __future__ import annotations

from typing import Iterable

from vecscene.utils.geometry import Affine, Point, apply_to_point
from vecscene.utils.path import (
    Close,
    CubicTo,
    LineTo,
    MoveTo,
    Outline,
    OutlineBuilder,
    PathElement,
    QuadTo,
)


def reconstruct_outline(segments: Iterable[PathElement], transform: Affine) -> Outline:
    """Build a draw-ready outline, applying ``transform`` to every point."""
    builder = OutlineBuilder()
    just_closed = False
    most_recent_initial: Point = (0.0, 0.0)

    def tx(p: Point) -> Point:
        return apply_to_point(transform, p)

    for seg in segments:
        if isinstance(seg, Close):
            just_closed = True
            builder.close_path()
            continue

        reopen = just_closed
        just_closed = False

        if isinstance(seg, MoveTo):
            most_recent_initial = seg.point
            builder.move_to(tx(seg.point))
        elif reopen:
            builder.move_to(tx(most_recent_initial))

        if isinstance(seg, LineTo):
            builder.line_to(tx(seg.point))
        elif isinstance(seg, QuadTo):
            builder.quad_to(tx(seg.control), tx(seg.point))
        elif isinstance(seg, CubicTo):
            builder.curve_to(tx(seg.control1), tx(seg.control2), tx(seg.point))

    return builder.build()
