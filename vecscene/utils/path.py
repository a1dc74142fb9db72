"""Outline model: path elements, an outline builder and the immutable outline.

The same element vocabulary describes a document's raw segment stream and a
reconstructed, draw-ready outline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

import numpy as np
from numpy.typing import NDArray
from svgpathtools import CubicBezier as _Cubic
from svgpathtools import Line as _Line
from svgpathtools import QuadraticBezier as _Quad

from vecscene.utils.geometry import Point


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class QuadTo:
    control: Point
    point: Point


@dataclass(frozen=True)
class CubicTo:
    control1: Point
    control2: Point
    point: Point


@dataclass(frozen=True)
class Close:
    pass


PathElement = Union[MoveTo, LineTo, QuadTo, CubicTo, Close]


def element_points(element: PathElement) -> tuple[Point, ...]:
    """All points carried by an element, controls first."""
    if isinstance(element, (MoveTo, LineTo)):
        return (element.point,)
    if isinstance(element, QuadTo):
        return (element.control, element.point)
    if isinstance(element, CubicTo):
        return (element.control1, element.control2, element.point)
    return ()


def _c(p: Point) -> complex:
    return complex(p[0], p[1])


@dataclass(frozen=True)
class Outline:
    """An ordered sequence of path elements describing one or more subpaths."""

    elements: tuple[PathElement, ...] = ()

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[PathElement]:
        return iter(self.elements)

    @property
    def is_empty(self) -> bool:
        return not self.elements

    def subpaths(self) -> list[tuple[PathElement, ...]]:
        """Split at every MoveTo. Each subpath starts with its MoveTo."""
        result: list[tuple[PathElement, ...]] = []
        current: list[PathElement] = []
        for el in self.elements:
            if isinstance(el, MoveTo) and current:
                result.append(tuple(current))
                current = []
            current.append(el)
        if current:
            result.append(tuple(current))
        return result

    def points(self) -> NDArray[np.float64]:
        """Nx2 array of every point (controls included) in element order."""
        pts = [p for el in self.elements for p in element_points(el)]
        if not pts:
            return np.empty((0, 2))
        return np.array(pts, dtype=np.float64)

    def _segments(self) -> Iterator[object]:
        """Yield the drawn geometry as svgpathtools segments. Close emits its closing line."""
        start: Point | None = None
        current: Point | None = None
        for el in self.elements:
            if isinstance(el, MoveTo):
                start = current = el.point
                continue
            if current is None:
                continue
            if isinstance(el, LineTo):
                seg = _Line(_c(current), _c(el.point))
                current = el.point
            elif isinstance(el, QuadTo):
                seg = _Quad(_c(current), _c(el.control), _c(el.point))
                current = el.point
            elif isinstance(el, CubicTo):
                seg = _Cubic(_c(current), _c(el.control1), _c(el.control2), _c(el.point))
                current = el.point
            else:
                if start is None or start == current:
                    current = start
                    continue
                seg = _Line(_c(current), _c(start))
                current = start
            yield seg

    def bounds(self) -> tuple[float, float, float, float] | None:
        """Exact (xmin, ymin, xmax, ymax) of the curve geometry, None when empty."""
        if self.is_empty:
            return None
        xs: list[float] = []
        ys: list[float] = []
        for el in self.elements:
            if isinstance(el, MoveTo):
                xs.append(el.point[0])
                ys.append(el.point[1])
        for seg in self._segments():
            xmin, xmax, ymin, ymax = seg.bbox()
            xs.extend((xmin, xmax))
            ys.extend((ymin, ymax))
        if not xs:
            return None
        return (float(min(xs)), float(min(ys)), float(max(xs)), float(max(ys)))

    def polylines(self, samples: int = 16) -> list[tuple[NDArray[np.float64], bool]]:
        """Approximate each subpath by a polyline.

        Returns (Nx2 points, closed) pairs. Curves are sampled at ``samples``
        evenly spaced parameter values; lines contribute their end point only.
        """
        result: list[tuple[NDArray[np.float64], bool]] = []
        pts: list[Point] = []
        closed = False
        start: Point | None = None

        def flush() -> None:
            if pts:
                result.append((np.array(pts, dtype=np.float64), closed))

        current: Point | None = None
        ts = np.linspace(0.0, 1.0, max(samples, 2))[1:]
        for el in self.elements:
            if isinstance(el, MoveTo):
                flush()
                pts = [el.point]
                closed = False
                start = current = el.point
            elif current is None:
                continue
            elif isinstance(el, LineTo):
                pts.append(el.point)
                current = el.point
            elif isinstance(el, QuadTo):
                seg = _Quad(_c(current), _c(el.control), _c(el.point))
                pts.extend((z.real, z.imag) for z in (seg.point(t) for t in ts))
                current = el.point
            elif isinstance(el, CubicTo):
                seg = _Cubic(_c(current), _c(el.control1), _c(el.control2), _c(el.point))
                pts.extend((z.real, z.imag) for z in (seg.point(t) for t in ts))
                current = el.point
            else:
                closed = True
                current = start
        flush()
        return result


class OutlineBuilder:
    """Mutable builder mirroring the usual move/line/quad/curve/close API."""

    def __init__(self) -> None:
        self._elements: list[PathElement] = []

    def move_to(self, point: Point) -> None:
        self._elements.append(MoveTo(point))

    def line_to(self, point: Point) -> None:
        self._elements.append(LineTo(point))

    def quad_to(self, control: Point, point: Point) -> None:
        self._elements.append(QuadTo(control, point))

    def curve_to(self, control1: Point, control2: Point, point: Point) -> None:
        self._elements.append(CubicTo(control1, control2, point))

    def close_path(self) -> None:
        self._elements.append(Close())

    def build(self) -> Outline:
        return Outline(tuple(self._elements))
