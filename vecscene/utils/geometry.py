"""Leaf-node geometry helpers. No engine imports.

Affine transforms are 3x3 matrices laid out as

    [[a, c, e],
     [b, d, f],
     [0, 0, 1]]

so a point (x, y) maps to (a*x + c*y + e, b*x + d*y + f).
"""

from __future__ import annotations

import warnings

import numpy as np
from numpy.typing import NDArray
from svgpathtools.parser import SVGSyntaxWarning, parse_transform

Point = tuple[float, float]
Affine = NDArray[np.float64]


def identity() -> Affine:
    return np.identity(3)


def translate(tx: float, ty: float) -> Affine:
    m = np.identity(3)
    m[0, 2] = tx
    m[1, 2] = ty
    return m


def scale(sx: float, sy: float | None = None) -> Affine:
    """Uniform scale when ``sy`` is omitted."""
    m = np.identity(3)
    m[0, 0] = sx
    m[1, 1] = sx if sy is None else sy
    return m


def compose(outer: Affine, inner: Affine) -> Affine:
    """``outer * inner``: ``inner`` is applied to points first."""
    return np.asarray(outer, dtype=np.float64) @ np.asarray(inner, dtype=np.float64)


def then_translate(matrix: Affine, tx: float, ty: float) -> Affine:
    """Apply ``matrix`` then translate the result by (tx, ty)."""
    return compose(translate(tx, ty), matrix)


def from_svg_transform(transform_str: str | None) -> Affine:
    """Parse an SVG ``transform`` attribute. Empty or missing -> identity.

    Raises ValueError on malformed input, including the parts svgpathtools
    would otherwise skip with a warning.
    """
    if not transform_str or not transform_str.strip():
        return identity()
    with warnings.catch_warnings():
        warnings.simplefilter("error", SVGSyntaxWarning)
        try:
            matrix = parse_transform(transform_str.strip())
        except SVGSyntaxWarning as e:
            raise ValueError(str(e)) from e
    return np.asarray(matrix, dtype=np.float64)


def apply_to_point(matrix: Affine, point: Point) -> Point:
    x, y = point
    return (
        float(matrix[0, 0] * x + matrix[0, 1] * y + matrix[0, 2]),
        float(matrix[1, 0] * x + matrix[1, 1] * y + matrix[1, 2]),
    )


def apply_to_points(matrix: Affine, points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Transform an Nx2 array of points."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return pts @ matrix[:2, :2].T + matrix[:2, 2]


def mean_scale(matrix: Affine) -> float:
    """Average linear scale factor, used to size stroke widths under a transform."""
    return float(np.sqrt(abs(np.linalg.det(matrix[:2, :2]))))


def is_identity(matrix: Affine, tol: float = 1e-12) -> bool:
    return bool(np.allclose(matrix, np.identity(3), atol=tol))


def union_bbox(
    boxes: list[tuple[float, float, float, float]],
) -> tuple[float, float, float, float] | None:
    if not boxes:
        return None
    arr = np.array(boxes, dtype=np.float64)
    return (
        float(arr[:, 0].min()),
        float(arr[:, 1].min()),
        float(arr[:, 2].max()),
        float(arr[:, 3].max()),
    )
