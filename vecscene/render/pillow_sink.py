"""Reference raster backend on top of Pillow.

Curves are sampled into polylines before drawing, so output is aliased and
approximate. Good enough for previews and tests, not a production rasterizer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, ImageChops, ImageDraw

from vecscene.config import settings
from vecscene.engine.paint import Color
from vecscene.engine.scene import Cap, FillRule, Join, StrokeStyle
from vecscene.utils.geometry import Affine, apply_to_points, mean_scale
from vecscene.utils.path import Outline

logger = logging.getLogger(__name__)


@dataclass
class RasterConfig:
    """Per-surface raster options."""

    # Samples per quadratic / cubic segment
    curve_samples: int = settings.curve_samples
    background: str = settings.background


class PillowSink:
    """Paint sink drawing into an RGBA ``PIL.Image``."""

    def __init__(self, width: int, height: int, config: RasterConfig | None = None) -> None:
        self.config = config or RasterConfig()
        self.image = Image.new("RGBA", (width, height), self.config.background)
        self._draw = ImageDraw.Draw(self.image)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def _polylines(self, outline: Outline, transform: Affine) -> list[tuple[list[tuple[float, float]], bool]]:
        result = []
        for pts, closed in outline.polylines(self.config.curve_samples):
            mapped = apply_to_points(transform, pts)
            result.append(([(float(x), float(y)) for x, y in mapped], closed))
        return result

    def fill(self, rule: FillRule, transform: Affine, color: Color, clip, outline: Outline) -> None:
        # Subpaths are combined as a union (non-zero, same winding) or xor (even-odd)
        combine = ImageChops.logical_xor if rule is FillRule.EVEN_ODD else ImageChops.logical_or
        mask = Image.new("1", self.image.size, 0)
        for pts, _ in self._polylines(outline, transform):
            if len(pts) < 3:
                continue
            layer = Image.new("1", self.image.size, 0)
            ImageDraw.Draw(layer).polygon(pts, fill=1)
            mask = combine(mask, layer)
        self.image.paste(color.to_rgba(), (0, 0), mask)

    def stroke(self, style: StrokeStyle, transform: Affine, color: Color, clip, outline: Outline) -> None:
        width = style.width * mean_scale(transform)
        pixel_width = max(1, int(round(width)))
        joint = "curve" if style.join is Join.ROUND else None
        rgba = color.to_rgba()
        for pts, closed in self._polylines(outline, transform):
            if closed and len(pts) > 1:
                pts = pts + [pts[0]]
            if len(pts) < 2:
                continue
            self._draw.line(pts, fill=rgba, width=pixel_width, joint=joint)
            if not closed and width > 1:
                r = width / 2
                for cap, (x, y) in ((style.start_cap, pts[0]), (style.end_cap, pts[-1])):
                    if cap is Cap.ROUND:
                        self._draw.ellipse((x - r, y - r, x + r, y + r), fill=rgba)

    def draw_image(self, image: Image.Image, transform: Affine) -> None:
        """Blit ``image`` with its top-left at the origin of ``transform``."""
        inverse = np.linalg.inv(transform)
        coeffs = (
            inverse[0, 0],
            inverse[0, 1],
            inverse[0, 2],
            inverse[1, 0],
            inverse[1, 1],
            inverse[1, 2],
        )
        warped = image.convert("RGBA").transform(
            self.image.size,
            Image.Transform.AFFINE,
            coeffs,
            resample=Image.Resampling.BILINEAR,
        )
        self.image.alpha_composite(warped)

    def save(self, path: str | Path) -> None:
        self.image.save(path)
        logger.info("Wrote %dx%d image to %s", self.image.width, self.image.height, path)
