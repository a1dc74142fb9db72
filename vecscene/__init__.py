"""vecscene — flatten vector documents into draw-ready path records."""

from vecscene.engine.flatten import flatten, parse
from vecscene.engine.paint import Color
from vecscene.engine.scene import DrawablePath, FillRule, FlattenedScene, StrokeStyle
from vecscene.errors import DocumentParseError, SceneError, UnsupportedFeatureError

__all__ = [
    "Color",
    "DocumentParseError",
    "DrawablePath",
    "FillRule",
    "FlattenedScene",
    "SceneError",
    "StrokeStyle",
    "UnsupportedFeatureError",
    "flatten",
    "parse",
]

__version__ = "0.1.0"
