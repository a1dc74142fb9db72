"""Typed errors raised while parsing and flattening vector documents."""

from __future__ import annotations


class SceneError(Exception):
    """Base error of the project."""


class DocumentParseError(SceneError, ValueError):
    """Malformed document bytes, XML, transform or path data."""


class UnsupportedFeatureError(SceneError, NotImplementedError):
    """The document uses a node or paint kind the flattener does not draw."""

    def __init__(self, feature: str, detail: str = "") -> None:
        self.feature = feature
        message = f"unsupported feature: {feature}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
