"""Tests for scene tree flattening."""

import numpy as np
import pytest

from tests.conftest import (
    GRADIENT_SVG,
    IMAGE_SVG,
    NESTED_ORDER_COLORS,
    NESTED_SVG,
    TEXT_SVG,
    TRANSLATED_SVG,
)

from vecscene.engine.flatten import flatten, parse
from vecscene.engine.paint import Color
from vecscene.engine.scene import StrokeStyle
from vecscene.errors import DocumentParseError, UnsupportedFeatureError
from vecscene.svg.document import (
    FlatPaint,
    GroupNode,
    ImageNode,
    LinearGradientPaint,
    PathNode,
    TextNode,
    count_paths,
)
from vecscene.svg.parser import parse_document
from vecscene.utils.geometry import scale, translate
from vecscene.utils.path import Close, LineTo, MoveTo

RED = FlatPaint(255, 0, 0)


def _path(x: float = 0.0, fill=RED, **kwargs) -> PathNode:
    return PathNode(segments=[MoveTo((x, 0)), LineTo((x + 1, 0)), Close()], fill=fill, **kwargs)


def test_record_count_equals_path_count():
    document = parse_document(NESTED_SVG)
    scene = flatten(document.root)
    assert len(scene) == count_paths(document.root) == 6


def test_records_follow_preorder():
    scene = parse(NESTED_SVG)
    colors = [(r.fill.r, r.fill.g, r.fill.b) for r in scene]
    assert colors == NESTED_ORDER_COLORS


def test_preorder_on_built_tree():
    root = GroupNode(
        children=[
            _path(0),
            GroupNode(children=[_path(1), GroupNode(children=[_path(2)]), _path(3)]),
            _path(4),
        ]
    )
    scene = flatten(root)
    starts = [r.outline.elements[0].point[0] for r in scene]
    assert starts == [0, 1, 2, 3, 4]


def test_nested_translations_compose():
    root = GroupNode(
        transform=translate(10, 0),
        children=[GroupNode(transform=translate(0, 10), children=[_path(0)])],
    )
    scene = flatten(root)
    assert scene[0].outline.elements[0] == MoveTo((10.0, 10.0))


def test_nested_translations_from_document():
    scene = parse(TRANSLATED_SVG)
    assert len(scene) == 1
    assert scene[0].outline.elements[0] == MoveTo((10.0, 10.0))


def test_parent_transform_is_outer():
    # scale(2) around translate(5, 0): point (0, 0) -> (10, 0)
    root = GroupNode(
        transform=scale(2),
        children=[GroupNode(transform=translate(5, 0), children=[_path(0)])],
    )
    scene = flatten(root)
    assert scene[0].outline.elements[0] == MoveTo((10.0, 0.0))


def test_outer_transform_argument():
    root = GroupNode(transform=translate(1, 1), children=[_path(0)])
    scene = flatten(root, translate(100, 0))
    assert scene[0].outline.elements[0] == MoveTo((101.0, 1.0))


def test_paint_and_stroke_style():
    root = GroupNode(
        children=[
            _path(0, fill=None, stroke=FlatPaint(0, 0, 255), stroke_width=3.0),
            _path(0, stroke=FlatPaint(0, 0, 0)),
            _path(0),
        ]
    )
    scene = flatten(root)
    assert scene[0].fill is None
    assert scene[0].stroke == Color(0, 0, 255)
    assert scene[0].stroke_style.width == 3.0
    # stroke without declared width gets the default width
    assert scene[1].stroke_style == StrokeStyle(width=1.0)
    assert scene[2].stroke is None
    assert scene[2].fill == Color(255, 0, 0)


def test_gradient_anywhere_fails_whole_document():
    with pytest.raises(UnsupportedFeatureError) as exc:
        parse(GRADIENT_SVG)
    assert exc.value.feature == "linear-gradient"


def test_gradient_stroke_fails():
    root = GroupNode(children=[_path(0), _path(1, stroke=LinearGradientPaint("g"))])
    with pytest.raises(UnsupportedFeatureError):
        flatten(root)


def test_text_node_fails():
    with pytest.raises(UnsupportedFeatureError) as exc:
        parse(TEXT_SVG)
    assert exc.value.feature == "text"


def test_image_node_fails():
    with pytest.raises(UnsupportedFeatureError) as exc:
        parse(IMAGE_SVG)
    assert exc.value.feature == "image"


def test_unsupported_nodes_in_built_tree():
    with pytest.raises(UnsupportedFeatureError):
        flatten(GroupNode(children=[_path(0), GroupNode(children=[TextNode("hi")])]))
    with pytest.raises(UnsupportedFeatureError):
        flatten(GroupNode(children=[ImageNode("x.png")]))


def test_malformed_bytes_fail_to_parse():
    with pytest.raises(DocumentParseError):
        parse(b"<svg><path")


def test_flattening_twice_is_stable():
    first = parse(NESTED_SVG)
    second = parse(NESTED_SVG)
    assert len(first) == len(second)
    for a, b in zip(first, second):
        assert a.fill == b.fill
        assert a.stroke == b.stroke
        assert a.stroke_style == b.stroke_style
        assert [type(e) for e in a.outline] == [type(e) for e in b.outline]
        np.testing.assert_allclose(a.outline.points(), b.outline.points())


def test_deep_nesting_does_not_recurse():
    node = _path(0)
    for _ in range(5000):
        node = GroupNode(transform=translate(0.001, 0), children=[node])
    scene = flatten(node)
    assert len(scene) == 1
    assert scene[0].outline.elements[0].point[0] == pytest.approx(5.0)


def test_empty_document():
    scene = flatten(GroupNode())
    assert len(scene) == 0
    assert scene.bounds() is None
