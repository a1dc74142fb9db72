"""Tests for drawable object kinds."""

import numpy as np
import pytest

from tests.conftest import STROKED_SVG, TEXT_SVG

from vecscene.engine.paint import Color
from vecscene.errors import UnsupportedFeatureError
from vecscene.render.objects import ORANGE, Bitmap, DrawMode, Primitive, VectorSprite
from vecscene.utils.geometry import apply_to_point


def test_primitive_fills_orange_rect(sink):
    Primitive().draw(sink, (5.0, 7.0))
    (call,) = sink.calls
    assert call.kind == "fill"
    assert call.color == ORANGE
    assert call.outline.bounds() == pytest.approx((0.0, 0.0, 20.0, 40.0))
    assert apply_to_point(call.transform, (0, 0)) == pytest.approx((5.0, 7.0))


def test_bitmap_blits(sink):
    Bitmap(image="pixels", size=(26, 37)).draw(sink, (1.0, 2.0))
    (call,) = sink.calls
    assert call.kind == "image"
    assert call.image == "pixels"
    assert apply_to_point(call.transform, (0, 0)) == pytest.approx((1.0, 2.0))


@pytest.mark.parametrize(
    "mode, kinds",
    [
        (DrawMode.FILL, ["fill", "fill"]),
        (DrawMode.STROKE, ["stroke", "stroke", "stroke"]),
        (DrawMode.FILL_STROKE, ["fill", "stroke", "fill", "stroke"]),
    ],
)
def test_sprite_draw_modes(sink, mode, kinds):
    sprite = VectorSprite.from_bytes(STROKED_SVG, size=(40, 40), mode=mode)
    sprite.draw(sink, (0.0, 0.0))
    assert [c.kind for c in sink.calls] == kinds


def test_sprite_transform_scales_then_translates(sink):
    sprite = VectorSprite.from_bytes(STROKED_SVG, size=(20, 20), mode=DrawMode.FILL, scale=0.5)
    sprite.draw(sink, (100.0, 50.0))
    m = sink.calls[0].transform
    assert apply_to_point(m, (10, 10)) == pytest.approx((105.0, 55.0))


def test_clone_shares_scene(sink):
    sprite = VectorSprite.from_bytes(STROKED_SVG, size=(40, 40))
    clone = sprite.clone()
    assert clone.scene is not sprite.scene
    assert clone.scene.records is sprite.scene.records

    sprite.draw(sink, (0.0, 0.0))
    first = [(c.kind, c.color) for c in sink.calls]
    sink.clear()
    clone.draw(sink, (0.0, 0.0))
    assert [(c.kind, c.color) for c in sink.calls] == first
    assert first[0] == ("fill", Color(255, 0, 0))


def test_sprite_from_unsupported_document():
    with pytest.raises(UnsupportedFeatureError):
        VectorSprite.from_bytes(TEXT_SVG, size=(10, 10))


def test_primitive_transform_is_translation(sink):
    Primitive().draw(sink, (3.0, 4.0))
    np.testing.assert_allclose(sink.calls[0].transform[:2, :2], np.identity(2))
