"""Tests for cate.ui.gutter."""

from cate.grammars.base import Color, SpanStyle
from cate.ui.gutter import GUTTER_SEPARATOR, number_width, render_gutter


def test_number_width():
    assert number_width(None) == 1
    assert number_width(0) == 1
    assert number_width(9) == 1
    assert number_width(10) == 2
    assert number_width(12345) == 5


def test_gutter_is_right_aligned():
    assert render_gutter(7, 3).text == "  7" + GUTTER_SEPARATOR
    assert render_gutter(123, 3).text == "123  "


def test_gutter_wider_than_width():
    assert render_gutter(100, 2).text == "100  "


def test_gutter_style():
    style = SpanStyle(Color(0x5C, 0x63, 0x70))
    assert render_gutter(1, 1, style).style == style
    assert render_gutter(1, 1).style is None
