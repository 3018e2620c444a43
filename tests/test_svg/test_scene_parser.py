"""Tests for the SVG scene parser."""

import pytest

from icontable.errors import SceneParseError
from icontable.svg.parser import parse_length, parse_svg, parse_viewbox
from tests.conftest import ADD_SVG, CLIP_PATH_SVG


def test_parse_add():
    scene = parse_svg(ADD_SVG)
    assert scene.root.kind == "svg"
    assert [c.kind for c in scene.root.children] == ["path", "path"]
    assert scene.root.children[0].get("fill") == "none"
    assert scene.viewbox == (0.0, 0.0, 24.0, 24.0)
    assert scene.declared_size == (24.0, 24.0)


def test_nested_structure():
    scene = parse_svg(CLIP_PATH_SVG)
    defs, group = scene.root.children
    assert defs.kind == "defs"
    assert defs.children[0].kind == "clipPath"
    assert group.get("clip-path") == "url(#a)"
    assert group.children[0].kind == "path"


def test_style_merged_over_attributes():
    scene = parse_svg(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<path fill="red" style="fill:none; opacity: .5" d="M0 0"/></svg>'
    )
    path = scene.root.children[0]
    assert path.get("fill") == "none"
    assert path.get("opacity") == ".5"
    assert "style" not in path.attributes


def test_comments_and_bytes_input():
    scene = parse_svg(b'<?xml version="1.0" encoding="UTF-8"?><svg><!-- note --><circle r="1"/></svg>')
    assert [c.kind for c in scene.root.children] == ["circle"]
    assert scene.viewbox is None
    assert scene.declared_size is None


@pytest.mark.parametrize(
    "text",
    [
        "<svg><path></svg>",
        '<html xmlns="http://www.w3.org/1999/xhtml"/>',
        '<svg viewBox="0 0 24"/>',
        '<svg width="24mm" height="24mm"/>',
        '<svg viewBox="0 0 inf inf"/>',
        '<svg viewBox="0 0 1e999 1e999"/>',
        '<svg viewBox="0 0 nan 24"/>',
        '<svg width="1e999" height="1e999"/>',
    ],
)
def test_malformed_documents(text):
    with pytest.raises(SceneParseError):
        parse_svg(text)


def test_parse_length():
    assert parse_length(None) is None
    assert parse_length("24") == 24.0
    assert parse_length(" 48px ") == 48.0
    with pytest.raises(ValueError):
        parse_length("1em")


def test_parse_viewbox():
    assert parse_viewbox("0,0,24,24") == (0.0, 0.0, 24.0, 24.0)
    with pytest.raises(ValueError):
        parse_viewbox("0 0 0 24")
