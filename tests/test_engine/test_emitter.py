"""Tests for table building, rendering and atomic writes."""

import json
import os

import pytest

from icontable.engine.emitter import (
    build_table,
    format_number,
    render_json,
    render_python,
    write_atomic,
)
from icontable.engine.resolver import resolve_scene
from icontable.errors import IdentifierCollisionError
from icontable.models.geometry import (
    Circle,
    ClosePath,
    CurveTo,
    FlatShape,
    IconGeometry,
    LineTo,
    MoveTo,
    Point,
)
from icontable.models.icon import IconKey, ResolvedIcon
from icontable.svg.parser import parse_svg
from tests.conftest import ROUND_TRIP_SVG

SQUARE = (
    MoveTo(Point(0, 0)),
    LineTo(Point(1 / 3, 0)),
    LineTo(Point(1 / 3, 2 / 3)),
    ClosePath(),
)


def _icon(name, category="action", variant="normal", shapes=None):
    if shapes is None:
        shapes = (FlatShape(SQUARE, 1.0),)
    return ResolvedIcon(IconKey(category=category, name=name, variant=variant), 24.0, shapes)


@pytest.mark.parametrize(
    "value, expected",
    [(2, "2.00"), (1.5, "1.50"), (1.234, "1.23"), (1.236, "1.24"), (-0.001, "0.00"), (-3.5, "-3.50")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


class TestBuildTable:
    def test_groups_and_sorts(self):
        table = build_table([
            _icon("zoom_in"),
            _icon("add", category="content"),
            _icon("alarm"),
            _icon("alarm", variant="outlined"),
        ])
        assert list(table) == ["normal", "outlined"]
        assert list(table["normal"]) == ["action", "content"]
        assert list(table["normal"]["action"]) == ["alarm", "zoom_in"]
        assert table["outlined"]["action"]["alarm"].identifier == "OUTLINED_ALARM"

    def test_collision_detected(self):
        with pytest.raises(IdentifierCollisionError) as exc:
            build_table([_icon("Add"), _icon("add")])
        assert exc.value.identifier == "ADD"

    def test_collision_across_categories(self):
        with pytest.raises(IdentifierCollisionError):
            build_table([_icon("error", category="alert"), _icon("error", category="content")])


class TestRenderPython:
    def test_module_executes(self):
        circle = FlatShape(Circle(Point(12, 12), 10), 0.3)
        table = build_table([_icon("add"), _icon("3d_rotation", shapes=(circle,))])
        namespace: dict = {}
        exec(render_python(table), namespace)

        add = namespace["ADD"]
        assert isinstance(add, IconGeometry)
        assert add.identifier == "ADD"
        assert add.nominal_size == 24.0
        assert add.shapes[0].geometry[1] == LineTo(Point(0.33, 0))
        assert add.shapes[0].geometry[-1] == ClosePath()
        assert namespace["_3D_ROTATION"].shapes[0] == FlatShape(Circle(Point(12, 12), 10), 0.3)
        assert namespace["icon_table"]["normal"]["action"]["add"] is add

    def test_round_trip_commands_are_formatted(self):
        icon = resolve_scene(parse_svg(ROUND_TRIP_SVG), IconKey(category="a", name="shape"), 24)
        text = render_python(build_table([icon]))
        assert "MoveTo(Point(0.00, 0.00))," in text
        assert "LineTo(Point(10.00, 0.00))," in text
        assert "CurveTo(Point(10.00, 5.00), Point(5.00, 10.00), Point(0.00, 10.00))," in text
        assert "ClosePath()," in text
        assert text.index("MoveTo") < text.index("LineTo(") < text.index("CurveTo(") < text.index("ClosePath(),")

    def test_header_and_sections(self):
        text = render_python(build_table([_icon("add", category="content"), _icon("alarm")]))
        assert text.startswith("# @generated by icontable. DO NOT EDIT.\n# 2 icons.\n")
        assert text.index("# normal / action") < text.index("# normal / content")

    def test_rendering_is_stable(self):
        icons = [_icon("b"), _icon("a"), _icon("c", category="other")]
        assert render_python(build_table(icons)) == render_python(build_table(reversed(icons)))


class TestRenderJson:
    def test_structure(self):
        circle = FlatShape(Circle(Point(1, 2), 3), 0.5)
        shapes = (FlatShape((MoveTo(Point(0, 0)), CurveTo(Point(1, 1), Point(2, 2), Point(3, 3)), ClosePath())), circle)
        data = json.loads(render_json(build_table([_icon("add", shapes=shapes)])))
        entry = data["normal"]["action"]["add"]
        assert entry["identifier"] == "ADD"
        assert entry["nominal_size"] == 24.0
        assert entry["shapes"][0] == {"opacity": 1.0, "path": [["M", 0, 0], ["C", 1, 1, 2, 2, 3, 3], ["Z"]]}
        assert entry["shapes"][1] == {"opacity": 0.5, "circle": [1, 2, 3]}

    def test_fixed_precision_text(self):
        text = render_json(build_table([_icon("add")]))
        assert '["L", 0.33, 0.67]' in text
        assert '"nominal_size": 24.00' in text

    def test_multiple_groups_are_valid_json(self):
        icons = [_icon("a"), _icon("b"), _icon("c", category="other"), _icon("d", variant="round", shapes=())]
        data = json.loads(render_json(build_table(icons)))
        assert list(data) == ["normal", "round"]
        assert list(data["normal"]) == ["action", "other"]
        assert data["round"]["action"]["d"]["shapes"] == []

    def test_empty_table(self):
        assert json.loads(render_json(build_table([]))) == {}


class TestWriteAtomic:
    def test_writes_and_replaces(self, tmp_path):
        target = tmp_path / "out" / "icons.py"
        write_atomic(target, "first\n")
        write_atomic(target, "second\n")
        assert target.read_text() == "second\n"
        assert os.listdir(target.parent) == ["icons.py"]

    def test_failure_leaves_previous_output(self, tmp_path, monkeypatch):
        target = tmp_path / "icons.py"
        target.write_text("old\n")

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(OSError):
            write_atomic(target, "new\n")
        assert target.read_text() == "old\n"
        assert os.listdir(tmp_path) == ["icons.py"]
