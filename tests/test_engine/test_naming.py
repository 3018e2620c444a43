"""Tests for identifier derivation."""

import pytest

from icontable.engine.naming import icon_identifier, upper_snake
from icontable.errors import IdentifierError


@pytest.mark.parametrize(
    "name, expected",
    [
        ("add", "ADD"),
        ("Add", "ADD"),
        ("add_circle_outline", "ADD_CIRCLE_OUTLINE"),
        ("add-circle outline", "ADD_CIRCLE_OUTLINE"),
        ("addCircle", "ADD_CIRCLE"),
        ("HTTPServer", "HTTP_SERVER"),
        ("wifi_1_bar", "WIFI_1_BAR"),
    ],
)
def test_upper_snake(name, expected):
    assert upper_snake(name) == expected
    assert icon_identifier(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("3d_rotation", "_3D_ROTATION"),
        ("10k", "_10K"),
        ("360", "_360"),
        ("1x_mobiledata", "_1X_MOBILEDATA"),
    ],
)
def test_digit_leading_names_get_underscore(name, expected):
    identifier = icon_identifier(name)
    assert identifier == expected
    assert not identifier[0].isdigit()


def test_variant_prefix():
    assert icon_identifier("add", "outlined") == "OUTLINED_ADD"
    assert icon_identifier("3d_rotation", "two-tone") == "TWO_TONE_3D_ROTATION"
    assert icon_identifier("add", "normal") == "ADD"


@pytest.mark.parametrize("name", ["", "__", "-- --"])
def test_unusable_names(name):
    with pytest.raises(IdentifierError):
        icon_identifier(name)
