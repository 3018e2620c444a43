"""Constant-style identifiers for icons."""

from __future__ import annotations

import re

from icontable.errors import IdentifierError
from icontable.models.icon import DEFAULT_VARIANT

_SEPARATOR_RE = re.compile(r"[^0-9A-Za-z]+")
# camelCase and ACRONYMWord boundaries; digits stay glued to their word.
_CAMEL_RE = re.compile(r"(?<=[a-z])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def upper_snake(text: str) -> str:
    words = []
    for chunk in _SEPARATOR_RE.split(text):
        words.extend(w for w in _CAMEL_RE.split(chunk) if w)
    return "_".join(w.upper() for w in words)


def icon_identifier(name: str, variant: str = DEFAULT_VARIANT) -> str:
    """``3d_rotation`` → ``_3D_ROTATION``; outlined ``add`` → ``OUTLINED_ADD``.

    Identifiers never start with a digit: a digit-leading result always gets a
    leading underscore.
    """
    base = upper_snake(name)
    if not base:
        raise IdentifierError(f"icon name {name!r} has no usable characters")
    if variant != DEFAULT_VARIANT:
        prefix = upper_snake(variant)
        if not prefix:
            raise IdentifierError(f"variant name {variant!r} has no usable characters")
        base = f"{prefix}_{base}"
    if base[0].isdigit():
        base = "_" + base
    return base
