"""SVG document → SceneNode tree.

Only structure and attributes are captured here; interpreting them (paint,
transforms, validation) is the resolver's job.
"""

from __future__ import annotations

import logging
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from icontable.errors import SceneParseError

logger = logging.getLogger(__name__)

_LENGTH_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(px)?\s*$")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass
class SceneNode:
    """One element of the parsed document."""

    kind: str
    # Presentation attributes, with inline ``style`` declarations merged over them.
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[SceneNode] = field(default_factory=list)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)


@dataclass
class SvgScene:
    root: SceneNode
    # viewBox as (min_x, min_y, width, height); None when the document has none.
    viewbox: tuple[float, float, float, float] | None = None
    # Declared width/height attributes, when both are present.
    declared_size: tuple[float, float] | None = None


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_style(style: str) -> dict[str, str]:
    declarations: dict[str, str] = {}
    for item in style.split(";"):
        if ":" not in item:
            continue
        name, value = item.split(":", 1)
        declarations[name.strip()] = value.strip()
    return declarations


def _build_node(element: ET.Element) -> SceneNode:
    attrs = {_local_name(k): v.strip() for k, v in element.attrib.items()}
    style = attrs.pop("style", None)
    if style:
        attrs.update(_parse_style(style))
    node = SceneNode(kind=_local_name(element.tag), attributes=attrs)
    node.children = [_build_node(child) for child in element if isinstance(child.tag, str)]
    return node


def parse_length(value: str | None) -> float | None:
    """Parse a unitless or ``px`` length. Other units are rejected."""
    if value is None:
        return None
    m = _LENGTH_RE.match(value)
    if m is None:
        raise ValueError(f"unsupported length {value!r}")
    length = float(m.group(1))
    if not math.isfinite(length):
        raise ValueError(f"length {value!r} out of range")
    return length


def parse_viewbox(value: str) -> tuple[float, float, float, float]:
    parts = value.replace(",", " ").split()
    if len(parts) != 4:
        raise ValueError(f"invalid viewBox {value!r}")
    if not all(_NUMBER_RE.fullmatch(p) for p in parts):
        raise ValueError(f"invalid viewBox {value!r}")
    min_x, min_y, width, height = (float(p) for p in parts)
    if not all(math.isfinite(v) for v in (min_x, min_y, width, height)):
        raise ValueError(f"viewBox {value!r} out of range")
    if width <= 0 or height <= 0:
        raise ValueError(f"viewBox {value!r} has no area")
    return min_x, min_y, width, height


def parse_svg(svg_text: str | bytes) -> SvgScene:
    """Parse raw SVG text into a scene. Raises SceneParseError without a path."""
    try:
        element = ET.fromstring(svg_text)
    except ET.ParseError as e:
        raise SceneParseError(f"malformed document: {e}") from e

    root = _build_node(element)
    if root.kind != "svg":
        raise SceneParseError(f"root element is <{root.kind}>, expected <svg>")

    try:
        viewbox = parse_viewbox(root.attributes["viewBox"]) if "viewBox" in root.attributes else None
        width = parse_length(root.get("width"))
        height = parse_length(root.get("height"))
    except ValueError as e:
        raise SceneParseError(str(e)) from e

    declared = (width, height) if width is not None and height is not None else None
    logger.debug("Parsed SVG: %d top-level elements, viewBox=%s", len(root.children), viewbox)
    return SvgScene(root=root, viewbox=viewbox, declared_size=declared)
