"""Scene Resolver: one source document → one ResolvedIcon.

Depth-first walk over the scene tree. Every call receives its own immutable
RenderState, so composing a child's transform or opacity never leaks into a
sibling branch.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from pathlib import Path

import numpy as np

from icontable.errors import SceneError, SceneParseError, UnsupportedFeatureError, UnsupportedNodeError
from icontable.models.geometry import Circle, FlatShape, PathCommand, Point, with_points
from icontable.models.icon import IconKey, ResolvedIcon, SourceRecord
from icontable.svg.parser import SceneNode, SvgScene, parse_length, parse_svg
from icontable.svg.pathdata import parse_path_data
from icontable.utils.affine import (
    Matrix,
    apply_points,
    compose,
    identity,
    is_identity,
    parse_transform,
    similarity_scale,
    translation,
)

logger = logging.getLogger(__name__)

# Groups must not carry these: ids invite <use> references, the rest cannot be flattened.
_GROUP_FORBIDDEN = ("id", "clip-path", "mask", "filter")
_LEAF_FORBIDDEN = ("clip-path", "mask", "filter")
_DESCRIPTIVE_KINDS = frozenset({"title", "desc", "metadata"})
_HIDDEN_VISIBILITY = frozenset({"hidden", "collapse"})
DEFAULT_FILL = "black"


@dataclass(frozen=True, eq=False)
class RenderState:
    """Inherited state at one point of the walk."""

    transform: Matrix = field(default_factory=identity)
    opacity: float = 1.0
    fill: str | None = DEFAULT_FILL
    fill_opacity: float = 1.0
    stroke: str | None = None
    visible: bool = True

    @property
    def shape_opacity(self) -> float:
        return self.opacity * self.fill_opacity


def _parse_opacity(value: str, attr: str) -> float:
    try:
        number = float(value[:-1]) / 100.0 if value.endswith("%") else float(value)
    except ValueError as e:
        raise SceneParseError(f"invalid {attr} {value!r}") from e
    if not math.isfinite(number):
        raise SceneParseError(f"invalid {attr} {value!r}")
    return min(1.0, max(0.0, number))


def _parse_number(node: SceneNode, attr: str, default: float) -> float:
    try:
        value = parse_length(node.get(attr))
    except ValueError as e:
        raise SceneParseError(f"invalid {attr} on <{node.kind}>: {e}") from e
    return default if value is None else value


def _check_forbidden(node: SceneNode, forbidden: tuple[str, ...]) -> None:
    for attr in forbidden:
        if attr in node.attributes:
            raise UnsupportedFeatureError(attr, node.kind)


def derive_state(state: RenderState, node: SceneNode) -> RenderState:
    """State seen by ``node``'s content: the parent's, composed with the node's own."""
    changes: dict = {}

    raw_transform = node.get("transform")
    if raw_transform is not None:
        try:
            local = parse_transform(raw_transform)
        except ValueError as e:
            raise SceneParseError(f"invalid transform on <{node.kind}>: {e}") from e
        if not is_identity(local):
            changes["transform"] = compose(state.transform, local)

    raw_opacity = node.get("opacity")
    if raw_opacity is not None:
        opacity = _parse_opacity(raw_opacity, "opacity")
        if opacity != 1.0:
            changes["opacity"] = state.opacity * opacity

    fill = node.get("fill")
    if fill is not None and fill != "inherit":
        if fill.startswith("url("):
            raise UnsupportedFeatureError("fill", node.kind)
        changes["fill"] = None if fill == "none" else fill

    stroke = node.get("stroke")
    if stroke is not None and stroke != "inherit":
        changes["stroke"] = None if stroke == "none" else stroke

    fill_opacity = node.get("fill-opacity")
    if fill_opacity is not None and fill_opacity != "inherit":
        changes["fill_opacity"] = _parse_opacity(fill_opacity, "fill-opacity")

    visibility = node.get("visibility")
    if visibility is not None and visibility != "inherit":
        changes["visible"] = visibility not in _HIDDEN_VISIBILITY

    return replace(state, **changes) if changes else state


def _transform_commands(commands: list[PathCommand], m: Matrix) -> tuple[PathCommand, ...]:
    if is_identity(m):
        return tuple(commands)
    flat = [(p.x, p.y) for cmd in commands for p in cmd.points]
    mapped = apply_points(m, np.array(flat, dtype=np.float64).reshape(-1, 2))
    if not np.isfinite(mapped).all():
        raise SceneParseError("path coordinates overflow after transform")
    out: list[PathCommand] = []
    i = 0
    for cmd in commands:
        n = len(cmd.points)
        out.append(with_points(cmd, tuple(Point(float(x), float(y)) for x, y in mapped[i:i + n])))
        i += n
    return tuple(out)


class SceneResolver:
    """Collects the flat shapes of one document in painter's order."""

    def __init__(self, source: str = "<memory>", strict_defs: bool = False) -> None:
        self.source = source
        self.strict_defs = strict_defs
        self.shapes: list[FlatShape] = []

    def visit(self, node: SceneNode, state: RenderState) -> None:
        kind = node.kind
        if kind == "g":
            self._visit_group(node, state)
        elif kind == "path":
            self._visit_path(node, state)
        elif kind == "circle":
            self._visit_circle(node, state)
        elif kind == "defs":
            self._visit_defs(node)
        elif kind in _DESCRIPTIVE_KINDS:
            logger.debug("%s: ignoring <%s>", self.source, kind)
        else:
            raise UnsupportedNodeError(kind)

    def visit_root(self, root: SceneNode, state: RenderState) -> None:
        # The root may be named, but otherwise follows group rules.
        _check_forbidden(root, _LEAF_FORBIDDEN)
        if root.get("display") == "none":
            return
        inner = derive_state(state, root)
        for child in root.children:
            self.visit(child, inner)

    def _visit_group(self, node: SceneNode, state: RenderState) -> None:
        _check_forbidden(node, _GROUP_FORBIDDEN)
        if node.get("display") == "none":
            return
        inner = derive_state(state, node)
        for child in node.children:
            self.visit(child, inner)

    def _leaf_state(self, node: SceneNode, state: RenderState) -> RenderState | None:
        _check_forbidden(node, _LEAF_FORBIDDEN)
        if node.get("display") == "none":
            return None
        inner = derive_state(state, node)
        if not inner.visible:
            return None
        if inner.fill is None:
            if inner.stroke is not None:
                logger.warning("%s: dropping stroke-only <%s>, strokes are not emitted", self.source, node.kind)
            return None
        # Filled regions only; a stroked outline has no representation.
        if inner.stroke is not None:
            raise UnsupportedFeatureError("stroke", node.kind)
        return inner

    def _visit_path(self, node: SceneNode, state: RenderState) -> None:
        inner = self._leaf_state(node, state)
        if inner is None:
            return
        d = node.get("d")
        if not d:
            logger.debug("%s: skipping <path> without data", self.source)
            return
        try:
            commands = parse_path_data(d)
        except ValueError as e:
            raise SceneParseError(f"invalid path data: {e}") from e
        if not commands:
            return
        geometry = _transform_commands(commands, inner.transform)
        self.shapes.append(FlatShape(geometry=geometry, opacity=inner.shape_opacity))

    def _visit_circle(self, node: SceneNode, state: RenderState) -> None:
        inner = self._leaf_state(node, state)
        if inner is None:
            return
        cx = _parse_number(node, "cx", 0.0)
        cy = _parse_number(node, "cy", 0.0)
        r = _parse_number(node, "r", 0.0)
        if r < 0:
            raise SceneParseError(f"negative circle radius {r}")
        if r == 0:
            return

        scale = similarity_scale(inner.transform)
        if scale is None:
            raise UnsupportedFeatureError("transform", node.kind)
        x, y = apply_points(inner.transform, np.array([[cx, cy]], dtype=np.float64))[0]
        if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(r * scale)):
            raise SceneParseError("circle overflows after transform")
        circle = Circle(center=Point(float(x), float(y)), radius=r * scale)
        self.shapes.append(FlatShape(geometry=circle, opacity=inner.shape_opacity))

    def _visit_defs(self, node: SceneNode) -> None:
        if not node.children:
            return
        if self.strict_defs:
            raise UnsupportedFeatureError("defs", node.kind)
        logger.warning(
            "%s: ignoring non-empty <defs> (%d elements), output may be incomplete",
            self.source,
            len(node.children),
        )


def nominal_size(scene: SvgScene, size: int) -> tuple[float, Matrix]:
    """Canvas size of the scene and the transform placing its origin at (0, 0)."""
    if scene.viewbox is not None:
        min_x, min_y, width, height = scene.viewbox
        origin = translation(-min_x, -min_y) if (min_x or min_y) else identity()
    elif scene.declared_size is not None:
        (width, height), origin = scene.declared_size, identity()
    else:
        width = height = float(size)
        origin = identity()

    if width != height:
        raise SceneParseError(f"non-square canvas {width:g}x{height:g}")
    return width, origin


def resolve_scene(
    scene: SvgScene,
    key: IconKey,
    size: int,
    source: str = "<memory>",
    strict_defs: bool = False,
) -> ResolvedIcon:
    canvas, origin = nominal_size(scene, size)
    if scene.declared_size is not None and scene.declared_size[0] != size:
        logger.warning("%s: declared width %g does not match the %dpx file name", source, scene.declared_size[0], size)
    resolver = SceneResolver(source=source, strict_defs=strict_defs)
    resolver.visit_root(scene.root, RenderState(transform=origin))
    return ResolvedIcon(key=key, nominal_size=canvas, shapes=tuple(resolver.shapes))


def resolve_icon(record: SourceRecord, *, strict_defs: bool = False) -> ResolvedIcon:
    """Read, parse and flatten one chosen source file."""
    path: Path = record.path
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SceneParseError(f"cannot read source: {e.strerror or e}", path) from e

    try:
        scene = parse_svg(raw)
        icon = resolve_scene(scene, record.key, record.size, source=str(path), strict_defs=strict_defs)
    except SceneError as e:
        e.with_path(path)
        raise

    logger.debug("Resolved %s from %s: %d shapes", record.key, path.name, len(icon.shapes))
    return icon
