"""Identifier & Table Emitter.

Builds the ordered, collision-checked table and renders it as a generated
Python module or a JSON document. Numbers are written with exactly two
decimals; rendering happens fully in memory and the file is replaced
atomically, so a failed build never leaves partial output behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path

from icontable.engine.naming import icon_identifier
from icontable.errors import IdentifierCollisionError
from icontable.models.geometry import (
    Circle,
    ClosePath,
    CurveTo,
    FlatShape,
    IconGeometry,
    LineTo,
    MoveTo,
    PathCommand,
    Point,
    QuadTo,
)
from icontable.models.icon import IconKey, ResolvedIcon

logger = logging.getLogger(__name__)

# variant → category → name → entry, every level sorted.
OutputTable = dict[str, dict[str, dict[str, IconGeometry]]]

GENERATED_HEADER = "# @generated by icontable. DO NOT EDIT."
_GEOMETRY_IMPORTS = (
    "Circle",
    "ClosePath",
    "CurveTo",
    "FlatShape",
    "IconGeometry",
    "LineTo",
    "MoveTo",
    "Point",
    "QuadTo",
)
_COMMAND_LETTERS = {MoveTo: "M", LineTo: "L", QuadTo: "Q", CurveTo: "C", ClosePath: "Z"}


def format_number(value: float) -> str:
    text = f"{value:.2f}"
    return "0.00" if text == "-0.00" else text


def build_table(icons: Iterable[ResolvedIcon]) -> OutputTable:
    """Assign identifiers and group icons. Raises before anything is rendered."""
    owners: dict[str, IconKey] = {}
    entries: list[tuple[IconKey, IconGeometry]] = []
    for icon in icons:
        identifier = icon_identifier(icon.key.name, icon.key.variant)
        owner = owners.get(identifier)
        if owner is not None:
            raise IdentifierCollisionError(identifier, owner, icon.key)
        owners[identifier] = icon.key
        entries.append((icon.key, IconGeometry(identifier, icon.nominal_size, icon.shapes)))

    table: OutputTable = {}
    for key, entry in sorted(entries, key=lambda item: item[0].sort_key):
        table.setdefault(key.variant, {}).setdefault(key.category, {})[key.name] = entry
    return table


def iter_entries(table: OutputTable) -> Iterable[tuple[IconKey, IconGeometry]]:
    for variant, categories in table.items():
        for category, icons in categories.items():
            for name, entry in icons.items():
                yield IconKey(category=category, name=name, variant=variant), entry


# Python module output


def _py_point(p: Point) -> str:
    return f"Point({format_number(p.x)}, {format_number(p.y)})"


def _py_command(cmd: PathCommand) -> str:
    return f"{type(cmd).__name__}({', '.join(_py_point(p) for p in cmd.points)})"


def _py_shape(shape: FlatShape, indent: str) -> list[str]:
    inner = indent + "    "
    lines = [f"{indent}FlatShape("]
    if isinstance(shape.geometry, Circle):
        c = shape.geometry
        lines.append(f"{inner}geometry=Circle(center={_py_point(c.center)}, radius={format_number(c.radius)}),")
    else:
        lines.append(f"{inner}geometry=(")
        lines.extend(f"{inner}    {_py_command(cmd)}," for cmd in shape.geometry)
        lines.append(f"{inner}),")
    lines.append(f"{inner}opacity={format_number(shape.opacity)},")
    lines.append(f"{indent}),")
    return lines


def render_python(table: OutputTable) -> str:
    entries = list(iter_entries(table))
    lines = [GENERATED_HEADER, f"# {len(entries)} icons.", "", "from icontable.models.geometry import ("]
    lines.extend(f"    {name}," for name in _GEOMETRY_IMPORTS)
    lines.append(")")

    section = None
    for key, entry in entries:
        if (key.variant, key.category) != section:
            section = (key.variant, key.category)
            lines += ["", f"# {key.variant} / {key.category}"]
        lines += [
            "",
            f"{entry.identifier} = IconGeometry(",
            f"    identifier={json.dumps(entry.identifier)},",
            f"    nominal_size={format_number(entry.nominal_size)},",
            "    shapes=(",
        ]
        for shape in entry.shapes:
            lines.extend(_py_shape(shape, "        "))
        lines += ["    ),", ")"]

    # Lower case, so it can never clash with an upper-case icon identifier.
    lines += ["", "icon_table = {"]
    for variant, categories in table.items():
        lines.append(f"    {json.dumps(variant)}: {{")
        for category, icons in categories.items():
            lines.append(f"        {json.dumps(category)}: {{")
            lines.extend(f"            {json.dumps(name)}: {entry.identifier}," for name, entry in icons.items())
            lines.append("        },")
        lines.append("    },")
    lines.append("}")
    return "\n".join(lines) + "\n"


# JSON output


def _json_shape(shape: FlatShape) -> str:
    opacity = format_number(shape.opacity)
    if isinstance(shape.geometry, Circle):
        c = shape.geometry
        values = ", ".join(format_number(v) for v in (c.center.x, c.center.y, c.radius))
        return f'{{"opacity": {opacity}, "circle": [{values}]}}'
    commands = []
    for cmd in shape.geometry:
        parts = [json.dumps(_COMMAND_LETTERS[type(cmd)])]
        for p in cmd.points:
            parts += [format_number(p.x), format_number(p.y)]
        commands.append(f"[{', '.join(parts)}]")
    return f'{{"opacity": {opacity}, "path": [{", ".join(commands)}]}}'


def _json_block(items: list[tuple[str, list[str]]], indent: str) -> list[str]:
    """Render ``"key": <lines>`` pairs as an object body with trailing-comma rules."""
    lines = []
    for i, (key, body) in enumerate(items):
        comma = "," if i < len(items) - 1 else ""
        lines.append(f"{indent}{json.dumps(key)}: {body[0]}")
        lines.extend(body[1:-1])
        if len(body) > 1:
            lines.append(body[-1] + comma)
        else:
            lines[-1] += comma
    return lines


def render_json(table: OutputTable) -> str:
    variants = []
    for variant, categories in table.items():
        category_items = []
        for category, icons in categories.items():
            icon_items = []
            for name, entry in icons.items():
                shapes = [f"          {_json_shape(s)}" for s in entry.shapes]
                shape_lines = [line + ("," if i < len(shapes) - 1 else "") for i, line in enumerate(shapes)]
                body = [
                    "{",
                    f'        "identifier": {json.dumps(entry.identifier)},',
                    f'        "nominal_size": {format_number(entry.nominal_size)},',
                    '        "shapes": [',
                    *shape_lines,
                    "        ]",
                    "      }",
                ]
                icon_items.append((name, body))
            category_items.append((category, ["{", *_json_block(icon_items, "      "), "    }"]))
        variants.append((variant, ["{", *_json_block(category_items, "    "), "  }"]))
    return "\n".join(["{", *_json_block(variants, "  "), "}"]) + "\n"


RENDERERS: dict[str, Callable[[OutputTable], str]] = {
    "python": render_python,
    "json": render_json,
}


def write_atomic(path: Path | str, text: str) -> None:
    """Replace ``path`` with ``text`` in one step; a failure leaves it untouched."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    logger.info("Wrote %s (%d bytes)", path, len(text.encode("utf-8")))
