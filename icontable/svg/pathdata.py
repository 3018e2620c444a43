"""SVG path data (the ``d`` attribute) → absolute PathCommands.

Commands are kept 1:1 where the target vocabulary has them: M, L, Q, C and Z
survive as MoveTo, LineTo, QuadTo, CurveTo and ClosePath. The remaining SVG
commands are expanded: H/V become LineTo, S/T get their reflected control
point, and elliptical arcs become runs of CurveTo (svgpathtools does the
center parameterization).
"""

from __future__ import annotations

import math
import re

from svgpathtools import Arc

from icontable.models.geometry import (
    ClosePath,
    CurveTo,
    LineTo,
    MoveTo,
    PathCommand,
    Point,
    QuadTo,
)

_COMMAND_LETTERS = frozenset("MmZzLlHhVvCcSsQqTtAa")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_SEPARATOR_RE = re.compile(r"[\s,]*")
_FLAG_RE = re.compile(r"[01]")

# One cubic per quarter turn keeps the radial error below 0.03% of the radius.
_MAX_ARC_SEGMENT_DEG = 90.0


class _Lexer:
    """Position-based tokenizer; arc flags may be packed without separators."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _skip(self) -> None:
        self.pos = _SEPARATOR_RE.match(self.text, self.pos).end()

    def at_end(self) -> bool:
        self._skip()
        return self.pos >= len(self.text)

    def command(self) -> str | None:
        self._skip()
        if self.pos < len(self.text) and self.text[self.pos] in _COMMAND_LETTERS:
            self.pos += 1
            return self.text[self.pos - 1]
        return None

    def number(self) -> float:
        self._skip()
        m = _NUMBER_RE.match(self.text, self.pos)
        if m is None:
            raise ValueError(f"expected a number at offset {self.pos} in path data")
        self.pos = m.end()
        value = float(m.group(0))
        if not math.isfinite(value):
            raise ValueError(f"number {m.group(0)!r} out of range in path data")
        return value

    def flag(self) -> bool:
        self._skip()
        m = _FLAG_RE.match(self.text, self.pos)
        if m is None:
            raise ValueError(f"expected an arc flag at offset {self.pos} in path data")
        self.pos = m.end()
        return m.group(0) == "1"

    def point(self) -> complex:
        x = self.number()
        return complex(x, self.number())


def _pt(z: complex) -> Point:
    return Point(z.real, z.imag)


def arc_to_cubics(
    start: complex,
    radius: complex,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    end: complex,
) -> list[tuple[complex, complex, complex]]:
    """Approximate an SVG elliptical arc with cubic Béziers.

    Returns ``(control1, control2, end)`` triples. A zero radius degrades to a
    straight line and a zero-length arc to nothing, as SVG prescribes.
    """
    if start == end:
        return []
    rx, ry = abs(radius.real), abs(radius.imag)
    if rx == 0 or ry == 0:
        return [(start, end, end)]

    arc = Arc(start, complex(rx, ry), rotation, large_arc, sweep, end)
    delta = math.radians(arc.delta)
    count = max(1, math.ceil(abs(arc.delta) / _MAX_ARC_SEGMENT_DEG - 1e-9))
    # Handle length along dP/dθ for a sub-arc of delta / count radians.
    k = 4.0 / 3.0 * math.tan(delta / count / 4.0) / delta

    cubics = []
    p0 = start
    for i in range(count):
        t0, t1 = i / count, (i + 1) / count
        p3 = end if i == count - 1 else arc.point(t1)
        c1 = p0 + k * arc.derivative(t0)
        c2 = p3 - k * arc.derivative(t1)
        cubics.append((c1, c2, p3))
        p0 = p3
    return cubics


class _PathBuilder:
    def __init__(self) -> None:
        self.commands: list[PathCommand] = []
        self.current: complex | None = None
        self.start = 0j
        self.closed = False
        # Last control point, for S/T reflection; reset by other commands.
        self.cubic_ctrl: complex | None = None
        self.quad_ctrl: complex | None = None

    def _ensure_subpath(self) -> complex:
        if self.current is None:
            raise ValueError("path data must begin with a moveto")
        if self.closed:
            # Drawing after Z starts a new subpath at the previous start point.
            self.commands.append(MoveTo(_pt(self.start)))
            self.closed = False
        return self.current

    def move(self, p: complex) -> None:
        self.commands.append(MoveTo(_pt(p)))
        self.current = self.start = p
        self.closed = False
        self.cubic_ctrl = self.quad_ctrl = None

    def line(self, p: complex) -> None:
        self._ensure_subpath()
        self.commands.append(LineTo(_pt(p)))
        self.current = p
        self.cubic_ctrl = self.quad_ctrl = None

    def quad(self, c: complex, p: complex) -> None:
        self._ensure_subpath()
        self.commands.append(QuadTo(_pt(c), _pt(p)))
        self.current = p
        self.cubic_ctrl, self.quad_ctrl = None, c

    def cubic(self, c1: complex, c2: complex, p: complex) -> None:
        self._ensure_subpath()
        self.commands.append(CurveTo(_pt(c1), _pt(c2), _pt(p)))
        self.current = p
        self.cubic_ctrl, self.quad_ctrl = c2, None

    def close(self) -> None:
        self._ensure_subpath()
        self.commands.append(ClosePath())
        self.current = self.start
        self.closed = True
        self.cubic_ctrl = self.quad_ctrl = None

    def reflected(self, ctrl: complex | None) -> complex:
        cur = self.current
        return cur if ctrl is None else 2 * cur - ctrl


def parse_path_data(d: str) -> list[PathCommand]:
    """Parse path data into absolute commands. Raises ValueError when malformed."""
    lexer = _Lexer(d)
    b = _PathBuilder()
    command: str | None = None

    while not lexer.at_end():
        letter = lexer.command()
        if letter is not None:
            command = letter
        elif command is None:
            raise ValueError("path data must begin with a command")
        elif command in "Zz":
            raise ValueError(f"unexpected number after closepath at offset {lexer.pos}")

        if b.current is None and command not in "Mm":
            raise ValueError("path data must begin with a moveto")

        upper = command.upper()
        rel = command.islower()
        origin = b.current if rel and b.current is not None else 0j

        if upper == "Z":
            b.close()
        elif upper == "M":
            b.move(origin + lexer.point())
            # Further coordinate pairs are implicit linetos.
            command = "l" if rel else "L"
        elif upper == "L":
            b.line(origin + lexer.point())
        elif upper == "H":
            x = lexer.number()
            cur = b.current
            b.line(complex(x + (cur.real if rel else 0.0), cur.imag))
        elif upper == "V":
            y = lexer.number()
            cur = b.current
            b.line(complex(cur.real, y + (cur.imag if rel else 0.0)))
        elif upper == "C":
            c1 = origin + lexer.point()
            c2 = origin + lexer.point()
            b.cubic(c1, c2, origin + lexer.point())
        elif upper == "S":
            c1 = b.reflected(b.cubic_ctrl)
            c2 = origin + lexer.point()
            b.cubic(c1, c2, origin + lexer.point())
        elif upper == "Q":
            c = origin + lexer.point()
            b.quad(c, origin + lexer.point())
        elif upper == "T":
            c = b.reflected(b.quad_ctrl)
            b.quad(c, origin + lexer.point())
        elif upper == "A":
            radius = lexer.point()
            rotation = lexer.number()
            large_arc = lexer.flag()
            sweep = lexer.flag()
            end = origin + lexer.point()
            b._ensure_subpath()
            for c1, c2, p in arc_to_cubics(b.current, radius, rotation, large_arc, sweep, end):
                if c1 == b.current and c2 == p:
                    b.line(p)
                else:
                    b.cubic(c1, c2, p)

    return b.commands
