"""Affine helpers on 3x3 homogeneous matrices. No engine imports."""

from __future__ import annotations

import math
import re
import warnings

import numpy as np
from numpy.typing import NDArray
from svgpathtools.parser import parse_transform as _svg_parse_transform

Matrix = NDArray[np.float64]

_TRANSFORM_FN_RE = re.compile(r"([A-Za-z]+)\s*\(([^()]*)\)")
_TRANSFORM_GAP_RE = re.compile(r"^[\s,]*$")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ARG_SEPARATOR_RE = re.compile(r"\s*,?\s*")
# Accepted argument counts per function.
_ARITY = {
    "matrix": (6,),
    "translate": (1, 2),
    "scale": (1, 2),
    "rotate": (1, 3),
    "skewX": (1,),
    "skewY": (1,),
}

# Tolerance for treating a linear part as a similarity (rotation + uniform scale).
_SIMILARITY_EPS = 1e-9


def identity() -> Matrix:
    return np.identity(3)


def translation(tx: float, ty: float) -> Matrix:
    m = np.identity(3)
    m[0, 2] = tx
    m[1, 2] = ty
    return m


def is_identity(m: Matrix) -> bool:
    return bool(np.allclose(m, np.identity(3), rtol=0.0, atol=1e-12))


def compose(parent: Matrix, local: Matrix) -> Matrix:
    """Parent applied after local: a point maps as ``parent @ local @ p``."""
    return parent @ local


def _split_args(name: str, args: str) -> list[str]:
    """Numbers of one call, separated by whitespace and at most one comma."""
    values = []
    pos = len(args) - len(args.lstrip())
    end = len(args.rstrip())
    while pos < end:
        if values:
            pos = _ARG_SEPARATOR_RE.match(args, pos).end()
        m = _NUMBER_RE.match(args, pos)
        if m is None:
            raise ValueError(f"invalid arguments {args!r} to transform function {name!r}")
        values.append(m.group(0))
        pos = m.end()
    return values


def parse_transform(text: str | None) -> Matrix:
    """Parse an SVG ``transform`` attribute into a 3x3 matrix.

    svgpathtools does the matrix construction; it silently skips unknown
    functions and unreadable arguments, so names, argument lists and arity
    are checked first.
    Raises ValueError on anything that is not a well-formed transform list.
    """
    if text is None or not text.strip():
        return identity()

    pos = 0
    calls: list[str] = []
    for match in _TRANSFORM_FN_RE.finditer(text):
        if not _TRANSFORM_GAP_RE.match(text[pos:match.start()]):
            raise ValueError(f"malformed transform {text!r}")
        name, args = match.group(1), match.group(2)
        if name not in _ARITY:
            raise ValueError(f"unknown transform function {name!r}")
        values = _split_args(name, args)
        if len(values) not in _ARITY[name]:
            raise ValueError(f"transform function {name!r} takes {_ARITY[name]} arguments, got {len(values)}")
        if not all(math.isfinite(float(v)) for v in values):
            raise ValueError(f"non-finite argument to transform function {name!r}")
        calls.append(f"{name}({' '.join(values)})")
        pos = match.end()
    if not calls or not _TRANSFORM_GAP_RE.match(text[pos:]):
        raise ValueError(f"malformed transform {text!r}")

    # svgpathtools warns and skips the parts it cannot read.
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        try:
            matrix = _svg_parse_transform(" ".join(calls))
        except (IndexError, Warning) as e:
            raise ValueError(f"invalid transform {text!r}: {e}") from e
    matrix = np.asarray(matrix, dtype=np.float64)
    if not np.isfinite(matrix).all():
        raise ValueError(f"transform {text!r} is not finite")
    return matrix


def apply_points(m: Matrix, points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Map an Nx2 array of points through ``m``."""
    if len(points) == 0:
        return points
    return points @ m[:2, :2].T + m[:2, 2]


def similarity_scale(m: Matrix) -> float | None:
    """Uniform scale factor of ``m``, or None when it distorts shapes.

    A circle stays a circle only under rotation, reflection, translation and
    uniform scaling.
    """
    a, c = m[0, 0], m[0, 1]
    b, d = m[1, 0], m[1, 1]
    rotation = abs(a - d) <= _SIMILARITY_EPS and abs(b + c) <= _SIMILARITY_EPS
    reflection = abs(a + d) <= _SIMILARITY_EPS and abs(b - c) <= _SIMILARITY_EPS
    if not (rotation or reflection):
        return None
    return float(np.sqrt(abs(a * d - b * c)))
