"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


# Material-style sources

ADD_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">
  <path d="M0 0h24v24H0z" fill="none"/>
  <path d="M19 13h-6v6h-2v-6H5v-2h6V5h2v6h6v2z"/>
</svg>'''

CIRCLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">
  <circle cx="12" cy="12" r="10"/>
</svg>'''

TWO_TONE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24">
  <path d="M0 0h24v24H0V0z" fill="none"/>
  <path d="M4 4h16v16H4z" opacity=".3"/>
  <circle cx="12" cy="12" r="3"/>
</svg>'''

NESTED_OPACITY_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <g opacity="0.5">
    <g opacity="0.8">
      <path d="M0 0L10 0L10 10Z"/>
    </g>
  </g>
</svg>'''

NESTED_TRANSFORM_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <g transform="scale(3)">
    <g transform="translate(2,0)">
      <path d="M1 0L1 1"/>
    </g>
  </g>
</svg>'''

CLIP_PATH_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <defs><clipPath id="a"><path d="M0 0h24v24H0z"/></clipPath></defs>
  <g clip-path="url(#a)">
    <path d="M2 2h20v20H2z"/>
  </g>
</svg>'''

ROUND_TRIP_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <path d="M0 0L10 0C10 5 5 10 0 10Z"/>
</svg>'''


def write_svg(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def nested_tree(tmp_path: Path) -> Path:
    """A small material-style ``src`` tree."""
    root = tmp_path / "src"
    write_svg(root / "content" / "add" / "materialicons" / "24px.svg", ADD_SVG)
    write_svg(root / "content" / "add" / "materialicons" / "18px.svg", ADD_SVG)
    write_svg(root / "content" / "add" / "materialiconsoutlined" / "24px.svg", ADD_SVG)
    write_svg(root / "image" / "lens" / "materialicons" / "24px.svg", CIRCLE_SVG)
    write_svg(root / "image" / "3d_rotation" / "materialicons" / "24px.svg", TWO_TONE_SVG)
    return root
