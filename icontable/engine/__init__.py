"""Build engine: scanning, scene resolution and table emission."""

from icontable.engine.emitter import build_table, render_json, render_python, write_atomic
from icontable.engine.naming import icon_identifier
from icontable.engine.pipeline import Pipeline, compile_icons
from icontable.engine.resolver import resolve_icon, resolve_scene
from icontable.engine.scanner import scan_sources

__all__ = [
    "Pipeline",
    "build_table",
    "compile_icons",
    "icon_identifier",
    "render_json",
    "render_python",
    "resolve_icon",
    "resolve_scene",
    "scan_sources",
    "write_atomic",
]
