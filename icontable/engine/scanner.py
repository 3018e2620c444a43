"""Source Scanner: directory tree → one SourceRecord per icon.

Two layouts are understood:

- ``nested`` (canonical): ``root/<category>/<name>/<variant>/<size>px.svg``
- ``legacy``: ``root/<category>/svg/production/ic_<name>_<size>px.svg``, or the
  same files directly under ``root/<category>/``; the variant is always
  ``normal``.

The largest size of each icon wins. Size is decided only after every
candidate has been seen, since directory iteration order is arbitrary.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from icontable.errors import DuplicateSourceError, ScanError
from icontable.models.icon import DEFAULT_VARIANT, IconKey, SourceRecord

logger = logging.getLogger(__name__)

NESTED_FILE_RE = re.compile(r"^(\d+)px\.svg$")
LEGACY_FILE_RE = re.compile(r"^ic_(.+)_(\d+)px\.svg$")

# Categories of the material-design-icons 3.x release.
MATERIAL_CATEGORIES = (
    "action",
    "alert",
    "av",
    "communication",
    "content",
    "device",
    "editor",
    "file",
    "hardware",
    "image",
    "maps",
    "navigation",
    "notification",
    "places",
    "social",
    "toggle",
)

LAYOUTS = ("nested", "legacy")


def normalize_variant(dirname: str, prefix: str = "materialicons") -> str:
    """``materialicons`` → ``normal``, ``materialiconsoutlined`` → ``outlined``."""
    name = dirname[len(prefix):] if prefix and dirname.startswith(prefix) else dirname
    return name or DEFAULT_VARIANT


def _entries(path: Path) -> list[os.DirEntry]:
    """List a directory, skipping names that cannot be represented as text."""
    try:
        with os.scandir(path) as it:
            entries = list(it)
    except OSError as e:
        raise ScanError(path, e.strerror or str(e)) from e

    usable = []
    for entry in entries:
        try:
            entry.name.encode("utf-8")
        except UnicodeEncodeError:
            logger.warning("Skipping %r in %s: file name is not valid text", entry.name, path)
            continue
        if entry.name.startswith("."):
            logger.debug("Skipping hidden entry %s", entry.path)
            continue
        usable.append(entry)
    return sorted(usable, key=lambda e: e.name)


def _subdirs(path: Path) -> Iterator[os.DirEntry]:
    for entry in _entries(path):
        if entry.is_dir():
            yield entry
        else:
            logger.debug("Skipping non-directory %s", entry.path)


def _files(path: Path) -> Iterator[os.DirEntry]:
    for entry in _entries(path):
        if entry.is_file():
            yield entry


def _category_dirs(root: Path, categories: Iterable[str]) -> list[Path]:
    wanted = list(categories)
    if not wanted:
        return [Path(entry.path) for entry in _subdirs(root)]
    dirs = []
    for category in wanted:
        path = root / category
        if not path.is_dir():
            raise ScanError(path, "category directory is missing or unreadable")
        dirs.append(path)
    return dirs


def iter_nested(root: Path, categories: Iterable[str] = (), variant_prefix: str = "materialicons") -> Iterator[SourceRecord]:
    for category_dir in _category_dirs(root, categories):
        for name_dir in _subdirs(category_dir):
            for variant_dir in _subdirs(Path(name_dir.path)):
                variant = normalize_variant(variant_dir.name, variant_prefix)
                key = IconKey(category=category_dir.name, name=name_dir.name, variant=variant)
                for entry in _files(Path(variant_dir.path)):
                    m = NESTED_FILE_RE.match(entry.name)
                    if m is None:
                        logger.warning("Skipping %s: not a <size>px.svg file", entry.path)
                        continue
                    yield SourceRecord(key=key, size=int(m.group(1)), path=Path(entry.path))


def iter_legacy(root: Path, categories: Iterable[str] = ()) -> Iterator[SourceRecord]:
    for category_dir in _category_dirs(root, list(categories) or MATERIAL_CATEGORIES):
        production = category_dir / "svg" / "production"
        source_dir = production if production.is_dir() else category_dir
        for entry in _files(source_dir):
            m = LEGACY_FILE_RE.match(entry.name)
            if m is None:
                # TODO: non-square icons (ic_<name>_<w>x<h>px.svg) are skipped here.
                logger.warning("Skipping %s: not an ic_<name>_<size>px.svg file", entry.path)
                continue
            key = IconKey(category=category_dir.name, name=m.group(1))
            yield SourceRecord(key=key, size=int(m.group(2)), path=Path(entry.path))


def select_largest(records: Iterable[SourceRecord]) -> list[SourceRecord]:
    """Keep the largest size per key; equal sizes for one key are an error."""
    chosen: dict[IconKey, SourceRecord] = {}
    for record in records:
        current = chosen.get(record.key)
        if current is None or record.size > current.size:
            chosen[record.key] = record
        elif record.size == current.size:
            raise DuplicateSourceError(current.path, record.path, record.size)
    return sorted(chosen.values(), key=lambda r: r.key.sort_key)


def scan_sources(
    root: Path | str,
    *,
    layout: str = "nested",
    categories: Iterable[str] = (),
    variants: Iterable[str] = (DEFAULT_VARIANT,),
    variant_prefix: str = "materialicons",
) -> list[SourceRecord]:
    """Discover icon sources under ``root``; one record per icon, key-sorted."""
    root = Path(root)
    if not root.is_dir():
        raise ScanError(root, "source directory is missing or unreadable")

    if layout == "nested":
        found = iter_nested(root, categories, variant_prefix)
    elif layout == "legacy":
        found = iter_legacy(root, categories)
    else:
        raise ValueError(f"unknown layout {layout!r}, expected one of {LAYOUTS}")

    wanted = set(variants)
    candidates = [r for r in found if not wanted or r.key.variant in wanted]
    records = select_largest(candidates)
    logger.info("Scanned %s: %d source files, %d icons", root, len(candidates), len(records))
    return records
