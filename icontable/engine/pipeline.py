"""Pipeline orchestrator: scan → resolve → build table → write, all or nothing."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from pathlib import Path

from icontable.config import Settings
from icontable.engine.emitter import RENDERERS, OutputTable, build_table, write_atomic
from icontable.engine.resolver import resolve_icon
from icontable.engine.scanner import scan_sources
from icontable.models.icon import ResolvedIcon, SourceRecord

logger = logging.getLogger(__name__)


class Pipeline:
    """Runs one compiler build with explicit settings."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def scan(self) -> list[SourceRecord]:
        s = self.settings
        return scan_sources(
            s.source_dir,
            layout=s.layout,
            categories=s.categories,
            variants=s.variants,
            variant_prefix=s.variant_prefix,
        )

    def resolve(self, records: list[SourceRecord]) -> list[ResolvedIcon]:
        """Resolve every record; the first failure aborts the build."""
        resolve = partial(resolve_icon, strict_defs=self.settings.strict_defs)
        jobs = self.settings.jobs
        if jobs > 1 and len(records) > 1:
            # Output order comes from build_table, never from completion order.
            with ProcessPoolExecutor(max_workers=jobs) as pool:
                return list(pool.map(resolve, records, chunksize=32))
        return [resolve(record) for record in records]

    def build(self) -> tuple[OutputTable, str]:
        """Run every phase in memory and return the table and its rendering."""
        start = time.perf_counter()

        records = self.scan()
        t0 = time.perf_counter()
        icons = self.resolve(records)
        shape_count = sum(len(icon.shapes) for icon in icons)
        logger.info(
            "Resolved %d icons (%d shapes) in %.0fms",
            len(icons),
            shape_count,
            (time.perf_counter() - t0) * 1000,
        )

        table = build_table(icons)
        text = RENDERERS[self.settings.output_format](table)
        logger.info("Build complete in %.0fms", (time.perf_counter() - start) * 1000)
        return table, text

    def run(self) -> Path:
        _, text = self.build()
        write_atomic(self.settings.output, text)
        return self.settings.output


def compile_icons(settings: Settings) -> Path:
    """Compile the icon tree described by ``settings`` into its output file."""
    return Pipeline(settings).run()
