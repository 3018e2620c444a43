"""Command line wrapper around the pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from icontable.config import Settings
from icontable.engine.pipeline import compile_icons
from icontable.errors import IconTableError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="icontable",
        description="Compile a tree of SVG icons into a static geometry table.",
    )
    parser.add_argument("--source", type=Path, help="root of the icon source tree")
    parser.add_argument("--output", type=Path, help="file to write")
    parser.add_argument("--format", dest="output_format", choices=["python", "json"])
    parser.add_argument("--layout", choices=["nested", "legacy"])
    parser.add_argument("--category", dest="categories", action="append", help="limit to a category (repeatable)")
    parser.add_argument("--variant", dest="variants", action="append", help="variant to include (repeatable)")
    parser.add_argument("--strict-defs", action="store_true", default=None, help="fail on non-empty <defs>")
    parser.add_argument("--jobs", type=int, help="worker processes for resolution")
    parser.add_argument("--log-level", help="logging level name")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    if "source" in overrides:
        overrides["source_dir"] = overrides.pop("source")
    settings = Settings(**overrides)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        output = compile_icons(settings)
    except IconTableError as e:
        logger.error("Build failed: %s", e)
        return 1
    logger.info("Icon table written to %s", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
