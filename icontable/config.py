"""Build configuration from environment variables and ``.env``."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    source_dir: Path = Path("material-design-icons/src")
    output: Path = Path("icons.py")
    output_format: Literal["python", "json"] = "python"

    # Source tree
    layout: Literal["nested", "legacy"] = "nested"
    categories: list[str] = []
    variants: list[str] = ["normal"]
    variant_prefix: str = "materialicons"

    # Resolution
    strict_defs: bool = False
    jobs: int = 1

    log_level: str = "info"

    model_config = SettingsConfigDict(env_prefix="ICONTABLE_", env_file=".env", env_file_encoding="utf-8")

