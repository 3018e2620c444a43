"""Icon identity and per-icon records flowing through the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from icontable.models.geometry import FlatShape

DEFAULT_VARIANT = "normal"


class IconKey(BaseModel):
    """Identifies one logical icon across all of its sizes."""

    model_config = ConfigDict(frozen=True)

    category: str
    name: str
    variant: str = DEFAULT_VARIANT

    @property
    def sort_key(self) -> tuple[str, str, str]:
        # Table order: variant, then category, then name.
        return (self.variant, self.category, self.name)

    def __lt__(self, other: IconKey) -> bool:
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return f"{self.variant}/{self.category}/{self.name}"


class SourceRecord(BaseModel):
    """One discovered source file."""

    model_config = ConfigDict(frozen=True)

    key: IconKey
    size: int
    path: Path


@dataclass(frozen=True)
class ResolvedIcon:
    key: IconKey
    nominal_size: float
    # Painter's order: later shapes draw over earlier ones.
    shapes: tuple[FlatShape, ...]
