from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


DEFAULT_DIMENSIONS: Tuple[str, ...] = ("HP", "Attack", "Defense", "Sp_Atk", "Sp_Def", "Speed")


@dataclass(frozen=True)
class RecordColumns:
    """
    Semantic names for the CSV columns used internally by the app.
    """
    name: str = "Name"
    primary: str = "Type_1"
    secondary: str = "Type_2"
    generation: str = "Generation"
    total: str = "Total"
    dimensions: Tuple[str, ...] = DEFAULT_DIMENSIONS

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> RecordColumns:
        dims = raw.get("dimensions") or DEFAULT_DIMENSIONS
        return cls(
            name=str(raw.get("name", "Name")),
            primary=str(raw.get("primary", "Type_1")),
            secondary=str(raw.get("secondary", "Type_2")),
            generation=str(raw.get("generation", "Generation")),
            total=str(raw.get("total", "Total")),
            dimensions=tuple(str(d) for d in dims),
        )

    def required(self) -> Tuple[str, ...]:
        """All configured column names, in a stable order."""
        return (self.name, self.primary, self.secondary, self.generation, self.total) + self.dimensions


@dataclass(frozen=True)
class DensityConfig:
    bandwidth: float = 20.0
    grid_ticks: int = 80


@dataclass(frozen=True)
class AnimationConfig:
    interval_ms: int = 1000


@dataclass(frozen=True)
class ArtworkConfig:
    base_url: str = "https://pokeapi.co/api/v2/pokemon"
    timeout_s: float = 5.0
    placeholder_missing: str = "https://via.placeholder.com/96?text=N/A"
    placeholder_error: str = "https://via.placeholder.com/96?text=Error"


@dataclass
class GlobalConfig:
    ui_title: str
    data_file: Optional[Path]
    columns: RecordColumns = field(default_factory=RecordColumns)
    none_value: str = "None"
    density: DensityConfig = field(default_factory=DensityConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    artwork: ArtworkConfig = field(default_factory=ArtworkConfig)
