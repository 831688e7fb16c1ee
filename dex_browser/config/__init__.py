from .model import (
    AnimationConfig,
    ArtworkConfig,
    DensityConfig,
    GlobalConfig,
    RecordColumns,
)
from .loader import load_global_config

__all__ = [
    "AnimationConfig",
    "ArtworkConfig",
    "DensityConfig",
    "GlobalConfig",
    "RecordColumns",
    "load_global_config",
]
