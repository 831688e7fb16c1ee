from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dex_browser.config.model import (
    AnimationConfig,
    ArtworkConfig,
    DensityConfig,
    GlobalConfig,
    RecordColumns,
)
from dex_browser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be an object in global.json, got {type(value).__name__}")
    return value


def _resolve_data_file(root: Path, raw_value: Optional[str]) -> Optional[Path]:
    """
    Resolve the dataset path:
    - Absolute paths are used as-is.
    - Relative paths are resolved against DEX_BROWSER_DATA_ROOT when set,
      otherwise against the config root directory.
    """
    if raw_value is None:
        return None

    path = Path(raw_value)
    if path.is_absolute():
        return path

    data_root = os.environ.get("DEX_BROWSER_DATA_ROOT")
    if data_root:
        return (Path(data_root) / path).resolve()
    return (root / path).resolve()


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory containing 'global.json'.

    Expected structure:

        root/
            global.json

    Every section is optional and falls back to the dataclass defaults:

    - ui_title: title for UI, defaults to 'Creature Stats Browser'
    - data_file: CSV path, relative paths resolved as in _resolve_data_file
    - columns: semantic column mapping (RecordColumns)
    - none_value: sentinel used for a missing secondary category
    - density / animation / artwork: tuning for the respective components

    :param root: Directory containing 'global.json'.
    :return: A GlobalConfig instance.
    :raises FileNotFoundError: if global.json does not exist.
    :raises ConfigError: if a section is malformed.
    """
    root = Path(root)
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    with global_path.open() as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"global.json is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError("global.json must contain a JSON object")

    columns_raw = _section(raw, "columns")
    if isinstance(columns_raw.get("dimensions"), str):
        raise ConfigError("columns.dimensions must be a list of column names")

    density_raw = _section(raw, "density")
    animation_raw = _section(raw, "animation")
    artwork_raw = _section(raw, "artwork")

    try:
        density = DensityConfig(
            bandwidth=float(density_raw.get("bandwidth", DensityConfig.bandwidth)),
            grid_ticks=int(density_raw.get("grid_ticks", DensityConfig.grid_ticks)),
        )
        animation = AnimationConfig(
            interval_ms=int(animation_raw.get("interval_ms", AnimationConfig.interval_ms)),
        )
        artwork = ArtworkConfig(
            base_url=str(artwork_raw.get("base_url", ArtworkConfig.base_url)).rstrip("/"),
            timeout_s=float(artwork_raw.get("timeout_s", ArtworkConfig.timeout_s)),
            placeholder_missing=str(artwork_raw.get("placeholder_missing", ArtworkConfig.placeholder_missing)),
            placeholder_error=str(artwork_raw.get("placeholder_error", ArtworkConfig.placeholder_error)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting in global.json: {e}") from e

    if density.bandwidth <= 0:
        raise ConfigError("density.bandwidth must be positive")
    if density.grid_ticks <= 0:
        raise ConfigError("density.grid_ticks must be positive")
    if animation.interval_ms <= 0:
        raise ConfigError("animation.interval_ms must be positive")

    return GlobalConfig(
        ui_title=raw.get("ui_title", "Creature Stats Browser"),
        data_file=_resolve_data_file(root, raw.get("data_file")),
        columns=RecordColumns.from_raw(columns_raw),
        none_value=str(raw.get("none_value", "None")),
        density=density,
        animation=animation,
        artwork=artwork,
    )
