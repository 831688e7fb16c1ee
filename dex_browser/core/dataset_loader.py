from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from dex_browser.config.model import GlobalConfig, RecordColumns
from dex_browser.core.dataset import RecordSet
from dex_browser.core.exceptions import ConfigError, DatasetSchemaError

logger = logging.getLogger(__name__)


def _ensure_unique_names(df: pd.DataFrame, columns: RecordColumns, source: str) -> pd.DataFrame:
    """
    Ensure record identities are unique, logging what we do.
    """
    dupes = df[columns.name].duplicated(keep="first")
    if dupes.any():
        logger.warning(
            "Record names are not unique for '%s'; keeping the first of %d duplicate(s)",
            source,
            int(dupes.sum()),
        )
        df = df[~dupes]
    return df


def _validate_columns(df: pd.DataFrame, columns: RecordColumns, source: str) -> None:
    missing = [col for col in columns.required() if col not in df.columns]
    if missing:
        msg = f"Dataset '{source}': configured column(s) {missing} not found"
        logger.error(msg, extra={"dataset": source, "missing": missing})
        raise DatasetSchemaError(msg)


def from_frame(
    df: pd.DataFrame,
    columns: Optional[RecordColumns] = None,
    none_value: str = "None",
    name: str = "dataset",
) -> RecordSet:
    """
    Normalise a raw DataFrame into a RecordSet.

    - names and categories become strings
    - a missing secondary category becomes the `none_value` sentinel
    - generation and numeric dimensions are coerced to numbers (bad values -> NaN,
      which per-analysis validity filters then exclude)
    """
    columns = columns or RecordColumns()
    _validate_columns(df, columns, name)

    df = df.copy()
    df = df[df[columns.name].notna()]
    df[columns.name] = df[columns.name].astype(str).str.strip()
    df = _ensure_unique_names(df, columns, name)

    primary = df[columns.primary]
    df[columns.primary] = primary.where(primary.isna(), primary.astype(str).str.strip())

    secondary = df[columns.secondary]
    secondary = secondary.where(secondary.notna() & (secondary.astype(str).str.strip() != ""), none_value)
    df[columns.secondary] = secondary.astype(str).str.strip()

    for col in (columns.generation, columns.total) + columns.dimensions:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    return RecordSet(df, columns=columns, none_value=none_value, name=name)


def load_csv(
    path: Path,
    columns: Optional[RecordColumns] = None,
    none_value: str = "None",
) -> RecordSet:
    """
    Read a CSV file into a RecordSet.
    """
    path = Path(path)
    if not path.is_file():
        raise DatasetSchemaError(f"Dataset file not found at {path}.")

    df = pd.read_csv(path)
    if df.empty:
        raise DatasetSchemaError(f"Dataset file {path} contains no rows.")

    records = from_frame(df, columns=columns, none_value=none_value, name=path.stem)
    logger.info(
        "Dataset loaded",
        extra={"dataset": records.name, "path": str(path), "n_records": len(records)},
    )
    return records


def from_config(cfg: GlobalConfig) -> RecordSet:
    """
    Materialise the configured dataset.
    """
    if cfg.data_file is None:
        raise ConfigError("global.json does not define 'data_file'")
    return load_csv(cfg.data_file, columns=cfg.columns, none_value=cfg.none_value)
