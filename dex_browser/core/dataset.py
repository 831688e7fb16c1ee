from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd

from dex_browser.config.model import RecordColumns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidSets:
    """
    Cached valid values for UI validation / sanitisation.
    Computing .unique() on every callback is wasteful, so we do it once per RecordSet.
    """
    names: frozenset
    primaries: frozenset
    secondaries: frozenset
    generations: Tuple[int, ...]


@dataclass(frozen=True)
class ValidRecords:
    """
    Result of a per-analysis validity filter.

    `frame` holds only the rows usable for the analysis; the original
    RecordSet is never mutated. `excluded` is kept for diagnostics.
    """
    frame: pd.DataFrame
    excluded: int

    @property
    def n_valid(self) -> int:
        return len(self.frame)


class RecordSet:
    """
    Immutable, read-only view over the loaded dataset.

    Includes:
    - Standardised access to the configured columns
    - Per-analysis validity filtering (records are excluded, never mutated)
    - Cached filters so repeated recomputation stays cheap
    """

    MAX_VALID_CACHE = 32

    # -------------------------------------------------------------------------
    # Constructor
    # -------------------------------------------------------------------------
    def __init__(
        self,
        frame: pd.DataFrame,
        columns: RecordColumns,
        none_value: str = "None",
        name: str = "dataset",
    ) -> None:
        self.name = name
        self.columns = columns
        self.none_value = none_value

        # Private copy; callers hand us a frame once and we never write to it again
        self._frame = frame.reset_index(drop=True).copy()

        self._valid_cache: Dict[Tuple[str, ...], ValidRecords] = {}
        self._valid_sets: ValidSets | None = None

    # -------------------------------------------------------------------------
    # Validity filtering
    # -------------------------------------------------------------------------
    def valid_for(
        self,
        numeric: Sequence[str] = (),
        categorical: Sequence[str] = (),
    ) -> ValidRecords:
        """
        Return the rows whose `numeric` columns are all finite numbers and whose
        `categorical` columns are all present.

        Filters are cached per (numeric, categorical) combination.
        """
        key = tuple(numeric) + ("|",) + tuple(categorical)
        cached = self._valid_cache.get(key)
        if cached is not None:
            return cached

        df = self._frame
        mask = np.ones(len(df), dtype=bool)

        for col in numeric:
            if col not in df.columns:
                mask &= False
                continue
            values = pd.to_numeric(df[col], errors="coerce").to_numpy(dtype=float)
            mask &= np.isfinite(values)

        for col in categorical:
            if col not in df.columns:
                mask &= False
                continue
            series = df[col]
            mask &= (series.notna() & (series.astype(str).str.len() > 0)).to_numpy()

        valid = ValidRecords(frame=df[mask], excluded=int((~mask).sum()))

        if valid.excluded:
            logger.debug(
                "Records excluded from analysis",
                extra={
                    "dataset": self.name,
                    "numeric": list(numeric),
                    "categorical": list(categorical),
                    "excluded": valid.excluded,
                },
            )

        self._valid_cache[key] = valid

        # Prevent unbounded growth
        if len(self._valid_cache) > self.MAX_VALID_CACHE:
            self._valid_cache.clear()

        return valid

    # -------------------------------------------------------------------------
    # Cached valid values for UI sanitisation
    # -------------------------------------------------------------------------
    def valid_sets(self) -> ValidSets:
        if self._valid_sets is not None:
            return self._valid_sets

        cols = self.columns
        df = self._frame
        generations = pd.to_numeric(df[cols.generation], errors="coerce").dropna()

        self._valid_sets = ValidSets(
            names=frozenset(df[cols.name].dropna().astype(str)),
            primaries=frozenset(df[cols.primary].dropna().astype(str)),
            secondaries=frozenset(df[cols.secondary].dropna().astype(str)),
            generations=tuple(sorted(set(int(g) for g in generations))),
        )
        return self._valid_sets

    # -------------------------------------------------------------------------
    # Properties & getters
    # -------------------------------------------------------------------------
    @property
    def frame(self) -> pd.DataFrame:
        """Return a copy of the underlying rows."""
        return self._frame.copy()

    def __len__(self) -> int:
        return len(self._frame)

    def numeric_values(self, column: str) -> np.ndarray:
        """Finite values of one numeric column across the whole dataset."""
        if column not in self._frame.columns:
            return np.array([], dtype=float)
        values = pd.to_numeric(self._frame[column], errors="coerce").to_numpy(dtype=float)
        return values[np.isfinite(values)]

    def rows_by_name(self, names: Sequence[str]) -> List[dict]:
        """Return full records (as dicts) for the given identities, in dataset order."""
        wanted = set(names)
        name_col = self.columns.name
        sub = self._frame[self._frame[name_col].astype(str).isin(wanted)]
        return sub.to_dict(orient="records")
