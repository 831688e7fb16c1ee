"""Cross-filter selection for the parallel coordinates view (active categories + one focused record)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from dex_browser.core.dataset import RecordSet
from dex_browser.core.diagnostics import NOT_IN_CURRENT_VIEW, Diagnostic
from dex_browser.interaction.artwork import ArtworkTicket, artwork_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    active: frozenset = frozenset()
    focus: Optional[str] = None
    focus_token: int = 0
    artwork: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active": sorted(self.active),
            "focus": self.focus,
            "focus_token": self.focus_token,
            "artwork": self.artwork,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[SelectionState]:
        if not data:
            return None
        return cls(
            active=frozenset(str(k) for k in data.get("active", [])),
            focus=data.get("focus"),
            focus_token=int(data.get("focus_token", 0)),
            artwork=data.get("artwork"),
        )


@dataclass(frozen=True)
class FocusDetails:
    name: str
    type_label: str
    stats: Tuple[Tuple[str, float], ...]


@dataclass(frozen=True)
class SelectionView:
    rows: Tuple[Dict[str, Any], ...]
    emphasized: Tuple[bool, ...]
    dimensions: Tuple[str, ...]
    categories: Tuple[str, ...]
    active: frozenset
    focus: Optional[FocusDetails] = None
    artwork: Optional[str] = None
    y_extent: Optional[Tuple[float, float]] = None
    message: Optional[str] = None


class SelectionCoordinator:
    """
    Keeps the active category set and the focused record consistent.

    Invariant: the focused record is always inside the active-category subset;
    any update that removes its category clears the focus in the same step.
    """

    def __init__(self, records: RecordSet, state: Optional[SelectionState] = None):
        self.records = records
        cols = records.columns
        self.name_col = cols.name
        self.category_col = cols.primary
        self.secondary_col = cols.secondary
        self.dimensions: Tuple[str, ...] = tuple(cols.dimensions)

        valid = records.valid_for(numeric=self.dimensions, categorical=(cols.name, cols.primary))
        self._working = valid.frame
        self.excluded = valid.excluded

        self._category_by_name: Dict[str, str] = dict(
            zip(self._working[self.name_col].astype(str), self._working[self.category_col].astype(str))
        )
        self.categories: Tuple[str, ...] = tuple(sorted(set(self._category_by_name.values())))

        if state is None:
            state = SelectionState(active=frozenset(self.categories))
        self._state = self._sanitise(state)

    @property
    def state(self) -> SelectionState:
        return self._state

    # ------------------------------------------------------------------
    # Category filter
    # ------------------------------------------------------------------
    def set_active_categories(self, keys: Iterable[str]) -> SelectionState:
        active = frozenset(k for k in (str(k) for k in keys) if k in self.categories)
        state = replace(self._state, active=active)
        if state.focus is not None and self._category_by_name.get(state.focus) not in active:
            logger.debug("Focus left the active categories; clearing", extra={"focus": state.focus})
            state = self._cleared(state)
        self._state = state
        return self._state

    def toggle_category(self, key: str, enabled: bool) -> SelectionState:
        active = set(self._state.active)
        if enabled:
            active.add(key)
        else:
            active.discard(key)
        return self.set_active_categories(active)

    def select_all(self) -> SelectionState:
        return self.set_active_categories(self.categories)

    def deselect_all(self) -> SelectionState:
        return self.set_active_categories(())

    # ------------------------------------------------------------------
    # Focus
    # ------------------------------------------------------------------
    def focus(self, identity: str) -> Optional[Diagnostic]:
        """
        Focus `identity` if it is in the filtered working set.

        :return: None on success, a NOT_IN_CURRENT_VIEW diagnostic otherwise
        """
        if not self.in_view(identity):
            logger.info("Focus ignored: record not in current view", extra={"identity": identity})
            return Diagnostic(NOT_IN_CURRENT_VIEW, f"'{identity}' is not in the current view.")

        if identity != self._state.focus:
            self._state = replace(
                self._state,
                focus=identity,
                focus_token=self._state.focus_token + 1,
                artwork=None,
            )
        return None

    def clear_focus(self) -> SelectionState:
        if self._state.focus is not None:
            self._state = self._cleared(self._state)
        return self._state

    def in_view(self, identity: Optional[str]) -> bool:
        if identity is None:
            return False
        category = self._category_by_name.get(str(identity))
        return category is not None and category in self._state.active

    def is_emphasized(self, identity: str) -> bool:
        """
        Outside the active subset: always suppressed. Inside: emphasised when it
        is the focus, or when nothing is focused.
        """
        if not self.in_view(identity):
            return False
        return self._state.focus is None or self._state.focus == identity

    # ------------------------------------------------------------------
    # Artwork lookup race guard
    # ------------------------------------------------------------------
    def begin_artwork_lookup(self) -> Optional[ArtworkTicket]:
        focus = self._state.focus
        if focus is None:
            return None
        return ArtworkTicket(identity=focus, token=self._state.focus_token, key=artwork_key(focus))

    def apply_artwork(self, ticket: ArtworkTicket, reference: str) -> bool:
        """
        Store a resolved artwork reference unless the focus moved on since the
        lookup started.
        """
        if ticket.token != self._state.focus_token or ticket.identity != self._state.focus:
            logger.debug(
                "Discarding stale artwork result",
                extra={"identity": ticket.identity, "ticket": ticket.token, "current": self._state.focus_token},
            )
            return False
        self._state = replace(self._state, artwork=reference)
        return True

    # ------------------------------------------------------------------
    # Derived view
    # ------------------------------------------------------------------
    def filtered_frame(self) -> pd.DataFrame:
        df = self._working
        return df[df[self.category_col].astype(str).isin(self._state.active)]

    def view(self) -> SelectionView:
        df = self.filtered_frame()
        focus = self._state.focus

        if focus is not None:
            # focused row last so it draws on top
            is_focus = df[self.name_col].astype(str) == focus
            df = pd.concat([df[~is_focus], df[is_focus]])

        rows: List[Dict[str, Any]] = df.to_dict(orient="records")
        emphasized = tuple(self.is_emphasized(str(r[self.name_col])) for r in rows)

        y_extent = None
        message = None
        if rows:
            values = df[list(self.dimensions)].to_numpy(dtype=float)
            y_extent = (float(values.min()), float(values.max()))
        elif not len(self._working):
            message = "No valid data for parallel coordinates."
        else:
            message = "No records of the selected categories."

        return SelectionView(
            rows=tuple(rows),
            emphasized=emphasized,
            dimensions=self.dimensions,
            categories=self.categories,
            active=self._state.active,
            focus=self._focus_details(focus),
            artwork=self._state.artwork,
            y_extent=y_extent,
            message=message,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _focus_details(self, focus: Optional[str]) -> Optional[FocusDetails]:
        if focus is None:
            return None
        match = self._working[self._working[self.name_col].astype(str) == focus]
        if match.empty:
            return None
        row = match.iloc[0]
        primary = str(row[self.category_col])
        secondary = row[self.secondary_col]
        type_label = primary
        if pd.notna(secondary) and str(secondary) != self.records.none_value:
            type_label = f"{primary} / {secondary}"
        return FocusDetails(
            name=focus,
            type_label=type_label,
            stats=tuple((dim, float(row[dim])) for dim in self.dimensions),
        )

    @staticmethod
    def _cleared(state: SelectionState) -> SelectionState:
        return replace(state, focus=None, focus_token=state.focus_token + 1, artwork=None)

    def _sanitise(self, state: SelectionState) -> SelectionState:
        active = frozenset(k for k in state.active if k in self.categories)
        state = replace(state, active=active)
        if state.focus is not None and self._category_by_name.get(state.focus) not in active:
            state = self._cleared(state)
        return state
