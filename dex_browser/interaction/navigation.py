"""
Drill-down navigation for the stacked bar view.

Overview -> PrimaryFiltered(p) -> DetailList(p, s). Every state can be reset to
Overview; DetailList can step back to PrimaryFiltered. Every transition
recomputes the whole derived view.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from dex_browser.analysis.aggregation import AggregateResult, CategoryAggregator
from dex_browser.core.diagnostics import SELECTOR_INVALIDATED, Diagnostic
from dex_browser.core.exceptions import CategoryNotFound

logger = logging.getLogger(__name__)


class NavigationLevel(str, Enum):
    OVERVIEW = "overview"
    PRIMARY_FILTERED = "primary_filtered"
    DETAIL_LIST = "detail_list"


@dataclass(frozen=True)
class NavigationState:
    """
    Current drill-down level plus the selector values that parameterise it.
    """
    level: NavigationLevel = NavigationLevel.OVERVIEW
    primary: Optional[str] = None
    secondary: Optional[str] = None

    @classmethod
    def overview(cls) -> NavigationState:
        return cls()

    @classmethod
    def primary_filtered(cls, primary: str) -> NavigationState:
        return cls(level=NavigationLevel.PRIMARY_FILTERED, primary=primary)

    @classmethod
    def detail_list(cls, primary: str, secondary: str) -> NavigationState:
        return cls(level=NavigationLevel.DETAIL_LIST, primary=primary, secondary=secondary)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["level"] = self.level.value
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> NavigationState:
        if not data:
            return cls()
        try:
            level = NavigationLevel(data.get("level", NavigationLevel.OVERVIEW.value))
        except ValueError:
            return cls()
        primary = data.get("primary")
        secondary = data.get("secondary")
        if level is NavigationLevel.PRIMARY_FILTERED and primary:
            return cls.primary_filtered(primary)
        if level is NavigationLevel.DETAIL_LIST and primary and secondary:
            return cls.detail_list(primary, secondary)
        return cls()


@dataclass(frozen=True)
class NavigationView:
    """
    View model handed to the renderer.

    For OVERVIEW / PRIMARY_FILTERED `aggregate` is set; for DETAIL_LIST
    `members` lists the matching identities.
    """
    state: NavigationState
    title: str
    aggregate: Optional[AggregateResult] = None
    members: Tuple[str, ...] = ()
    message: Optional[str] = None
    show_all_link: bool = False
    back_label: Optional[str] = None
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)


class NavigationStateMachine:
    """
    Owns one chart's NavigationState. Only the transition methods below change it.
    """

    def __init__(self, aggregator: CategoryAggregator, state: Optional[NavigationState] = None):
        self.aggregator = aggregator
        self._state = state or NavigationState.overview()
        self._diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def state(self) -> NavigationState:
        return self._state

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def select_segment(self, primary: str, secondary: Optional[str] = None) -> NavigationState:
        """
        Handle a click on the segment (primary, secondary).

        Overview            -> PrimaryFiltered(primary)
        PrimaryFiltered(p)  -> DetailList(p, secondary) when primary == p
        anything else       -> unchanged
        """
        self._diagnostics = ()
        level = self._state.level

        if level is NavigationLevel.OVERVIEW:
            if not self._primary_exists(primary):
                self._invalidate(primary)
                return self._state
            self._state = NavigationState.primary_filtered(primary)

        elif level is NavigationLevel.PRIMARY_FILTERED:
            if primary != self._state.primary or not secondary:
                logger.debug(
                    "Ignoring segment outside the displayed group",
                    extra={"current": self._state.primary, "clicked": primary},
                )
                return self._state
            if not self._primary_exists(primary):
                self._invalidate(primary)
                return self._state
            self._state = NavigationState.detail_list(primary, secondary)

        else:
            logger.debug("No forward transition from the detail list")

        return self._state

    def back(self) -> NavigationState:
        """
        DetailList(p, s) -> PrimaryFiltered(p). From PrimaryFiltered this is the
        "Show All" link and returns to Overview.
        """
        self._diagnostics = ()
        if self._state.level is NavigationLevel.DETAIL_LIST:
            self._state = NavigationState.primary_filtered(self._state.primary)
        elif self._state.level is NavigationLevel.PRIMARY_FILTERED:
            self._state = NavigationState.overview()
        return self._state

    def reset(self) -> NavigationState:
        self._diagnostics = ()
        self._state = NavigationState.overview()
        return self._state

    # ------------------------------------------------------------------
    # Derived view
    # ------------------------------------------------------------------
    def view(self) -> NavigationView:
        """
        Recompute the derived view for the current state.

        A selector that no longer resolves falls back to Overview and the
        state is reset in place.
        """
        state = self._state

        if state.level is NavigationLevel.DETAIL_LIST:
            if not self._primary_exists(state.primary):
                self._invalidate(state.primary)
                return self.view()
            members = tuple(self.aggregator.members(state.primary, state.secondary))
            message = None
            if not members:
                message = f"No records found for {state.primary} / {state.secondary}."
            return NavigationView(
                state=state,
                title=f"{state.primary} / {state.secondary}",
                members=members,
                message=message,
                show_all_link=True,
                back_label=f"‹ Back to {state.primary} View",
                diagnostics=self._diagnostics,
            )

        if state.level is NavigationLevel.PRIMARY_FILTERED:
            try:
                result = self.aggregator.aggregate(only=state.primary)
            except CategoryNotFound:
                self._invalidate(state.primary)
                return self.view()
            return NavigationView(
                state=state,
                title=f"{state.primary}: Distribution by Secondary Type",
                aggregate=result,
                show_all_link=True,
                diagnostics=self._diagnostics,
            )

        result = self.aggregator.aggregate()
        message = None if result.groups else "No data for stacked bar chart."
        return NavigationView(
            state=state,
            title="Distribution by Primary & Secondary Type",
            aggregate=result,
            message=message,
            diagnostics=self._diagnostics,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _primary_exists(self, primary: Optional[str]) -> bool:
        return bool(primary) and primary in self.aggregator.primary_keys()

    def _invalidate(self, primary: Optional[str]) -> None:
        logger.warning(
            "Primary category not found; displaying full chart",
            extra={"primary": primary},
        )
        self._state = NavigationState.overview()
        self._diagnostics = self._diagnostics + (
            Diagnostic(SELECTOR_INVALIDATED, f"Category '{primary}' not found. Showing all categories."),
        )
