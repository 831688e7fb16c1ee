from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import dash
from dash import Input, Output, State

from dex_browser.interaction.navigation import NavigationState, NavigationStateMachine
from dex_browser.ui.helpers import diagnostics_alerts, error_figure
from dex_browser.ui.ids import IDs

if TYPE_CHECKING:
    from dex_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

VIEW_ID = "stacked_bar"

_HIDDEN = {"display": "none"}
_SHOWN = {"display": "inline-block"}


def segment_from_click(click_data: Optional[dict]) -> Optional[tuple]:
    """(primary, secondary) from a bar click, or None."""
    if not click_data:
        return None
    points = click_data.get("points") or []
    if not points:
        return None
    custom = points[0].get("customdata")
    if not isinstance(custom, (list, tuple)) or len(custom) < 2:
        return None
    return str(custom[0]), str(custom[1])


def apply_navigation_event(
    machine: NavigationStateMachine,
    triggered_id: Optional[str],
    click_data: Optional[dict],
) -> NavigationState:
    if triggered_id == IDs.Control.STACKED_GRAPH:
        segment = segment_from_click(click_data)
        if segment is None:
            return machine.state
        return machine.select_segment(*segment)
    if triggered_id == IDs.Control.STACKED_BACK_BTN:
        return machine.back()
    if triggered_id == IDs.Control.STACKED_SHOW_ALL_BTN:
        return machine.reset()
    return machine.state


def register_navigation_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Segment clicks / back / show all -> NavigationState -> figure
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.NAVIGATION_STATE, "data"),
        Output(IDs.Control.STACKED_GRAPH, "figure"),
        Output(IDs.Control.STACKED_GRAPH, "clickData"),
        Output(IDs.Control.STACKED_BACK_BTN, "children"),
        Output(IDs.Control.STACKED_BACK_BTN, "style"),
        Output(IDs.Control.STACKED_SHOW_ALL_BTN, "style"),
        Output(IDs.Control.STACKED_STATUS, "children"),
        Input(IDs.Control.STACKED_GRAPH, "clickData"),
        Input(IDs.Control.STACKED_BACK_BTN, "n_clicks"),
        Input(IDs.Control.STACKED_SHOW_ALL_BTN, "n_clicks"),
        State(IDs.Store.NAVIGATION_STATE, "data"),
    )
    def update_navigation(
        click_data: Optional[dict],
        _back_clicks: Optional[int],
        _show_all_clicks: Optional[int],
        state_data: dict[str, Any] | None,
    ):
        triggered_id = dash.ctx.triggered_id
        try:
            view = ctx.view(VIEW_ID)
            machine = view.machine(NavigationState.from_dict(state_data))
            apply_navigation_event(machine, triggered_id, click_data)

            # view() may reset an invalidated selector, so read the state after it
            data = machine.view()
            fig = view.render_figure(data, machine.state)
        except Exception:
            logger.exception(
                "Error in update_navigation",
                extra={"triggered_id": triggered_id, "navigation_state": state_data},
            )
            return (
                dash.no_update,
                error_figure("The chart hit an unexpected error."),
                None,
                dash.no_update,
                _HIDDEN,
                _HIDDEN,
                dash.no_update,
            )

        return (
            machine.state.to_dict(),
            fig,
            # cleared so the same segment can be clicked again
            None,
            data.back_label or "‹ Back",
            _SHOWN if data.back_label else _HIDDEN,
            _SHOWN if data.show_all_link else _HIDDEN,
            diagnostics_alerts(data.diagnostics),
        )
