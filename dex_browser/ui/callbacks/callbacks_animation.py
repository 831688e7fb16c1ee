from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import dash
from dash import Input, Output, State

from dex_browser.interaction.animation import AnimationState
from dex_browser.ui.helpers import diagnostics_alerts, error_figure
from dex_browser.ui.ids import IDs

if TYPE_CHECKING:
    from dex_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

VIEW_ID = "ridgeline"


def apply_animation_event(
    controller,
    triggered_id: Optional[str],
    slider_value: Optional[int],
    tick_run_id: Optional[int],
) -> AnimationState:
    """
    Map one UI event onto a controller operation. Pure apart from the
    controller itself, so it can be tested without a running app.
    """
    if triggered_id == IDs.Control.ANIMATION_BUTTON:
        return controller.toggle()
    if triggered_id == IDs.Control.ANIMATION_SLIDER:
        if slider_value is None or slider_value == controller.state.index:
            return controller.state
        return controller.scrub_to(slider_value)
    if triggered_id == IDs.Control.ANIMATION_INTERVAL:
        return controller.tick(tick_run_id)
    return controller.state


def register_animation_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Button / slider / interval tick -> AnimationState -> figure
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.ANIMATION_STATE, "data"),
        Output(IDs.Store.ANIMATION_RUN, "data"),
        Output(IDs.Control.RIDGELINE_GRAPH, "figure"),
        Output(IDs.Control.ANIMATION_BUTTON, "children"),
        Output(IDs.Control.ANIMATION_SLIDER, "value"),
        Output(IDs.Control.ANIMATION_INTERVAL, "disabled"),
        Output(IDs.Control.ANIMATION_LABEL, "children"),
        Input(IDs.Control.ANIMATION_BUTTON, "n_clicks"),
        Input(IDs.Control.ANIMATION_SLIDER, "value"),
        Input(IDs.Control.ANIMATION_INTERVAL, "n_intervals"),
        State(IDs.Store.ANIMATION_STATE, "data"),
        State(IDs.Store.ANIMATION_RUN, "data"),
    )
    def update_animation(
        _n_clicks: Optional[int],
        slider_value: Optional[int],
        _n_intervals: Optional[int],
        state_data: dict[str, Any] | None,
        tick_run_id: Optional[int],
    ):
        triggered_id = dash.ctx.triggered_id
        try:
            view = ctx.view(VIEW_ID)
            controller = view.controller(AnimationState.from_dict(state_data))
            state = apply_animation_event(controller, triggered_id, slider_value, tick_run_id)

            data = view.compute_data(state)
            fig = view.render_figure(data, state)
        except Exception:
            logger.exception(
                "Error in update_animation",
                extra={"triggered_id": triggered_id, "animation_state": state_data},
            )
            return (
                dash.no_update,
                dash.no_update,
                error_figure("The animation hit an unexpected error."),
                dash.no_update,
                dash.no_update,
                True,
                dash.no_update,
            )

        label = f"Selected Generation: {data.step_key}" if data.step_key is not None else ""
        return (
            state.to_dict(),
            # the interval ticks under the run it was armed with
            state.run_id if state.is_playing else None,
            fig,
            data.button_label,
            state.index,
            not state.is_playing,
            diagnostics_alerts(data.diagnostics, label or None),
        )
