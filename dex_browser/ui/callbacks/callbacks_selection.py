from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional

import dash
import dash_bootstrap_components as dbc
from dash import Input, Output, State, exceptions, html

from dex_browser.interaction.artwork import ArtworkTicket
from dex_browser.interaction.selection import FocusDetails, SelectionCoordinator, SelectionState
from dex_browser.ui.helpers import diagnostics_alerts, error_figure
from dex_browser.ui.ids import IDs
from dex_browser.views.colors import category_colors, text_color_for

if TYPE_CHECKING:
    from dex_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

VIEW_ID = "parallel_coordinates"


def identity_from_click(click_data: Optional[dict]) -> Optional[str]:
    if not click_data:
        return None
    points = click_data.get("points") or []
    if not points:
        return None
    custom = points[0].get("customdata")
    if custom is None:
        return None
    return str(custom)


def apply_selection_event(
    coordinator: SelectionCoordinator,
    triggered_id: Optional[str],
    checklist: Optional[List[str]],
    click_data: Optional[dict],
) -> list:
    """
    Map one UI event onto a coordinator operation; returns any diagnostics.
    """
    diagnostics = []
    if triggered_id == IDs.Control.CATEGORY_CHECKLIST:
        coordinator.set_active_categories(checklist or [])
    elif triggered_id == IDs.Control.SELECT_ALL_BTN:
        coordinator.select_all()
    elif triggered_id == IDs.Control.DESELECT_ALL_BTN:
        coordinator.deselect_all()
    elif triggered_id == IDs.Control.PARCOORDS_GRAPH:
        identity = identity_from_click(click_data)
        if identity is not None:
            diagnostic = coordinator.focus(identity)
            if diagnostic is not None:
                diagnostics.append(diagnostic)
    elif triggered_id == IDs.Control.FOCUS_CLOSE_BTN:
        coordinator.clear_focus()
    return diagnostics


def artwork_request(
    coordinator: SelectionCoordinator,
    previous_token: Optional[int],
) -> Optional[dict]:
    """
    Ticket for a new artwork lookup, or None when the focus did not change.

    `previous_token` is None on the initial call, so a focus restored from the
    session store still gets its artwork.
    """
    if coordinator.state.focus is None:
        return None
    if previous_token is not None and previous_token == coordinator.state.focus_token:
        return None
    ticket = coordinator.begin_artwork_lookup()
    return ticket.to_dict() if ticket is not None else None


def focus_image(coordinator: SelectionCoordinator, artwork_result: Optional[dict]) -> str:
    """
    Image source for the focus modal. A result for an older focus is dropped.
    """
    ticket = ArtworkTicket.from_dict(artwork_result)
    if ticket is not None and artwork_result.get("reference"):
        coordinator.apply_artwork(ticket, str(artwork_result["reference"]))
    return coordinator.state.artwork or ""


def _focus_body(focus: Optional[FocusDetails]):
    if focus is None:
        return []
    rows = [html.Tr([html.Th(dim), html.Td(f"{value:g}")]) for dim, value in focus.stats]
    return [
        html.Div(focus.type_label, className="text-muted mb-2"),
        dbc.Table(html.Tbody(rows), size="sm", bordered=False, className="mb-0"),
    ]


def register_selection_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Category filter / focus -> SelectionState -> figure
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SELECTION_STATE, "data"),
        Output(IDs.Control.CATEGORY_CHECKLIST, "value"),
        Output(IDs.Control.PARCOORDS_GRAPH, "figure"),
        Output(IDs.Control.PARCOORDS_GRAPH, "clickData"),
        Output(IDs.Control.PARCOORDS_STATUS, "children"),
        Output(IDs.Control.FOCUS_MODAL, "is_open"),
        Output(IDs.Control.FOCUS_HEADER, "children"),
        Output(IDs.Control.FOCUS_HEADER, "style"),
        Output(IDs.Control.FOCUS_BODY, "children"),
        Output(IDs.Store.ARTWORK_REQUEST, "data"),
        Input(IDs.Control.CATEGORY_CHECKLIST, "value"),
        Input(IDs.Control.SELECT_ALL_BTN, "n_clicks"),
        Input(IDs.Control.DESELECT_ALL_BTN, "n_clicks"),
        Input(IDs.Control.PARCOORDS_GRAPH, "clickData"),
        Input(IDs.Control.FOCUS_CLOSE_BTN, "n_clicks"),
        State(IDs.Store.SELECTION_STATE, "data"),
    )
    def update_selection(
        checklist: Optional[List[str]],
        _select_all: Optional[int],
        _deselect_all: Optional[int],
        click_data: Optional[dict],
        _close: Optional[int],
        state_data: dict[str, Any] | None,
    ):
        triggered_id = dash.ctx.triggered_id
        try:
            view = ctx.view(VIEW_ID)
            coordinator = view.coordinator(SelectionState.from_dict(state_data))
            previous_token = coordinator.state.focus_token if triggered_id is not None else None
            diagnostics = apply_selection_event(coordinator, triggered_id, checklist, click_data)
            request = artwork_request(coordinator, previous_token)

            data = coordinator.view()
            fig = view.render_figure(data, coordinator.state)
        except Exception:
            logger.exception(
                "Error in update_selection",
                extra={"triggered_id": triggered_id, "selection_state": state_data},
            )
            return (
                dash.no_update,
                dash.no_update,
                error_figure("The chart hit an unexpected error."),
                None,
                dash.no_update,
                False,
                dash.no_update,
                dash.no_update,
                dash.no_update,
                dash.no_update,
            )

        focus = data.focus
        header_style = {}
        if focus is not None:
            category = focus.type_label.split(" / ")[0]
            background = category_colors(data.categories).get(category, "#333333")
            header_style = {"backgroundColor": background, "color": text_color_for(background), "padding": "4px 8px"}

        return (
            coordinator.state.to_dict(),
            sorted(coordinator.state.active),
            fig,
            None,
            diagnostics_alerts(diagnostics),
            focus is not None,
            focus.name if focus is not None else "",
            header_style,
            _focus_body(focus),
            request if request is not None else dash.no_update,
        )

    # ---------------------------------------------------------
    # Artwork request -> lookup result, tagged with the focus token
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.ARTWORK_RESULT, "data"),
        Input(IDs.Store.ARTWORK_REQUEST, "data"),
        prevent_initial_call=True,
    )
    def resolve_artwork(request: dict[str, Any] | None):
        ticket = ArtworkTicket.from_dict(request)
        if ticket is None:
            raise exceptions.PreventUpdate

        result = ctx.artwork_client.lookup(ticket)
        logger.debug("Artwork resolved", extra={"identity": ticket.identity, "ok": result.ok})
        return dict(ticket.to_dict(), reference=result.reference)

    # ---------------------------------------------------------
    # Lookup result + current focus -> modal image
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.FOCUS_IMAGE, "src"),
        Input(IDs.Store.ARTWORK_RESULT, "data"),
        Input(IDs.Store.SELECTION_STATE, "data"),
    )
    def show_artwork(artwork_result: dict[str, Any] | None, state_data: dict[str, Any] | None):
        try:
            coordinator = ctx.view(VIEW_ID).coordinator(SelectionState.from_dict(state_data))
            return focus_image(coordinator, artwork_result)
        except Exception:
            logger.exception("Error in show_artwork", extra={"selection_state": state_data})
            return ""
