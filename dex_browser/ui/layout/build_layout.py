from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from dex_browser.ui.ids import IDs
from dex_browser.ui.layout.build_navbar import build_navbar
from dex_browser.ui.layout.build_parallel_panel import build_focus_modal, build_parallel_panel
from dex_browser.ui.layout.build_ridgeline_panel import build_ridgeline_panel
from dex_browser.ui.layout.build_stacked_bar_panel import build_stacked_bar_panel

if TYPE_CHECKING:
    from dex_browser.ui.config import AppConfig


def _build_view_panel(ctx: AppConfig, view_id: str):
    view = ctx.view(view_id)
    if view_id == "ridgeline":
        controller = view.controller()
        step_keys = [s.key for s in controller.steps]
        return build_ridgeline_panel(step_keys, ctx.global_config.animation.interval_ms)
    if view_id == "stacked_bar":
        return build_stacked_bar_panel()
    if view_id == "parallel_coordinates":
        return build_parallel_panel(view.coordinator().categories)
    return dbc.Card(dbc.CardBody(f"No panel for view '{view_id}'."), className="mt-3")


def build_layout(ctx: AppConfig):
    """
    One tab per registered view. Each interactive component keeps its state
    snapshot in its own session store.
    """
    navbar = build_navbar(ctx.global_config, ctx.records)

    tabs = [
        dcc.Tab(label=cls.label, value=cls.id, children=[_build_view_panel(ctx, cls.id)])
        for cls in ctx.registry.all_classes()
    ]
    default_tab = tabs[0].value if tabs else None

    return dbc.Container(
        fluid=True,
        className="dex-root",
        children=[
            navbar,

            # Per-view state snapshots
            dcc.Store(id=IDs.Store.NAVIGATION_STATE, storage_type="session"),
            dcc.Store(id=IDs.Store.ANIMATION_STATE, storage_type="session"),
            dcc.Store(id=IDs.Store.ANIMATION_RUN, storage_type="memory"),
            dcc.Store(id=IDs.Store.SELECTION_STATE, storage_type="session"),
            dcc.Store(id=IDs.Store.ARTWORK_REQUEST, storage_type="memory"),
            dcc.Store(id=IDs.Store.ARTWORK_RESULT, storage_type="memory"),

            build_focus_modal(),

            dcc.Tabs(
                id=IDs.Control.PAGE_TABS,
                value=default_tab,
                children=tabs,
                className="mt-2",
            ),
            html.Footer(
                html.Small("Artwork courtesy of PokeAPI.", className="text-muted"),
                className="mt-3 mb-2",
            ),
        ],
    )
