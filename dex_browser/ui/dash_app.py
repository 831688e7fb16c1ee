from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from dex_browser.config.loader import load_global_config
from dex_browser.core.dataset_loader import from_config
from dex_browser.core.view_registry import ViewRegistry
from dex_browser.interaction.artwork import ArtworkClient
from dex_browser.ui.callbacks.callbacks_animation import register_animation_callbacks
from dex_browser.ui.callbacks.callbacks_navigation import register_navigation_callbacks
from dex_browser.ui.callbacks.callbacks_selection import register_selection_callbacks
from dex_browser.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def build_view_registry() -> ViewRegistry:
    from dex_browser.views import (
        RidgelineView,
        StackedBarView,
        ParallelCoordinatesView,
    )

    registry = ViewRegistry()
    registry.register(RidgelineView)
    registry.register(StackedBarView)
    registry.register(ParallelCoordinatesView)
    return registry


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load config + dataset (hard errors surface here, never in callbacks)
    global_config = load_global_config(config_root)
    records = from_config(global_config)

    # 2) App context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        records=records,
        registry=build_view_registry(),
        artwork_client=ArtworkClient(global_config.artwork),
    )
    ctx.validate()

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        suppress_callback_exceptions=True,
    )
    app.title = global_config.ui_title

    app.layout = build_layout(ctx)

    register_animation_callbacks(app, ctx)
    register_navigation_callbacks(app, ctx)
    register_selection_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={"records": len(records), "views": [cls.id for cls in ctx.registry.all_classes()]},
    )
    return app
