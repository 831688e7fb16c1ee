from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from dex_browser.ui.ids import IDs


def build_stacked_bar_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardBody(
                [
                    html.Div(
                        [
                            dbc.Button(
                                "‹ Back",
                                id=IDs.Control.STACKED_BACK_BTN,
                                color="secondary",
                                outline=True,
                                size="sm",
                                className="me-2",
                                style={"display": "none"},
                            ),
                            dbc.Button(
                                "Show All Types",
                                id=IDs.Control.STACKED_SHOW_ALL_BTN,
                                color="link",
                                size="sm",
                                style={"display": "none"},
                            ),
                        ],
                        className="d-flex align-items-center mb-2",
                    ),
                    html.Div(id=IDs.Control.STACKED_STATUS),
                    dcc.Graph(id=IDs.Control.STACKED_GRAPH, config={"responsive": True}),
                ]
            ),
        ],
        className="mt-3",
    )
