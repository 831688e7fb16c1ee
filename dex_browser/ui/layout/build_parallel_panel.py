from __future__ import annotations

from typing import Sequence

import dash_bootstrap_components as dbc
from dash import dcc, html

from dex_browser.ui.ids import IDs


def build_focus_modal() -> dbc.Modal:
    return dbc.Modal(
        [
            dbc.ModalHeader(dbc.ModalTitle(id=IDs.Control.FOCUS_HEADER), close_button=False),
            dbc.ModalBody(
                dbc.Row(
                    [
                        dbc.Col(html.Img(id=IDs.Control.FOCUS_IMAGE, style={"width": "96px"}), width="auto"),
                        dbc.Col(html.Div(id=IDs.Control.FOCUS_BODY)),
                    ],
                    className="align-items-center",
                )
            ),
            dbc.ModalFooter(
                dbc.Button("Close", id=IDs.Control.FOCUS_CLOSE_BTN, color="secondary", size="sm")
            ),
        ],
        id=IDs.Control.FOCUS_MODAL,
        is_open=False,
        centered=True,
        backdrop="static",
    )


def build_parallel_panel(categories: Sequence[str]) -> dbc.Card:
    """
    Category checklist on the left, parallel coordinates chart on the right.
    All categories start active.
    """
    options = [{"label": c, "value": c} for c in categories]

    sidebar = dbc.Card(
        [
            dbc.CardHeader("Primary types", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Div(
                        [
                            dbc.Button("Select All", id=IDs.Control.SELECT_ALL_BTN, size="sm", className="me-2"),
                            dbc.Button(
                                "Deselect All",
                                id=IDs.Control.DESELECT_ALL_BTN,
                                size="sm",
                                color="secondary",
                            ),
                        ],
                        className="mb-2",
                    ),
                    dcc.Checklist(
                        id=IDs.Control.CATEGORY_CHECKLIST,
                        options=options,
                        value=list(categories),
                        labelStyle={"display": "block"},
                    ),
                ]
            ),
        ]
    )

    return dbc.Card(
        dbc.CardBody(
            dbc.Row(
                [
                    dbc.Col(sidebar, md=3),
                    dbc.Col(
                        [
                            html.Div(id=IDs.Control.PARCOORDS_STATUS),
                            dcc.Graph(id=IDs.Control.PARCOORDS_GRAPH, config={"responsive": True}),
                        ],
                        md=9,
                    ),
                ],
                className="gx-3",
            )
        ),
        className="mt-3",
    )
