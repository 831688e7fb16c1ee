from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from dex_browser.interaction.animation import LABEL_PLAY
from dex_browser.ui.ids import IDs


def build_ridgeline_panel(step_keys, interval_ms: int) -> dbc.Card:
    """
    Density chart plus play/pause button and a generation slider.

    The interval is the tick source; callbacks keep it enabled only while the
    animation is playing.
    """
    last = max(len(step_keys) - 1, 0)
    marks = {i: key for i, key in enumerate(step_keys)}

    return dbc.Card(
        [
            dbc.CardBody(
                [
                    dcc.Graph(id=IDs.Control.RIDGELINE_GRAPH, config={"responsive": True}),
                    html.Div(
                        [
                            dbc.Button(
                                LABEL_PLAY,
                                id=IDs.Control.ANIMATION_BUTTON,
                                color="primary",
                                size="sm",
                                className="me-3",
                                disabled=not step_keys,
                            ),
                            html.Div(
                                dcc.Slider(
                                    id=IDs.Control.ANIMATION_SLIDER,
                                    min=0,
                                    max=last,
                                    step=1,
                                    value=0,
                                    marks=marks,
                                    disabled=not step_keys,
                                ),
                                className="flex-grow-1",
                            ),
                        ],
                        className="d-flex align-items-center mt-2",
                    ),
                    html.Div(id=IDs.Control.ANIMATION_LABEL, className="small text-muted mt-1"),
                    dcc.Interval(
                        id=IDs.Control.ANIMATION_INTERVAL,
                        interval=interval_ms,
                        n_intervals=0,
                        disabled=True,
                    ),
                ]
            ),
        ],
        className="mt-3",
    )
