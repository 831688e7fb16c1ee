from __future__ import annotations

from typing import Iterable, List, Optional

import dash_bootstrap_components as dbc
import plotly.graph_objs as go

from dex_browser.core.diagnostics import Diagnostic


def message_figure(title: str, details: Optional[str] = None) -> go.Figure:
    fig = go.Figure()
    text = title if details is None else f"{title}<br><br>{details}"
    fig.add_annotation(
        text=text,
        showarrow=False,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=40, r=40, t=40, b=40))
    return fig


def error_figure(details: str) -> go.Figure:
    return message_figure("Something went wrong while rendering this view.", details)


def diagnostics_alerts(diagnostics: Iterable[Diagnostic], message: Optional[str] = None) -> List[dbc.Alert]:
    """Small dismissable alerts for the status line under a chart."""
    alerts = [
        dbc.Alert(d.message, color="warning", dismissable=True, className="py-1 px-2 mb-1 small")
        for d in diagnostics
    ]
    if message:
        alerts.append(dbc.Alert(message, color="info", className="py-1 px-2 mb-1 small"))
    return alerts
