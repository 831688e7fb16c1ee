from __future__ import annotations

from typing import Optional

import plotly.graph_objects as go

from dex_browser.analysis.density import ticks
from dex_browser.core.base_view import BaseView
from dex_browser.interaction.animation import AnimationController, AnimationState, DensityFrame
from dex_browser.views.colors import step_color


class RidgelineView(BaseView):
    """
    Animated density of Total stats, one generation at a time.
    """

    id = "ridgeline"
    label = "Total Stats by Generation"

    def __init__(self, records, config=None):
        super().__init__(records, config)
        self._template: Optional[AnimationController] = None

    def controller(self, state: Optional[AnimationState] = None) -> AnimationController:
        # steps and grid depend only on the dataset, so build them once
        if self._template is None:
            self._template = AnimationController.from_records(self.records, self.config.density)
        t = self._template
        return AnimationController(t.steps, t.grid, t.bandwidth, state)

    def compute_data(self, state: Optional[AnimationState]) -> DensityFrame:
        return self.controller(state).frame()

    def render_figure(self, data: DensityFrame, state=None) -> go.Figure:
        if not data.available:
            return self.empty_figure("No valid generation data.")

        title = "Distribution of Total Stats by Generation"
        fig = go.Figure()

        color = step_color(data.state.index)
        if data.curve:
            xs = [p[0] for p in data.curve]
            ys = [p[1] for p in data.curve]
            fig.add_trace(
                go.Scatter(
                    x=xs,
                    y=ys,
                    mode="lines",
                    line=dict(color="#333", width=1, shape="spline"),
                    fill="tozeroy",
                    fillcolor=color,
                    opacity=0.7,
                    name=f"Generation {data.step_key}",
                    hoverinfo="skip",
                )
            )
        else:
            fig.add_annotation(
                text=f"Not enough data for generation {data.step_key}",
                showarrow=False,
                xref="paper",
                yref="paper",
                x=0.5,
                y=0.5,
            )

        # y axis shows record counts: density * (n / peak)
        if data.peak > 0:
            tickvals = ticks(0.0, data.peak, 5)
            ticktext = [f"{t * data.count_scale:.0f}" for t in tickvals]
            fig.update_yaxes(range=[0, data.peak * 1.05], tickvals=tickvals, ticktext=ticktext)
        else:
            fig.update_yaxes(range=[0, 1], showticklabels=False)

        if data.x_extent is not None:
            fig.update_xaxes(range=list(data.x_extent))

        fig.update_layout(
            title=f"{title} | Selected Generation: {data.step_key}",
            xaxis_title="Total Stats",
            yaxis_title="Number of records",
            showlegend=False,
            height=500,
            margin=dict(l=70, r=30, t=50, b=50),
            transition={"duration": 750, "easing": "linear"},
        )
        return fig
