from __future__ import annotations

from typing import Optional

import plotly.graph_objects as go

from dex_browser.analysis.aggregation import CategoryAggregator
from dex_browser.core.base_view import BaseView
from dex_browser.interaction.navigation import (
    NavigationLevel,
    NavigationState,
    NavigationStateMachine,
    NavigationView,
)
from dex_browser.views.colors import category_colors


class StackedBarView(BaseView):
    """
    Count of records per primary category, stacked by secondary category.
    Clicking a segment drills down: all categories -> one primary -> member list.
    """

    id = "stacked_bar"
    label = "Primary & Secondary Types"

    def __init__(self, records, config=None):
        super().__init__(records, config)
        self._aggregator: Optional[CategoryAggregator] = None

    @property
    def aggregator(self) -> CategoryAggregator:
        if self._aggregator is None:
            self._aggregator = CategoryAggregator(self.records)
        return self._aggregator

    def machine(self, state: Optional[NavigationState] = None) -> NavigationStateMachine:
        return NavigationStateMachine(self.aggregator, state)

    def compute_data(self, state: Optional[NavigationState]) -> NavigationView:
        return self.machine(state).view()

    def render_figure(self, data: NavigationView, state=None) -> go.Figure:
        if data.state.level is NavigationLevel.DETAIL_LIST:
            return self._render_members(data)

        result = data.aggregate
        if result is None or not result.groups:
            return self.empty_figure(data.message or "No data for stacked bar chart.")

        colors = category_colors(result.secondary_domain)
        # largest total at the top of a horizontal bar chart
        y_order = list(reversed(result.keys))

        fig = go.Figure()
        for secondary in result.secondary_domain:
            segments = [s for s in result.segments if s.secondary == secondary]
            if not segments:
                continue
            fig.add_trace(
                go.Bar(
                    orientation="h",
                    name=secondary,
                    x=[s.count for s in segments],
                    y=[s.primary for s in segments],
                    base=[s.start for s in segments],
                    marker_color=colors[secondary],
                    customdata=[[s.primary, s.secondary] for s in segments],
                    hovertemplate="%{customdata[0]} / %{customdata[1]}<br>Count: %{x}<extra></extra>",
                )
            )

        fig.update_layout(
            title=data.title,
            barmode="overlay",
            height=max(300, 28 * len(result.groups) + 120),
            margin=dict(l=100, r=40, t=50, b=40),
            xaxis_title="Number of records",
            xaxis=dict(range=[0, result.max_total * 1.05 if result.max_total else 1]),
            yaxis=dict(categoryorder="array", categoryarray=y_order),
            legend_title="Secondary Type",
            clickmode="event",
        )
        return fig

    def _render_members(self, data: NavigationView) -> go.Figure:
        if not data.members:
            return self.empty_figure(data.message or "No records found.")

        fig = go.Figure(
            go.Table(
                header=dict(values=["Name"], align="left"),
                cells=dict(values=[list(data.members)], align="left"),
            )
        )
        fig.update_layout(
            title=data.title,
            height=min(800, 60 + 24 * len(data.members) + 60),
            margin=dict(l=20, r=20, t=50, b=20),
        )
        return fig
