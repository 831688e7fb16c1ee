from __future__ import annotations

from typing import Any, Dict, List, Optional

import plotly.graph_objects as go

from dex_browser.core.base_view import BaseView
from dex_browser.interaction.selection import SelectionCoordinator, SelectionState, SelectionView
from dex_browser.views.colors import category_colors


class ParallelCoordinatesView(BaseView):
    """
    One polyline per record across the stat dimensions, filtered by primary
    category. Clicking a line focuses that record and dims the rest.
    """

    id = "parallel_coordinates"
    label = "Stats by Type"

    def coordinator(self, state: Optional[SelectionState] = None) -> SelectionCoordinator:
        return SelectionCoordinator(self.records, state)

    def compute_data(self, state: Optional[SelectionState]) -> SelectionView:
        return self.coordinator(state).view()

    def render_figure(self, data: SelectionView, state=None) -> go.Figure:
        if data.message or not data.rows:
            return self.empty_figure(data.message or "No records of the selected categories.")

        name_col = self.records.columns.name
        category_col = self.records.columns.primary
        dims = list(data.dimensions)
        colors = category_colors(data.categories)
        has_focus = data.focus is not None

        # one trace per category; None breaks the line between records
        lines: Dict[str, Dict[str, List[Any]]] = {}
        focus_row: Optional[Dict[str, Any]] = None
        for row, emphasized in zip(data.rows, data.emphasized):
            if has_focus and emphasized:
                focus_row = row
                continue
            bucket = lines.setdefault(str(row[category_col]), {"x": [], "y": [], "names": []})
            name = str(row[name_col])
            bucket["x"].extend(dims + [None])
            bucket["y"].extend([row[d] for d in dims] + [None])
            bucket["names"].extend([name] * len(dims) + [None])

        fig = go.Figure()
        for category in data.categories:
            bucket = lines.get(category)
            if bucket is None:
                continue
            fig.add_trace(
                go.Scatter(
                    x=bucket["x"],
                    y=bucket["y"],
                    customdata=bucket["names"],
                    mode="lines",
                    name=category,
                    line=dict(color=colors[category], width=1.5),
                    opacity=0.1 if has_focus else 0.7,
                    connectgaps=False,
                    hovertemplate="%{customdata}<br>%{x}: %{y}<extra></extra>",
                )
            )

        if focus_row is not None:
            name = str(focus_row[name_col])
            fig.add_trace(
                go.Scatter(
                    x=dims,
                    y=[focus_row[d] for d in dims],
                    customdata=[name] * len(dims),
                    mode="lines+markers",
                    name=name,
                    line=dict(color=colors.get(str(focus_row[category_col]), "#333"), width=4),
                    opacity=1.0,
                    hovertemplate="%{customdata}<br>%{x}: %{y}<extra></extra>",
                )
            )

        layout: Dict[str, Any] = dict(
            title="Base Stats by Primary Type",
            height=550,
            margin=dict(l=50, r=30, t=50, b=40),
            xaxis=dict(categoryorder="array", categoryarray=dims, showgrid=True),
            legend_title="Primary Type",
            hovermode="closest",
        )
        if data.y_extent is not None:
            lo, hi = data.y_extent
            pad = (hi - lo) * 0.05 or 1.0
            layout["yaxis"] = dict(range=[lo - pad, hi + pad], title="Stat value")
        fig.update_layout(**layout)
        return fig
