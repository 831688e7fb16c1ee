import pandas as pd
import plotly.graph_objs as go

from dex_browser.config.model import GlobalConfig, RecordColumns
from dex_browser.core.dataset import RecordSet
from dex_browser.interaction.animation import AnimationState, AnimationStatus
from dex_browser.views.ridgeline_view import RidgelineView


def _make_records(generations, totals) -> RecordSet:
    cols = RecordColumns()
    n = len(generations)
    df = pd.DataFrame(
        {
            "Name": [f"r{i}" for i in range(n)],
            "Type_1": ["Fire"] * n,
            "Type_2": ["None"] * n,
            "Generation": generations,
            "Total": totals,
        }
    )
    for dim in cols.dimensions:
        df[dim] = 1.0
    return RecordSet(df, columns=cols)


def _make_view() -> RidgelineView:
    records = _make_records([1, 1, 1, 2, 2, 3], [300, 330, 420, 500, 520, 600])
    return RidgelineView(records, GlobalConfig(ui_title="t", data_file=None))


def test_compute_data_returns_frame_for_state():
    view = _make_view()

    data = view.compute_data(AnimationState(index=1, status=AnimationStatus.PAUSED))

    assert data.step_key == "2"
    assert data.length == 3
    assert data.n_observations == 2


def test_render_area_with_count_axis():
    view = _make_view()
    data = view.compute_data(None)

    fig = view.render_figure(data)

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 1
    assert fig.data[0].fill == "tozeroy"
    assert "Selected Generation: 1" in fig.layout.title.text
    assert list(fig.layout.xaxis.range) == [data.x_extent[0], data.x_extent[1]]
    # tick labels are counts, not densities
    assert all(float(t).is_integer() for t in fig.layout.yaxis.ticktext)


def test_render_empty_curve_keeps_axes():
    view = _make_view()
    data = view.compute_data(AnimationState(index=2, status=AnimationStatus.PAUSED))

    fig = view.render_figure(data)

    assert data.is_empty
    assert len(fig.data) == 0
    assert "Not enough data" in fig.layout.annotations[0].text
    assert fig.layout.xaxis.range is not None


def test_render_without_generations():
    records = _make_records([None, None], [300, 320])
    view = RidgelineView(records)

    fig = view.render_figure(view.compute_data(None))

    assert fig.layout.title.text == "No valid generation data."


def test_controller_inputs_are_reused():
    view = _make_view()

    first = view.controller()
    second = view.controller(AnimationState(index=2))

    assert first.steps == second.steps
    assert first.grid == second.grid
    assert second.state.index == 2
