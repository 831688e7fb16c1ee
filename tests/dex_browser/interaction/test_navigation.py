import pandas as pd

from dex_browser.analysis.aggregation import CategoryAggregator
from dex_browser.config.model import RecordColumns
from dex_browser.core.dataset import RecordSet
from dex_browser.core.diagnostics import SELECTOR_INVALIDATED
from dex_browser.interaction.navigation import (
    NavigationLevel,
    NavigationState,
    NavigationStateMachine,
)


def _make_machine(state=None) -> NavigationStateMachine:
    """
    Primary A has 5 records (3 None, 2 X), B has 2 (None, Y), C has 1 (None).
    """
    pairs = [
        ("Ann", "A", "None"),
        ("Abe", "A", "X"),
        ("Ada", "A", "None"),
        ("Al", "A", "X"),
        ("Amy", "A", "None"),
        ("Bo", "B", "None"),
        ("Bea", "B", "Y"),
        ("Cy", "C", "None"),
    ]
    df = pd.DataFrame(pairs, columns=["Name", "Type_1", "Type_2"])
    for col in ("Generation", "Total") + RecordColumns().dimensions:
        df[col] = 1.0
    records = RecordSet(df, columns=RecordColumns())
    return NavigationStateMachine(CategoryAggregator(records), state)


def test_initial_view_is_overview():
    machine = _make_machine()

    view = machine.view()

    assert view.state.level is NavigationLevel.OVERVIEW
    assert view.title == "Distribution by Primary & Secondary Type"
    assert view.aggregate.keys == ["A", "B", "C"]
    assert not view.show_all_link
    assert view.back_label is None


def test_drill_down_to_member_list():
    machine = _make_machine()

    machine.select_segment("A", "X")
    filtered = machine.view()

    assert filtered.state == NavigationState.primary_filtered("A")
    assert filtered.aggregate.keys == ["A"]
    assert filtered.title == "A: Distribution by Secondary Type"
    assert filtered.show_all_link

    machine.select_segment("A", "X")
    detail = machine.view()

    assert detail.state == NavigationState.detail_list("A", "X")
    assert set(detail.members) == {"Abe", "Al"}
    assert detail.title == "A / X"
    assert detail.back_label == "‹ Back to A View"


def test_detail_list_without_members_shows_message():
    machine = _make_machine(NavigationState.detail_list("B", "X"))

    view = machine.view()

    assert view.members == ()
    assert view.message == "No records found for B / X."


def test_click_on_other_primary_is_ignored_when_filtered():
    machine = _make_machine(NavigationState.primary_filtered("A"))

    state = machine.select_segment("B", "None")

    assert state == NavigationState.primary_filtered("A")


def test_click_in_detail_list_is_a_no_op():
    start = NavigationState.detail_list("A", "None")
    machine = _make_machine(start)

    assert machine.select_segment("A", "X") == start


def test_back_steps_up_one_level():
    machine = _make_machine(NavigationState.detail_list("A", "X"))

    assert machine.back() == NavigationState.primary_filtered("A")
    assert machine.back() == NavigationState.overview()
    assert machine.back() == NavigationState.overview()


def test_reset_from_any_level():
    for start in (
        NavigationState.overview(),
        NavigationState.primary_filtered("B"),
        NavigationState.detail_list("B", "Y"),
    ):
        machine = _make_machine(start)
        assert machine.reset() == NavigationState.overview()


def test_unknown_primary_falls_back_to_overview():
    machine = _make_machine()

    state = machine.select_segment("Z", "None")
    view = machine.view()

    assert state == NavigationState.overview()
    assert [d.code for d in view.diagnostics] == [SELECTOR_INVALIDATED]
    assert view.aggregate.keys == ["A", "B", "C"]


def test_stale_restored_selector_is_invalidated():
    machine = _make_machine(NavigationState.primary_filtered("Gone"))

    view = machine.view()

    assert view.state.level is NavigationLevel.OVERVIEW
    assert machine.state == NavigationState.overview()
    assert view.diagnostics[0].code == SELECTOR_INVALIDATED


def test_state_round_trip_and_bad_input():
    state = NavigationState.detail_list("A", "X")

    assert NavigationState.from_dict(state.to_dict()) == state
    assert NavigationState.from_dict(None) == NavigationState.overview()
    assert NavigationState.from_dict({"level": "sideways"}) == NavigationState.overview()
    assert NavigationState.from_dict({"level": "detail_list", "primary": "A"}) == NavigationState.overview()


def test_click_and_redraw_aggregate_once(monkeypatch):
    machine = _make_machine()
    calls = []
    original = machine.aggregator.aggregate

    def counting(only=None):
        calls.append(only)
        return original(only=only)

    monkeypatch.setattr(machine.aggregator, "aggregate", counting)

    machine.select_segment("B", "Y")
    machine.view()

    assert calls == ["B"]


def test_primary_keys_cover_valid_records():
    machine = _make_machine()

    assert machine.aggregator.primary_keys() == frozenset({"A", "B", "C"})
