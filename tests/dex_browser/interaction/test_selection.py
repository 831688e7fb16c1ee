import numpy as np
import pandas as pd

from dex_browser.config.model import RecordColumns
from dex_browser.core.dataset import RecordSet
from dex_browser.core.diagnostics import NOT_IN_CURRENT_VIEW
from dex_browser.interaction.selection import SelectionCoordinator, SelectionState


def _make_records() -> RecordSet:
    """
    Five records across Fire / Water / Grass; Broken has a missing Speed and
    never takes part in the chart.
    """
    df = pd.DataFrame(
        {
            "Name": ["Charmander", "Charizard", "Squirtle", "Bulbasaur", "Broken"],
            "Type_1": ["Fire", "Fire", "Water", "Grass", "Water"],
            "Type_2": ["None", "Flying", "None", "Poison", "None"],
            "Generation": [1, 1, 1, 1, 1],
            "Total": [309, 534, 314, 318, 100],
            "HP": [39, 78, 44, 45, 10],
            "Attack": [52, 84, 48, 49, 10],
            "Defense": [43, 78, 65, 49, 10],
            "Sp_Atk": [60, 109, 50, 65, 10],
            "Sp_Def": [50, 85, 64, 65, 10],
            "Speed": [65, 100, 43, 45, np.nan],
        }
    )
    return RecordSet(df, columns=RecordColumns())


def test_defaults_to_all_categories_active():
    coordinator = SelectionCoordinator(_make_records())

    assert coordinator.categories == ("Fire", "Grass", "Water")
    assert coordinator.state.active == frozenset({"Fire", "Grass", "Water"})
    assert coordinator.excluded == 1

    view = coordinator.view()
    assert len(view.rows) == 4
    assert all(view.emphasized)
    assert view.y_extent == (39.0, 109.0)


def test_toggle_and_bulk_operations():
    coordinator = SelectionCoordinator(_make_records())

    coordinator.toggle_category("Water", False)
    assert coordinator.state.active == frozenset({"Fire", "Grass"})

    coordinator.toggle_category("Water", True)
    assert "Water" in coordinator.state.active

    coordinator.deselect_all()
    assert coordinator.state.active == frozenset()
    assert coordinator.view().rows == ()
    assert coordinator.view().message == "No records of the selected categories."

    coordinator.select_all()
    assert coordinator.state.active == frozenset(coordinator.categories)


def test_unknown_categories_are_dropped():
    coordinator = SelectionCoordinator(_make_records())

    state = coordinator.set_active_categories(["Fire", "Dragon"])

    assert state.active == frozenset({"Fire"})


def test_focus_emphasises_only_the_focused_record():
    coordinator = SelectionCoordinator(_make_records())

    assert coordinator.focus("Charizard") is None
    view = coordinator.view()

    assert coordinator.is_emphasized("Charizard")
    assert not coordinator.is_emphasized("Charmander")
    # focused row is drawn last
    assert view.rows[-1]["Name"] == "Charizard"
    assert view.emphasized.count(True) == 1
    assert view.focus.name == "Charizard"
    assert view.focus.type_label == "Fire / Flying"
    assert dict(view.focus.stats)["Sp_Atk"] == 109.0


def test_single_type_label_omits_sentinel():
    coordinator = SelectionCoordinator(_make_records())
    coordinator.focus("Squirtle")

    assert coordinator.view().focus.type_label == "Water"


def test_focus_outside_active_set_is_a_no_op():
    coordinator = SelectionCoordinator(_make_records())
    coordinator.set_active_categories(["Fire"])
    before = coordinator.state

    diagnostic = coordinator.focus("Squirtle")

    assert diagnostic.code == NOT_IN_CURRENT_VIEW
    assert coordinator.state == before
    assert coordinator.focus("Broken").code == NOT_IN_CURRENT_VIEW


def test_removing_focused_category_clears_focus():
    coordinator = SelectionCoordinator(_make_records())
    coordinator.focus("Squirtle")
    token = coordinator.state.focus_token

    state = coordinator.toggle_category("Water", False)

    assert state.focus is None
    assert state.focus_token > token
    assert coordinator.view().focus is None


def test_clear_focus_is_idempotent():
    coordinator = SelectionCoordinator(_make_records())
    coordinator.focus("Bulbasaur")

    first = coordinator.clear_focus()
    second = coordinator.clear_focus()

    assert first.focus is None
    assert first == second


def test_late_artwork_for_previous_focus_is_discarded():
    coordinator = SelectionCoordinator(_make_records())
    coordinator.focus("Charmander")
    stale = coordinator.begin_artwork_lookup()

    coordinator.focus("Bulbasaur")
    fresh = coordinator.begin_artwork_lookup()

    assert not coordinator.apply_artwork(stale, "http://img/charmander.png")
    assert coordinator.state.artwork is None

    assert coordinator.apply_artwork(fresh, "http://img/bulbasaur.png")
    assert coordinator.view().artwork == "http://img/bulbasaur.png"
    assert fresh.key == "bulbasaur"


def test_refocusing_same_record_keeps_artwork():
    coordinator = SelectionCoordinator(_make_records())
    coordinator.focus("Charmander")
    coordinator.apply_artwork(coordinator.begin_artwork_lookup(), "http://img/c.png")

    coordinator.focus("Charmander")

    assert coordinator.state.artwork == "http://img/c.png"


def test_no_lookup_without_focus():
    assert SelectionCoordinator(_make_records()).begin_artwork_lookup() is None


def test_restored_state_is_sanitised():
    restored = SelectionState(active=frozenset({"Fire", "Ghost"}), focus="Squirtle", focus_token=3)

    coordinator = SelectionCoordinator(_make_records(), restored)

    assert coordinator.state.active == frozenset({"Fire"})
    assert coordinator.state.focus is None


def test_state_round_trip():
    state = SelectionState(active=frozenset({"Fire"}), focus="Charmander", focus_token=2, artwork="x")

    assert SelectionState.from_dict(state.to_dict()) == state
    assert SelectionState.from_dict(None) is None
    assert SelectionState.from_dict({}) is None


def test_no_valid_rows_message():
    df = _make_records().frame
    df["Speed"] = np.nan
    coordinator = SelectionCoordinator(RecordSet(df, columns=RecordColumns()))

    view = coordinator.view()

    assert view.rows == ()
    assert view.message == "No valid data for parallel coordinates."
