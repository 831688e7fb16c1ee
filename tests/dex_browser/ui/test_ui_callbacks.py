import json
from pathlib import Path

import pandas as pd
from dash import Dash

from dex_browser.config.model import ArtworkConfig, RecordColumns
from dex_browser.core.dataset import RecordSet
from dex_browser.interaction.animation import AnimationController, AnimationStatus
from dex_browser.interaction.navigation import NavigationState, NavigationStateMachine
from dex_browser.analysis.aggregation import CategoryAggregator
from dex_browser.interaction.selection import SelectionCoordinator
from dex_browser.ui.callbacks.callbacks_animation import apply_animation_event
from dex_browser.ui.callbacks.callbacks_navigation import apply_navigation_event, segment_from_click
from dex_browser.ui.callbacks.callbacks_selection import (
    apply_selection_event,
    artwork_request,
    focus_image,
    identity_from_click,
)
from dex_browser.ui.dash_app import build_view_registry, create_dash_app
from dex_browser.ui.ids import IDs


def _make_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Name": ["Charmander", "Vulpix", "Squirtle", "Lapras"],
            "Type_1": ["Fire", "Fire", "Water", "Water"],
            "Type_2": ["", "", "", "Ice"],
            "Generation": [1, 1, 2, 2],
            "Total": [309, 299, 314, 535],
            "HP": [39, 38, 44, 130],
            "Attack": [52, 41, 48, 85],
            "Defense": [43, 40, 65, 80],
            "Sp_Atk": [60, 50, 50, 85],
            "Sp_Def": [50, 65, 64, 95],
            "Speed": [65, 65, 43, 60],
        }
    )


def _make_records() -> RecordSet:
    df = _make_frame()
    df["Type_2"] = df["Type_2"].replace("", "None")
    return RecordSet(df, columns=RecordColumns())


def _click(customdata):
    return {"points": [{"customdata": customdata}]}


def test_click_parsers():
    assert segment_from_click(_click(["Water", "Ice"])) == ("Water", "Ice")
    assert segment_from_click(_click("Water")) is None
    assert segment_from_click(None) is None
    assert identity_from_click(_click("Lapras")) == "Lapras"
    assert identity_from_click({"points": []}) is None


def test_navigation_events():
    machine = NavigationStateMachine(CategoryAggregator(_make_records()))

    apply_navigation_event(machine, IDs.Control.STACKED_GRAPH, _click(["Water", "Ice"]))
    assert machine.state == NavigationState.primary_filtered("Water")

    apply_navigation_event(machine, IDs.Control.STACKED_GRAPH, _click(["Water", "Ice"]))
    assert machine.state == NavigationState.detail_list("Water", "Ice")

    apply_navigation_event(machine, IDs.Control.STACKED_BACK_BTN, None)
    assert machine.state == NavigationState.primary_filtered("Water")

    apply_navigation_event(machine, IDs.Control.STACKED_SHOW_ALL_BTN, None)
    assert machine.state == NavigationState.overview()


def test_animation_events():
    controller = AnimationController.from_records(_make_records())

    state = apply_animation_event(controller, IDs.Control.ANIMATION_BUTTON, 0, None)
    assert state.status is AnimationStatus.PLAYING

    # tick from an older run is ignored
    state = apply_animation_event(controller, IDs.Control.ANIMATION_INTERVAL, 0, state.run_id - 1)
    assert state.index == 0

    state = apply_animation_event(controller, IDs.Control.ANIMATION_INTERVAL, 0, state.run_id)
    assert state.index == 1
    assert state.status is AnimationStatus.FINISHED

    state = apply_animation_event(controller, IDs.Control.ANIMATION_SLIDER, 0, None)
    assert state.index == 0
    assert state.status is AnimationStatus.PAUSED


def test_selection_events():
    coordinator = SelectionCoordinator(_make_records())

    apply_selection_event(coordinator, IDs.Control.CATEGORY_CHECKLIST, ["Water"], None)
    assert coordinator.state.active == frozenset({"Water"})

    diagnostics = apply_selection_event(coordinator, IDs.Control.PARCOORDS_GRAPH, None, _click("Vulpix"))
    assert diagnostics and coordinator.state.focus is None

    apply_selection_event(coordinator, IDs.Control.PARCOORDS_GRAPH, None, _click("Lapras"))
    assert coordinator.state.focus == "Lapras"

    apply_selection_event(coordinator, IDs.Control.FOCUS_CLOSE_BTN, None, None)
    assert coordinator.state.focus is None

    apply_selection_event(coordinator, IDs.Control.SELECT_ALL_BTN, None, None)
    assert coordinator.state.active == frozenset({"Fire", "Water"})

    apply_selection_event(coordinator, IDs.Control.DESELECT_ALL_BTN, None, None)
    assert coordinator.state.active == frozenset()


def test_artwork_request_only_on_focus_change():
    coordinator = SelectionCoordinator(_make_records())
    token = coordinator.state.focus_token

    apply_selection_event(coordinator, IDs.Control.PARCOORDS_GRAPH, None, _click("Lapras"))
    request = artwork_request(coordinator, token)
    assert request == {"identity": "Lapras", "token": token + 1, "key": "lapras"}

    # same focus again, e.g. a checklist change that keeps it
    token = coordinator.state.focus_token
    apply_selection_event(coordinator, IDs.Control.CATEGORY_CHECKLIST, ["Fire", "Water"], None)
    assert artwork_request(coordinator, token) is None

    # initial call with a focus restored from the session store
    assert artwork_request(coordinator, None)["identity"] == "Lapras"

    coordinator.clear_focus()
    assert artwork_request(coordinator, token) is None


def test_focus_image_drops_result_for_older_focus():
    records = _make_records()
    coordinator = SelectionCoordinator(records)
    coordinator.focus("Lapras")
    stale = dict(coordinator.begin_artwork_lookup().to_dict(), reference="http://img/lapras.png")
    coordinator.clear_focus()
    coordinator.focus("Lapras")
    state = coordinator.state

    assert focus_image(SelectionCoordinator(records, state), stale) == ""

    current = dict(coordinator.begin_artwork_lookup().to_dict(), reference="http://img/lapras.png")
    assert focus_image(SelectionCoordinator(records, state), current) == "http://img/lapras.png"

    # placeholders travel the same way as real references
    failed = dict(current, reference=ArtworkConfig().placeholder_error)
    assert focus_image(SelectionCoordinator(records, state), failed) == ArtworkConfig().placeholder_error

    assert focus_image(SelectionCoordinator(records, state), None) == ""


def test_registry_lists_all_views():
    registry = build_view_registry()

    assert [cls.id for cls in registry.all_classes()] == ["ridgeline", "stacked_bar", "parallel_coordinates"]


def test_create_dash_app_from_config(tmp_path: Path):
    data_path = tmp_path / "dex.csv"
    _make_frame().to_csv(data_path, index=False)
    config_root = tmp_path / "config"
    config_root.mkdir()
    (config_root / "global.json").write_text(
        json.dumps({"ui_title": "Test Dex", "data_file": str(data_path)})
    )

    app = create_dash_app(config_root)

    assert isinstance(app, Dash)
    assert app.title == "Test Dex"
    assert app.layout is not None


def _make_app(tmp_path: Path) -> Dash:
    data_path = tmp_path / "dex.csv"
    _make_frame().to_csv(data_path, index=False)
    config_root = tmp_path / "config"
    config_root.mkdir()
    (config_root / "global.json").write_text(json.dumps({"data_file": str(data_path)}))
    return create_dash_app(config_root)


def _callback_graph(app: Dash) -> dict:
    """
    Callback name -> (input props, output props), read from the registered callbacks.
    """
    graph = {}
    for key, entry in app.callback_map.items():
        if key.startswith(".."):
            outputs = set(key.strip(".").split("..."))
        else:
            outputs = {key}
        inputs = {f"{i['id']}.{i['property']}" for i in entry["inputs"]}
        name = getattr(entry.get("callback"), "__name__", key)
        graph[name] = (inputs, outputs)
    return graph


def _trigger_chain(graph: dict, start: str):
    """
    Follow property changes from `start` the way the browser does: a callback
    already on the chain that led to a change is not triggered again.

    :return: (props reached with the callback that set them, callbacks skipped for that reason)
    """
    reached = set()
    skipped = []
    queue = [(start, [])]
    while queue:
        prop, chain = queue.pop(0)
        for name, (inputs, outputs) in graph.items():
            if prop not in inputs:
                continue
            if name in chain:
                # a callback resetting its own input is fine
                if name != chain[-1]:
                    skipped.append((name, chain))
                continue
            for out in outputs:
                reached.add((out, name))
                queue.append((out, chain + [name]))
    return reached, skipped


def test_no_loops_between_callbacks(tmp_path: Path):
    graph = _callback_graph(_make_app(tmp_path))

    edges = {
        name: {
            other
            for other, (other_inputs, _) in graph.items()
            if other != name and outputs & other_inputs
        }
        for name, (_, outputs) in graph.items()
    }

    def reaches(src, target, seen=()):
        return any(nxt == target or (nxt not in seen and reaches(nxt, target, seen + (nxt,))) for nxt in edges[src])

    assert not [name for name in graph if reaches(name, name)]


def test_focus_click_reaches_image(tmp_path: Path):
    graph = _callback_graph(_make_app(tmp_path))

    reached, skipped = _trigger_chain(graph, f"{IDs.Control.PARCOORDS_GRAPH}.clickData")

    assert not skipped
    assert (f"{IDs.Store.ARTWORK_RESULT}.data", "resolve_artwork") in reached
    assert (f"{IDs.Control.FOCUS_IMAGE}.src", "show_artwork") in reached

    image_inputs = graph["show_artwork"][0]
    assert f"{IDs.Store.ARTWORK_RESULT}.data" in image_inputs
