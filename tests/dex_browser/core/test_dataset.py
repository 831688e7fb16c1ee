import numpy as np
import pandas as pd

from dex_browser.config.model import RecordColumns
from dex_browser.core.dataset import RecordSet


def _make_records() -> RecordSet:
    """
    Four records:
    - Bad has a non-numeric HP
    - Blank has an empty primary category
    """
    df = pd.DataFrame(
        {
            "Name": ["A1", "A2", "Bad", "Blank"],
            "Type_1": ["Fire", "Water", "Fire", ""],
            "Type_2": ["None", "Flying", "None", "None"],
            "Generation": [1, 2, 1, 3],
            "Total": [300.0, 400.0, 350.0, 500.0],
            "HP": [45.0, 50.0, np.nan, 60.0],
            "Attack": [1.0, 2.0, 3.0, 4.0],
            "Defense": [1.0, 2.0, 3.0, 4.0],
            "Sp_Atk": [1.0, 2.0, 3.0, 4.0],
            "Sp_Def": [1.0, 2.0, 3.0, 4.0],
            "Speed": [1.0, 2.0, 3.0, 4.0],
        }
    )
    return RecordSet(df, columns=RecordColumns(), name="tiny")


def test_valid_for_excludes_non_numeric_and_counts_them():
    records = _make_records()

    valid = records.valid_for(numeric=("HP",))

    assert valid.n_valid == 3
    assert valid.excluded == 1
    assert "Bad" not in set(valid.frame["Name"])


def test_valid_for_excludes_empty_categories():
    records = _make_records()

    valid = records.valid_for(categorical=("Name", "Type_1"))

    assert valid.excluded == 1
    assert "Blank" not in set(valid.frame["Name"])


def test_valid_for_missing_column_excludes_everything():
    records = _make_records()

    valid = records.valid_for(numeric=("NotAColumn",))

    assert valid.n_valid == 0
    assert valid.excluded == len(records)


def test_valid_for_is_cached():
    records = _make_records()

    first = records.valid_for(numeric=("HP",), categorical=("Name",))
    second = records.valid_for(numeric=("HP",), categorical=("Name",))

    assert first is second


def test_frame_is_a_copy():
    records = _make_records()

    df = records.frame
    df.loc[0, "Name"] = "Changed"

    assert records.frame.loc[0, "Name"] == "A1"


def test_valid_sets_and_numeric_values():
    records = _make_records()

    sets = records.valid_sets()

    assert sets.primaries == frozenset({"Fire", "Water", ""})
    assert sets.generations == (1, 2, 3)
    assert list(records.numeric_values("HP")) == [45.0, 50.0, 60.0]
    assert records.numeric_values("Missing").size == 0


def test_rows_by_name_keeps_dataset_order():
    records = _make_records()

    rows = records.rows_by_name(["Blank", "A1"])

    assert [r["Name"] for r in rows] == ["A1", "Blank"]
