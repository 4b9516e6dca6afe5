import pytest

from unischedule.core.date_utils import clock_to_minutes, normalize_clock, parse_date_only
from unischedule.core.formatting import compact_label, mode_label, parse_group_label, parse_group_meta
from unischedule.models.models import Group


def test_parse_group_label_full():
    meta = parse_group_label("Y2.S2.WD.SE")
    assert meta.year == "Y2"
    assert meta.semester == "S2"
    assert meta.year_key == "Y2.S2"
    assert meta.mode == "WD"
    assert meta.specialization == "SE"


@pytest.mark.parametrize("label, expected", [
    ("Y1", ("Y1", "S1", "WE", "GEN")),
    ("Y1.S2", ("Y1", "S2", "WE", "GEN")),
    ("", ("Unknown", "S1", "WE", "GEN")),
])
def test_parse_group_label_defaults(label, expected):
    meta = parse_group_label(label)
    assert (meta.year, meta.semester, meta.mode, meta.specialization) == expected


def test_parse_group_meta_prefers_parent_group():
    group = Group(id="SE.1", label="SE.1 (Y2.S2.WD.SE)", parent_group="Y2.S2.WD.SE")
    assert parse_group_meta(group).specialization == "SE"


def test_parse_group_meta_falls_back_to_id():
    group = Group(id="Y3.S1.WE.AI", label="Y3.S1.WE.AI", parent_group="")
    assert parse_group_meta(group).mode == "WE"


def test_mode_and_compact_labels():
    assert mode_label("WE") == "Weekend"
    assert mode_label("WD") == "Weekday"
    assert mode_label("EV") == "EV"
    assert compact_label("Y2.S2") == "Y2S2"


# --- date_utils ---

@pytest.mark.parametrize("value, expected", [
    ("09:00", "09:00"),
    ("9:05", "09:05"),
    (" 23:59 ", "23:59"),
    ("24:00", None),
    ("12:60", None),
    ("noon", None),
    ("", None),
    (None, None),
])
def test_normalize_clock(value, expected):
    assert normalize_clock(value) == expected


def test_clock_to_minutes():
    assert clock_to_minutes("00:00") == 0
    assert clock_to_minutes("14:30") == 870
    with pytest.raises(ValueError):
        clock_to_minutes("25:00")


def test_parse_date_only():
    assert parse_date_only("2026-01-19").isoformat() == "2026-01-19"
    with pytest.raises(ValueError):
        parse_date_only("19.01.2026")
    with pytest.raises(ValueError):
        parse_date_only("2026-02-30")
