import pytest

from unischedule.core.merger import merge_sessions, session_sort_key
from unischedule.models.models import Session


def session(day="Monday", start="09:00", duration=60, title="A", location="L", description="D"):
    return Session(day=day, start=start, duration_minutes=duration, title=title,
                   location=location, description=description)


def test_adjacent_identical_sessions_merge():
    merged = merge_sessions([session(start="09:00"), session(start="10:00")])
    assert merged == [session(start="09:00", duration=120)]


@pytest.mark.parametrize("field, value", [
    ("title", "B"),
    ("location", "Other room"),
    ("description", "Someone else"),
])
def test_sessions_differing_in_an_attribute_stay_apart(field, value):
    second = session(start="10:00", **{field: value})
    merged = merge_sessions([session(start="09:00"), second])
    assert merged == [session(start="09:00"), second]


def test_gap_between_sessions_prevents_merge():
    merged = merge_sessions([session(start="09:00"), session(start="10:15")])
    assert len(merged) == 2


def test_overlapping_sessions_are_not_merged():
    merged = merge_sessions([session(start="09:00", duration=120), session(start="10:00")])
    assert len(merged) == 2


def test_same_time_on_different_days_is_not_merged():
    merged = merge_sessions([session(day="Monday"), session(day="Tuesday", start="10:00")])
    assert len(merged) == 2


def test_merge_chains_runs_and_sorts_input():
    unordered = [
        session(day="Tuesday", start="08:00", title="T"),
        session(start="11:00"),
        session(start="09:00"),
        session(start="10:00"),
    ]
    merged = merge_sessions(unordered)
    assert merged == [
        session(start="09:00", duration=180),
        session(day="Tuesday", start="08:00", title="T"),
    ]


def test_merge_is_idempotent():
    sessions = [
        session(start="09:00"), session(start="10:00"), session(start="11:00", title="B"),
        session(day="Friday", start="14:00", duration=90), session(day="Friday", start="15:30", duration=30),
        session(day="Sunday", start="08:00"),
    ]
    once = merge_sessions(sessions)
    assert merge_sessions(once) == once
    assert len(once) == 4


def test_sort_key_uses_monday_first_order():
    assert session_sort_key(session(day="Monday")) < session_sort_key(session(day="Sunday"))
    assert session_sort_key(session(day="Saturday")) < session_sort_key(session(day="Sunday"))


def test_unknown_day_sorts_last():
    merged = merge_sessions([session(day="Someday"), session(day="Sunday")])
    assert [s.day for s in merged] == ["Sunday", "Someday"]


def test_custom_day_order():
    order = ("Sunday", "Monday")
    merged = merge_sessions([session(day="Monday"), session(day="Sunday")], day_order=order)
    assert [s.day for s in merged] == ["Sunday", "Monday"]
