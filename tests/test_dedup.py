from datetime import date, datetime, timedelta
import pytest

from eventcompass.calendar_logic import dedup_series, expand_events, paginate, split_upcoming_past
from eventcompass.models import MasterEvent


def _make_event(event_id, start, rrule=None, title="Event"):
    ev = MasterEvent(title=title, start=start, end=start + timedelta(hours=1),
                     is_recurring=rrule is not None, rrule=rrule)
    ev.id = event_id
    return ev


@pytest.fixture
def events():
    return [
        _make_event(1, datetime(2024, 1, 1, 9), "FREQ=WEEKLY", title="Meeting"),
        _make_event(2, datetime(2024, 1, 2, 7), "FREQ=DAILY;INTERVAL=2", title="Zumba"),
        _make_event(3, datetime(2024, 1, 20, 14), title="Fiesta"),
        _make_event(4, datetime(2024, 1, 25, 8), title="Vaccination"),
    ]


def test_one_entry_per_series(events):
    occ = expand_events(events, date(2024, 1, 1), date(2024, 1, 31))
    result = dedup_series(occ)
    assert sorted(o.source_event.id for o in result) == [1, 2, 3, 4]
    # Vertreter ist jeweils der erste Termin der Eingabe, hier der Anker
    assert all(not o.is_virtual for o in result)


def test_representative_follows_input_order(events):
    occ = expand_events(events[:1], date(2024, 1, 1), date(2024, 1, 31))
    result = dedup_series(list(reversed(occ)))
    assert len(result) == 1
    assert result[0].start == datetime(2024, 1, 29, 9)


def test_dedup_idempotent(events):
    occ = expand_events(events, date(2024, 1, 1), date(2024, 3, 31))
    once = dedup_series(occ)
    assert dedup_series(once) == once


def test_non_recurring_never_deduplicated():
    same = _make_event(9, datetime(2024, 2, 1, 9))
    occ = expand_events([same], date(2024, 2, 1), date(2024, 2, 1)) * 2
    assert dedup_series(occ) == occ


def test_corrupt_rule_counts_as_single_event():
    ev = _make_event(5, datetime(2024, 2, 1, 9), "FREQ=SOMETIMES")
    occ = expand_events([ev], date(2024, 2, 1), date(2024, 2, 1)) * 2
    assert len(dedup_series(occ)) == 2


def test_split_upcoming_past(events):
    now = datetime(2024, 1, 17, 12)
    upcoming, past = split_upcoming_past(events, now)
    assert [(o.source_event.id, o.start) for o in upcoming[:3]] == [
        (2, datetime(2024, 1, 18, 7)),
        (3, datetime(2024, 1, 20, 14)),
        (1, datetime(2024, 1, 22, 9)),
    ]
    assert len(upcoming) == 4
    # Vergangene: neueste zuerst
    assert [(o.source_event.id, o.start) for o in past] == [
        (2, datetime(2024, 1, 16, 7)),
        (1, datetime(2024, 1, 15, 9)),
    ]


def test_split_uses_configured_window(events):
    now = datetime(2024, 3, 1, 12)
    cfg = {'list_window': {'months_before': 0, 'months_after': 1}, 'max_instances': 365}
    upcoming, past = split_upcoming_past(events, now, cfg)
    assert past == []
    assert {o.source_event.id for o in upcoming} == {1, 2}


def test_paginate():
    items = list(range(12))
    assert paginate(items, 1) == ([0, 1, 2, 3, 4], 3)
    assert paginate(items, 3) == ([10, 11], 3)
    assert paginate([], 1) == ([], 1)
    with pytest.raises(ValueError):
        paginate(items, 0)
