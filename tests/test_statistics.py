from datetime import date, datetime, timedelta

from eventcompass.calendar_logic import expand_events
from eventcompass.models import MasterEvent
from eventcompass.statistics import count_by_category, count_per_month, summarize_occurrences


def _event(event_id, start, category=None, rrule=None):
    ev = MasterEvent(title=f"ev{event_id}", start=start, end=start + timedelta(hours=2),
                     is_recurring=rrule is not None, rrule=rrule, category=category)
    ev.id = event_id
    return ev


def test_count_by_category():
    events = [
        _event(1, datetime(2024, 1, 1), "meeting"),
        _event(2, datetime(2024, 1, 2), "meeting"),
        _event(3, datetime(2024, 1, 3), "health"),
        _event(4, datetime(2024, 1, 4)),
    ]
    assert count_by_category(events) == {"meeting": 2, "health": 1, "other": 1}


def test_summarize_and_per_month():
    events = [
        _event(1, datetime(2024, 1, 30, 9), "sports", "FREQ=DAILY"),
        _event(2, datetime(2024, 2, 10, 9), "social"),
    ]
    occ = expand_events(events, date(2024, 1, 1), date(2024, 2, 2))
    stats = summarize_occurrences(occ)
    # 30.1., 31.1., 1.2., 2.2. der Serie; Einzeltermin liegt außerhalb
    assert stats == {'total': 4, 'anchors': 1, 'virtual': 3, 'series': 1}
    assert count_per_month(occ) == {"periods": [(2024, 1), (2024, 2)], "counts": [2, 2]}
