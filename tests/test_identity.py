from datetime import date, datetime

from eventcompass.calendar_logic import expand_event
from eventcompass.data import Database
from eventcompass.identity import derive_occurrence_id, make_occurrence, resolve_edit_target
from eventcompass.models import MasterEvent


def _weekly_meeting():
    return MasterEvent(
        title="Council meeting",
        start=datetime(2024, 1, 1, 9),
        end=datetime(2024, 1, 1, 10),
        is_recurring=True,
        rrule="FREQ=WEEKLY;INTERVAL=1",
    )


def test_derive_id_is_deterministic():
    start = datetime(2024, 1, 15, 9)
    assert derive_occurrence_id(5, start) == derive_occurrence_id(5, start)
    assert derive_occurrence_id(5, start) != derive_occurrence_id(5, datetime(2024, 1, 22, 9))
    assert derive_occurrence_id(5, start) != derive_occurrence_id(6, start)


def test_anchor_carries_master_id():
    ev = _weekly_meeting()
    ev.id = 3
    anchor = make_occurrence(ev, ev.start)
    assert anchor.occurrence_id == "3"
    assert not anchor.is_virtual
    assert resolve_edit_target(anchor) == 3


def test_occurrence_ids_unique_within_series():
    ev = _weekly_meeting()
    ev.id = 3
    occ = expand_event(ev, date(2024, 1, 1), date(2024, 6, 30))
    ids = [o.occurrence_id for o in occ]
    assert len(ids) == len(set(ids))


def test_edit_redirect_applies_to_whole_series(tmp_path):
    db = Database(str(tmp_path / 'events.db'))
    ev = _weekly_meeting()
    db.save_event(ev)

    occ = expand_event(db.get_event(ev.id), date(2024, 1, 1), date(2024, 1, 22))
    jan15 = [o for o in occ if o.start.date() == date(2024, 1, 15)][0]
    assert jan15.is_virtual
    assert resolve_edit_target(jan15) == ev.id

    # Bearbeiten des virtuellen Termins ändert den Master
    target = db.load_edit_target(jan15)
    target.title = "Council meeting (moved room)"
    db.save_event(target)

    occ = expand_event(db.get_event(ev.id), date(2024, 1, 1), date(2024, 1, 22))
    assert len(occ) == 4
    assert all(o.source_event.title == "Council meeting (moved room)" for o in occ)
    assert len(db.load_events()) == 1
    db.close()


def test_delete_virtual_occurrence_deletes_master(tmp_path):
    db = Database(str(tmp_path / 'events.db'))
    ev = _weekly_meeting()
    db.save_event(ev)
    other = MasterEvent(title="Clean-up drive", start=datetime(2024, 1, 6, 7), end=datetime(2024, 1, 6, 11))
    db.save_event(other)

    occ = expand_event(ev, date(2024, 1, 8), date(2024, 1, 8))
    db.delete_occurrence(occ[0])
    assert [e.id for e in db.load_events()] == [other.id]
    db.close()
