# src/eventcompass/main.py

from datetime import date, datetime, time
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from .calendar_logic import expand_event
from .config import load_config
from .data import Database
from .export_utils import describe_recurrence, format_occurrence
from .models import MasterEvent
from .rrule_codec import rule_from_form


def _read_date(prompt: str, default: Optional[date] = None) -> Optional[date]:
    raw = input(prompt).strip()
    if not raw:
        return default
    return date.fromisoformat(raw)


def _read_time(prompt: str, default: time) -> time:
    raw = input(prompt).strip()
    return time.fromisoformat(raw) if raw else default


def input_event() -> MasterEvent:
    print("\n✏️  New event:")
    title = input("  Title: ").strip() or "Untitled"
    location = input("  Location [empty=none]: ").strip() or None
    day = _read_date("  Date (YYYY-MM-DD) [empty=today]: ", date.today())
    start_t = _read_time("  Start time (HH:MM) [09:00]: ", time(9, 0))
    end_t = _read_time("  End time (HH:MM) [10:00]: ", time(10, 0))
    return MasterEvent(
        title=title,
        start=datetime.combine(day, start_t),
        end=datetime.combine(day, end_t),
        location=location,
    )


def input_recurrence(ev: MasterEvent):
    freq = input("  Repeat? [none/daily/weekly/monthly/yearly]: ").strip().lower() or "none"
    if freq == "none":
        return
    interval_raw = input("  Every how many units? [1]: ").strip()
    interval = int(interval_raw) if interval_raw.isdigit() else 1
    weekdays: List[str] = []
    if freq == "weekly":
        days_str = input("  Weekdays (e.g. MO,WE,FR) [empty=same weekday]: ")
        weekdays = [x.strip() for x in days_str.split(",") if x.strip()]
    until = _read_date("  Last day (YYYY-MM-DD) [empty=open end]: ")
    ev.rrule = rule_from_form(freq, interval, weekdays, until)
    ev.is_recurring = ev.rrule is not None


def run_wizard():
    print("🗓️  Welcome to the EventCompass wizard 🗓️")
    cfg = load_config()
    ev = input_event()
    input_recurrence(ev)
    months = int(input("How many months should be listed? [3] ").strip() or 3)

    window_start = ev.start.date()
    window_end = window_start + relativedelta(months=months)
    occurrences = expand_event(ev, window_start, window_end, cfg['max_instances'])

    print(f"\n✅ {len(occurrences)} occurrences until {window_end.isoformat()}:")
    if ev.is_recurring:
        print(" ", describe_recurrence(ev.rrule))
    for occ in occurrences:
        print(" ", format_occurrence(occ))

    if input("\nSave event? (y/n) ").lower() == "y":
        db = Database()
        try:
            db.save_event(ev)
            print(f"Event saved with id {ev.id}.")
        finally:
            db.close()


if __name__ == "__main__":
    run_wizard()
