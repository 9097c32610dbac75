import calendar
import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterator, List, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from .config import DEFAULT_CONFIG
from .identity import make_occurrence
from .models import Frequency, MasterEvent, Occurrence, RecurrenceRule

MAX_INSTANCES = DEFAULT_CONFIG['max_instances']

Moment = Union[date, datetime]


def _as_datetime(value: Moment, end_of_day: bool, tzinfo=None) -> datetime:
    # date -> Tagesanfang bzw. Tagesende (Fenster ist geschlossen)
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.max if end_of_day else time.min)
    if tzinfo is not None and value.tzinfo is None:
        value = value.replace(tzinfo=tzinfo)
    return value


def _nth_step(anchor: datetime, rule: RecurrenceRule, n: int) -> datetime:
    """n-ter Termin nach dem Anker. Monats-/Jahresschritte klemmen auf den Monatsletzten."""
    step = n * rule.interval
    if rule.frequency is Frequency.DAILY:
        return anchor + timedelta(days=step)
    if rule.frequency is Frequency.WEEKLY:
        return anchor + timedelta(weeks=step)
    if rule.frequency is Frequency.MONTHLY:
        return anchor + relativedelta(months=step)
    return anchor + relativedelta(years=step)


def _next_listed_weekday(current: datetime, rule: RecurrenceRule) -> datetime:
    for i in range(1, 8):
        candidate = current + timedelta(days=i)
        if candidate.weekday() in rule.weekdays:
            return candidate
    # nur bei leerer/inkonsistenter Wochentagsliste erreichbar
    return current + timedelta(weeks=rule.interval)


def _candidates(anchor: datetime, rule: RecurrenceRule) -> Iterator[datetime]:
    """Endlose, streng steigende Folge der Starts nach dem Anker."""
    by_weekday = rule.frequency is Frequency.WEEKLY and rule.weekdays
    current = anchor
    n = 1
    while True:
        try:
            if by_weekday:
                current = _next_listed_weekday(current, rule)
            else:
                current = _nth_step(anchor, rule, n)
        except (OverflowError, ValueError):
            # Ende des darstellbaren Datumsbereichs (Jahr 9999)
            return
        yield current
        n += 1


def expand_event(event: MasterEvent,
                 window_start: Moment,
                 window_end: Moment,
                 max_instances: int = MAX_INSTANCES) -> List[Occurrence]:
    """
    Berechne alle Termine eines Master-Events im Fenster [window_start, window_end].

    - Der Anker (Original-Start) wird geliefert, wenn seine Zeitspanne das Fenster berührt.
    - Weitere Termine werden ab dem Anker in Regel-Schritten erzeugt, bis
      min(window_end, UNTIL) überschritten ist.
    - Höchstens `max_instances` Termine pro Aufruf (Anker mitgezählt).
    Ergebnis ist nach Start sortiert und ohne doppelte Startzeiten.
    """
    tz = event.start.tzinfo
    win_start = _as_datetime(window_start, end_of_day=False, tzinfo=tz)
    win_end = _as_datetime(window_end, end_of_day=True, tzinfo=tz)

    occurrences: List[Occurrence] = []
    if event.start <= win_end and event.end >= win_start:
        occurrences.append(make_occurrence(event, event.start))

    rule = event.rule
    if rule is None:
        if event.has_corrupt_rule:
            logging.warning(
                f"Event {event.id} ({event.title}) is marked recurring but its rule "
                f"{event.rrule!r} could not be read; showing the first occurrence only"
            )
        return occurrences

    limit = win_end
    if rule.until is not None:
        until = rule.until.replace(tzinfo=tz) if tz is not None else rule.until
        limit = min(limit, until)

    for candidate in _candidates(event.start, rule):
        if len(occurrences) >= max_instances or candidate > limit:
            break
        if candidate >= win_start:
            try:
                occurrences.append(make_occurrence(event, candidate))
            except OverflowError:
                # Ende des Termins läge nach dem Jahr 9999
                break
    return occurrences


def expand_events(events: List[MasterEvent],
                  window_start: Moment,
                  window_end: Moment,
                  max_instances: int = MAX_INSTANCES) -> List[Occurrence]:
    """Alle Termine mehrerer Master-Events, gemeinsam nach Start sortiert."""
    result: List[Occurrence] = []
    for ev in events:
        result.extend(expand_event(ev, window_start, window_end, max_instances))
    result.sort(key=lambda occ: occ.start)
    return result


def events_for_date(events: List[MasterEvent], day: date) -> List[Occurrence]:
    """Termine, die an `day` beginnen (eine Zelle im Kalender-Raster)."""
    return [occ for occ in expand_events(events, day, day) if occ.start.date() == day]


def month_grid(events: List[MasterEvent], year: int, month: int,
               firstweekday: int = calendar.SUNDAY) -> Dict[date, List[Occurrence]]:
    """
    Raster über 6 Wochen für einen Monat, inkl. der angrenzenden Tage aus
    Vor- und Folgemonat. Jeder Tag bekommt die an ihm beginnenden Termine.
    """
    weeks = calendar.Calendar(firstweekday).monthdatescalendar(year, month)
    days = [d for week in weeks for d in week]
    while len(days) < 42:
        days.append(days[-1] + timedelta(days=1))

    grid: Dict[date, List[Occurrence]] = {d: [] for d in days}
    for occ in expand_events(events, days[0], days[-1]):
        cell = grid.get(occ.start.date())
        if cell is not None:
            cell.append(occ)
    return grid


def dedup_series(occurrences: List[Occurrence]) -> List[Occurrence]:
    """
    Für Listenansichten: jede wiederkehrende Serie erscheint nur einmal,
    vertreten durch ihren ersten Termin in der Eingabe. Einzeltermine bleiben unverändert.
    """
    seen = set()
    result: List[Occurrence] = []
    for occ in occurrences:
        ev = occ.source_event
        if ev.rule is None:
            result.append(occ)
            continue
        key = ev.id if ev.id is not None else id(ev)
        if key in seen:
            continue
        seen.add(key)
        result.append(occ)
    return result


def split_upcoming_past(events: List[MasterEvent],
                        now: datetime,
                        config: Optional[dict] = None) -> Tuple[List[Occurrence], List[Occurrence]]:
    """
    Teile die Termine um `now` herum in kommende und vergangene auf.
    Kommende aufsteigend, vergangene absteigend; beide Listen je Serie dedupliziert.
    """
    cfg = config or DEFAULT_CONFIG
    win = cfg.get('list_window', DEFAULT_CONFIG['list_window'])
    window_start = now - relativedelta(months=win.get('months_before', 1))
    window_end = now + relativedelta(months=win.get('months_after', 6))
    max_instances = cfg.get('max_instances', MAX_INSTANCES)

    all_occ = expand_events(events, window_start, window_end, max_instances)
    upcoming = [occ for occ in all_occ if occ.start >= now]
    past = [occ for occ in all_occ if occ.start < now]
    past.reverse()
    return dedup_series(upcoming), dedup_series(past)


def paginate(items: list, page: int, per_page: int = DEFAULT_CONFIG['events_per_page']) -> Tuple[list, int]:
    """1-basierte Seite und Gesamtzahl der Seiten (mindestens 1)."""
    if page < 1 or per_page < 1:
        raise ValueError(f"page and per_page must be positive, got {page}/{per_page}")
    pages = max(1, math.ceil(len(items) / per_page))
    return items[(page - 1) * per_page:page * per_page], pages
