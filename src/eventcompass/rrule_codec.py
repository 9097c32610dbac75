"""Lesen und Schreiben der kompakten Regel-Strings (FREQ=...;INTERVAL=...;BYDAY=...;UNTIL=...)."""
import logging
from datetime import date, datetime, time
from typing import Dict, List, Optional, Union

from dateutil.parser import isoparse

from .models import Frequency, RecurrenceRule, WEEKDAY_NAMES, WEEKDAY_TOKENS


def _format_until(u: datetime) -> str:
    # strftime("%Y") füllt Jahre < 1000 nicht auf vier Stellen auf
    return f"{u.year:04d}{u.month:02d}{u.day:02d}T{u.hour:02d}{u.minute:02d}{u.second:02d}Z"


def _parse_until(value: str) -> Optional[datetime]:
    # 20240305T000000Z oder nur 20240305
    try:
        return isoparse(value.strip())
    except (ValueError, OverflowError):
        logging.warning(f"Ignoring unreadable UNTIL value: {value!r}")
        return None


def _parse_interval(value: str) -> int:
    try:
        interval = int(value.strip())
    except ValueError:
        return 1
    return interval if interval > 0 else 1


def decode_rule(rule_string: Optional[str]) -> Optional[RecurrenceRule]:
    """
    Zerlegt einen Regel-String in eine RecurrenceRule.
    Fehlt FREQ oder ist es unbekannt, wird None geliefert; der Aufrufer
    behandelt den Termin dann als nicht wiederkehrend.
    """
    if not rule_string:
        return None
    text = rule_string.strip()
    if text.upper().startswith("RRULE:"):
        text = text[len("RRULE:"):]

    frequency = None
    interval = 1
    weekdays: List[int] = []
    until = None

    for part in text.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        key = key.strip().upper()
        if key == "FREQ":
            try:
                frequency = Frequency(value.strip().upper())
            except ValueError:
                frequency = None
        elif key == "INTERVAL":
            interval = _parse_interval(value)
        elif key == "BYDAY":
            for token in value.split(","):
                token = token.strip().upper()
                if token in WEEKDAY_TOKENS:
                    weekdays.append(WEEKDAY_TOKENS.index(token))
        elif key == "UNTIL":
            until = _parse_until(value)
        # unbekannte Schlüssel werden ignoriert

    if frequency is None:
        return None
    return RecurrenceRule(frequency, interval, weekdays, until)


def encode_rule(rule: RecurrenceRule) -> str:
    parts = [f"FREQ={rule.frequency.value}"]
    if rule.interval > 1:
        parts.append(f"INTERVAL={rule.interval}")
    if rule.frequency is Frequency.WEEKLY and rule.weekdays:
        parts.append("BYDAY=" + ",".join(WEEKDAY_TOKENS[wd] for wd in rule.weekdays))
    if rule.until is not None:
        parts.append(f"UNTIL={_format_until(rule.until)}")
    return ";".join(parts)


def _weekday_index(day: Union[int, str]) -> Optional[int]:
    if isinstance(day, int):
        return day if 0 <= day <= 6 else None
    name = day.strip().lower()
    for i, (token, full) in enumerate(zip(WEEKDAY_TOKENS, WEEKDAY_NAMES)):
        if name in (token.lower(), full.lower()):
            return i
    return None


def rule_from_form(frequency: str,
                   interval: int = 1,
                   weekly_days: Optional[List[Union[int, str]]] = None,
                   end_date: Optional[date] = None) -> Optional[str]:
    """
    Baut aus den Formularfeldern (Häufigkeit, Intervall, Wochentage, Enddatum)
    einen Regel-String. 'none' bedeutet: keine Wiederholung.
    Das Enddatum gilt inklusive, UNTIL wird daher auf 23:59:59 gesetzt.
    """
    if not frequency or frequency.lower() == "none":
        return None
    weekdays = []
    for day in weekly_days or []:
        idx = _weekday_index(day)
        if idx is not None:
            weekdays.append(idx)
    until = datetime.combine(end_date, time(23, 59, 59)) if end_date else None
    rule = RecurrenceRule(Frequency(frequency.upper()), max(int(interval or 1), 1), weekdays, until)
    return encode_rule(rule)


def rule_to_form(rule_string: Optional[str]) -> Dict:
    """Gegenstück zu rule_from_form, für das Vorbelegen des Bearbeiten-Dialogs."""
    rule = decode_rule(rule_string)
    if rule is None:
        return {"frequency": "none", "interval": 1, "weekly_days": [], "end_date": None}
    return {
        "frequency": rule.frequency.value.lower(),
        "interval": rule.interval,
        "weekly_days": [WEEKDAY_NAMES[wd].lower() for wd in rule.weekdays],
        "end_date": rule.until.date() if rule.until else None,
    }
