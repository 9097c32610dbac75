import csv
import logging
from typing import List, Optional

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from eventcompass.models import Frequency, Occurrence, RecurrenceRule, WEEKDAY_NAMES
from eventcompass.rrule_codec import decode_rule

_UNIT_NAMES = {
    Frequency.DAILY: ('daily', 'days'),
    Frequency.WEEKLY: ('weekly', 'weeks'),
    Frequency.MONTHLY: ('monthly', 'months'),
    Frequency.YEARLY: ('yearly', 'years'),
}

_WEEKDAY_SHORT = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def describe_recurrence(rule_string: Optional[str]) -> Optional[str]:
    """
    Menschenlesbare Kurzbeschreibung einer Regel, z.B.
    'Repeats every 3 days' oder 'Repeats weekly on Monday, Friday'.
    Kein Regel-String -> None, unlesbare Regel -> 'Recurring event'.
    """
    if not rule_string:
        return None
    return describe_rule(decode_rule(rule_string))


def describe_rule(rule: Optional[RecurrenceRule]) -> str:
    if rule is None:
        return 'Recurring event'

    adverb, unit = _UNIT_NAMES[rule.frequency]
    if rule.weekdays:
        # Wochentags-Serien laufen jede Woche, INTERVAL gilt dort nicht
        text = f"Repeats {adverb} on " + ", ".join(WEEKDAY_NAMES[wd] for wd in rule.weekdays)
    else:
        text = f"Repeats {adverb}" if rule.interval == 1 else f"Repeats every {rule.interval} {unit}"
    if rule.until is not None:
        text += f" until {rule.until.date().isoformat()}"
    return text


def format_occurrence(occ: Occurrence) -> str:
    """Eine Zeile für Listen und Exporte: Datum, Uhrzeit, Titel, ggf. Ort und Serie."""
    ev = occ.source_event
    wd = _WEEKDAY_SHORT[occ.start.weekday()]
    line = f"{occ.start.date().isoformat()} ({wd}) {occ.start:%H:%M}-{occ.end:%H:%M} {ev.title}"
    if ev.location:
        line += f" @ {ev.location}"
    if ev.rule is not None:
        line += " [recurring]"
    return line


def export_agenda_csv(occurrences: List[Occurrence], filename: str):
    with open(filename, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(["id", "event_id", "title", "start", "end", "location", "category", "recurrence"])
        for occ in occurrences:
            ev = occ.source_event
            writer.writerow([
                occ.occurrence_id,
                ev.id,
                ev.title,
                occ.start.isoformat(),
                occ.end.isoformat(),
                ev.location or "",
                ev.category or "",
                describe_rule(ev.rule) if ev.is_recurring else "",
            ])


def export_agenda_pdf(occurrences: List[Occurrence], filename: str, title: str = 'Event Agenda'):
    """Schreibt die Terminliste als PDF, mit Seitenumbruch und wiederholter Kopfzeile."""
    logging.info(f"Exporting {len(occurrences)} occurrences to {filename}")
    c = canvas.Canvas(filename, pagesize=letter)
    w, h = letter
    y = h - 40
    c.setFont('Helvetica-Bold', 14)
    c.drawString(50, y, title)
    y -= 30
    c.setFont('Helvetica', 10)
    c.drawString(50, y, f"Events: {len(occurrences)}")
    y -= 30
    c.setFont('Helvetica-Bold', 12)
    c.drawString(50, y, "Date       | Time        | Event")
    y -= 20
    c.setFont('Helvetica', 10)
    for occ in occurrences:
        if y < 60:
            c.showPage()
            y = h - 40
            c.setFont('Helvetica-Bold', 12)
            c.drawString(50, y, "Date       | Time        | Event")
            y -= 20
            c.setFont('Helvetica', 10)
        c.drawString(50, y, format_occurrence(occ))
        y -= 15
        rec = describe_rule(occ.source_event.rule) if occ.source_event.is_recurring else None
        if rec:
            c.drawString(70, y, rec)
            y -= 15
    c.save()
