from datetime import datetime

from .models import MasterEvent, Occurrence

_ID_STAMP_FORMAT = "%Y%m%dT%H%M%S"


def derive_occurrence_id(master_id, occurrence_start: datetime) -> str:
    """
    Abgeleitete ID eines berechneten Termins: Master-ID + Startzeitpunkt.
    Nur als Schlüssel für Listen gedacht, wird nie gespeichert.
    """
    return f"{master_id}-{occurrence_start.strftime(_ID_STAMP_FORMAT)}"


def make_occurrence(event: MasterEvent, start: datetime) -> Occurrence:
    """Erzeuge den Termin einer Serie, der bei `start` beginnt."""
    is_anchor = start == event.start
    # Der Anker trägt die ID des Masters selbst
    occurrence_id = str(event.id) if is_anchor else derive_occurrence_id(event.id, start)
    return Occurrence(
        source_event=event,
        occurrence_id=occurrence_id,
        start=start,
        end=start + event.duration,
        is_virtual=not is_anchor,
    )


def resolve_edit_target(occurrence: Occurrence):
    """
    Liefert die ID des Datensatzes, der beim Bearbeiten/Löschen eines
    angeklickten Termins tatsächlich geändert werden muss.
    Virtuelle Termine zeigen immer auf ihren Master; der Anker ist der Master.
    """
    return occurrence.source_event.id
