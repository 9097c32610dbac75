from collections import Counter, defaultdict
from typing import Dict, List
from eventcompass.models import MasterEvent, Occurrence


def count_by_category(events: List[MasterEvent]) -> Dict[str, int]:
    """Anzahl der Master-Termine je Kategorie (ohne Kategorie -> 'other')."""
    counts = Counter(ev.category or 'other' for ev in events)
    return dict(counts)


def summarize_occurrences(occurrences: List[Occurrence]) -> Dict[str, int]:
    """
    Zusammenfassung für eine Liste berechneter Termine:
      total   : Gesamtzahl der Termine
      anchors : Termine, die dem gespeicherten Original entsprechen
      virtual : berechnete Serientermine
      series  : Anzahl verschiedener wiederkehrender Master
    """
    anchors = sum(1 for occ in occurrences if not occ.is_virtual)
    series = {occ.source_event.id for occ in occurrences
              if occ.source_event.rule is not None}
    return {
        'total': len(occurrences),
        'anchors': anchors,
        'virtual': len(occurrences) - anchors,
        'series': len(series),
    }


def count_per_month(occurrences: List[Occurrence]) -> Dict[str, list]:
    """Termine je (Jahr, Monat), aufsteigend sortiert."""
    per_month = defaultdict(int)
    for occ in occurrences:
        per_month[(occ.start.year, occ.start.month)] += 1

    sorted_keys = sorted(per_month.keys())
    return {"periods": sorted_keys, "counts": [per_month[k] for k in sorted_keys]}
