# src/eventcompass/models.py
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

# 0=Montag … 6=Sonntag, wie datetime.weekday()
WEEKDAY_TOKENS = ["MO", "TU", "WE", "TH", "FR", "SA", "SU"]
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

EVENT_CATEGORIES = ["meeting", "health", "sports", "holiday", "education", "social"]


class Frequency(str, enum.Enum):
    """Unterstützte FREQ-Werte einer Regel."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


@dataclass
class RecurrenceRule:
    """Strukturierte Form eines Regel-Strings (z. B. FREQ=WEEKLY;BYDAY=MO,FR)."""
    frequency: Frequency
    interval: int = 1                                       # alle N Einheiten
    weekdays: List[int] = field(default_factory=list)       # nur bei WEEKLY relevant
    until: Optional[datetime] = None                        # inklusive

    def __post_init__(self):
        self.frequency = Frequency(self.frequency)
        if self.interval < 1:
            raise ValueError(f"interval must be positive, got {self.interval}")
        if self.frequency is not Frequency.WEEKLY:
            self.weekdays = []
        self.weekdays = sorted({int(wd) for wd in self.weekdays})
        if any(wd < 0 or wd > 6 for wd in self.weekdays):
            raise ValueError(f"weekdays must be in 0..6, got {self.weekdays}")
        if self.until is not None:
            # Token hat Sekundenauflösung und keine Zone
            until = self.until
            if until.tzinfo is not None:
                until = until.astimezone(timezone.utc).replace(tzinfo=None)
            self.until = until.replace(microsecond=0)


@dataclass
class MasterEvent:
    """Gespeicherter Termin; die Serie wird bei Bedarf daraus berechnet."""
    id: Optional[int] = field(default=None, init=False)    # db-Primärschlüssel
    title: str
    start: datetime
    end: datetime
    description: Optional[str] = None
    location: Optional[str] = None
    is_recurring: bool = False
    rrule: Optional[str] = None                             # einzige persistierte Wiederholungsinfo
    category: Optional[str] = None
    audience: Optional[str] = None
    visibility: str = "public"

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"end {self.end} lies before start {self.start}")

    @property
    def duration(self):
        return self.end - self.start

    @property
    def rule(self) -> Optional[RecurrenceRule]:
        if not self.is_recurring or not self.rrule:
            return None
        # einmal je Regel-String dekodieren; ändert sich rrule, wird neu gelesen
        cached = self.__dict__.get('_decoded_rule')
        if cached is None or cached[0] != self.rrule:
            from .rrule_codec import decode_rule
            cached = (self.rrule, decode_rule(self.rrule))
            self.__dict__['_decoded_rule'] = cached
        return cached[1]

    @property
    def has_corrupt_rule(self) -> bool:
        """True, wenn der Termin wiederkehrend sein soll, die Regel aber nicht lesbar ist."""
        return self.is_recurring and self.rule is None


@dataclass
class Occurrence:
    """Ein konkreter Termin einer Serie. Wird nie gespeichert."""
    source_event: MasterEvent
    occurrence_id: str
    start: datetime
    end: datetime
    is_virtual: bool = False
