import os
import sqlite3
from datetime import datetime
from typing import List, Optional
from eventcompass.identity import resolve_edit_target
from eventcompass.models import MasterEvent, Occurrence
import logging

_EVENT_COLUMNS = (
    "title", "description", "location", "start_time", "end_time",
    "is_recurring", "rrule", "category", "audience", "visibility",
)


class Database:
    def __init__(self, db_path: str = None):
        try:
            self.db_path = db_path or os.path.join(os.path.expanduser("~"), ".eventcompass", "eventcompass.db")
            if self.db_path != ':memory:':
                os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self._ensure_tables()
        except (sqlite3.Error, OSError) as e:
            logging.error(f"Database connection error: {e}")
            raise

    def _ensure_tables(self):
        cur = self.conn.cursor()
        # Nur Master-Termine; berechnete Serientermine werden nie gespeichert
        cur.execute("""
        CREATE TABLE IF NOT EXISTS events (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          title TEXT NOT NULL,
          description TEXT,
          location TEXT,
          start_time TEXT NOT NULL,
          end_time TEXT NOT NULL,
          is_recurring INTEGER NOT NULL DEFAULT 0,
          rrule TEXT,
          category TEXT,
          audience TEXT,
          visibility TEXT NOT NULL DEFAULT 'public'
        )""")
        self.conn.commit()

    # Export/Import
    def export_to_sql(self, filename: str):
        """Dump aller Tabellen als SQL-Statements"""
        with open(filename, 'w', encoding='utf-8') as f:
            for line in self.conn.iterdump():
                f.write(f"{line}\n")

    def import_from_sql(self, filename: str):
        """Vorhandene Tabellen löschen, Dump einlesen und ausführen"""
        cur = self.conn.cursor()
        cur.execute("DROP TABLE IF EXISTS events")
        self.conn.commit()

        with open(filename, 'r', encoding='utf-8') as f:
            script = f.read()
        self.conn.executescript(script)
        self.conn.commit()

    @staticmethod
    def _row_to_event(row) -> MasterEvent:
        ev = MasterEvent(
            title=row['title'],
            start=datetime.fromisoformat(row['start_time']),
            end=datetime.fromisoformat(row['end_time']),
            description=row['description'],
            location=row['location'],
            is_recurring=bool(row['is_recurring']),
            rrule=row['rrule'],
            category=row['category'],
            audience=row['audience'],
            visibility=row['visibility'],
        )
        ev.id = row['id']
        return ev

    # Event-Methoden
    def load_events(self) -> List[MasterEvent]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM events ORDER BY start_time, id")
        return [self._row_to_event(row) for row in cur.fetchall()]

    def get_event(self, event_id: int) -> Optional[MasterEvent]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM events WHERE id=?", (event_id,))
        row = cur.fetchone()
        return self._row_to_event(row) if row else None

    def save_event(self, ev: MasterEvent):
        values = (
            ev.title, ev.description, ev.location,
            ev.start.isoformat(), ev.end.isoformat(),
            int(ev.is_recurring), ev.rrule if ev.is_recurring else None,
            ev.category, ev.audience, ev.visibility,
        )
        cur = self.conn.cursor()
        try:
            if ev.id is not None:
                assignments = ", ".join(f"{col}=?" for col in _EVENT_COLUMNS)
                cur.execute(f"UPDATE events SET {assignments} WHERE id=?", values + (ev.id,))
                logging.info(f"Updated event id={ev.id}")
            else:
                placeholders = ",".join("?" for _ in _EVENT_COLUMNS)
                cur.execute(
                    f"INSERT INTO events ({', '.join(_EVENT_COLUMNS)}) VALUES ({placeholders})",
                    values
                )
                ev.id = cur.lastrowid
                logging.info(f"Inserted new event with id={ev.id}")
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            logging.error(f"Error saving event: {e}")
            raise

    def delete_event(self, event_id: int):
        cur = self.conn.cursor()
        cur.execute("DELETE FROM events WHERE id=?", (event_id,))
        self.conn.commit()

    # Angeklickte Termine: Änderungen gehen immer an den Master
    def load_edit_target(self, occurrence: Occurrence) -> Optional[MasterEvent]:
        return self.get_event(resolve_edit_target(occurrence))

    def delete_occurrence(self, occurrence: Occurrence):
        """Löscht die ganze Serie, zu der der Termin gehört."""
        self.delete_event(resolve_edit_target(occurrence))

    def close(self):
        """Schließe die Datenbankverbindung sauber"""
        if self.conn:
            self.conn.close()
            self.conn = None
