"""
Calendar Repository - free-text notes attached to calendar days.

There is at most one note per date. `upsert_for_date` is the normal write
path: blank text removes the day's note, otherwise the note is updated in
place or created.
"""

import logging
from typing import Dict, List, Optional

from database.models import CalendarNote
from errors import ConflictError
from services.base_repository import BaseRepository
from validators import require_date, to_iso_date

logger = logging.getLogger(__name__)


class CalendarNotesRepository(BaseRepository):
    """Repository for calendar notes."""

    model = CalendarNote
    entity_name = 'CalendarNote'
    required_fields = ['date', 'text']
    writable_fields = ['date', 'text']

    def _validate(self, data: Dict, partial: bool = False) -> None:
        if 'date' in data:
            data['date'] = to_iso_date(data['date'])
        super()._validate(data, partial)
        if 'date' in data:
            require_date(data, 'date')

    def _find(self, day: str) -> Optional[CalendarNote]:
        return self.session.query(CalendarNote).filter(CalendarNote.date == day).first()

    def add(self, data: Dict) -> int:
        day = to_iso_date(data.get('date'))
        if day and self._find(day) is not None:
            raise ConflictError(f"A note already exists for {day}")
        return super().add(data)

    def update(self, record_id: int, data: Dict) -> Dict:
        day = to_iso_date(data.get('date'))
        if day:
            other = self._find(day)
            if other is not None and other.id != record_id:
                raise ConflictError(f"A note already exists for {day}")
        return super().update(record_id, data)

    def get_for_date(self, day) -> Optional[Dict]:
        note = self._find(to_iso_date(day))
        return note.to_dict() if note else None

    def upsert_for_date(self, day, text: str) -> Optional[Dict]:
        """
        Set the note for `day`. Returns the stored note, or None when blank
        text removed it (or there was nothing to remove).
        """
        day = to_iso_date(day)
        require_date({'date': day}, 'date')
        existing = self._find(day)

        if not text or not text.strip():
            if existing is not None:
                self.session.delete(existing)
                self.session.flush()
                logger.info(f"Removed calendar note for {day}")
            return None

        if existing is not None:
            existing.text = text
            self.session.flush()
            logger.info(f"Updated calendar note for {day}")
            return existing.to_dict()

        note = CalendarNote(date=day, text=text)
        self.session.add(note)
        self.session.flush()
        logger.info(f"Created calendar note for {day}")
        return note.to_dict()

    def list_between(self, start, end) -> List[Dict]:
        """Notes dated within [start, end]."""
        return self.list_where('date', between=(start, end))
