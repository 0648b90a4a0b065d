"""
Base Repository - uniform CRUD and indexed query contract shared by the
entity repositories.

Every repository works on a caller-owned Session (see Store.session_scope)
and returns plain dicts, never ORM instances.
"""

import logging
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from errors import NotFoundError, ValidationError
from validators import require_fields, to_iso_date

logger = logging.getLogger(__name__)

_MISSING = object()


def _plain(value):
    """Bind enums by value and dates as ISO strings."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return to_iso_date(value)
    return value


class BaseRepository:
    """Repository for one entity type with an auto-incrementing integer id."""

    model = None
    entity_name = 'record'
    required_fields: List[str] = []
    writable_fields: List[str] = []
    default_order_desc = False

    def __init__(self, session: Session):
        self.session = session

    # =========================================================================
    # HOOKS
    # =========================================================================

    def _validate(self, data: Dict, partial: bool = False) -> None:
        """Raise ValidationError if `data` is not acceptable for a write."""
        if partial:
            present = [f for f in self.required_fields if f in data]
            require_fields(data, present)
        else:
            require_fields(data, self.required_fields)

    def _prepare(self, data: Dict, existing: Optional[Any] = None) -> Dict:
        """Return the column values to write. `existing` is set on update."""
        return {key: _plain(data[key]) for key in self.writable_fields if key in data}

    # =========================================================================
    # SCHEMA INTROSPECTION
    # =========================================================================

    @classmethod
    def indexed_fields(cls) -> Set[str]:
        """Fields that can be used with list_where/count_where."""
        table = cls.model.__table__
        fields = {col.name for col in table.primary_key.columns}
        for index in table.indexes:
            fields.update(col.name for col in index.columns)
        return fields

    def _where(self, field: str, equals=_MISSING, between: Optional[Tuple] = None,
               any_of: Optional[Iterable] = None):
        if field not in self.indexed_fields():
            raise ValidationError(
                f"'{field}' is not an indexed field of {self.entity_name}", field=field
            )
        given = [equals is not _MISSING, between is not None, any_of is not None]
        if sum(given) != 1:
            raise ValidationError("Exactly one of equals, between or any_of is required")

        column = getattr(self.model, field)
        if equals is not _MISSING:
            return column.is_(None) if equals is None else column == _plain(equals)
        if between is not None:
            low, high = between
            # Inclusive on both ends
            return column.between(_plain(low), _plain(high))
        return column.in_([_plain(v) for v in any_of])

    def _ordered(self, query):
        if self.default_order_desc:
            return query.order_by(self.model.id.desc())
        return query.order_by(self.model.id)

    def _get_model(self, record_id):
        if record_id is None:
            return None
        return self.session.get(self.model, record_id)

    def _require_model(self, record_id):
        if record_id is None:
            raise ValidationError(f"{self.entity_name} id is required", field='id')
        obj = self._get_model(record_id)
        if obj is None:
            raise NotFoundError(self.entity_name, record_id)
        return obj

    # =========================================================================
    # CRUD
    # =========================================================================

    def add(self, data: Dict) -> int:
        """Insert a new record and return its id."""
        data = {k: v for k, v in data.items() if k != 'id'}
        self._validate(data)
        obj = self.model(**self._prepare(data))
        self.session.add(obj)
        self.session.flush()
        logger.info(f"Created {self.entity_name}: {obj.id}")
        return obj.id

    def update(self, record_id: int, data: Dict) -> Dict:
        """Merge `data` into an existing record."""
        obj = self._require_model(record_id)
        data = {k: v for k, v in data.items() if k != 'id'}
        self._validate(data, partial=True)
        for key, value in self._prepare(data, existing=obj).items():
            setattr(obj, key, value)
        self.session.flush()
        logger.info(f"Updated {self.entity_name}: {record_id}")
        return obj.to_dict()

    def delete(self, record_id: int) -> None:
        """Hard delete. Deleting a missing id is not an error."""
        obj = self._get_model(record_id)
        if obj is None:
            logger.debug(f"Delete of missing {self.entity_name} {record_id} ignored")
            return
        self.session.delete(obj)
        self.session.flush()
        logger.info(f"Deleted {self.entity_name}: {record_id}")

    def get(self, record_id: int) -> Optional[Dict]:
        """Get a record by id, or None."""
        obj = self._get_model(record_id)
        return obj.to_dict() if obj else None

    def list_all(self) -> List[Dict]:
        """List every record."""
        rows = self._ordered(self.session.query(self.model)).all()
        return [row.to_dict() for row in rows]

    def list_where(self, field: str, equals=_MISSING, between: Optional[Tuple] = None,
                   any_of: Optional[Iterable] = None) -> List[Dict]:
        """
        List records matching one indexed-field predicate: `equals=value`,
        `between=(low, high)` (inclusive), or `any_of=[...]`.
        """
        clause = self._where(field, equals=equals, between=between, any_of=any_of)
        rows = self._ordered(self.session.query(self.model).filter(clause)).all()
        return [row.to_dict() for row in rows]

    def count(self) -> int:
        return self.session.query(func.count(self.model.id)).scalar() or 0

    def count_where(self, field: str, equals=_MISSING, between: Optional[Tuple] = None,
                    any_of: Optional[Iterable] = None) -> int:
        clause = self._where(field, equals=equals, between=between, any_of=any_of)
        return self.session.query(func.count(self.model.id)).filter(clause).scalar() or 0
