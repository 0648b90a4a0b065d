"""
Customers Repository - Database access layer for customer records.
"""

import logging
from typing import Dict, List

from sqlalchemy import or_

from database.models import Customer
from errors import ValidationError
from services.base_repository import BaseRepository
from validators import require_date, require_email, sanitize_string

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ('street', 'number', 'neighborhood', 'city', 'state', 'zip_code')


class CustomersRepository(BaseRepository):
    """Repository for customer database operations."""

    model = Customer
    entity_name = 'Customer'
    required_fields = ['name', 'phone']
    writable_fields = ['name', 'phone', 'email', 'birthday', 'anniversary_date',
                       'observations', 'address']

    def _validate(self, data: Dict, partial: bool = False) -> None:
        super()._validate(data, partial)
        require_email(data)
        require_date(data, 'birthday', optional=True)
        require_date(data, 'anniversary_date', optional=True)
        address = data.get('address')
        if address is not None and not isinstance(address, dict):
            raise ValidationError("address must be a mapping", field='address')

    def _prepare(self, data: Dict, existing=None) -> Dict:
        values = super()._prepare(data, existing)
        for key in ('name', 'phone'):
            if key in values:
                values[key] = sanitize_string(values[key])
        if values.get('address'):
            # Partial addresses are kept as given
            values['address'] = {k: v for k, v in values['address'].items() if k in ADDRESS_FIELDS}
        return values

    def search(self, term: str) -> List[Dict]:
        """Search customers by name (case-insensitive) or phone substring."""
        if not term:
            return self.list_all()
        pattern = f"%{term}%"
        customers = self._ordered(self.session.query(Customer).filter(
            or_(
                Customer.name.ilike(pattern),
                Customer.phone.like(pattern)
            )
        )).all()
        return [c.to_dict() for c in customers]
