"""
Quotes Repository - Database access layer for quotes.

Line item subtotals and the quote total are re-derived on every write from
the items, discount and shipping fee; a caller-supplied total is ignored.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import or_, cast, String

from database.models import Quote, QuoteStatus
from errors import ValidationError
from services.base_repository import BaseRepository
from services.pricing import normalize_items, recompute_totals
from validators import coerce_enum, require_date, require_non_negative, to_iso_date

logger = logging.getLogger(__name__)


class QuotesRepository(BaseRepository):
    """Repository for quote database operations."""

    model = Quote
    entity_name = 'Quote'
    required_fields = ['customer_id', 'date', 'validity']
    writable_fields = ['customer_id', 'customer_name', 'date', 'validity', 'delivery_date',
                       'items', 'discount', 'shipping_fee', 'shipping_distance',
                       'observations', 'status', 'attachments']
    default_order_desc = True

    def _validate(self, data: Dict, partial: bool = False) -> None:
        for key in ('date', 'validity', 'delivery_date'):
            if key in data:
                data[key] = to_iso_date(data[key])
        super()._validate(data, partial)
        if 'customer_id' in data and not data['customer_id']:
            raise ValidationError("customer required", field='customer_id')
        for key in ('date', 'validity'):
            if key in data:
                require_date(data, key)
        require_date(data, 'delivery_date', optional=True)
        for key in ('discount', 'shipping_fee', 'shipping_distance'):
            require_non_negative(data, key)
        if 'status' in data:
            coerce_enum(QuoteStatus, data['status'])

    def _prepare(self, data: Dict, existing: Optional[Quote] = None) -> Dict:
        values = super()._prepare(data, existing)
        if 'status' in values or existing is None:
            values['status'] = coerce_enum(
                QuoteStatus, values.get('status', QuoteStatus.PENDING)
            ).value
        if 'delivery_date' in values:
            values['delivery_date'] = values['delivery_date'] or None

        items = values['items'] if 'items' in values else (existing.items if existing else [])
        values['items'] = normalize_items(items)
        discount = values.get('discount', existing.discount if existing else 0) or 0
        shipping_fee = values.get('shipping_fee', existing.shipping_fee if existing else 0) or 0
        values['discount'] = discount
        values['shipping_fee'] = shipping_fee
        values['total'] = recompute_totals(values['items'], discount, shipping_fee)
        return values

    def set_status(self, quote_id: int, status) -> Dict:
        """
        Set a quote's status. Any status may follow any other; see
        services.status_policy for the optional transition check.
        """
        quote = self._require_model(quote_id)
        old_status = quote.status
        quote.status = coerce_enum(QuoteStatus, status).value
        self.session.flush()
        logger.info(f"Quote {quote_id} status changed from '{old_status}' to '{quote.status}'")
        return quote.to_dict()

    def search(self, term: str = None, status=None) -> List[Dict]:
        """
        Newest-first quotes whose customer name contains `term`
        (case-insensitive) or whose id contains it, optionally restricted to
        one status. A status of None or 'all' means any status.
        """
        query = self.session.query(Quote)
        if term:
            query = query.filter(or_(
                Quote.customer_name.ilike(f"%{term}%"),
                cast(Quote.id, String).like(f"%{term}%")
            ))
        if status and status != 'all':
            query = query.filter(Quote.status == coerce_enum(QuoteStatus, status).value)
        return [q.to_dict() for q in self._ordered(query).all()]

    def list_for_customer(self, customer_id: int) -> List[Dict]:
        return self.list_where('customer_id', equals=customer_id)
