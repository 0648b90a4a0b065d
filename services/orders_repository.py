"""
Orders Repository - Database access layer for orders.

Orders are written by quote conversion (see services.quote_lifecycle); their
items and total are a frozen copy of the source quote.
"""

import logging
from typing import Dict, List

from database.models import Order, OrderStatus
from errors import ValidationError
from services.base_repository import BaseRepository
from services.pricing import normalize_items
from validators import coerce_enum, require_date, require_non_negative, to_iso_date

logger = logging.getLogger(__name__)


class OrdersRepository(BaseRepository):
    """Repository for order database operations."""

    model = Order
    entity_name = 'Order'
    required_fields = ['customer_id', 'delivery_date']
    writable_fields = ['quote_id', 'customer_id', 'customer_name', 'items', 'total',
                       'delivery_date', 'status', 'observations']
    default_order_desc = True

    def _validate(self, data: Dict, partial: bool = False) -> None:
        if 'delivery_date' in data:
            data['delivery_date'] = to_iso_date(data['delivery_date'])
        super()._validate(data, partial)
        if 'customer_id' in data and not data['customer_id']:
            raise ValidationError("customer required", field='customer_id')
        if 'delivery_date' in data:
            require_date(data, 'delivery_date')
        require_non_negative(data, 'total')
        if 'status' in data:
            coerce_enum(OrderStatus, data['status'])

    def _prepare(self, data: Dict, existing=None) -> Dict:
        values = super()._prepare(data, existing)
        if 'status' in values or existing is None:
            values['status'] = coerce_enum(
                OrderStatus, values.get('status', OrderStatus.PENDING)
            ).value
        if 'items' in values or existing is None:
            values['items'] = normalize_items(values.get('items'))
        if existing is None:
            values.setdefault('total', 0)
        return values

    def update_status(self, order_id: int, status) -> Dict:
        """Move an order along the production board."""
        order = self._require_model(order_id)
        old_status = order.status
        order.status = coerce_enum(OrderStatus, status).value
        self.session.flush()
        logger.info(f"Order {order_id} status changed from '{old_status}' to '{order.status}'")
        return order.to_dict()

    def list_for_period(self, start, end) -> List[Dict]:
        """Orders whose delivery date falls within [start, end]."""
        return self.list_where('delivery_date', between=(start, end))

    def get_for_quote(self, quote_id: int) -> List[Dict]:
        rows = self.session.query(Order).filter(Order.quote_id == quote_id).order_by(Order.id).all()
        return [o.to_dict() for o in rows]
