"""
Quote Lifecycle - editing a quote draft, saving it, and converting it into
an order.

The editing functions work on the caller's in-memory quote dict (form
state) and keep `subtotal` and `total` consistent after every change.
Nothing is persisted until `QuoteLifecycleService.save`.
"""

import copy
import logging
from datetime import date, timedelta
from typing import Dict, Optional

from sqlalchemy.orm import Session

from config import Config
from database.models import OrderStatus, QuoteStatus
from errors import ValidationError, NotFoundError
from services.customers_repository import CustomersRepository
from services.orders_repository import OrdersRepository
from services.pricing import (
    line_subtotal, make_item, recompute_totals, shipping_fee_for_distance
)
from services.quotes_repository import QuotesRepository
from validators import require_date, require_non_negative, to_iso_date, validate_number_range

logger = logging.getLogger(__name__)

EDITABLE_ITEM_FIELDS = ('name', 'quantity', 'unit_price', 'unit')


# =============================================================================
# DRAFT EDITING
# =============================================================================

def new_quote(today: date = None, settings: Optional[Dict] = None, config=Config) -> Dict:
    """Blank quote draft dated `today`, valid for the configured number of days."""
    today = today or date.today()
    return {
        'customer_id': None,
        'customer_name': '',
        'date': today.isoformat(),
        'validity': (today + timedelta(days=config.DEFAULT_QUOTE_VALIDITY_DAYS)).isoformat(),
        'delivery_date': None,
        'items': [],
        'discount': 0,
        'shipping_fee': 0,
        'shipping_distance': None,
        'total': 0,
        'observations': (settings or {}).get('default_observations', ''),
        'status': QuoteStatus.PENDING.value,
    }


def apply_totals(quote: Dict) -> Dict:
    """Re-derive the quote total from its items, discount and shipping fee."""
    quote['total'] = recompute_totals(
        quote.get('items') or [], quote.get('discount') or 0, quote.get('shipping_fee') or 0
    )
    return quote


def set_customer(quote: Dict, customer: Dict) -> Dict:
    """Point the quote at a customer, snapshotting the customer's name."""
    quote['customer_id'] = customer['id']
    quote['customer_name'] = customer['name']
    return quote


def add_item(quote: Dict, product: Dict) -> Dict:
    """Append one unit of `product` at its current price."""
    quote['items'] = list(quote.get('items') or [])
    quote['items'].append(make_item(product))
    return apply_totals(quote)


def update_item(quote: Dict, index: int, fields: Dict) -> Dict:
    """Merge `fields` into line `index` and recompute its subtotal."""
    items = list(quote.get('items') or [])
    if not 0 <= index < len(items):
        raise ValidationError(f"Item index {index} out of range", field='items')
    item = dict(items[index])
    item.update({key: value for key, value in fields.items() if key in EDITABLE_ITEM_FIELDS})
    is_valid, error = validate_number_range(item.get('quantity'))
    if not is_valid or item['quantity'] <= 0:
        raise ValidationError(f"Item {index}: quantity must be greater than zero", field='items')
    is_valid, error = validate_number_range(item.get('unit_price'), min_value=0)
    if not is_valid:
        raise ValidationError(f"Item {index}: unit_price {error.lower()}", field='items')
    item['subtotal'] = line_subtotal(item)
    items[index] = item
    quote['items'] = items
    return apply_totals(quote)


def remove_item(quote: Dict, index: int) -> Dict:
    items = list(quote.get('items') or [])
    if not 0 <= index < len(items):
        raise ValidationError(f"Item index {index} out of range", field='items')
    del items[index]
    quote['items'] = items
    return apply_totals(quote)


def set_discount(quote: Dict, discount: float) -> Dict:
    require_non_negative({'discount': discount}, 'discount')
    quote['discount'] = discount or 0
    return apply_totals(quote)


def set_shipping_fee(quote: Dict, shipping_fee: float) -> Dict:
    require_non_negative({'shipping_fee': shipping_fee}, 'shipping_fee')
    quote['shipping_fee'] = shipping_fee or 0
    return apply_totals(quote)


def set_shipping_distance(quote: Dict, distance_km: float, rate_per_km: float = None,
                          config=Config) -> Dict:
    """Charge shipping by distance at `rate_per_km` (configured default if None)."""
    if rate_per_km is None:
        rate_per_km = config.DEFAULT_SHIPPING_RATE_PER_KM
    quote['shipping_distance'] = distance_km
    quote['shipping_fee'] = shipping_fee_for_distance(distance_km, rate_per_km)
    return apply_totals(quote)


# =============================================================================
# PERSISTENCE
# =============================================================================

class QuoteLifecycleService:
    """Saves quotes and converts them into orders within one session."""

    def __init__(self, session: Session):
        self.session = session
        self.quotes = QuotesRepository(session)
        self.orders = OrdersRepository(session)
        self.customers = CustomersRepository(session)

    def save(self, quote: Dict, require_items: bool = True) -> int:
        """
        Insert the quote if it has no id, otherwise update it. Sets
        quote['id'] and returns it.
        """
        if not quote.get('customer_id'):
            raise ValidationError("customer required", field='customer_id')
        if require_items and not quote.get('items'):
            raise ValidationError("items required", field='items')

        data = {key: value for key, value in quote.items() if key not in ('id', 'total')}
        if not data.get('customer_name'):
            customer = self.customers.get(quote['customer_id'])
            if customer:
                data['customer_name'] = customer['name']

        if quote.get('id'):
            saved = self.quotes.update(quote['id'], data)
        else:
            saved = self.quotes.get(self.quotes.add(data))

        quote.update({
            'id': saved['id'],
            'customer_name': saved['customer_name'],
            'items': saved['items'],
            'total': saved['total'],
            'status': saved['status'],
        })
        return saved['id']

    def convert_to_order(self, quote, delivery_date) -> Dict:
        """
        Create an order from a saved quote and mark the quote APPROVED.

        The order is written first; if that fails the quote is not touched.
        Both writes share the caller's session, so Store.session_scope
        commits or rolls back them together.
        """
        quote_id = quote.get('id') if isinstance(quote, dict) else quote
        if not quote_id:
            raise ValidationError("Quote must be saved before conversion", field='id')
        delivery_date = to_iso_date(delivery_date)
        require_date({'delivery_date': delivery_date}, 'delivery_date')

        source = self.quotes.get(quote_id)
        if source is None:
            raise NotFoundError('Quote', quote_id)

        order_id = self.orders.add({
            'quote_id': source['id'],
            'customer_id': source['customer_id'],
            'customer_name': source['customer_name'],
            'items': copy.deepcopy(source['items']),
            'total': source['total'],
            'delivery_date': delivery_date,
            'status': OrderStatus.PENDING,
            'observations': source['observations'],
        })
        self.quotes.set_status(source['id'], QuoteStatus.APPROVED)

        if isinstance(quote, dict):
            quote['status'] = QuoteStatus.APPROVED.value
        logger.info(f"Converted quote {source['id']} into order {order_id}")
        return self.orders.get(order_id)
