"""
Pricing - line item and quote total arithmetic.

subtotal of a line is always quantity * unit_price, and a quote total is
always max(0, sum(subtotals) - discount + shipping_fee). Nothing here trusts
a previously stored subtotal or total.
"""

import copy
from typing import Dict, List, Optional

from errors import ValidationError
from validators import validate_number_range

ITEM_FIELDS = ('product_id', 'name', 'quantity', 'unit_price', 'subtotal', 'unit')


def _number(value, default=0):
    return default if value is None else value


def line_subtotal(item: Dict) -> float:
    return _number(item.get('quantity')) * _number(item.get('unit_price'))


def items_subtotal(items: List[Dict]) -> float:
    return sum(line_subtotal(item) for item in items or [])


def recompute_totals(items: List[Dict], discount: float = 0, shipping_fee: float = 0) -> float:
    """Return the quote total for these items, discount and shipping fee."""
    subtotal = items_subtotal(items)
    return max(0, subtotal - _number(discount) + _number(shipping_fee))


def make_item(product: Dict, quantity: float = 1) -> Dict:
    """New line item snapshotting the product's name, price and unit."""
    unit_price = _number(product.get('price'))
    return {
        'product_id': product.get('id'),
        'name': product.get('name', ''),
        'quantity': quantity,
        'unit_price': unit_price,
        'subtotal': quantity * unit_price,
        'unit': product.get('unit') or 'unid',
    }


def normalize_items(items: Optional[List[Dict]]) -> List[Dict]:
    """
    Validate line items and return a detached copy with every subtotal
    re-derived. Raises ValidationError on a bad line.
    """
    normalized = []
    for index, raw in enumerate(items or []):
        if not isinstance(raw, dict):
            raise ValidationError(f"Item {index} must be a mapping", field='items')
        item = {key: copy.deepcopy(raw.get(key)) for key in ITEM_FIELDS}
        if not item['name'] or not str(item['name']).strip():
            raise ValidationError(f"Item {index}: name is required", field='items')

        is_valid, error = validate_number_range(item['quantity'])
        if not is_valid or item['quantity'] <= 0:
            raise ValidationError(f"Item {index}: quantity must be greater than zero", field='items')
        is_valid, error = validate_number_range(item['unit_price'], min_value=0)
        if not is_valid:
            raise ValidationError(f"Item {index}: unit_price {error.lower()}", field='items')

        item['unit'] = item['unit'] or 'unid'
        item['subtotal'] = line_subtotal(item)
        normalized.append(item)
    return normalized


def shipping_fee_for_distance(distance_km: float, rate_per_km: Optional[float]) -> float:
    """Shipping fee charged for a delivery distance."""
    is_valid, error = validate_number_range(distance_km, min_value=0)
    if not is_valid:
        raise ValidationError(f"shipping_distance: {error}", field='shipping_distance')
    return distance_km * _number(rate_per_km)


def product_margin(product: Dict) -> Optional[float]:
    """
    Margin as a fraction of the consumer price, or None when the product has
    no cost price (or no price to divide by).
    """
    price = _number(product.get('price'))
    cost = _number(product.get('cost_price'))
    if cost <= 0 or price <= 0:
        return None
    return (price - cost) / price
