"""
Catalog Repository - Database access layer for products and categories.

Deleting a category does not touch its products; a product whose
category_id no longer resolves is reported as uncategorized.
"""

import logging
from typing import Dict, List, Optional

from database.models import Category, Product
from services.base_repository import BaseRepository
from services.pricing import product_margin
from validators import require_non_negative, sanitize_string

logger = logging.getLogger(__name__)


class CategoriesRepository(BaseRepository):
    """Repository for product categories."""

    model = Category
    entity_name = 'Category'
    required_fields = ['name']
    writable_fields = ['name']

    def _prepare(self, data: Dict, existing=None) -> Dict:
        values = super()._prepare(data, existing)
        if 'name' in values:
            values['name'] = sanitize_string(values['name'])
        return values

    def names_by_id(self) -> Dict[int, str]:
        return {c.id: c.name for c in self.session.query(Category).all()}


class ProductsRepository(BaseRepository):
    """Repository for catalog products."""

    model = Product
    entity_name = 'Product'
    required_fields = ['name', 'price']
    writable_fields = ['name', 'price', 'cost_price', 'description', 'unit',
                       'photo_base64', 'category_id', 'active']

    def _validate(self, data: Dict, partial: bool = False) -> None:
        super()._validate(data, partial)
        require_non_negative(data, 'price')
        require_non_negative(data, 'cost_price')

    def _prepare(self, data: Dict, existing=None) -> Dict:
        values = super()._prepare(data, existing)
        if 'name' in values:
            values['name'] = sanitize_string(values['name'])
        if 'active' in values:
            values['active'] = bool(values['active'])
        if 'category_id' in values:
            values['category_id'] = values['category_id'] or None
        if existing is None:
            values.setdefault('active', True)
            values.setdefault('unit', 'unid')
        return values

    def list_active(self) -> List[Dict]:
        """Products offered in the quote editor."""
        return self.list_where('active', equals=True)

    def toggle_active(self, product_id: int) -> Dict:
        """Flip a product's active flag."""
        product = self._require_model(product_id)
        product.active = not product.active
        self.session.flush()
        logger.info(f"Product {product_id} active={product.active}")
        return product.to_dict()

    def search(self, term: str, active_only: bool = False) -> List[Dict]:
        """Search products by name substring (case-insensitive)."""
        query = self.session.query(Product)
        if term:
            query = query.filter(Product.name.ilike(f"%{term}%"))
        if active_only:
            query = query.filter(Product.active.is_(True))
        return [p.to_dict() for p in self._ordered(query).all()]

    def list_with_categories(self) -> List[Dict]:
        """
        Products with `category_name` resolved and `margin` computed.
        Dangling category ids resolve to None (uncategorized).
        """
        names = CategoriesRepository(self.session).names_by_id()
        products = []
        for product in self.list_all():
            product['category_name'] = names.get(product['category_id'])
            product['margin'] = product_margin(product)
            products.append(product)
        return products

    def category_name(self, product: Dict) -> Optional[str]:
        category_id = product.get('category_id')
        if not category_id:
            return None
        category = self.session.get(Category, category_id)
        return category.name if category else None
