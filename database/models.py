"""
SQLAlchemy models for the quoting/ordering data layer.
Defines company settings, catalog, customers, quotes, orders and calendar notes.

Dates are calendar dates stored as ISO 'YYYY-MM-DD' strings, so range scans
compare lexicographically. Quote/order line items are embedded JSON lists.
"""

import copy
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, DateTime,
    JSON, Index, CheckConstraint
)
from database.connection import Base


def utcnow():
    """Naive UTC timestamp for audit columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# =============================================================================
# ENUMS
# =============================================================================

class ProductMode(str, Enum):
    SIMPLE = 'SIMPLE'
    COMPLETE = 'COMPLETE'


class PDFTheme(str, Enum):
    SIMPLE = 'Simples'
    ELEGANT = 'Elegante'
    MINIMALIST = 'Minimalista'


class QuoteStatus(str, Enum):
    PENDING = 'Pendente'
    NEGOTIATING = 'Em negociação'
    APPROVED = 'Aprovado'
    PRODUCTION = 'Produção iniciada'
    DELIVERED = 'Entregue'
    CANCELLED = 'Cancelado'


class OrderStatus(str, Enum):
    PENDING = 'Pendente'
    PRODUCING = 'Produzindo'
    READY = 'Pronto'
    DELIVERED = 'Entregue'
    CANCELLED = 'Cancelado'


# Quote statuses counted as revenue
REALIZED_STATUSES = (
    QuoteStatus.APPROVED.value,
    QuoteStatus.PRODUCTION.value,
    QuoteStatus.DELIVERED.value,
)


# =============================================================================
# COMPANY SETTINGS (single slot)
# =============================================================================

class CompanySettings(Base):
    """
    Company profile and preferences. The table holds at most one row: its
    primary key is pinned to SINGLETON_ID by a check constraint.
    """
    __tablename__ = 'company_settings'

    SINGLETON_ID = 1

    id = Column(Integer, primary_key=True, default=SINGLETON_ID, autoincrement=False)
    company_name = Column(String(255), nullable=False)
    owner_name = Column(String(255), nullable=False)
    phone = Column(String(50), default='')
    email = Column(String(255))
    logo_base64 = Column(Text)
    default_observations = Column(Text, default='')
    product_mode = Column(String(20), default=ProductMode.SIMPLE.value)
    pdf_theme = Column(String(20), default=PDFTheme.SIMPLE.value)
    password_hash = Column(String(255))
    shipping_rate_per_km = Column(Float)
    origin_address = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint('id = 1', name='ck_company_settings_single_slot'),
    )

    def to_dict(self, include_sensitive=False):
        data = {
            'id': self.id,
            'company_name': self.company_name,
            'owner_name': self.owner_name,
            'phone': self.phone,
            'email': self.email,
            'logo_base64': self.logo_base64,
            'default_observations': self.default_observations or '',
            'product_mode': self.product_mode,
            'pdf_theme': self.pdf_theme,
            'has_password': bool(self.password_hash),
            'shipping_rate_per_km': self.shipping_rate_per_km,
            'origin_address': self.origin_address,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
        if include_sensitive:
            data['password_hash'] = self.password_hash
        return data


# =============================================================================
# CATALOG
# =============================================================================

class Category(Base):
    """Product categories. Deleting one leaves products pointing at it."""
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    __table_args__ = (
        Index('ix_categories_name', 'name'),
        {'sqlite_autoincrement': True},
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name
        }


class Product(Base):
    """Catalog products. category_id is a plain column, not a foreign key."""
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, default=0)
    cost_price = Column(Float)
    description = Column(Text)
    unit = Column(String(20), default='unid')
    photo_base64 = Column(Text)
    category_id = Column(Integer)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_products_name', 'name'),
        Index('ix_products_category_id', 'category_id'),
        Index('ix_products_active', 'active'),
        {'sqlite_autoincrement': True},
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'cost_price': self.cost_price,
            'description': self.description,
            'unit': self.unit,
            'photo_base64': self.photo_base64,
            'category_id': self.category_id,
            'active': bool(self.active),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }


# =============================================================================
# CUSTOMERS
# =============================================================================

class Customer(Base):
    """Customer records. address is stored as given, even when partial."""
    __tablename__ = 'customers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255))
    birthday = Column(String(10))
    anniversary_date = Column(String(10))
    observations = Column(Text)
    address = Column(JSON)  # street, number, neighborhood, city, state, zip_code
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_customers_name', 'name'),
        Index('ix_customers_birthday', 'birthday'),
        {'sqlite_autoincrement': True},
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'email': self.email,
            'birthday': self.birthday,
            'anniversary_date': self.anniversary_date,
            'observations': self.observations,
            'address': copy.deepcopy(self.address) if self.address else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }


# =============================================================================
# QUOTES
# =============================================================================

class Quote(Base):
    """
    Quotes/proposals. customer_name and the line items' name/unit_price are
    snapshots taken at save time; total is always derived from the items.
    """
    __tablename__ = 'quotes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, nullable=False)
    customer_name = Column(String(255), default='')
    date = Column(String(10), nullable=False)
    validity = Column(String(10), nullable=False)
    delivery_date = Column(String(10))
    items = Column(JSON, default=list)
    discount = Column(Float, default=0)
    shipping_fee = Column(Float, default=0)
    shipping_distance = Column(Float)
    total = Column(Float, default=0)
    observations = Column(Text, default='')
    status = Column(String(30), nullable=False, default=QuoteStatus.PENDING.value)
    attachments = Column(JSON, default=list)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_quotes_customer_id', 'customer_id'),
        Index('ix_quotes_date', 'date'),
        Index('ix_quotes_status', 'status'),
        Index('ix_quotes_delivery_date', 'delivery_date'),
        {'sqlite_autoincrement': True},
    )

    def to_dict(self):
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'customer_name': self.customer_name,
            'date': self.date,
            'validity': self.validity,
            'delivery_date': self.delivery_date,
            'items': copy.deepcopy(self.items or []),
            'discount': self.discount or 0,
            'shipping_fee': self.shipping_fee or 0,
            'shipping_distance': self.shipping_distance,
            'total': self.total or 0,
            'observations': self.observations or '',
            'status': self.status,
            'attachments': list(self.attachments or []),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }


# =============================================================================
# ORDERS
# =============================================================================

class Order(Base):
    """Orders, created from a quote with a frozen copy of its items and total."""
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_id = Column(Integer)
    customer_id = Column(Integer, nullable=False)
    customer_name = Column(String(255), default='')
    items = Column(JSON, default=list)
    total = Column(Float, default=0)
    delivery_date = Column(String(10), nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    observations = Column(Text)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_orders_customer_id', 'customer_id'),
        Index('ix_orders_delivery_date', 'delivery_date'),
        Index('ix_orders_status', 'status'),
        {'sqlite_autoincrement': True},
    )

    def to_dict(self):
        return {
            'id': self.id,
            'quote_id': self.quote_id,
            'customer_id': self.customer_id,
            'customer_name': self.customer_name,
            'items': copy.deepcopy(self.items or []),
            'total': self.total or 0,
            'delivery_date': self.delivery_date,
            'status': self.status,
            'observations': self.observations,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }


# =============================================================================
# CALENDAR
# =============================================================================

class CalendarNote(Base):
    """Free-text note attached to a calendar day. One per date."""
    __tablename__ = 'calendar_notes'

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(10), nullable=False)
    text = Column(Text, nullable=False)

    __table_args__ = (
        Index('ix_calendar_notes_date', 'date', unique=True),
        {'sqlite_autoincrement': True},
    )

    def to_dict(self):
        return {
            'id': self.id,
            'date': self.date,
            'text': self.text
        }
