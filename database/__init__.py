"""
Database package for the quoting/ordering data layer.
Provides SQLAlchemy models, store opening/migration, and session handling.
"""

from database.connection import (
    Base,
    Store,
    open_store,
    init_db,
    get_db_session,
    check_db_connection
)

from database.models import (
    ProductMode,
    PDFTheme,
    QuoteStatus,
    OrderStatus,
    REALIZED_STATUSES,
    CompanySettings,
    Category,
    Product,
    Customer,
    Quote,
    Order,
    CalendarNote
)

__all__ = [
    # Connection
    'Base',
    'Store',
    'open_store',
    'init_db',
    'get_db_session',
    'check_db_connection',
    # Enums
    'ProductMode',
    'PDFTheme',
    'QuoteStatus',
    'OrderStatus',
    'REALIZED_STATUSES',
    # Models
    'CompanySettings',
    'Category',
    'Product',
    'Customer',
    'Quote',
    'Order',
    'CalendarNote'
]
