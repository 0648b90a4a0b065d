"""
Services package for the quoting/ordering data layer.
Contains repository classes, the quote lifecycle and the reports service.
"""

from services.calendar_repository import CalendarNotesRepository
from services.catalog_repository import CategoriesRepository, ProductsRepository
from services.customers_repository import CustomersRepository
from services.orders_repository import OrdersRepository
from services.quote_lifecycle import QuoteLifecycleService
from services.quotes_repository import QuotesRepository
from services.reports_service import ReportsService
from services.settings_repository import SettingsRepository

__all__ = [
    'CalendarNotesRepository',
    'CategoriesRepository',
    'ProductsRepository',
    'CustomersRepository',
    'OrdersRepository',
    'QuoteLifecycleService',
    'QuotesRepository',
    'ReportsService',
    'SettingsRepository'
]
