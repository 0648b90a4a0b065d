"""
Pytest configuration and shared fixtures
"""
import os
import sys
import pytest
from datetime import date
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def app_config():
    """Fixture providing test configuration"""
    from config import TestingConfig
    return TestingConfig


@pytest.fixture
def test_env_vars():
    """Fixture restoring environment variables after the test"""
    original_env = os.environ.copy()

    os.environ['APP_ENV'] = 'testing'

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def store():
    """Fixture providing an in-memory store migrated to the latest revision"""
    from database.connection import open_store
    opened = open_store('sqlite://')
    yield opened
    opened.close()


@pytest.fixture
def session(store):
    """Fixture providing a session committed at the end of the test"""
    with store.session_scope() as db:
        yield db


@pytest.fixture
def today():
    """Fixed reference day for date-window calculations"""
    return date(2025, 1, 15)


@pytest.fixture
def make_customer(session):
    """Factory creating customers and returning their dicts"""
    from services.customers_repository import CustomersRepository

    repo = CustomersRepository(session)

    def _make(name='Ana', phone='11999990000', **extra):
        return repo.get(repo.add({'name': name, 'phone': phone, **extra}))

    return _make


@pytest.fixture
def make_product(session):
    """Factory creating products and returning their dicts"""
    from services.catalog_repository import ProductsRepository

    repo = ProductsRepository(session)

    def _make(name='Bolo', price=50, **extra):
        return repo.get(repo.add({'name': name, 'price': price, 'active': True, **extra}))

    return _make


@pytest.fixture
def make_quote(session, make_customer, today):
    """Factory persisting quotes directly through the repository"""
    from services.quotes_repository import QuotesRepository

    repo = QuotesRepository(session)
    customer_cache = {}

    def _make(total_items=None, status='Pendente', quote_date=None, validity=None,
              customer_name='Ana', **extra):
        if customer_name not in customer_cache:
            customer_cache[customer_name] = make_customer(name=customer_name)
        customer = customer_cache[customer_name]
        data = {
            'customer_id': customer['id'],
            'customer_name': customer['name'],
            'date': (quote_date or today).isoformat(),
            'validity': (validity or today).isoformat(),
            'items': total_items if total_items is not None else [],
            'status': status,
            **extra
        }
        return repo.get(repo.add(data))

    return _make


def item(name, quantity, unit_price):
    """Line item literal used by the tests"""
    return {'name': name, 'quantity': quantity, 'unit_price': unit_price,
            'subtotal': quantity * unit_price, 'unit': 'unid'}
