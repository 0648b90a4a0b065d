"""
Tests for the entity repositories
"""
import pytest

from errors import ConflictError, NotFoundError, ValidationError
from services.calendar_repository import CalendarNotesRepository
from services.catalog_repository import CategoriesRepository, ProductsRepository
from services.customers_repository import CustomersRepository
from services.orders_repository import OrdersRepository
from services.quotes_repository import QuotesRepository
from conftest import item


@pytest.mark.integration
class TestCrudContract:
    """Tests for the shared add/update/delete/get contract"""

    def test_add_assigns_increasing_ids(self, session):
        """Test that ids are assigned by the store and increase"""
        repo = CustomersRepository(session)
        first = repo.add({'name': 'Ana', 'phone': '11999990000'})
        second = repo.add({'name': 'Bia', 'phone': '11988880000'})
        assert second > first

    def test_caller_supplied_id_is_ignored(self, session):
        """Test that add never trusts an id in the input"""
        repo = CustomersRepository(session)
        new_id = repo.add({'id': 999, 'name': 'Ana', 'phone': '11999990000'})
        assert new_id != 999
        assert repo.get(999) is None

    def test_ids_are_not_reused_after_delete(self, session):
        """Test that a deleted id is never handed out again"""
        repo = CustomersRepository(session)
        first = repo.add({'name': 'Ana', 'phone': '11999990000'})
        repo.delete(first)
        second = repo.add({'name': 'Bia', 'phone': '11988880000'})
        assert second > first

    def test_get_missing_returns_none(self, session):
        """Test that get of an unknown id is None, not an error"""
        assert CustomersRepository(session).get(42) is None

    def test_update_merges_fields(self, session, make_customer):
        """Test that update only touches the given fields"""
        customer = make_customer(email='ana@example.com')
        updated = CustomersRepository(session).update(customer['id'], {'phone': '11911112222'})
        assert updated['phone'] == '11911112222'
        assert updated['email'] == 'ana@example.com'
        assert updated['name'] == 'Ana'

    def test_update_missing_raises_not_found(self, session):
        """Test that updating an unknown id raises NotFoundError"""
        with pytest.raises(NotFoundError) as exc_info:
            CustomersRepository(session).update(42, {'name': 'Ana'})
        assert exc_info.value.entity_id == 42

    def test_update_without_id_raises_validation_error(self, session):
        """Test that update requires an id"""
        with pytest.raises(ValidationError):
            CustomersRepository(session).update(None, {'name': 'Ana'})

    def test_delete_is_idempotent(self, session, make_customer):
        """Test that deleting twice, or deleting a missing id, succeeds"""
        repo = CustomersRepository(session)
        customer = make_customer()
        repo.delete(customer['id'])
        repo.delete(customer['id'])
        repo.delete(12345)
        assert repo.get(customer['id']) is None
        assert repo.count() == 0

    def test_returned_records_are_detached_copies(self, session, make_customer):
        """Test that mutating a returned dict does not change the store"""
        repo = CustomersRepository(session)
        customer = make_customer(address={'city': 'Recife'})
        customer['address']['city'] = 'Olinda'
        assert repo.get(customer['id'])['address']['city'] == 'Recife'


@pytest.mark.integration
class TestIndexedQueries:
    """Tests for list_where and count_where"""

    def test_equals(self, session, make_quote):
        """Test equality lookup on an indexed field"""
        make_quote(status='Pendente')
        make_quote(status='Aprovado')
        make_quote(status='Aprovado')
        repo = QuotesRepository(session)
        assert len(repo.list_where('status', equals='Aprovado')) == 2
        assert repo.count_where('status', equals='Pendente') == 1

    def test_between_is_inclusive(self, session, make_quote, today):
        """Test that both range ends are included"""
        from datetime import date
        for day in (9, 10, 15, 20, 21):
            make_quote(quote_date=date(2025, 1, day))
        repo = QuotesRepository(session)
        found = repo.list_where('date', between=('2025-01-10', '2025-01-20'))
        assert sorted(q['date'] for q in found) == ['2025-01-10', '2025-01-15', '2025-01-20']
        assert repo.count_where('date', between=(date(2025, 1, 10), date(2025, 1, 20))) == 3

    def test_any_of(self, session, make_quote):
        """Test membership lookup"""
        make_quote(status='Pendente')
        make_quote(status='Entregue')
        make_quote(status='Cancelado')
        repo = QuotesRepository(session)
        assert repo.count_where('status', any_of=['Entregue', 'Cancelado']) == 2

    def test_non_indexed_field_is_rejected(self, session):
        """Test that querying a field without an index is a ValidationError"""
        with pytest.raises(ValidationError) as exc_info:
            CustomersRepository(session).list_where('email', equals='ana@example.com')
        assert exc_info.value.field == 'email'

    def test_exactly_one_predicate_required(self, session):
        """Test that zero or several predicates are rejected"""
        repo = QuotesRepository(session)
        with pytest.raises(ValidationError):
            repo.list_where('status')
        with pytest.raises(ValidationError):
            repo.list_where('status', equals='Pendente', any_of=['Pendente'])

    def test_quotes_list_newest_first(self, session, make_quote):
        """Test that quotes are listed newest first"""
        first = make_quote()
        second = make_quote()
        ids = [q['id'] for q in QuotesRepository(session).list_all()]
        assert ids == [second['id'], first['id']]


@pytest.mark.integration
class TestCustomersRepository:
    """Tests for customer records"""

    def test_name_and_phone_required(self, session):
        """Test that name and phone are required"""
        repo = CustomersRepository(session)
        with pytest.raises(ValidationError) as exc_info:
            repo.add({'name': 'Ana'})
        assert exc_info.value.field == 'phone'
        with pytest.raises(ValidationError):
            repo.add({'name': '  ', 'phone': '11999990000'})

    def test_invalid_email_rejected(self, session):
        """Test that a malformed email is rejected"""
        with pytest.raises(ValidationError):
            CustomersRepository(session).add({'name': 'Ana', 'phone': '1', 'email': 'nope'})

    def test_partial_address_is_kept(self, make_customer):
        """Test that an address with only some fields is stored as given"""
        customer = make_customer(address={'city': 'Recife', 'unknown': 'x'})
        assert customer['address'] == {'city': 'Recife'}

    def test_birthday_lookup(self, session, make_customer):
        """Test lookup by birthday"""
        make_customer(name='Ana', birthday='1990-01-15')
        make_customer(name='Bia', birthday='1991-03-02')
        found = CustomersRepository(session).list_where('birthday', equals='1990-01-15')
        assert [c['name'] for c in found] == ['Ana']

    def test_search_by_name_or_phone(self, session, make_customer):
        """Test case-insensitive name search and phone search"""
        make_customer(name='Ana Souza', phone='11999990000')
        make_customer(name='Bia Lima', phone='21988887777')
        repo = CustomersRepository(session)
        assert [c['name'] for c in repo.search('souza')] == ['Ana Souza']
        assert [c['name'] for c in repo.search('8888')] == ['Bia Lima']
        assert len(repo.search('')) == 2


@pytest.mark.integration
class TestCatalogRepositories:
    """Tests for products and categories"""

    def test_product_defaults(self, session):
        """Test that new products are active with a default unit"""
        repo = ProductsRepository(session)
        product = repo.get(repo.add({'name': 'Bolo', 'price': 50}))
        assert product['active'] is True
        assert product['unit'] == 'unid'

    def test_negative_price_rejected(self, session):
        """Test that prices cannot be negative"""
        with pytest.raises(ValidationError):
            ProductsRepository(session).add({'name': 'Bolo', 'price': -1})

    def test_toggle_and_list_active(self, session, make_product):
        """Test that inactive products drop out of the active list"""
        cake = make_product(name='Bolo')
        make_product(name='Torta')
        repo = ProductsRepository(session)
        assert repo.toggle_active(cake['id'])['active'] is False
        assert [p['name'] for p in repo.list_active()] == ['Torta']

    def test_search_active_only(self, session, make_product):
        """Test product search restricted to active products"""
        make_product(name='Bolo de cenoura')
        make_product(name='Bolo de fubá', active=False)
        repo = ProductsRepository(session)
        assert len(repo.search('bolo')) == 2
        assert [p['name'] for p in repo.search('bolo', active_only=True)] == ['Bolo de cenoura']

    def test_deleting_category_leaves_products_uncategorized(self, session, make_product):
        """Test that a dangling category id resolves to no category"""
        categories = CategoriesRepository(session)
        category_id = categories.add({'name': 'Bolos'})
        product = make_product(category_id=category_id, cost_price=20)
        products = ProductsRepository(session)
        assert products.category_name(product) == 'Bolos'

        categories.delete(category_id)

        listed = products.list_with_categories()[0]
        assert listed['category_id'] == category_id
        assert listed['category_name'] is None
        assert listed['margin'] == pytest.approx(0.6)
        assert products.category_name(product) is None

    def test_list_by_category(self, session, make_product):
        """Test indexed lookup by category"""
        make_product(name='Bolo', category_id=1)
        make_product(name='Pão', category_id=2)
        assert ProductsRepository(session).count_where('category_id', equals=1) == 1


@pytest.mark.integration
class TestCalendarNotesRepository:
    """Tests for calendar notes"""

    def test_upsert_creates_then_updates(self, session):
        """Test that a second write to a date replaces the note"""
        repo = CalendarNotesRepository(session)
        created = repo.upsert_for_date('2025-01-20', 'Encomenda grande')
        updated = repo.upsert_for_date('2025-01-20', 'Encomenda cancelada')
        assert updated['id'] == created['id']
        assert repo.get_for_date('2025-01-20')['text'] == 'Encomenda cancelada'
        assert repo.count() == 1

    def test_blank_text_removes_note(self, session):
        """Test that blank text deletes the note for that date"""
        repo = CalendarNotesRepository(session)
        repo.upsert_for_date('2025-01-20', 'Feriado')
        assert repo.upsert_for_date('2025-01-20', '   ') is None
        assert repo.get_for_date('2025-01-20') is None
        assert repo.upsert_for_date('2025-01-21', '') is None

    def test_add_refuses_second_note_for_date(self, session):
        """Test that add enforces one note per date"""
        repo = CalendarNotesRepository(session)
        repo.add({'date': '2025-01-20', 'text': 'Feriado'})
        with pytest.raises(ConflictError):
            repo.add({'date': '2025-01-20', 'text': 'Outra'})

    def test_moving_note_onto_taken_date_conflicts(self, session):
        """Test that update refuses to put two notes on one date"""
        repo = CalendarNotesRepository(session)
        repo.upsert_for_date('2025-01-20', 'Feriado')
        other = repo.upsert_for_date('2025-01-21', 'Entrega grande')
        with pytest.raises(ConflictError):
            repo.update(other['id'], {'date': '2025-01-20'})
        assert repo.get(other['id'])['date'] == '2025-01-21'
        assert repo.get_for_date('2025-01-20')['text'] == 'Feriado'

    def test_update_keeping_own_date(self, session):
        """Test that a note can be rewritten or moved to a free date"""
        repo = CalendarNotesRepository(session)
        note = repo.upsert_for_date('2025-01-20', 'Feriado')
        assert repo.update(note['id'], {'date': '2025-01-20', 'text': 'Ponto facultativo'})['text'] == 'Ponto facultativo'
        assert repo.update(note['id'], {'date': '2025-01-22'})['date'] == '2025-01-22'
        assert repo.get_for_date('2025-01-20') is None

    def test_invalid_date_rejected(self, session):
        """Test that notes need a real calendar date"""
        with pytest.raises(ValidationError):
            CalendarNotesRepository(session).upsert_for_date('20/01/2025', 'Feriado')

    def test_list_between(self, session):
        """Test range lookup of notes"""
        repo = CalendarNotesRepository(session)
        for day in ('2025-01-01', '2025-01-31', '2025-02-01'):
            repo.upsert_for_date(day, 'nota')
        assert len(repo.list_between('2025-01-01', '2025-01-31')) == 2


@pytest.mark.integration
class TestOrdersRepository:
    """Tests for orders"""

    def test_new_order_defaults_to_pending(self, session, make_customer):
        """Test order defaults and item normalization"""
        customer = make_customer()
        repo = OrdersRepository(session)
        order = repo.get(repo.add({
            'customer_id': customer['id'],
            'delivery_date': '2025-01-20',
            'items': [{'name': 'Bolo', 'quantity': 2, 'unit_price': 50, 'subtotal': 1}],
            'total': 100
        }))
        assert order['status'] == 'Pendente'
        assert order['items'][0]['subtotal'] == 100

    def test_customer_required(self, session):
        """Test that an order needs a customer"""
        with pytest.raises(ValidationError):
            OrdersRepository(session).add({'customer_id': 0, 'delivery_date': '2025-01-20'})

    def test_update_status(self, session, make_customer):
        """Test moving an order through production"""
        customer = make_customer()
        repo = OrdersRepository(session)
        order_id = repo.add({'customer_id': customer['id'], 'delivery_date': '2025-01-20'})
        assert repo.update_status(order_id, 'Produzindo')['status'] == 'Produzindo'
        with pytest.raises(ValidationError):
            repo.update_status(order_id, 'Aprovado')

    def test_list_for_period(self, session, make_customer):
        """Test listing orders by delivery window"""
        customer = make_customer()
        repo = OrdersRepository(session)
        for day in ('2025-01-10', '2025-01-20', '2025-02-01'):
            repo.add({'customer_id': customer['id'], 'delivery_date': day,
                      'items': [item('Bolo', 1, 50)]})
        found = repo.list_for_period('2025-01-01', '2025-01-31')
        assert sorted(o['delivery_date'] for o in found) == ['2025-01-10', '2025-01-20']
