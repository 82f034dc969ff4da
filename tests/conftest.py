import pytest
from datetime import date, timedelta
from decimal import Decimal

from retail_store import create_app
from retail_store.models import Cashier, Product, ProductCategory, ReceiptCounter
from retail_store.services.receipt_store import ReceiptStore
from retail_store.services.store_service import Store

# Fixed transaction date for unit tests
TODAY = date(2026, 3, 10)


@pytest.fixture(scope='function')
def receipt_store(tmp_path):
    """Receipt store writing into a temporary directory."""
    return ReceiptStore(str(tmp_path / 'receipts'))


@pytest.fixture(scope='function')
def counter():
    """Fresh receipt counter, so numbers start at 1 in each test."""
    return ReceiptCounter()


@pytest.fixture(scope='function')
def cashier():
    return Cashier(1, 'Mariya', Decimal('1000'))


@pytest.fixture(scope='function')
def waffle():
    """Food product two days from expiry (inside the 3-day window)."""
    return Product(100, 'Waffle', Decimal('1.00'), TODAY + timedelta(days=2), 10, ProductCategory.FOOD)


@pytest.fixture(scope='function')
def parfum():
    """Non-food product far from expiry."""
    return Product(200, 'Parfum', Decimal('5.00'), TODAY + timedelta(days=30), 5, ProductCategory.NON_FOOD)


@pytest.fixture(scope='function')
def store(receipt_store, counter, cashier, waffle, parfum):
    """Store with 15% markdown, 3-day window, one cashier and two products."""
    store = Store(Decimal('0.15'), 3, receipt_store=receipt_store, counter=counter, today=lambda: TODAY)
    store.register_cashier(cashier)
    store.stock_product(waffle)
    store.stock_product(parfum)
    return store


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create application instance for testing."""
    app = create_app('config.Config', {
        'TESTING': True,
        'RECEIPTS_DIR': str(tmp_path / 'app-receipts'),
        'SALE_DISCOUNT_RATE': Decimal('0.15'),
        'NEAR_EXPIRY_DAYS': 3,
        'ATOMIC_BASKETS': True,
        'LOW_STOCK_THRESHOLD': 5,
    })
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def runner(app):
    """Create CLI runner."""
    return app.test_cli_runner()


@pytest.fixture(scope='function')
def stocked_client(client):
    """Client for an app with one cashier and two products stocked through the API."""
    today = date.today()
    client.post('/staff/', json={'id': 1, 'name': 'Mariya', 'salary': '1000'})
    client.post('/catalog/', json={
        'id': 100, 'name': 'Waffle', 'delivery_price': '1.00',
        'expiry_date': (today + timedelta(days=2)).isoformat(),
        'quantity': 10, 'category': 'food',
    })
    client.post('/catalog/', json={
        'id': 200, 'name': 'Parfum', 'delivery_price': '5.00',
        'expiry_date': (today + timedelta(days=30)).isoformat(),
        'quantity': 5, 'category': 'non_food',
    })
    return client
