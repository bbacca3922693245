import logging
import pytest
from decimal import Decimal
from unittest.mock import patch

from retail_inventory.api.middlewares.correlation_id import CorrelationIdFilter, correlation_id_context
from retail_inventory.exceptions import TransactionConflict
from retail_inventory.models import Product


class TestOrderController:
    """Test /api/v1/orders endpoints."""

    def test_create_order(self, client, sample_product):
        response = client.post('/api/v1/orders/', json={
            'customer_name': 'Siti',
            'items': [{'product_id': sample_product.id, 'quantity': 3}]
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['total_amount'] == 150000.0
        assert data['total_hpp'] == 90000.0
        assert data['profit'] == 60000.0
        assert data['status'] == 'pending'
        assert data['payment_status'] == 'unpaid'
        assert data['items'][0]['subtotal'] == 150000.0

    def test_create_order_validation_error(self, client, db_session):
        response = client.post('/api/v1/orders/', json={'items': []})

        assert response.status_code == 400
        data = response.get_json()
        assert data['kind'] == 'validation_error'
        assert 'items' in data['details']

    def test_create_order_invalid_quantity(self, client, sample_product):
        response = client.post('/api/v1/orders/', json={
            'items': [{'product_id': sample_product.id, 'quantity': 0}]
        })

        assert response.status_code == 400

    def test_create_order_insufficient_stock(self, client, sample_product):
        response = client.post('/api/v1/orders/', json={
            'items': [{'product_id': sample_product.id, 'quantity': 11}]
        })

        assert response.status_code == 422
        data = response.get_json()
        assert data['kind'] == 'insufficient_stock'
        assert data['available'] == 10
        assert data['requested'] == 11
        assert data['product_name'] == 'Kaos Polos'

    def test_create_order_unknown_product(self, client, db_session):
        response = client.post('/api/v1/orders/', json={
            'items': [{'product_id': 424242, 'quantity': 1}]
        })

        assert response.status_code == 404
        assert response.get_json()['kind'] == 'not_found'

    def test_create_order_conflict(self, client, sample_product):
        with patch('retail_inventory.services.order_service.OrderService.create_order',
                   side_effect=TransactionConflict()):
            response = client.post('/api/v1/orders/', json={
                'items': [{'product_id': sample_product.id, 'quantity': 1}]
            })

        assert response.status_code == 503
        data = response.get_json()
        assert data['kind'] == 'transaction_conflict'
        assert data['retryable'] is True

    def test_get_order_not_found(self, client, db_session):
        response = client.get('/api/v1/orders/999999')

        assert response.status_code == 404
        assert response.get_json()['order_id'] == 999999

    def test_list_orders_bad_date(self, client, db_session):
        response = client.get('/api/v1/orders/?start=yesterday')

        assert response.status_code == 400
        assert 'start' in response.get_json()['details']

    def test_update_status_invalid_value(self, client, sample_product):
        created = client.post('/api/v1/orders/', json={
            'items': [{'product_id': sample_product.id, 'quantity': 1}]
        }).get_json()

        response = client.put(f"/api/v1/orders/{created['id']}/status", json={'status': 'shipped'})

        assert response.status_code == 400

    def test_update_status_from_terminal(self, client, sample_product):
        created = client.post('/api/v1/orders/', json={
            'items': [{'product_id': sample_product.id, 'quantity': 1}]
        }).get_json()
        client.put(f"/api/v1/orders/{created['id']}/status", json={'status': 'completed'})

        response = client.put(f"/api/v1/orders/{created['id']}/status", json={'status': 'cancelled'})

        assert response.status_code == 409
        data = response.get_json()
        assert data['kind'] == 'invalid_transition'
        assert data['current_status'] == 'completed'
        assert data['target_status'] == 'cancelled'

    def test_delete_order(self, client, db_session, sample_product):
        created = client.post('/api/v1/orders/', json={
            'items': [{'product_id': sample_product.id, 'quantity': 2}]
        }).get_json()

        response = client.delete(f"/api/v1/orders/{created['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/v1/orders/{created['id']}").status_code == 404
        assert db_session.get(Product, sample_product.id).stock == 10


class TestStockController:
    """Test /api/v1/stock endpoints."""

    def test_stock_in(self, client, make_product):
        product = make_product(stock=10, hpp=Decimal('30000'))

        response = client.post('/api/v1/stock/in', json={
            'product_id': product.id,
            'quantity': 5,
            'unit_cost': 40000,
            'supplier': 'Grosir Tanah Abang'
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['stock_in']['quantity'] == 5
        assert data['product']['stock'] == 15
        assert data['product']['hpp'] == 33333.33

    def test_stock_in_validation(self, client, db_session):
        response = client.post('/api/v1/stock/in', json={'product_id': 1, 'quantity': 0})

        assert response.status_code == 400
        details = response.get_json()['details']
        assert 'quantity' in details
        assert 'unit_cost' in details

    def test_stock_in_unknown_product(self, client, db_session):
        response = client.post('/api/v1/stock/in', json={
            'product_id': 424242, 'quantity': 1, 'unit_cost': 1000
        })

        assert response.status_code == 404

    def test_movements_filtered_by_product(self, client, make_product):
        a = make_product(stock=10)
        b = make_product(stock=10)
        client.post('/api/v1/stock/in', json={'product_id': a.id, 'quantity': 1, 'unit_cost': 100})
        client.post('/api/v1/stock/in', json={'product_id': b.id, 'quantity': 2, 'unit_cost': 100})

        response = client.get(f'/api/v1/stock/movements?product_id={a.id}')

        assert response.status_code == 200
        data = response.get_json()
        assert data['total'] == 1
        assert data['movements'][0]['product_id'] == a.id
        assert data['movements'][0]['reference_type'] == 'stock_in'


class TestReportController:
    """Test /api/v1/reports endpoints."""

    def test_requires_dates(self, client, db_session):
        response = client.get('/api/v1/reports/financial')

        assert response.status_code == 400
        details = response.get_json()['details']
        assert 'start' in details
        assert 'end' in details

    def test_rejects_reversed_range(self, client, db_session):
        response = client.get('/api/v1/reports/financial?start=2025-02-01&end=2025-01-01')

        assert response.status_code == 400

    def test_empty_report(self, client, db_session):
        response = client.get('/api/v1/reports/financial?start=2025-01-01&end=2025-01-31')

        assert response.status_code == 200
        data = response.get_json()
        assert data['summary']['total_revenue'] == 0
        assert data['summary']['profit_margin'] == 0
        assert data['summary']['period']['start_date'].startswith('2025-01-01T00:00:00')
        assert data['summary']['period']['end_date'].startswith('2025-01-31T23:59:59')
        assert data['top_products'] == []
        assert data['revenue_by_day'] == []


class TestProductController:
    """Test /api/v1/products endpoints."""

    def test_create_and_get(self, client, db_session):
        response = client.post('/api/v1/products/', json={
            'name': 'Blus Batik', 'sku': 'BB-01', 'selling_price': 120000, 'hpp': 70000, 'stock': 6
        })

        assert response.status_code == 201
        created = response.get_json()
        assert created['stock'] == 6

        fetched = client.get(f"/api/v1/products/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.get_json()['sku'] == 'BB-01'

    def test_duplicate_sku(self, client, make_product):
        make_product(sku='BB-02')

        response = client.post('/api/v1/products/', json={
            'name': 'Copy', 'sku': 'BB-02', 'selling_price': 1
        })

        assert response.status_code == 409
        assert response.get_json()['kind'] == 'duplicate_sku'

    def test_update_prices(self, client, make_product):
        product = make_product(stock=3)

        response = client.put(f'/api/v1/products/{product.id}', json={'selling_price': 19000})

        assert response.status_code == 200
        data = response.get_json()
        assert data['selling_price'] == 19000.0
        assert data['stock'] == 3

    def test_update_rejects_stock_field(self, client, make_product):
        product = make_product(stock=3)

        response = client.put(f'/api/v1/products/{product.id}', json={'stock': 50})

        assert response.status_code == 400

    def test_low_stock(self, client, make_product):
        low = make_product(stock=1, min_stock=5)
        make_product(stock=8, min_stock=5)

        response = client.get('/api/v1/products/low-stock')

        assert response.status_code == 200
        data = response.get_json()
        assert data['total'] == 1
        assert data['products'][0]['id'] == low.id
        assert data['products'][0]['is_low_stock'] is True

    def test_archive(self, client, make_product):
        product = make_product()

        response = client.delete(f'/api/v1/products/{product.id}')

        assert response.status_code == 200
        assert response.get_json()['status'] == 'archived'
        assert client.get(f'/api/v1/products/{product.id}').status_code == 404


class TestHealth:
    """Test the health endpoint."""

    def test_health(self, client, db_session):
        response = client.get('/health')

        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'healthy'
        assert data['checks']['database']['status'] == 'healthy'

    def test_correlation_id_echoed(self, client, db_session):
        response = client.get('/health', headers={'X-Correlation-ID': 'abc-123'})

        assert response.headers['X-Correlation-ID'] == 'abc-123'

    def test_log_records_carry_correlation_id(self):
        record = logging.LogRecord('test', logging.INFO, __file__, 1, 'message', None, None)
        formatter = logging.Formatter('%(levelname)s [%(correlation_id)s]: %(message)s')

        token = correlation_id_context.set('abc-123')
        try:
            assert CorrelationIdFilter().filter(record)
        finally:
            correlation_id_context.reset(token)

        assert formatter.format(record) == 'INFO [abc-123]: message'
