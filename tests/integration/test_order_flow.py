"""
Integration test for the order flow through the HTTP API
Receives stock, sells, cancels, completes and reports with a real database
"""

from datetime import datetime

from retail_inventory.models import Product, StockMovement, StockMovementType


def test_stock_order_cancel_report_flow(client, db_session):
    # Intake: P with 10 units at cost 30000, selling at 50000
    product = client.post('/api/v1/products/', json={
        'name': 'Kaos Polos', 'sku': 'KP-001', 'category': 'Atasan',
        'hpp': 30000, 'selling_price': 50000, 'stock': 10
    }).get_json()
    product_id = product['id']

    # Sell 3: subtotal 150000, cost 90000, profit 60000
    first = client.post('/api/v1/orders/', json={
        'customer_name': 'Andi',
        'items': [{'product_id': product_id, 'quantity': 3, 'size': 'L'}]
    })
    assert first.status_code == 201
    first = first.get_json()
    assert first['order_number'] == f"ORD-{datetime.now():%Y%m%d}-0001"
    assert first['total_amount'] == 150000.0
    assert first['profit'] == 60000.0
    assert first['items'][0]['size'] == 'L'
    assert client.get(f'/api/v1/products/{product_id}').get_json()['stock'] == 7

    # 8 more than the 7 left
    rejected = client.post('/api/v1/orders/', json={
        'items': [{'product_id': product_id, 'quantity': 8}]
    })
    assert rejected.status_code == 422
    assert rejected.get_json()['available'] == 7
    assert rejected.get_json()['requested'] == 8

    # Cancel restores 10
    cancelled = client.put(f"/api/v1/orders/{first['id']}/status", json={'status': 'cancelled'})
    assert cancelled.status_code == 200
    assert cancelled.get_json()['status'] == 'cancelled'
    assert client.get(f'/api/v1/products/{product_id}').get_json()['stock'] == 10

    # Receive 5 at 40000: weighted cost 33333.33, stock 15
    received = client.post('/api/v1/stock/in', json={
        'product_id': product_id, 'quantity': 5, 'unit_cost': 40000
    })
    assert received.status_code == 201
    assert received.get_json()['product']['hpp'] == 33333.33
    assert received.get_json()['product']['stock'] == 15

    # Sell 2 at the new cost and complete it
    second = client.post('/api/v1/orders/', json={
        'items': [{'product_id': product_id, 'quantity': 2}]
    }).get_json()
    assert second['order_number'] == f"ORD-{datetime.now():%Y%m%d}-0002"
    assert second['total_hpp'] == 66666.66
    completed = client.put(f"/api/v1/orders/{second['id']}/status", json={'status': 'completed'})
    assert completed.status_code == 200

    # A later price change leaves the report alone
    client.put(f'/api/v1/products/{product_id}', json={'selling_price': 65000})

    today = datetime.now().strftime('%Y-%m-%d')
    report = client.get(f'/api/v1/reports/financial?start={today}&end={today}').get_json()
    assert report['summary']['total_orders'] == 1
    assert report['summary']['total_revenue'] == 100000.0
    assert report['summary']['total_profit'] == 33333.34
    assert report['summary']['total_cost'] == 66666.66
    assert report['summary']['profit_margin'] == 33.33
    assert report['top_products'][0]['product_sku'] == 'KP-001'
    assert report['top_products'][0]['quantity_sold'] == 2
    assert report['revenue_by_day'] == [{'date': today, 'revenue': 100000.0, 'orders': 1}]

    # Audit trail: opening stock, sale, restock, receipt, sale
    movements = client.get(f'/api/v1/stock/movements?product_id={product_id}').get_json()
    assert movements['total'] == 5
    assert [m['quantity'] for m in movements['movements']] == [-2, 5, 3, -3, 10]

    assert db_session.get(Product, product_id).stock == 13
    assert StockMovement.query.filter_by(movement_type=StockMovementType.OUT).count() == 2

    assert client.get('/api/v1/orders/').get_json()['total'] == 2
