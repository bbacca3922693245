"""
Financial Report Service - revenue, profit and trends from completed orders
"""

from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from flask import current_app

from retail_inventory.models import Order
from retail_inventory.repositories import OrderRepository
from retail_inventory.utils.money import to_decimal, quantize_cents

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


class FinancialReportService:
    """
    Read-only aggregation over completed orders.

    Product figures come from the order items' frozen snapshots, never from
    the live products table, so later price edits or archiving leave past
    reports unchanged.
    """

    def __init__(self, order_repo=None, top_products_limit: Optional[int] = None):
        self.order_repo = order_repo or OrderRepository()
        self._top_products_limit = top_products_limit

    @property
    def top_products_limit(self) -> int:
        if self._top_products_limit is not None:
            return self._top_products_limit
        return current_app.config.get('TOP_PRODUCTS_LIMIT', 10)

    def report(self, start: datetime, end: datetime) -> Dict[str, Any]:
        """Summary, top products and daily revenue for completed orders created in [start, end]"""
        orders = self.order_repo.list_completed_between(start, end)
        logger.debug(f"Building financial report over {len(orders)} completed order(s)")

        return {
            'summary': self._summary(orders, start, end),
            'top_products': self._top_products(orders),
            'revenue_by_day': self._revenue_by_day(orders),
        }

    @staticmethod
    def _summary(orders: List[Order], start: datetime, end: datetime) -> Dict[str, Any]:
        total_revenue = sum((to_decimal(o.total_amount) for o in orders), ZERO)
        total_profit = sum((to_decimal(o.profit) for o in orders), ZERO)
        total_orders = len(orders)

        avg_order_value = total_revenue / total_orders if total_orders else ZERO
        profit_margin = quantize_cents(total_profit / total_revenue * 100) if total_revenue else ZERO

        return {
            'total_revenue': total_revenue,
            'total_profit': total_profit,
            'total_cost': total_revenue - total_profit,
            'total_orders': total_orders,
            'avg_order_value': avg_order_value,
            'profit_margin': profit_margin,
            'period': {
                'start_date': start,
                'end_date': end,
            },
        }

    def _top_products(self, orders: List[Order]) -> List[Dict[str, Any]]:
        sales = OrderedDict()
        for order in orders:
            for item in order.items:
                entry = sales.get(item.product_id)
                if entry is None:
                    entry = sales[item.product_id] = {
                        'product_id': item.product_id,
                        'product_name': item.product_name,
                        'product_sku': item.product_sku,
                        'quantity_sold': 0,
                        'revenue': ZERO,
                        'profit': ZERO,
                    }
                subtotal = to_decimal(item.subtotal)
                entry['quantity_sold'] += item.quantity
                entry['revenue'] += subtotal
                entry['profit'] += subtotal - item.line_cost

        ranked = sorted(sales.values(), key=lambda e: e['revenue'], reverse=True)
        return ranked[:self.top_products_limit]

    @staticmethod
    def _revenue_by_day(orders: List[Order]) -> List[Dict[str, Any]]:
        days = {}
        for order in orders:
            # created_at is stored in server-local time
            key = order.created_at.date().isoformat()
            day = days.setdefault(key, {'date': key, 'revenue': ZERO, 'orders': 0})
            day['revenue'] += to_decimal(order.total_amount)
            day['orders'] += 1
        return [days[key] for key in sorted(days)]
