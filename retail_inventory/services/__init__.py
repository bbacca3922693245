"""
Services package - Business logic for the retail inventory service
"""

from .transaction import transactional
from .inventory_ledger import InventoryLedger, weighted_average_cost
from .order_sequence import OrderSequenceGenerator
from .order_lifecycle import OrderLifecycleManager, ALLOWED_TRANSITIONS, can_transition
from .order_service import OrderService
from .financial_report import FinancialReportService
from .product_service import ProductService

__all__ = [
    'transactional',
    'InventoryLedger',
    'weighted_average_cost',
    'OrderSequenceGenerator',
    'OrderLifecycleManager',
    'ALLOWED_TRANSITIONS',
    'can_transition',
    'OrderService',
    'FinancialReportService',
    'ProductService'
]
