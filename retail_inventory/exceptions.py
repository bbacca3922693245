"""
Domain errors raised by the order and stock services.

Every error carries a machine-readable ``kind`` and the HTTP status the API
layer reports it with. Business-rule violations are client-correctable;
``TransactionConflict`` is the only retryable one.
"""


class InventoryError(Exception):
    """Base class for all domain errors"""
    kind = 'error'
    status_code = 500
    retryable = False

    def __init__(self, message=None):
        self.message = message or self.__class__.__doc__ or self.kind
        super().__init__(self.message)

    def details(self):
        return {}

    def to_dict(self):
        payload = {
            'error': self.__class__.__name__,
            'kind': self.kind,
            'message': self.message,
            'status_code': self.status_code,
        }
        payload.update(self.details())
        return payload


class NotFoundError(InventoryError):
    """Requested resource does not exist"""
    kind = 'not_found'
    status_code = 404


class ProductNotFound(NotFoundError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")

    def details(self):
        return {'product_id': self.product_id}


class OrderNotFound(NotFoundError):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order with ID {order_id} not found")

    def details(self):
        return {'order_id': self.order_id}


class InsufficientStock(InventoryError):
    kind = 'insufficient_stock'
    status_code = 422

    def __init__(self, product_id, product_name, available, requested):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, requested: {requested}"
        )

    def details(self):
        return {
            'product_id': self.product_id,
            'product_name': self.product_name,
            'available': self.available,
            'requested': self.requested,
        }


class InvalidTransition(InventoryError):
    kind = 'invalid_transition'
    status_code = 409

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from {current} to {target}")

    def details(self):
        return {'current_status': self.current, 'target_status': self.target}


class DuplicateSku(InventoryError):
    kind = 'duplicate_sku'
    status_code = 409

    def __init__(self, sku):
        self.sku = sku
        super().__init__(f"Product with SKU {sku} already exists")

    def details(self):
        return {'sku': self.sku}


class TransactionConflict(InventoryError):
    """The transaction could not be completed; retry the request"""
    kind = 'transaction_conflict'
    status_code = 503
    retryable = True

    def details(self):
        return {'retryable': True}
