"""
Order Sequence Generator - daily order numbers like ORD-20250115-0001
"""

from datetime import date, datetime, time
from typing import Optional, Union

from flask import current_app

from retail_inventory.repositories import OrderRepository


class OrderSequenceGenerator:
    """
    Produces date-scoped, zero-padded order numbers.

    Must be called inside the transaction that inserts the order. The
    unique constraint on orders.order_number turns a concurrent collision
    into a retryable conflict.
    """

    def __init__(self, order_repo=None, prefix: Optional[str] = None):
        self.order_repo = order_repo or OrderRepository()
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix or current_app.config.get('ORDER_NUMBER_PREFIX', 'ORD')

    def day_prefix(self, day: date) -> str:
        return f"{self.prefix}-{day:%Y%m%d}-"

    def next(self, on: Union[date, datetime, None] = None) -> str:
        """Next order number for the given server-local day (default: today)"""
        if on is None:
            on = datetime.now()
        day = on.date() if isinstance(on, datetime) else on

        day_prefix = self.day_prefix(day)
        count = self.order_repo.count_created_between(
            datetime.combine(day, time.min),
            datetime.combine(day, time.max)
        )

        last_sequence = 0
        last_number = self.order_repo.last_order_number(day_prefix)
        if last_number:
            suffix = last_number[len(day_prefix):]
            if suffix.isdigit():
                last_sequence = int(suffix)

        # count + 1, unless deletions left a higher number already in use
        sequence = max(count, last_sequence) + 1
        return f"{day_prefix}{sequence:04d}"
