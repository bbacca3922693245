import pytest
from marshmallow import ValidationError

from retail_inventory.exceptions import InvalidTransition, OrderNotFound
from retail_inventory.models import Product, OrderStatus, StockMovementType, ReferenceType
from retail_inventory.repositories import StockRepository
from retail_inventory.services import OrderService, OrderLifecycleManager, can_transition


@pytest.fixture
def pending_order(db_session, sample_product):
    return OrderService().create_order(items=[{'product_id': sample_product.id, 'quantity': 3}])


class TestTransitionTable:
    """Test the order state machine."""

    @pytest.mark.parametrize('current,target,allowed', [
        (OrderStatus.PENDING, OrderStatus.COMPLETED, True),
        (OrderStatus.PENDING, OrderStatus.CANCELLED, True),
        (OrderStatus.PENDING, OrderStatus.PENDING, False),
        (OrderStatus.COMPLETED, OrderStatus.CANCELLED, False),
        (OrderStatus.COMPLETED, OrderStatus.PENDING, False),
        (OrderStatus.CANCELLED, OrderStatus.COMPLETED, False),
        (OrderStatus.CANCELLED, OrderStatus.PENDING, False),
    ])
    def test_can_transition(self, current, target, allowed):
        assert can_transition(current, target) is allowed


class TestOrderLifecycleManager:
    """Test status changes and their stock effects."""

    def test_complete_does_not_touch_stock(self, db_session, sample_product, pending_order):
        order = OrderLifecycleManager().transition(pending_order.id, 'completed')

        assert order.status == OrderStatus.COMPLETED
        assert db_session.get(Product, sample_product.id).stock == 7
        movements = StockRepository().movements_for_reference(ReferenceType.ORDER, order.id)
        assert len(movements) == 1

    def test_cancel_restores_stock(self, db_session, sample_product, pending_order):
        """Cancelling the 3 x P order puts P back at 10."""
        order = OrderLifecycleManager().transition(pending_order.id, OrderStatus.CANCELLED)

        assert order.status == OrderStatus.CANCELLED
        assert db_session.get(Product, sample_product.id).stock == 10

        movements = StockRepository().movements_for_reference(ReferenceType.ORDER, order.id)
        assert [(m.movement_type, m.quantity) for m in movements] == [
            (StockMovementType.OUT, -3),
            (StockMovementType.IN, 3),
        ]

    def test_cancel_restores_every_item(self, db_session, make_product):
        a = make_product(stock=5)
        b = make_product(stock=8)
        order = OrderService().create_order(items=[
            {'product_id': a.id, 'quantity': 5},
            {'product_id': b.id, 'quantity': 1},
        ])

        OrderLifecycleManager().transition(order.id, 'cancelled')

        assert db_session.get(Product, a.id).stock == 5
        assert db_session.get(Product, b.id).stock == 8

    def test_cancel_restocks_archived_product(self, db_session, sample_product, pending_order):
        product = db_session.get(Product, sample_product.id)
        product.archive()
        db_session.commit()

        OrderLifecycleManager().transition(pending_order.id, 'cancelled')

        assert db_session.get(Product, sample_product.id).stock == 10

    @pytest.mark.parametrize('first,second', [
        ('completed', 'cancelled'),
        ('cancelled', 'completed'),
        ('cancelled', 'cancelled'),
        ('completed', 'completed'),
    ])
    def test_terminal_states_reject_transitions(self, db_session, sample_product, pending_order,
                                                first, second):
        manager = OrderLifecycleManager()
        manager.transition(pending_order.id, first)
        stock_after_first = db_session.get(Product, sample_product.id).stock

        with pytest.raises(InvalidTransition) as exc_info:
            manager.transition(pending_order.id, second)

        assert exc_info.value.current == first
        assert exc_info.value.target == second
        assert exc_info.value.status_code == 409
        assert db_session.get(Product, sample_product.id).stock == stock_after_first

    def test_double_cancel_restores_once(self, db_session, sample_product, pending_order):
        manager = OrderLifecycleManager()
        manager.transition(pending_order.id, 'cancelled')

        with pytest.raises(InvalidTransition):
            manager.transition(pending_order.id, 'cancelled')

        assert db_session.get(Product, sample_product.id).stock == 10

    def test_unknown_status(self, db_session, pending_order):
        with pytest.raises(ValidationError):
            OrderLifecycleManager().transition(pending_order.id, 'shipped')

    def test_missing_order(self, db_session):
        with pytest.raises(OrderNotFound):
            OrderLifecycleManager().transition(999999, 'completed')
