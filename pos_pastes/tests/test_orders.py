import threading
from datetime import date

import pytest

from pos_pastes.errors import (
    EmptyOrder,
    InvalidAdvance,
    InvalidLineItem,
    InvalidOrderTransition,
    InvalidPaymentMethod,
    OrderNotFound,
    PersistenceFailure,
)
from pos_pastes.models import OrderStatus, OrderType, PaymentMethod
from pos_pastes.services import OrderNumberSequence, can_transition


COMBO = [{'id': 'pm-x', 'name': 'Combo', 'price': 69.0, 'quantity': 1}]
PEDIDO_GRANDE = [{'id': 'ps-001', 'name': 'Minero Tradicional', 'price': 24.0, 'quantity': 20}]


def test_instant_order_freezes_breakdown(container, employee):
    order = container.order_service.create_instant_order(
        COMBO, {'name': 'Ana'}, 'cash', employee
    )
    assert order.id
    assert order.type == OrderType.INSTANT
    assert order.status == OrderStatus.PENDING
    assert (order.subtotal, order.tax, order.total) == (59.48, 9.52, 69.0)
    assert order.advance == 0.0
    assert order.pending_amount == 69.0
    assert order.employee_id == 'emp-001'
    assert order.branch_id == 'suc-001'

    stored = container.order_service.get_order(order.id)
    assert stored.order_number == order.order_number
    assert stored.total == 69.0


def test_customer_defaults(container, employee):
    order = container.order_service.create_instant_order(COMBO, None, 'card', employee)
    assert order.customer.name == 'Cliente'
    assert order.customer.phone == ''
    assert order.customer.address == ''

    order = container.order_service.create_instant_order(
        COMBO, {'name': '   '}, 'card', employee
    )
    assert order.customer.name == 'Cliente'


def test_pre_order_with_advance(container, employee):
    order = container.order_service.create_pre_order(
        PEDIDO_GRANDE,
        {'name': 'Empresa ABC', 'phone': '5512345678'},
        'transfer',
        '2026-10-20',
        '14:00',
        employee,
        advance=200
    )
    assert order.type == OrderType.PREORDER
    assert order.total == 480.0
    assert order.advance == 200.0
    assert order.pending_amount == 280.0
    assert order.pickup_date == date(2026, 10, 20)
    assert order.pickup_time == '14:00'

    stored = container.order_service.get_order(order.id)
    assert stored.pickup_date == date(2026, 10, 20)
    assert stored.pending_amount == 280.0


def test_advance_out_of_range(container, employee):
    with pytest.raises(InvalidAdvance):
        container.order_service.create_pre_order(
            PEDIDO_GRANDE, None, 'cash', date(2026, 10, 20), '14:00', employee, advance=500
        )
    with pytest.raises(InvalidAdvance):
        container.order_service.create_pre_order(
            PEDIDO_GRANDE, None, 'cash', date(2026, 10, 20), '14:00', employee, advance=-1
        )
    # anticipo igual al total es válido
    order = container.order_service.create_pre_order(
        PEDIDO_GRANDE, None, 'cash', date(2026, 10, 20), '14:00', employee, advance=480
    )
    assert order.pending_amount == 0.0


@pytest.mark.parametrize('advance', [float('nan'), float('inf'), 'nan'])
def test_non_finite_advance_is_rejected(container, employee, advance):
    with pytest.raises(InvalidAdvance):
        container.order_service.create_pre_order(
            PEDIDO_GRANDE, None, 'cash', date(2026, 10, 20), '14:00', employee,
            advance=advance
        )
    assert container.order_repo.list() == []


def test_order_lines_need_whole_positive_quantities(container, employee):
    for items in (
        [{'id': 'ps-001', 'name': 'Paste', 'price': 27.0, 'quantity': 0}],
        [{'id': 'ps-001', 'name': 'Paste', 'price': 27.0, 'quantity': 1.7}],
        [{'id': 'ps-001', 'name': 'Paste', 'price': 'abc', 'quantity': 1}],
        ['ps-001'],
    ):
        with pytest.raises(InvalidLineItem):
            container.order_service.create_instant_order(items, None, 'cash', employee)
    assert container.order_repo.list() == []


def test_empty_order_and_bad_method(container, employee):
    with pytest.raises(EmptyOrder):
        container.order_service.create_instant_order([], None, 'cash', employee)
    with pytest.raises(InvalidPaymentMethod):
        container.order_service.create_instant_order(COMBO, None, 'bitcoin', employee)


def test_order_numbers_are_sequential(container, employee):
    numbers = [
        container.order_service.create_instant_order(COMBO, None, 'cash', employee).order_number
        for _ in range(3)
    ]
    assert numbers == ['#001', '#002', '#003']


def test_order_number_sequence_is_thread_safe(container):
    sequence = OrderNumberSequence(container.sequence_repo)
    results = []
    results_lock = threading.Lock()

    def worker():
        for _ in range(50):
            value = sequence.next_value()
            with results_lock:
                results.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == list(range(1, 401))
    assert sequence.current() == 400


def test_sequence_reset(container, employee):
    container.order_service.create_instant_order(COMBO, None, 'cash', employee)
    container.order_sequence.reset()
    order = container.order_service.create_instant_order(COMBO, None, 'cash', employee)
    assert order.order_number == '#001'


def test_transition_table():
    P, PR, R, D, C = (OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY,
                      OrderStatus.DELIVERED, OrderStatus.CANCELLED)
    assert can_transition(P, PR)
    assert can_transition(PR, R)
    assert can_transition(R, D)
    assert can_transition(P, D)
    for status in (P, PR, R):
        assert can_transition(status, C)

    assert not can_transition(PR, D)
    assert not can_transition(R, PR)
    for terminal in (D, C):
        for target in OrderStatus:
            assert not can_transition(terminal, target)


def test_full_lifecycle_produces_one_sale(container, employee, other_employee):
    orders = container.order_service
    order = orders.create_instant_order(COMBO, None, 'card', employee)

    order = orders.update_status(order.id, 'preparing', employee)
    assert order.status == OrderStatus.PREPARING
    order = orders.update_status(order.id, OrderStatus.READY, employee)
    assert order.status == OrderStatus.READY
    assert order.updated_at is not None

    order = orders.mark_as_delivered(order.id, other_employee)
    assert order.status == OrderStatus.DELIVERED
    assert order.sale_id

    sales = container.sales_service.sales
    assert len(sales) == 1
    sale = sales[0]
    assert sale.id == order.sale_id
    assert sale.order_id == order.id
    assert sale.total == 69.0
    assert sale.payment_method == PaymentMethod.CARD
    assert sale.employee_name == 'Admin'
    assert sale.cash_received is None
    assert sale.change is None


def test_second_delivery_is_rejected(container, employee):
    orders = container.order_service
    order = orders.create_instant_order(COMBO, None, 'cash', employee)
    orders.mark_as_delivered(order.id, employee)

    with pytest.raises(InvalidOrderTransition):
        orders.mark_as_delivered(order.id, employee)
    with pytest.raises(InvalidOrderTransition):
        orders.update_status(order.id, 'delivered', employee)

    assert len(container.sales_service.sales) == 1
    assert len(container.sales_repo.list()) == 1


def test_cancel_and_terminal_states(container, employee):
    orders = container.order_service
    order = orders.create_instant_order(COMBO, None, 'cash', employee)
    order = orders.cancel_order(order.id, employee)
    assert order.status == OrderStatus.CANCELLED

    with pytest.raises(InvalidOrderTransition):
        orders.mark_as_delivered(order.id, employee)
    with pytest.raises(InvalidOrderTransition):
        orders.update_status(order.id, 'pending', employee)
    with pytest.raises(InvalidOrderTransition):
        orders.cancel_order(order.id, employee)
    assert container.sales_service.sales == []


def test_illegal_and_unknown_transitions(container, employee):
    orders = container.order_service
    order = orders.create_instant_order(COMBO, None, 'cash', employee)
    with pytest.raises(InvalidOrderTransition):
        orders.update_status(order.id, 'ready', employee)
    with pytest.raises(InvalidOrderTransition):
        orders.update_status(order.id, 'volando', employee)
    assert orders.get_order(order.id).status == OrderStatus.PENDING


def test_unknown_order(container, employee):
    with pytest.raises(OrderNotFound):
        container.order_service.get_order('nope')
    with pytest.raises(OrderNotFound):
        container.order_service.mark_as_delivered('nope', employee)
    with pytest.raises(OrderNotFound):
        container.order_service.cancel_order('nope', employee)


def test_delivery_retry_reuses_persisted_sale(container, employee, monkeypatch):
    orders = container.order_service
    order = orders.create_instant_order(COMBO, None, 'cash', employee)

    original_update = container.order_repo.update

    def failing_update(record_id, patch):
        raise PersistenceFailure('disco lleno')

    monkeypatch.setattr(container.order_repo, 'update', failing_update)
    with pytest.raises(PersistenceFailure):
        orders.mark_as_delivered(order.id, employee)
    assert len(container.sales_repo.list()) == 1

    monkeypatch.setattr(container.order_repo, 'update', original_update)
    delivered = orders.mark_as_delivered(order.id, employee)

    assert delivered.status == OrderStatus.DELIVERED
    assert len(container.sales_repo.list()) == 1
    assert len(container.sales_service.sales) == 1
    assert delivered.sale_id == container.sales_service.sales[0].id


def test_queries(container, employee):
    orders = container.order_service
    a = orders.create_instant_order(COMBO, None, 'cash', employee)
    b = orders.create_pre_order(COMBO, None, 'cash', '2026-10-20', '10:00', employee)
    c = orders.create_instant_order(COMBO, None, 'cash', employee)
    orders.mark_as_delivered(a.id, employee)
    orders.cancel_order(c.id, employee)

    assert [o.id for o in orders.list_orders(type='preorder')] == [b.id]
    assert [o.id for o in orders.list_orders(status=OrderStatus.DELIVERED)] == [a.id]
    assert [o.id for o in orders.list_pending_orders('suc-001')] == [b.id]
    assert orders.list_pending_orders('otra') == []
    assert {o.id for o in orders.list_today_orders()} == {a.id, b.id, c.id}
    assert len(orders.list_orders(branch_id='suc-001')) == 3
