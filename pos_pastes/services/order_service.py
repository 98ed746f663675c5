# ==============================================================================
# SERVICIO DE PEDIDOS
# ==============================================================================
# Pedidos instantáneos (para llevar) y anticipados (con fecha de recogida).
#
# Máquina de estados:
#   pending → preparing → ready → delivered
#   pending → delivered
#   pending | preparing | ready → cancelled
# delivered y cancelled son terminales. Entregar genera exactamente UNA venta.
# ==============================================================================

import threading
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from pos_pastes.errors import (
    EmptyOrder,
    InvalidAdvance,
    InvalidLineItem,
    InvalidOrderTransition,
    OrderNotFound,
)
from pos_pastes.models import (
    Customer,
    Employee,
    Order,
    OrderStatus,
    OrderType,
    PaymentMethod,
    TERMINAL_STATUSES,
    line_items_from,
)
from pos_pastes.performance_logger import profile_function
from pos_pastes.pricing import format_order_number, price_breakdown, round2
from pos_pastes.repositories.interfaces import IOrderRepository, ISequenceRepository
from pos_pastes.services.audit_service import AuditService
from pos_pastes.services.sales_service import SalesService


# Transiciones permitidas (destino → orígenes válidos)
ALLOWED_TRANSITIONS = {
    OrderStatus.PREPARING: frozenset([OrderStatus.PENDING]),
    OrderStatus.READY: frozenset([OrderStatus.PREPARING]),
    OrderStatus.DELIVERED: frozenset([OrderStatus.PENDING, OrderStatus.READY]),
    OrderStatus.CANCELLED: frozenset([
        OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY
    ]),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return current in ALLOWED_TRANSITIONS.get(target, frozenset())


class OrderNumberSequence:
    """
    Contador de números de pedido del turno (#001, #002, ...).

    Cada incremento es una lectura-modificación-escritura bajo lock sobre el
    repositorio de secuencias: dos cajas concurrentes nunca reciben el mismo
    número.
    """

    NAME = 'orders'

    def __init__(self, sequence_repo: ISequenceRepository):
        self.sequence_repo = sequence_repo
        self._lock = threading.Lock()

    def next_value(self) -> int:
        with self._lock:
            value = self.sequence_repo.current(self.NAME) + 1
            self.sequence_repo.set_value(self.NAME, value)
            return value

    def next_order_number(self) -> str:
        return format_order_number(self.next_value())

    def current(self) -> int:
        with self._lock:
            return self.sequence_repo.current(self.NAME)

    def reset(self) -> None:
        """Reinicia a 0 (solo al cerrar el turno)."""
        with self._lock:
            self.sequence_repo.set_value(self.NAME, 0)


class OrderService:
    """
    Servicio de pedidos.

    Responsabilidades:
    - Crear pedidos instantáneos y anticipados con desglose congelado
    - Asignar número de pedido del turno
    - Validar transiciones de estado
    - Generar la venta al entregar
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        sequence: OrderNumberSequence,
        sales_service: SalesService,
        audit_service: AuditService = None
    ):
        self.order_repo = order_repo
        self.sequence = sequence
        self.sales_service = sales_service
        self.audit_service = audit_service
        self._lock = threading.RLock()

    def next_order_number(self) -> str:
        return self.sequence.next_order_number()

    # =========================================================================
    # CREACIÓN
    # =========================================================================

    @profile_function(name="Crear pedido instantáneo")
    def create_instant_order(
        self,
        items: Iterable[Any],
        customer: Union[Customer, Dict[str, Any], None],
        payment_method: Union[PaymentMethod, str],
        employee: Employee,
        notes: str = ''
    ) -> Order:
        """
        Crea un pedido para llevar en estado 'pending'.

        Raises:
            EmptyOrder: Sin items
            InvalidPaymentMethod: Método de pago desconocido
        """
        return self._create(
            OrderType.INSTANT, items, customer, payment_method, employee,
            notes=notes
        )

    @profile_function(name="Crear pedido anticipado")
    def create_pre_order(
        self,
        items: Iterable[Any],
        customer: Union[Customer, Dict[str, Any], None],
        payment_method: Union[PaymentMethod, str],
        pickup_date: Union[date, str],
        pickup_time: str,
        employee: Employee,
        advance: Optional[float] = None,
        notes: str = ''
    ) -> Order:
        """
        Crea un pedido anticipado con fecha/hora de recogida y anticipo.

        Args:
            advance: Anticipo pagado (default 0); 0 <= anticipo <= total

        Raises:
            EmptyOrder: Sin items
            InvalidAdvance: Anticipo negativo, mayor al total o no finito
        """
        if isinstance(pickup_date, str):
            pickup_date = date.fromisoformat(pickup_date)
        return self._create(
            OrderType.PREORDER, items, customer, payment_method, employee,
            pickup_date=pickup_date,
            pickup_time=pickup_time,
            advance=advance,
            notes=notes
        )

    def _create(
        self,
        order_type: OrderType,
        items: Iterable[Any],
        customer: Union[Customer, Dict[str, Any], None],
        payment_method: Union[PaymentMethod, str],
        employee: Employee,
        pickup_date: Optional[date] = None,
        pickup_time: Optional[str] = None,
        advance: Optional[float] = None,
        notes: str = ''
    ) -> Order:
        line_items = line_items_from(items)
        if not line_items:
            raise EmptyOrder('El pedido necesita al menos un producto')
        method = PaymentMethod.parse(payment_method)
        if not isinstance(customer, Customer):
            customer = Customer.from_dict(customer)

        breakdown = price_breakdown(line_items)
        try:
            advance = round2(advance or 0)
        except InvalidLineItem:
            raise InvalidAdvance(f"Anticipo inválido: {advance!r}")
        if advance < 0 or advance > breakdown.total:
            raise InvalidAdvance(
                f"Anticipo de {advance:.2f} inválido para un total de {breakdown.total:.2f}"
            )

        order = Order(
            id='',
            order_number=self.next_order_number(),
            type=order_type,
            items=line_items,
            subtotal=breakdown.subtotal,
            tax=breakdown.tax,
            total=breakdown.total,
            customer=customer,
            payment_method=method,
            pickup_date=pickup_date,
            pickup_time=pickup_time,
            advance=advance,
            notes=notes or '',
            employee_id=employee.id,
            branch_id=employee.branch_id
        )
        data = order.to_dict()
        del data['id']
        order.id = self.order_repo.save(data)

        if self.audit_service:
            self.audit_service.log_order_created(
                employee.name, order.id, order.order_number,
                order_type.value, order.total, advance
            )
        return order

    # =========================================================================
    # CAMBIOS DE ESTADO
    # =========================================================================

    @profile_function(name="Entregar pedido")
    def mark_as_delivered(self, order_id: str, employee: Employee) -> Order:
        """
        Entrega el pedido y registra su venta.

        La venta usa items, totales congelados y método de pago del pedido,
        atribuida al empleado que entrega. Si un intento previo ya guardó la
        venta pero no actualizó el pedido, se reutiliza esa venta.

        Raises:
            OrderNotFound: ID desconocido
            InvalidOrderTransition: Pedido ya entregado o cancelado
        """
        with self._lock:
            order = self.get_order(order_id)
            self._check_transition(order, OrderStatus.DELIVERED)

            sale = self.sales_service.find_sale_for_order(order.id)
            if sale is None:
                sale = self.sales_service.register_sale(
                    order.items,
                    order.payment_method,
                    employee,
                    subtotal=order.subtotal,
                    tax=order.tax,
                    total=order.total,
                    order_id=order.id,
                    order_number=order.order_number
                )
            else:
                self.sales_service.adopt(sale)

            return self._apply_status(
                order, OrderStatus.DELIVERED, employee, {'saleId': sale.id}
            )

    def cancel_order(self, order_id: str, employee: Employee) -> Order:
        """
        Raises:
            OrderNotFound: ID desconocido
            InvalidOrderTransition: Pedido en estado terminal
        """
        with self._lock:
            order = self.get_order(order_id)
            self._check_transition(order, OrderStatus.CANCELLED)
            return self._apply_status(order, OrderStatus.CANCELLED, employee)

    def update_status(
        self,
        order_id: str,
        status: Union[OrderStatus, str],
        employee: Employee
    ) -> Order:
        """
        Transición genérica; 'delivered' pasa por mark_as_delivered.

        Raises:
            OrderNotFound: ID desconocido
            InvalidOrderTransition: Transición no permitida o estado desconocido
        """
        try:
            target = OrderStatus(status)
        except ValueError:
            raise InvalidOrderTransition(f"Estado desconocido: {status}")

        if target == OrderStatus.DELIVERED:
            return self.mark_as_delivered(order_id, employee)
        if target == OrderStatus.CANCELLED:
            return self.cancel_order(order_id, employee)

        with self._lock:
            order = self.get_order(order_id)
            self._check_transition(order, target)
            return self._apply_status(order, target, employee)

    def _check_transition(self, order: Order, target: OrderStatus) -> None:
        if not can_transition(order.status, target):
            raise InvalidOrderTransition(
                f"Pedido {order.order_number}: no se puede pasar de "
                f"'{order.status.value}' a '{target.value}'"
            )

    def _apply_status(
        self,
        order: Order,
        target: OrderStatus,
        employee: Employee,
        extra: Optional[Dict[str, Any]] = None
    ) -> Order:
        old_status = order.status
        now = datetime.now()
        patch = {'status': target.value, 'updatedAt': now.isoformat()}
        patch.update(extra or {})
        data = self.order_repo.update(order.id, patch)
        if data is None:
            raise OrderNotFound(f"Pedido {order.id} no encontrado")

        if self.audit_service:
            self.audit_service.log_order_status_change(
                employee.name, order.id, order.order_number,
                old_status.value, target.value
            )
        return Order.from_dict(data)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_order(self, order_id: str) -> Order:
        """
        Raises:
            OrderNotFound: ID desconocido
        """
        data = self.order_repo.get(order_id)
        if data is None:
            raise OrderNotFound(f"Pedido {order_id} no encontrado")
        return Order.from_dict(data)

    def list_orders(
        self,
        type: Union[OrderType, str, None] = None,
        status: Union[OrderStatus, str, None] = None,
        branch_id: Optional[str] = None
    ) -> List[Order]:
        """Pedidos filtrados, más reciente primero."""
        filters = {}
        if type:
            filters['type'] = OrderType(type).value
        if status:
            filters['status'] = OrderStatus(status).value
        if branch_id:
            filters['branchId'] = branch_id
        orders = [Order.from_dict(o) for o in self.order_repo.list(**filters)]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders

    def list_pending_orders(self, branch_id: Optional[str] = None) -> List[Order]:
        """Pedidos no terminales (pending, preparing, ready)."""
        statuses = [s.value for s in OrderStatus if s not in TERMINAL_STATUSES]
        orders = [Order.from_dict(o) for o in self.order_repo.list_by_status(*statuses)]
        if branch_id:
            orders = [o for o in orders if o.branch_id == branch_id]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders

    def list_today_orders(self, branch_id: Optional[str] = None) -> List[Order]:
        today = date.today()
        return [
            o for o in self.list_orders(branch_id=branch_id)
            if o.created_at.date() == today
        ]
