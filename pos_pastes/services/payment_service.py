# ==============================================================================
# SERVICIO DE COBRO
# ==============================================================================
# Flujo de la caja: validar el pago, registrar la venta y vaciar el carrito.
# El carrito solo se vacía DESPUÉS de que la venta quedó guardada.
# ==============================================================================

from datetime import date
from typing import Any, Dict, Optional, Union

from pos_pastes.errors import EmptyOrder, InsufficientCash, InvalidLineItem, POSError
from pos_pastes.models import Customer, Employee, Order, OrderType, PaymentMethod, Sale
from pos_pastes.pricing import calculate_change, round2
from pos_pastes.services.cart_service import Cart
from pos_pastes.services.order_service import OrderService
from pos_pastes.services.sales_service import SalesService


class PaymentService:
    """
    Servicio de cobro.

    Responsabilidades:
    - Validar montos y calcular cambio (vista previa del modal de pago)
    - Cobrar el carrito como venta de contado
    - Guardar el carrito como pedido
    """

    def __init__(self, sales_service: SalesService, order_service: OrderService):
        self.sales_service = sales_service
        self.order_service = order_service

    def validate_payment(
        self,
        total: float,
        payment_method: Union[PaymentMethod, str],
        cash_received: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Valida un pago sin registrarlo.

        Returns:
            Dict con ok, change y error (si no alcanza o el método es inválido)
        """
        try:
            method = PaymentMethod.parse(payment_method)
        except POSError as e:
            return {'ok': False, 'change': None, 'error': e.message}

        if method != PaymentMethod.CASH:
            return {'ok': True, 'change': None}

        try:
            cash = round2(float(cash_received if cash_received is not None else total))
        except (TypeError, ValueError, InvalidLineItem):
            return {'ok': False, 'change': None, 'error': 'Monto recibido inválido'}

        if cash < round2(total):
            return {
                'ok': False,
                'change': None,
                'error': f'Faltan ${round2(total - cash):.2f}'
            }
        return {'ok': True, 'change': calculate_change(total, cash)}

    def checkout(
        self,
        cart: Cart,
        payment_method: Union[PaymentMethod, str],
        employee: Employee,
        cash_received: Optional[float] = None
    ) -> Sale:
        """
        Cobra el carrito.

        Raises:
            EmptyOrder: Carrito vacío
            InsufficientCash: Efectivo menor al total
            PersistenceFailure: La venta no se guardó (el carrito queda intacto)
        """
        if cart.is_empty:
            raise EmptyOrder()

        method = PaymentMethod.parse(payment_method)
        total = cart.total
        if method == PaymentMethod.CASH and cash_received is not None:
            if round2(cash_received) < total:
                raise InsufficientCash(
                    f"Efectivo insuficiente: faltan ${round2(total - cash_received):.2f}"
                )

        sale = self.sales_service.register_sale(
            cart.snapshot_line_items(),
            method,
            employee,
            cash_received=cash_received
        )
        cart.clear()
        return sale

    def save_cart_as_order(
        self,
        cart: Cart,
        customer: Union[Customer, Dict[str, Any], None],
        payment_method: Union[PaymentMethod, str],
        employee: Employee,
        order_type: Union[OrderType, str] = OrderType.INSTANT,
        pickup_date: Union[date, str, None] = None,
        pickup_time: Optional[str] = None,
        advance: Optional[float] = None,
        notes: str = ''
    ) -> Order:
        """
        Guarda el carrito como pedido instantáneo o anticipado.

        Raises:
            EmptyOrder: Carrito vacío
            InvalidAdvance: Anticipo fuera de rango
        """
        if cart.is_empty:
            raise EmptyOrder()

        items = cart.snapshot_line_items()
        if OrderType(order_type) == OrderType.PREORDER:
            order = self.order_service.create_pre_order(
                items, customer, payment_method, pickup_date, pickup_time,
                employee, advance=advance, notes=notes
            )
        else:
            order = self.order_service.create_instant_order(
                items, customer, payment_method, employee, notes=notes
            )
        cart.clear()
        return order
