# ==============================================================================
# SERVICIO DE VENTAS (LIBRO DEL TURNO)
# ==============================================================================
# Registra ventas completadas y resume el turno por método de pago.
#
# Reglas:
#   - Primero se persiste, después se agrega al libro en memoria.
#   - El libro solo crece; clear() lo vacía al cerrar el turno.
#   - El cambio solo existe en efectivo.
# ==============================================================================

import threading
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, List, Optional, Union

from pos_pastes.errors import InsufficientCash, InvalidLineItem
from pos_pastes.models import (
    CashRegisterSummary,
    Employee,
    PaymentMethod,
    Sale,
    line_items_from,
)
from pos_pastes.performance_logger import profile_function
from pos_pastes.pricing import (
    calculate_change,
    is_consistent,
    price_breakdown,
    round2,
)
from pos_pastes.repositories.interfaces import ISalesRepository
from pos_pastes.services.audit_service import AuditService


def _day_bounds(day: Union[date, datetime, None]) -> tuple:
    """Rango ISO [inicio, fin) del día local."""
    if day is None:
        day = date.today()
    if isinstance(day, datetime):
        day = day.date()
    start = datetime.combine(day, time.min)
    return start.isoformat(), (start + timedelta(days=1)).isoformat()


class SalesService:
    """
    Libro de ventas del turno.

    Responsabilidades:
    - Registrar ventas (contado o entrega de pedido)
    - Calcular cambio en efectivo
    - Resumir ventas por método de pago (corte de caja)
    - Consultar ventas del día, por empleado y recientes
    """

    def __init__(
        self,
        sales_repo: ISalesRepository,
        audit_service: AuditService = None
    ):
        """
        Args:
            sales_repo: Repositorio de ventas
            audit_service: Servicio de auditoría (opcional)
        """
        self.sales_repo = sales_repo
        self.audit_service = audit_service
        self._ledger: List[Sale] = []
        self._lock = threading.Lock()

    # =========================================================================
    # REGISTRO DE VENTAS
    # =========================================================================

    @profile_function(name="Registrar venta")
    def register_sale(
        self,
        items: Iterable[Any],
        payment_method: Union[PaymentMethod, str],
        employee: Employee,
        cash_received: Optional[float] = None,
        subtotal: Optional[float] = None,
        tax: Optional[float] = None,
        total: Optional[float] = None,
        order_id: Optional[str] = None,
        order_number: Optional[str] = None
    ) -> Sale:
        """
        Registra una venta completada.

        Los totales se calculan desde los items; si vienen dados (totales
        congelados de un pedido) se usan solo cuando cuadran
        (subtotal + iva == total).

        Args:
            items: LineItems o dicts {id, name, price, quantity}
            payment_method: cash, card o transfer
            employee: Empleado que cobra
            cash_received: Efectivo recibido (solo efectivo; None = monto exacto)
            order_id: Pedido que originó la venta (entregas)

        Returns:
            Venta persistida

        Raises:
            InsufficientCash: Efectivo menor al total
            InvalidLineItem: Item inválido o monto no finito (NaN, infinito)
            PersistenceFailure: Si no se pudo guardar
        """
        method = PaymentMethod.parse(payment_method)
        line_items = line_items_from(items)

        if total is not None and subtotal is not None and tax is not None:
            if not is_consistent(subtotal, tax, total):
                raise InvalidLineItem(
                    f"Totales inconsistentes: {subtotal} + {tax} != {total}"
                )
            subtotal, tax, total = round2(subtotal), round2(tax), round2(total)
        else:
            breakdown = price_breakdown(line_items)
            subtotal, tax, total = breakdown.subtotal, breakdown.tax, breakdown.total

        change = None
        if method == PaymentMethod.CASH:
            if cash_received is None:
                cash_received = total
            cash_received = round2(cash_received)
            if cash_received < total:
                raise InsufficientCash(
                    f"Efectivo insuficiente: recibido {cash_received:.2f}, total {total:.2f}"
                )
            change = calculate_change(total, cash_received)
        else:
            cash_received = None

        record = {
            'items': [item.to_dict() for item in line_items],
            'subtotal': subtotal,
            'iva': tax,
            'total': total,
            'paymentMethod': method.value,
            'employeeId': employee.id,
            'employeeName': employee.name,
            'branchId': employee.branch_id,
            'createdAt': datetime.now().isoformat(),
        }
        if cash_received is not None:
            record['cashReceived'] = cash_received
            record['change'] = change
        if order_id is not None:
            record['orderId'] = order_id

        # Persistir primero; si falla, el libro no cambia
        sale_id = self.sales_repo.save(record)
        sale = Sale.from_dict(dict(record, id=sale_id))

        with self._lock:
            self._ledger.append(sale)

        if self.audit_service:
            self.audit_service.log_sale_registered(
                employee.name, sale.id, sale.total, method.value, order_number
            )
        return sale

    def find_sale_for_order(self, order_id: str) -> Optional[Sale]:
        """Venta ya persistida para un pedido (reintentos de entrega)."""
        data = self.sales_repo.get_by_order(order_id)
        return Sale.from_dict(data) if data else None

    def adopt(self, sale: Sale) -> None:
        """Agrega al libro una venta persistida que aún no está en él."""
        with self._lock:
            if all(s.id != sale.id for s in self._ledger):
                self._ledger.append(sale)

    # =========================================================================
    # LIBRO DEL TURNO
    # =========================================================================

    @property
    def sales(self) -> List[Sale]:
        """Ventas del turno en orden de registro."""
        with self._lock:
            return list(self._ledger)

    def clear(self) -> None:
        """Vacía el libro del turno. El historial persistido no se toca."""
        with self._lock:
            self._ledger.clear()

    # =========================================================================
    # CORTE DE CAJA
    # =========================================================================

    def summary(
        self,
        sales: Optional[Iterable[Sale]] = None,
        employee_name: str = '',
        branch_id: str = ''
    ) -> CashRegisterSummary:
        """
        Resume ventas por método de pago.

        Args:
            sales: Ventas a resumir (None = libro del turno)
            employee_name: Nombre para el encabezado del corte
            branch_id: Sucursal del corte

        Returns:
            CashRegisterSummary (ticket promedio 0 si no hay ventas)
        """
        sales = self.sales if sales is None else list(sales)
        totals = {method: [] for method in PaymentMethod}
        for sale in sales:
            totals[sale.payment_method].append(sale.total)

        total_sales = round2(sum(s.total for s in sales))
        count = len(sales)

        return CashRegisterSummary(
            date=datetime.now(),
            employee_name=employee_name,
            branch_id=branch_id,
            total_sales=total_sales,
            sales_count=count,
            cash_total=round2(sum(totals[PaymentMethod.CASH])),
            card_total=round2(sum(totals[PaymentMethod.CARD])),
            transfer_total=round2(sum(totals[PaymentMethod.TRANSFER])),
            average_ticket=round2(total_sales / count) if count else 0.0,
            payment_breakdown={
                method.value: {
                    'count': len(amounts),
                    'total': round2(sum(amounts)),
                }
                for method, amounts in totals.items()
            },
            sales=sales
        )

    def shift_summary(self, employee: Optional[Employee] = None) -> CashRegisterSummary:
        """Corte de caja del libro en memoria."""
        return self.summary(
            self.sales,
            employee.name if employee else '',
            employee.branch_id if employee else ''
        )

    # =========================================================================
    # CONSULTAS (historial persistido)
    # =========================================================================

    def get_daily_sales(
        self,
        day: Union[date, datetime, None] = None,
        branch_id: Optional[str] = None
    ) -> List[Sale]:
        start, end = _day_bounds(day)
        sales = [Sale.from_dict(s) for s in self.sales_repo.list_between(start, end)]
        if branch_id:
            sales = [s for s in sales if s.branch_id == branch_id]
        return sales

    def get_employee_daily_sales(
        self,
        day: Union[date, datetime, None],
        employee_id: str
    ) -> List[Sale]:
        return [s for s in self.get_daily_sales(day) if s.employee_id == employee_id]

    def get_recent_sales(self, count: int = 5, branch_id: Optional[str] = None) -> List[Sale]:
        """Últimas ventas, más reciente primero."""
        # Orden inverso de inserción para desempatar registros del mismo instante
        sales = [Sale.from_dict(s) for s in reversed(self.sales_repo.list())]
        if branch_id:
            sales = [s for s in sales if s.branch_id == branch_id]
        sales.sort(key=lambda s: s.created_at, reverse=True)
        return sales[:count]

    def daily_summary(
        self,
        day: Union[date, datetime, None] = None,
        branch_id: Optional[str] = None,
        employee_id: Optional[str] = None
    ) -> CashRegisterSummary:
        sales = self.get_daily_sales(day, branch_id)
        if employee_id:
            sales = [s for s in sales if s.employee_id == employee_id]
        return self.summary(sales, branch_id=branch_id or '')
