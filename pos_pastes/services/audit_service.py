# ==============================================================================
# SERVICIO DE AUDITORÍA
# ==============================================================================
# Centraliza toda la lógica de registro de auditoría.
# Formatea mensajes humanizados y categoriza eventos.
# ==============================================================================

from typing import Any, Dict, List, Optional

from pos_pastes.models import AuditType
from pos_pastes.pricing import format_currency
from pos_pastes.repositories.interfaces import IAuditRepository


PAYMENT_LABELS = {
    'cash': 'efectivo',
    'card': 'tarjeta',
    'transfer': 'transferencia',
}


class AuditService:
    """
    Servicio para registro y consulta de auditoría.

    Centraliza:
    - Registro de eventos con mensajes humanizados
    - Categorización de eventos (VENTA, PEDIDO, SESION, SISTEMA)
    - Consulta de logs recientes

    La regla de oro: Si entra dinero → siempre log de VENTA
    """

    def __init__(self, audit_repo: IAuditRepository):
        self.audit_repo = audit_repo

    # =========================================================================
    # REGISTRO DE EVENTOS
    # =========================================================================

    def log(
        self,
        log_type: AuditType,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un evento de auditoría genérico.

        Args:
            log_type: Tipo de evento
            user: Empleado que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (venta, pedido)
            details: Detalles adicionales
        """
        self.audit_repo.log(log_type.value, user, message, related_id, details)

    def log_sale_registered(
        self,
        user: str,
        sale_id: str,
        total: float,
        method: str,
        order_number: str = None
    ) -> None:
        """
        Registra una venta.
        REGLA DE ORO: Si entra dinero, siempre se debe llamar esta función.
        """
        label = PAYMENT_LABELS.get(method, method)
        message = f"Venta de {format_currency(total)} en {label} por {user}"
        if order_number:
            message += f" (pedido {order_number})"
        self.log(
            AuditType.VENTA,
            user,
            message,
            sale_id,
            {'total': total, 'method': method, 'order_number': order_number}
        )

    def log_order_created(
        self,
        user: str,
        order_id: str,
        order_number: str,
        order_type: str,
        total: float,
        advance: float = 0.0
    ) -> None:
        kind = 'anticipado' if order_type == 'preorder' else 'para llevar'
        message = f"Pedido {order_number} ({kind}) creado por {user} - Total: {format_currency(total)}"
        if advance:
            message += f" - Anticipo: {format_currency(advance)}"
        self.log(
            AuditType.PEDIDO,
            user,
            message,
            order_id,
            {'type': order_type, 'total': total, 'advance': advance}
        )

    def log_order_status_change(
        self,
        user: str,
        order_id: str,
        order_number: str,
        old_status: str,
        new_status: str
    ) -> None:
        message = f"Pedido {order_number}: {old_status} → {new_status} por {user}"
        self.log(
            AuditType.PEDIDO,
            user,
            message,
            order_id,
            {'from': old_status, 'to': new_status}
        )

    def log_login(self, user: str, employee_id: str) -> None:
        self.log(AuditType.SESION, user, f"{user} inició sesión", employee_id)

    def log_logout(self, user: str, employee_id: str) -> None:
        self.log(AuditType.SESION, user, f"{user} cerró sesión", employee_id)

    def log_shift_closed(self, user: str, summary: Dict[str, Any]) -> None:
        """Registra el corte de caja con sus totales."""
        message = (
            f"Corte de caja por {user} - {summary.get('salesCount', 0)} ventas - "
            f"Total: {format_currency(summary.get('totalSales', 0))}"
        )
        self.log(AuditType.SISTEMA, user, message, details=summary)

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_recent(self, limit: int = 100) -> List[Dict[str, Any]]:
        return self.audit_repo.list()[:limit]

    def get_by_type(self, log_type: AuditType, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        logs = self.audit_repo.list(type=log_type.value)
        return logs[:limit] if limit else logs
