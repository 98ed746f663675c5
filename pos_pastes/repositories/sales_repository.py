# ==============================================================================
# REPOSITORIO DE VENTAS
# ==============================================================================
# Encapsula todo el acceso a sales.json
# Las ventas son inmutables: solo inserción y lectura, sin update ni delete.
# ==============================================================================

from typing import Any, Dict, List, Optional

from .base import RecordRepository


class SalesRepository(RecordRepository):
    """
    Repositorio de ventas completadas.

    Formato de datos en sales.json:
    {
        "a7d2...": {
            "id": "a7d2...",
            "items": [...],
            "subtotal": 59.48, "iva": 9.52, "total": 69.0,
            "paymentMethod": "cash",
            "cashReceived": 100.0, "change": 31.0,
            "employeeId": "emp-001", "employeeName": "Tony",
            "branchId": "suc-001",
            "createdAt": "2024-01-01T10:00:00",
            "orderId": "9f1c..."
        }
    }
    """

    collection = 'sales'

    def get_by_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        """Venta generada por la entrega de un pedido, si existe."""
        return self.find_by('orderId', order_id)

    def list_between(self, start: str, end: str) -> List[Dict[str, Any]]:
        """
        Ventas con createdAt en [start, end).

        Args:
            start: Fecha/hora ISO inicial (inclusive)
            end: Fecha/hora ISO final (exclusiva)
        """
        return [
            s for s in self.get_all().values()
            if start <= s.get('createdAt', '') < end
        ]
