# ==============================================================================
# REPOSITORIO DE PEDIDOS
# ==============================================================================
# Encapsula todo el acceso a orders.json
# Los pedidos se almacenan como diccionario: {id: {pedido}}
# ==============================================================================

from typing import Any, Dict, List, Optional

from .base import DictRepository


class OrderRepository(DictRepository):
    """
    Repositorio de pedidos instantáneos y anticipados.

    Formato de datos en orders.json:
    {
        "9f1c...": {
            "id": "9f1c...",
            "orderNumber": "#001",
            "type": "instant",
            "status": "pending",
            "items": [...],
            "subtotal": 59.48, "iva": 9.52, "total": 69.0,
            ...
        }
    }
    """

    collection = 'orders'

    def get_by_number(self, order_number: str) -> Optional[Dict[str, Any]]:
        """Busca el pedido más reciente con ese número (#001 se repite por turno)."""
        matches = self.list(orderNumber=order_number)
        return matches[-1] if matches else None

    def list_by_status(self, *statuses: str) -> List[Dict[str, Any]]:
        """Pedidos cuyo estado está en statuses."""
        wanted = set(statuses)
        return [o for o in self.get_all().values() if o.get('status') in wanted]
