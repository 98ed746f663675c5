# ==============================================================================
# REPOSITORIO DE AUDITORÍA
# ==============================================================================
# Encapsula todo el acceso a audit.json
# La auditoría se almacena como lista, más reciente primero: [{log1}, {log2}, ...]
# ==============================================================================

import uuid
from typing import Any, Dict, List, Optional

from pos_pastes.models import AuditEntry
from .base import ListRepository


class AuditRepository(ListRepository):
    """
    Repositorio del log de auditoría.

    Formato de datos en audit.json:
    [
        {
            "id": "c3f0...",
            "type": "VENTA",
            "user": "Tony",
            "message": "Venta de $69.00 en efectivo",
            "timestamp": "2024-01-01 10:00:00",
            "relatedId": "a7d2...",
            "details": {...}
        }
    ]
    """

    collection = 'audit'

    # Límite de registros para evitar archivos muy grandes
    MAX_LOGS = 10000

    def save(self, record: Dict[str, Any]) -> str:
        record_id = record.get('id') or uuid.uuid4().hex
        self.prepend(dict(record, id=record_id), limit=self.MAX_LOGS)
        return record_id

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        for record in self.get_all():
            if record.get('id') == record_id:
                return record
        return None

    def list(self, **filters: Any) -> List[Dict[str, Any]]:
        return [
            r for r in self.get_all()
            if all(r.get(k) == v for k, v in filters.items())
        ]

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Registra un nuevo evento de auditoría.

        Args:
            log_type: Tipo de evento (VENTA, PEDIDO, SESION, SISTEMA)
            user: Empleado que realizó la acción
            message: Mensaje descriptivo
            related_id: ID relacionado (venta, pedido, empleado)
            details: Detalles adicionales
        """
        entry = AuditEntry(
            type=log_type,
            user=user or 'sistema',
            message=message,
            related_id=related_id,
            details=details or {}
        )
        self.save(entry.to_dict())

    def get_recent(self, limit: int = 100) -> List[Dict[str, Any]]:
        return self.get_all()[:limit]

    def get_by_type(self, log_type: str, limit: int = 100) -> List[Dict[str, Any]]:
        return self.list(type=log_type)[:limit]
