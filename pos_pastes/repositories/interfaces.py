# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Los servicios dependen de estos protocolos, NO de implementaciones concretas.
# Cualquier backend (JSON, memoria, base de datos) que cumpla el contrato
# save / get / list / update puede inyectarse desde app_container.py.
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class IRepository(Protocol):
    """Operaciones mínimas de cualquier colección."""

    def save(self, record: Dict[str, Any]) -> str:
        """Inserta un documento y retorna su ID."""
        ...

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene un documento por ID."""
        ...

    def list(self, **filters: Any) -> List[Dict[str, Any]]:
        """Lista documentos que cumplen los filtros de igualdad."""
        ...


@runtime_checkable
class IMutableRepository(IRepository, Protocol):
    """Colección que admite actualización parcial."""

    def update(self, record_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Aplica un parche; retorna None si el documento no existe."""
        ...


# ==============================================================================
# INTERFACES ESPECÍFICAS
# ==============================================================================

@runtime_checkable
class IOrderRepository(IMutableRepository, Protocol):

    def list_by_status(self, *statuses: str) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class ISalesRepository(IRepository, Protocol):
    """Ventas: sin actualización ni borrado."""

    def get_by_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        ...

    def list_between(self, start: str, end: str) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class IEmployeeRepository(IMutableRepository, Protocol):

    def list_active(self) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class IProductRepository(IMutableRepository, Protocol):

    def list_by_category(self, category: str) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class ISequenceRepository(Protocol):

    def current(self, name: str) -> int:
        ...

    def set_value(self, name: str, value: int) -> None:
        ...


@runtime_checkable
class IAuditRepository(Protocol):

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        ...

    def list(self, **filters: Any) -> List[Dict[str, Any]]:
        ...
