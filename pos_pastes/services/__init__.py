# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio del punto de venta.
#
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Aplican reglas de negocio y lanzan errores de pos_pastes.errors
# 3. Las rutas solo llaman a servicios
# 4. Los servicios NO conocen el tipo de almacenamiento (JSON/memoria)
#
# ESTRUCTURA:
# ├── catalog_service.py → Menú y disponibilidad
# ├── cart_service.py    → Carrito (Cart puro + CartService de sesión)
# ├── order_service.py   → Pedidos, números de pedido, estados
# ├── sales_service.py   → Libro de ventas del turno, corte de caja
# ├── payment_service.py → Cobro del carrito
# ├── auth_service.py    → PIN, sesión, sucursal
# └── audit_service.py   → Logs de actividad
# ==============================================================================

from pos_pastes.services.audit_service import AuditService
from pos_pastes.services.catalog_service import CatalogService
from pos_pastes.services.cart_service import Cart, CartService
from pos_pastes.services.sales_service import SalesService
from pos_pastes.services.order_service import (
    OrderNumberSequence,
    OrderService,
    can_transition,
)
from pos_pastes.services.payment_service import PaymentService
from pos_pastes.services.auth_service import AuthService

__all__ = [
    'AuditService',
    'CatalogService',
    'Cart',
    'CartService',
    'SalesService',
    'OrderNumberSequence',
    'OrderService',
    'can_transition',
    'PaymentService',
    'AuthService',
]
