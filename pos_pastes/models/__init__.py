# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del POS
# ==============================================================================
# Entidades del dominio como dataclasses, independientes de la persistencia.
# ==============================================================================

from .entities import (
    # Catálogo
    Product,
    ProductCategory,

    # Pedidos
    LineItem,
    Customer,
    Order,
    OrderStatus,
    OrderType,
    TERMINAL_STATUSES,
    line_items_from,

    # Ventas
    Sale,
    PaymentMethod,
    CashRegisterSummary,

    # Empleados
    Employee,
    EmployeeRole,
    Branch,

    # Auditoría
    AuditEntry,
    AuditType,
)

__all__ = [
    'Product',
    'ProductCategory',
    'LineItem',
    'Customer',
    'Order',
    'OrderStatus',
    'OrderType',
    'TERMINAL_STATUSES',
    'line_items_from',
    'Sale',
    'PaymentMethod',
    'CashRegisterSummary',
    'Employee',
    'EmployeeRole',
    'Branch',
    'AuditEntry',
    'AuditType',
]
