# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia:
# to_dict() produce el documento que se guarda, from_dict() lo reconstruye.
# ==============================================================================

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pos_pastes.errors import InvalidPaymentMethod, InvalidLineItem
from pos_pastes.pricing import pending_amount, round2


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class PaymentMethod(str, Enum):
    """Métodos de pago aceptados."""
    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"

    @classmethod
    def parse(cls, value: Any) -> 'PaymentMethod':
        """Convierte un string ('cash', 'card', 'transfer') o falla."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidPaymentMethod(f"Método de pago inválido: {value}")


class OrderType(str, Enum):
    INSTANT = "instant"      # Pedido para llevar del turno actual
    PREORDER = "preorder"    # Pedido anticipado con fecha de recogida


class OrderStatus(str, Enum):
    """Estados posibles de un pedido."""
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"      # Terminal, genera la venta
    CANCELLED = "cancelled"      # Terminal, sin venta


TERMINAL_STATUSES = frozenset([OrderStatus.DELIVERED, OrderStatus.CANCELLED])


class ProductCategory(str, Enum):
    """Categorías del menú."""
    PASTES_SALADOS = "Pastes Salados"
    EMPANADAS_SALADAS = "Empanadas Saladas"
    EMPANADAS_DULCES = "Empanadas Dulces"
    BEBIDAS = "Bebidas"
    PROMOCIONES = "Promociones"


class EmployeeRole(str, Enum):
    CASHIER = "cashier"
    MANAGER = "manager"
    ADMIN = "admin"


class AuditType(str, Enum):
    """Tipos de eventos de auditoría."""
    VENTA = "VENTA"
    PEDIDO = "PEDIDO"
    SESION = "SESION"
    SISTEMA = "SISTEMA"


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _parse_date(value: Any) -> Optional[date]:
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    if isinstance(value, datetime):
        return value.date()
    return date.fromisoformat(value[:10])


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


# ==============================================================================
# CATÁLOGO
# ==============================================================================

@dataclass(frozen=True)
class Product:
    """
    Producto del catálogo. El precio YA incluye IVA.

    Attributes:
        id: Identificador único ("ps-001")
        name: Nombre visible en el POS
        price: Precio con IVA
        category: Categoría del menú
        is_available: Si se puede vender hoy
        description: Descripción opcional
    """
    id: str
    name: str
    price: float
    category: ProductCategory
    is_available: bool = True
    description: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'category': self.category.value,
            'isAvailable': self.is_available,
            'description': self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            price=float(data.get('price', 0) or 0),
            category=ProductCategory(data.get('category', ProductCategory.PROMOCIONES.value)),
            is_available=data.get('isAvailable', True),
            description=data.get('description', '')
        )


# ==============================================================================
# ITEMS, CLIENTES, PEDIDOS Y VENTAS
# ==============================================================================

def _parse_price(value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidLineItem(f"Precio inválido: {value!r}")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise InvalidLineItem(f"Precio inválido: {value!r}")
    if not math.isfinite(price):
        raise InvalidLineItem(f"Precio inválido: {value!r}")
    return price


def _parse_quantity(value: Any) -> int:
    """Cantidad entera; acepta 2.0 o '2' pero no 1.7."""
    if isinstance(value, bool):
        raise InvalidLineItem(f"Cantidad inválida: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidLineItem(f"Cantidad inválida: {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidLineItem(f"Cantidad inválida: {value!r}")


@dataclass(frozen=True)
class LineItem:
    """
    Copia de un producto dentro de un carrito, pedido o venta.
    Nunca apunta al Product vivo: cambios de precio no alteran el historial.

    Invariantes: precio finito >= 0, cantidad entera >= 1.
    """
    id: str
    name: str
    price: float
    quantity: int

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidLineItem(
                f"Item '{self.name}': la cantidad debe ser entera ({self.quantity!r})"
            )
        if not math.isfinite(self.price) or self.price < 0 or self.quantity < 1:
            raise InvalidLineItem(
                f"Item '{self.name}' inválido (precio {self.price}, cantidad {self.quantity})"
            )

    @property
    def line_total(self) -> float:
        return round2(self.price * self.quantity)

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> 'LineItem':
        return cls(id=product.id, name=product.name, price=product.price, quantity=quantity)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'quantity': self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LineItem':
        """
        Raises:
            InvalidLineItem: Item que no es dict, precio no numérico o
                cantidad no entera / menor a 1
        """
        if not isinstance(data, dict):
            raise InvalidLineItem(f"Item inválido: {data!r}")
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            price=_parse_price(data.get('price', 0) or 0),
            quantity=_parse_quantity(data.get('quantity', 0) or 0)
        )


def line_items_from(items: Optional[Iterable[Any]]) -> Tuple[LineItem, ...]:
    """Normaliza LineItems o dicts a una tupla inmutable de LineItems."""
    result = []
    for item in items or ():
        result.append(item if isinstance(item, LineItem) else LineItem.from_dict(item))
    return tuple(result)


@dataclass(frozen=True)
class Customer:
    """Datos del cliente de un pedido."""
    name: str = 'Cliente'
    phone: str = ''
    address: str = ''

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'phone': self.phone, 'address': self.address}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Customer':
        data = data or {}
        return cls(
            name=(data.get('name') or '').strip() or 'Cliente',
            phone=data.get('phone') or '',
            address=data.get('address') or ''
        )


@dataclass
class Order:
    """
    Pedido instantáneo o anticipado.
    El desglose (subtotal, iva, total) se calcula una vez al crearlo y queda
    congelado.
    """
    id: str
    order_number: str
    type: OrderType
    items: Tuple[LineItem, ...]
    subtotal: float
    tax: float
    total: float
    customer: Customer
    payment_method: PaymentMethod
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    pickup_date: Optional[date] = None
    pickup_time: Optional[str] = None
    advance: float = 0.0
    notes: str = ''
    employee_id: str = ''
    branch_id: str = ''
    updated_at: Optional[datetime] = None
    sale_id: Optional[str] = None

    @property
    def pending_amount(self) -> float:
        """Saldo por cobrar al entregar (total - anticipo)."""
        return pending_amount(self.total, self.advance)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        data = {
            'id': self.id,
            'orderNumber': self.order_number,
            'type': self.type.value,
            'items': [item.to_dict() for item in self.items],
            'subtotal': self.subtotal,
            'iva': self.tax,
            'total': self.total,
            'customer': self.customer.to_dict(),
            'paymentMethod': self.payment_method.value,
            'status': self.status.value,
            'advance': self.advance,
            'notes': self.notes,
            'employeeId': self.employee_id,
            'branchId': self.branch_id,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
            'saleId': self.sale_id,
        }
        if self.type == OrderType.PREORDER:
            data['pickupDate'] = _iso(self.pickup_date)
            data['pickupTime'] = self.pickup_time
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        return cls(
            id=data['id'],
            order_number=data.get('orderNumber', ''),
            type=OrderType(data.get('type', OrderType.INSTANT.value)),
            items=line_items_from(data.get('items')),
            subtotal=data.get('subtotal', 0.0),
            tax=data.get('iva', 0.0),
            total=data.get('total', 0.0),
            customer=Customer.from_dict(data.get('customer')),
            payment_method=PaymentMethod(data.get('paymentMethod', PaymentMethod.CASH.value)),
            status=OrderStatus(data.get('status', OrderStatus.PENDING.value)),
            created_at=_parse_datetime(data.get('createdAt')) or datetime.now(),
            pickup_date=_parse_date(data.get('pickupDate')),
            pickup_time=data.get('pickupTime'),
            advance=data.get('advance') or 0.0,
            notes=data.get('notes') or '',
            employee_id=data.get('employeeId', ''),
            branch_id=data.get('branchId', ''),
            updated_at=_parse_datetime(data.get('updatedAt')),
            sale_id=data.get('saleId')
        )


@dataclass(frozen=True)
class Sale:
    """
    Venta completada. Inmutable: no existe ruta de edición ni borrado.
    cash_received y change solo existen en pagos en efectivo.
    """
    id: str
    items: Tuple[LineItem, ...]
    subtotal: float
    tax: float
    total: float
    payment_method: PaymentMethod
    employee_id: str
    employee_name: str
    branch_id: str
    created_at: datetime
    cash_received: Optional[float] = None
    change: Optional[float] = None
    order_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'items': [item.to_dict() for item in self.items],
            'subtotal': self.subtotal,
            'iva': self.tax,
            'total': self.total,
            'paymentMethod': self.payment_method.value,
            'employeeId': self.employee_id,
            'employeeName': self.employee_name,
            'branchId': self.branch_id,
            'createdAt': _iso(self.created_at),
        }
        # Solo agregar campos opcionales si tienen valor
        if self.cash_received is not None:
            data['cashReceived'] = self.cash_received
        if self.change is not None:
            data['change'] = self.change
        if self.order_id is not None:
            data['orderId'] = self.order_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sale':
        return cls(
            id=data['id'],
            items=line_items_from(data.get('items')),
            subtotal=data.get('subtotal', 0.0),
            tax=data.get('iva', 0.0),
            total=data.get('total', 0.0),
            payment_method=PaymentMethod(data.get('paymentMethod', PaymentMethod.CASH.value)),
            employee_id=data.get('employeeId', ''),
            employee_name=data.get('employeeName', ''),
            branch_id=data.get('branchId', ''),
            created_at=_parse_datetime(data.get('createdAt')) or datetime.now(),
            cash_received=data.get('cashReceived'),
            change=data.get('change'),
            order_id=data.get('orderId')
        )


# ==============================================================================
# EMPLEADOS Y SUCURSALES
# ==============================================================================

@dataclass(frozen=True)
class Employee:
    """
    Empleado que opera la caja.

    Attributes:
        id: Identificador único
        name: Nombre para atribuir ventas
        branch_id: Sucursal donde trabaja
        role: Rol del empleado
        pin_hash: Hash del PIN (nunca en texto plano)
        is_active: Solo empleados activos pueden iniciar sesión
    """
    id: str
    name: str
    branch_id: str
    role: EmployeeRole = EmployeeRole.CASHIER
    pin_hash: str = ''
    is_active: bool = True

    def is_admin(self) -> bool:
        """Verifica si el empleado tiene permisos de administrador."""
        return self.role == EmployeeRole.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'branchId': self.branch_id,
            'role': self.role.value,
            'pin': self.pin_hash,
            'isActive': self.is_active,
        }

    def to_session(self) -> Dict[str, Any]:
        """Datos mínimos para guardar en la sesión (sin el PIN)."""
        return {
            'id': self.id,
            'name': self.name,
            'branchId': self.branch_id,
            'role': self.role.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Employee':
        try:
            role = EmployeeRole(data.get('role', 'cashier'))
        except ValueError:
            role = EmployeeRole.CASHIER
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            branch_id=data.get('branchId', ''),
            role=role,
            pin_hash=data.get('pin', ''),
            is_active=data.get('isActive', True)
        )


@dataclass(frozen=True)
class Branch:
    """Sucursal."""
    id: str
    name: str
    address: str = ''
    phone: str = ''
    is_active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'phone': self.phone,
            'isActive': self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Branch':
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            address=data.get('address', ''),
            phone=data.get('phone', ''),
            is_active=data.get('isActive', True)
        )


# ==============================================================================
# CORTE DE CAJA
# ==============================================================================

@dataclass
class CashRegisterSummary:
    """
    Resumen del turno por método de pago. Derivado, nunca se persiste.
    """
    date: datetime
    employee_name: str = ''
    branch_id: str = ''
    total_sales: float = 0.0
    sales_count: int = 0
    cash_total: float = 0.0
    card_total: float = 0.0
    transfer_total: float = 0.0
    average_ticket: float = 0.0
    payment_breakdown: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    sales: List[Sale] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': _iso(self.date),
            'employeeName': self.employee_name,
            'branchId': self.branch_id,
            'totalSales': self.total_sales,
            'salesCount': self.sales_count,
            'cashTotal': self.cash_total,
            'cardTotal': self.card_total,
            'transferTotal': self.transfer_total,
            'averageTicket': self.average_ticket,
            'paymentBreakdown': self.payment_breakdown,
        }


# ==============================================================================
# AUDITORÍA
# ==============================================================================

@dataclass
class AuditEntry:
    """
    Registro de auditoría.

    Attributes:
        type: Tipo de evento (VENTA, PEDIDO, SESION, SISTEMA)
        user: Empleado que realizó la acción
        message: Mensaje descriptivo
        timestamp: Fecha y hora del evento
        related_id: ID relacionado (venta, pedido, empleado)
        details: Detalles adicionales
    """
    type: str
    user: str
    message: str
    timestamp: str = ''
    related_id: str = ''
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'user': self.user,
            'message': self.message,
            'timestamp': self.timestamp,
            'relatedId': self.related_id,
            'details': self.details
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuditEntry':
        return cls(
            type=data.get('type', ''),
            user=data.get('user', ''),
            message=data.get('message', ''),
            timestamp=data.get('timestamp', ''),
            related_id=data.get('relatedId', ''),
            details=data.get('details') or {}
        )
