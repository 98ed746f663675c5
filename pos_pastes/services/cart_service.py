# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Cart: agregado puro (sin Flask) con las operaciones del carrito.
# CartService: un carrito por sesión, guardado en session['carrito'].
# ==============================================================================

from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from flask import session

from pos_pastes.errors import ProductNotFound, ProductUnavailable
from pos_pastes.models import LineItem, Product
from pos_pastes.pricing import PriceBreakdown, price_breakdown
from pos_pastes.services.catalog_service import CatalogService


class Cart:
    """
    Carrito de la venta en curso.

    Invariantes:
    - Nunca hay una línea con cantidad <= 0.
    - Un producto aparece como máximo en una línea.
    - Los totales siempre salen de price_breakdown (precios con IVA).
    """

    def __init__(self, items: Optional[List[LineItem]] = None):
        self._lines: Dict[str, LineItem] = {}
        for item in items or []:
            self._lines[item.id] = item

    # =========================================================================
    # Operaciones
    # =========================================================================

    def add_item(self, product: Product) -> None:
        """Agrega una unidad del producto (o incrementa si ya está)."""
        if not product.is_available:
            raise ProductUnavailable(f"{product.name} no está disponible")
        line = self._lines.get(product.id)
        if line is None:
            self._lines[product.id] = LineItem.from_product(product, 1)
        else:
            self._lines[product.id] = replace(line, quantity=line.quantity + 1)

    def increment_quantity(self, product_id: str) -> None:
        line = self._lines.get(product_id)
        if line is not None:
            self._lines[product_id] = replace(line, quantity=line.quantity + 1)

    def decrement_quantity(self, product_id: str) -> None:
        """Resta una unidad; en cantidad 1 no hace nada (usar remove_item)."""
        line = self._lines.get(product_id)
        if line is not None and line.quantity > 1:
            self._lines[product_id] = replace(line, quantity=line.quantity - 1)

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Fija la cantidad; quantity <= 0 elimina la línea."""
        line = self._lines.get(product_id)
        if line is None:
            return
        if quantity <= 0:
            del self._lines[product_id]
        else:
            self._lines[product_id] = replace(line, quantity=int(quantity))

    def remove_item(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    # =========================================================================
    # Consultas
    # =========================================================================

    @property
    def items(self) -> List[LineItem]:
        return list(self._lines.values())

    @property
    def breakdown(self) -> PriceBreakdown:
        return price_breakdown(self._lines.values())

    @property
    def subtotal(self) -> float:
        return self.breakdown.subtotal

    @property
    def tax(self) -> float:
        return self.breakdown.tax

    @property
    def total(self) -> float:
        return self.breakdown.total

    @property
    def item_count(self) -> int:
        """Unidades totales (no líneas)."""
        return sum(line.quantity for line in self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def quantity_of(self, product_id: str) -> int:
        line = self._lines.get(product_id)
        return line.quantity if line else 0

    def has_item(self, product_id: str) -> bool:
        return product_id in self._lines

    def snapshot_line_items(self) -> Tuple[LineItem, ...]:
        """Copia inmutable de las líneas para un pedido o venta."""
        return tuple(self._lines.values())

    # =========================================================================
    # Serialización para la sesión
    # =========================================================================

    def to_session(self) -> List[Dict[str, Any]]:
        return [line.to_dict() for line in self._lines.values()]

    @classmethod
    def from_session(cls, data: Optional[List[Dict[str, Any]]]) -> 'Cart':
        # Las líneas en 0 de una sesión vieja se descartan
        return cls([
            LineItem.from_dict(d) for d in data or []
            if isinstance(d, dict) and d.get('quantity')
        ])

    def to_dict(self) -> Dict[str, Any]:
        breakdown = self.breakdown
        return {
            'items': self.to_session(),
            'item_count': self.item_count,
            'subtotal': breakdown.subtotal,
            'tax': breakdown.tax,
            'total': breakdown.total,
        }


class CartService:
    """
    Servicio para el carrito de la sesión actual.

    Responsabilidades:
    - Resolver productos en el catálogo
    - Aplicar las operaciones de Cart
    - Guardar el carrito en session['carrito']
    """

    SESSION_KEY = 'carrito'

    def __init__(self, catalog_service: CatalogService):
        self.catalog_service = catalog_service

    def load(self) -> Cart:
        """Carrito de la sesión actual."""
        return Cart.from_session(session.get(self.SESSION_KEY))

    def store(self, cart: Cart) -> None:
        session[self.SESSION_KEY] = cart.to_session()
        session.modified = True

    def get_cart(self) -> Dict[str, Any]:
        return self.load().to_dict()

    def add_item(self, product_id: str) -> Dict[str, Any]:
        """
        Agrega una unidad del producto al carrito.

        Raises:
            ProductNotFound: Si el ID no existe en el catálogo
            ProductUnavailable: Si el producto no está disponible
        """
        product = self.catalog_service.lookup_product(product_id)
        if product is None:
            raise ProductNotFound(f"Producto {product_id} no encontrado")
        cart = self.load()
        cart.add_item(product)
        self.store(cart)
        return cart.to_dict()

    def increment_quantity(self, product_id: str) -> Dict[str, Any]:
        return self._apply(lambda cart: cart.increment_quantity(product_id))

    def decrement_quantity(self, product_id: str) -> Dict[str, Any]:
        return self._apply(lambda cart: cart.decrement_quantity(product_id))

    def set_quantity(self, product_id: str, quantity: int) -> Dict[str, Any]:
        return self._apply(lambda cart: cart.set_quantity(product_id, quantity))

    def remove_item(self, product_id: str) -> Dict[str, Any]:
        return self._apply(lambda cart: cart.remove_item(product_id))

    def clear(self) -> Dict[str, Any]:
        return self._apply(lambda cart: cart.clear())

    def _apply(self, operation) -> Dict[str, Any]:
        cart = self.load()
        operation(cart)
        self.store(cart)
        return cart.to_dict()
