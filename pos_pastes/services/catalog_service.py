# ==============================================================================
# SERVICIO DE CATÁLOGO
# ==============================================================================
# Menú de productos con precio (IVA incluido) y disponibilidad del día.
# ==============================================================================

from typing import Any, Iterable, List, Optional, Tuple, Union

from pos_pastes.errors import InvalidLineItem, ProductNotFound, ProductUnavailable
from pos_pastes.models import LineItem, Product, ProductCategory
from pos_pastes.repositories.interfaces import IProductRepository


# Menú inicial: (id, nombre, precio, categoría)
DEFAULT_MENU = [
    ('ps-001', 'Minero Tradicional', 27.0, ProductCategory.PASTES_SALADOS),
    ('ps-002', 'Pollo con Mole', 29.0, ProductCategory.PASTES_SALADOS),
    ('ps-003', 'Tinga de Pollo', 29.0, ProductCategory.PASTES_SALADOS),
    ('ps-004', 'Hawaiano', 30.0, ProductCategory.PASTES_SALADOS),
    ('ps-005', 'Champiñones', 28.0, ProductCategory.PASTES_SALADOS),
    ('ps-006', 'Rajas con Queso', 28.0, ProductCategory.PASTES_SALADOS),
    ('ps-007', 'Atún', 30.0, ProductCategory.PASTES_SALADOS),
    ('ps-008', 'Picadillo', 27.0, ProductCategory.PASTES_SALADOS),

    ('es-001', 'Emp. Pollo', 25.0, ProductCategory.EMPANADAS_SALADAS),
    ('es-002', 'Emp. Carne', 25.0, ProductCategory.EMPANADAS_SALADAS),
    ('es-003', 'Emp. Queso', 24.0, ProductCategory.EMPANADAS_SALADAS),
    ('es-004', 'Emp. Jamón y Queso', 26.0, ProductCategory.EMPANADAS_SALADAS),
    ('es-005', 'Emp. Rajas', 25.0, ProductCategory.EMPANADAS_SALADAS),
    ('es-006', 'Emp. Champiñones', 26.0, ProductCategory.EMPANADAS_SALADAS),

    ('ed-001', 'Emp. Manzana', 22.0, ProductCategory.EMPANADAS_DULCES),
    ('ed-002', 'Emp. Piña', 22.0, ProductCategory.EMPANADAS_DULCES),
    ('ed-003', 'Emp. Cajeta', 23.0, ProductCategory.EMPANADAS_DULCES),
    ('ed-004', 'Emp. Chocolate', 24.0, ProductCategory.EMPANADAS_DULCES),
    ('ed-005', 'Emp. Fresa', 22.0, ProductCategory.EMPANADAS_DULCES),
    ('ed-006', 'Emp. Nutella', 26.0, ProductCategory.EMPANADAS_DULCES),

    ('bb-001', 'Agua Natural', 15.0, ProductCategory.BEBIDAS),
    ('bb-002', 'Refresco 355ml', 18.0, ProductCategory.BEBIDAS),
    ('bb-003', 'Refresco 600ml', 25.0, ProductCategory.BEBIDAS),
    ('bb-004', 'Agua de Sabor', 20.0, ProductCategory.BEBIDAS),
    ('bb-005', 'Café Americano', 22.0, ProductCategory.BEBIDAS),
    ('bb-006', 'Jugo Natural', 28.0, ProductCategory.BEBIDAS),

    ('pm-001', 'Combo 2 Pastes + Refresco', 70.0, ProductCategory.PROMOCIONES),
    ('pm-002', 'Combo 3 Empanadas + Bebida', 85.0, ProductCategory.PROMOCIONES),
    ('pm-003', 'Combo Familiar (6 Pastes)', 150.0, ProductCategory.PROMOCIONES),
    ('pm-004', 'Combo Dulce (4 Emp. + Café)', 95.0, ProductCategory.PROMOCIONES),
]


class CatalogService:
    """
    Servicio de catálogo.

    Responsabilidades:
    - Consultar productos (todos, disponibles, por categoría)
    - Resolver un producto por ID para el carrito
    - Marcar productos como agotados / disponibles
    """

    def __init__(self, product_repo: IProductRepository):
        self.product_repo = product_repo

    def seed_if_empty(self) -> int:
        """
        Carga el menú inicial si la colección está vacía.

        Returns:
            Número de productos insertados
        """
        if self.product_repo.list():
            return 0
        products = [
            Product(id=pid, name=name, price=price, category=category)
            for pid, name, price, category in DEFAULT_MENU
        ]
        self.product_repo.save_all([p.to_dict() for p in products])
        return len(products)

    def get_products(self) -> List[Product]:
        return [Product.from_dict(p) for p in self.product_repo.list()]

    def get_available_products(self) -> List[Product]:
        return [p for p in self.get_products() if p.is_available]

    def get_products_by_category(self, category: Union[ProductCategory, str]) -> List[Product]:
        category = ProductCategory(category)
        return [
            Product.from_dict(p)
            for p in self.product_repo.list_by_category(category.value)
        ]

    def lookup_product(self, product_id: str) -> Optional[Product]:
        data = self.product_repo.get(product_id)
        return Product.from_dict(data) if data else None

    def resolve_items(self, items: Iterable[Any]) -> Tuple[LineItem, ...]:
        """
        Convierte items pedidos por el cliente ({id, quantity}) en LineItems
        con nombre y precio del catálogo. El precio enviado se ignora.

        Raises:
            InvalidLineItem: Item sin ID o con cantidad inválida
            ProductNotFound: ID desconocido
            ProductUnavailable: Producto agotado
        """
        result = []
        for item in items or ():
            if not isinstance(item, dict) or not item.get('id'):
                raise InvalidLineItem(f"Item inválido: {item!r}")
            product = self.lookup_product(str(item['id']))
            if product is None:
                raise ProductNotFound(f"Producto {item['id']} no encontrado")
            if not product.is_available:
                raise ProductUnavailable(f"{product.name} no está disponible")
            result.append(LineItem.from_dict({
                'id': product.id,
                'name': product.name,
                'price': product.price,
                'quantity': item.get('quantity', 1),
            }))
        return tuple(result)

    def set_availability(self, product_id: str, is_available: bool) -> Product:
        """
        Raises:
            ProductNotFound: Si el producto no existe
        """
        data = self.product_repo.update(product_id, {'isAvailable': bool(is_available)})
        if data is None:
            raise ProductNotFound(f"Producto {product_id} no encontrado")
        return Product.from_dict(data)

    @staticmethod
    def get_categories() -> List[str]:
        return [c.value for c in ProductCategory]
