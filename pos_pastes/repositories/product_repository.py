# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula todo el acceso a products.json (catálogo del menú)
# ==============================================================================

from typing import Any, Dict, List

from .base import DictRepository


class ProductRepository(DictRepository):
    """
    Formato de datos en products.json:
    {
        "ps-001": {
            "id": "ps-001",
            "name": "Paste de Papa con Carne",
            "price": 25.0,
            "category": "Pastes Salados",
            "isAvailable": true,
            "description": ""
        }
    }
    """

    collection = 'products'

    def list_by_category(self, category: str) -> List[Dict[str, Any]]:
        return self.list(category=category)

    def list_available(self) -> List[Dict[str, Any]]:
        return self.list(isAvailable=True)

    def set_availability(self, product_id: str, is_available: bool):
        return self.update(product_id, {'isAvailable': is_available})
