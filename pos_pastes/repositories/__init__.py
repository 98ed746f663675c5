# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia.
#
# ESTRUCTURA:
# ├── interfaces.py          → Protocolos (contratos save/get/list/update)
# ├── base.py                → Clases base (archivo JSON o memoria)
# ├── order_repository.py    → orders.json
# ├── sales_repository.py    → sales.json (solo inserción)
# ├── employee_repository.py → employees.json, branches.json
# ├── product_repository.py  → products.json
# ├── sequence_repository.py → sequences.json
# └── audit_repository.py    → audit.json
# ==============================================================================

from .interfaces import (
    IRepository,
    IMutableRepository,
    IOrderRepository,
    ISalesRepository,
    IEmployeeRepository,
    IProductRepository,
    ISequenceRepository,
    IAuditRepository,
)

from .base import BaseRepository, RecordRepository, DictRepository, ListRepository
from .order_repository import OrderRepository
from .sales_repository import SalesRepository
from .employee_repository import EmployeeRepository, BranchRepository
from .product_repository import ProductRepository
from .sequence_repository import SequenceRepository
from .audit_repository import AuditRepository

__all__ = [
    # Interfaces
    'IRepository',
    'IMutableRepository',
    'IOrderRepository',
    'ISalesRepository',
    'IEmployeeRepository',
    'IProductRepository',
    'ISequenceRepository',
    'IAuditRepository',

    # Clases base
    'BaseRepository',
    'RecordRepository',
    'DictRepository',
    'ListRepository',

    # Implementaciones
    'OrderRepository',
    'SalesRepository',
    'EmployeeRepository',
    'BranchRepository',
    'ProductRepository',
    'SequenceRepository',
    'AuditRepository',
]
