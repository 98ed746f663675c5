# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único donde se construyen repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (modo mock en memoria, repositorios reemplazables)
#   - Cambiar de backend sin tocar servicios
#
# data_dir = None → todas las colecciones viven en memoria (modo mock).
# ==============================================================================

from typing import Optional

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia
# ═══════════════════════════════════════════════════════════════════════════════
from pos_pastes.repositories import (
    AuditRepository,
    BranchRepository,
    EmployeeRepository,
    OrderRepository,
    ProductRepository,
    SalesRepository,
    SequenceRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from pos_pastes.services import (
    AuditService,
    AuthService,
    CartService,
    CatalogService,
    OrderNumberSequence,
    OrderService,
    PaymentService,
    SalesService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.
    Cada repositorio y servicio se crea una sola vez (lazy loading).

    Uso:
        container = AppContainer(data_dir='/var/pos/data')
        order_service = container.order_service
    """

    _instance: Optional['AppContainer'] = None

    def __init__(self, data_dir: Optional[str] = None):
        """
        Args:
            data_dir: Carpeta de archivos JSON, o None para modo mock
        """
        self._data_dir = data_dir
        self.reset()

    @property
    def data_dir(self) -> Optional[str]:
        return self._data_dir

    @property
    def is_mock(self) -> bool:
        return self._data_dir is None

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def order_repo(self) -> OrderRepository:
        if self._order_repo is None:
            self._order_repo = OrderRepository(self._data_dir)
        return self._order_repo

    @property
    def sales_repo(self) -> SalesRepository:
        if self._sales_repo is None:
            self._sales_repo = SalesRepository(self._data_dir)
        return self._sales_repo

    @property
    def employee_repo(self) -> EmployeeRepository:
        if self._employee_repo is None:
            self._employee_repo = EmployeeRepository(self._data_dir)
        return self._employee_repo

    @property
    def branch_repo(self) -> BranchRepository:
        if self._branch_repo is None:
            self._branch_repo = BranchRepository(self._data_dir)
        return self._branch_repo

    @property
    def product_repo(self) -> ProductRepository:
        if self._product_repo is None:
            self._product_repo = ProductRepository(self._data_dir)
        return self._product_repo

    @property
    def sequence_repo(self) -> SequenceRepository:
        if self._sequence_repo is None:
            self._sequence_repo = SequenceRepository(self._data_dir)
        return self._sequence_repo

    @property
    def audit_repo(self) -> AuditRepository:
        if self._audit_repo is None:
            self._audit_repo = AuditRepository(self._data_dir)
        return self._audit_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.product_repo)
        return self._catalog_service

    @property
    def cart_service(self) -> CartService:
        if self._cart_service is None:
            self._cart_service = CartService(self.catalog_service)
        return self._cart_service

    @property
    def sales_service(self) -> SalesService:
        if self._sales_service is None:
            self._sales_service = SalesService(self.sales_repo, self.audit_service)
        return self._sales_service

    @property
    def order_sequence(self) -> OrderNumberSequence:
        if self._order_sequence is None:
            self._order_sequence = OrderNumberSequence(self.sequence_repo)
        return self._order_sequence

    @property
    def order_service(self) -> OrderService:
        if self._order_service is None:
            self._order_service = OrderService(
                self.order_repo,
                self.order_sequence,
                self.sales_service,
                self.audit_service
            )
        return self._order_service

    @property
    def payment_service(self) -> PaymentService:
        if self._payment_service is None:
            self._payment_service = PaymentService(
                self.sales_service,
                self.order_service
            )
        return self._payment_service

    @property
    def auth_service(self) -> AuthService:
        if self._auth_service is None:
            self._auth_service = AuthService(
                self.employee_repo,
                self.branch_repo,
                self.audit_service
            )
        return self._auth_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def seed(self) -> None:
        """Carga menú, sucursal y empleados por defecto en colecciones vacías."""
        self.catalog_service.seed_if_empty()
        self.auth_service.seed_if_empty()

    def reset(self) -> None:
        """
        Reinicia todas las instancias.
        En modo mock esto descarta todos los datos.
        """
        self._order_repo = None
        self._sales_repo = None
        self._employee_repo = None
        self._branch_repo = None
        self._product_repo = None
        self._sequence_repo = None
        self._audit_repo = None

        self._audit_service = None
        self._catalog_service = None
        self._cart_service = None
        self._sales_service = None
        self._order_sequence = None
        self._order_service = None
        self._payment_service = None
        self._auth_service = None

    @classmethod
    def get_instance(cls, data_dir: Optional[str] = None) -> 'AppContainer':
        """
        Obtiene el contenedor global.

        Args:
            data_dir: Solo se usa en la primera llamada
        """
        if cls._instance is None:
            cls._instance = cls(data_dir)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina el contenedor global (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(data_dir: Optional[str] = None) -> AppContainer:
    """Obtiene el contenedor de dependencias global."""
    return AppContainer.get_instance(data_dir)
