# ==============================================================================
# ERRORES DEL DOMINIO
# ==============================================================================
# Todas las reglas de negocio fallan lanzando una de estas excepciones.
# Las rutas las convierten en {'ok': False, 'error': mensaje} con su código
# HTTP; ningún servicio las registra y sigue como si nada.
# ==============================================================================


class POSError(Exception):
    """Error base del punto de venta."""

    status_code = 400
    default_message = 'Error en el punto de venta'

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidLineItem(POSError):
    """Precio o cantidad negativos en un item."""
    default_message = 'Item inválido: precio y cantidad no pueden ser negativos'


class InvalidAdvance(POSError):
    """El anticipo es negativo o excede el total del pedido."""
    default_message = 'El anticipo no puede exceder el total del pedido'


class InsufficientCash(POSError):
    """El efectivo recibido no cubre el total."""
    default_message = 'El efectivo recibido es menor al total'


class InvalidPaymentMethod(POSError):
    default_message = 'Método de pago inválido'


class EmptyOrder(POSError):
    default_message = 'El carrito está vacío'


class OrderNotFound(POSError):
    status_code = 404
    default_message = 'Pedido no encontrado'


class InvalidOrderTransition(POSError):
    """Cambio de estado no permitido (p. ej. desde 'delivered')."""
    status_code = 409
    default_message = 'Cambio de estado no permitido'


class ProductNotFound(POSError):
    status_code = 404
    default_message = 'Producto no encontrado'


class ProductUnavailable(POSError):
    status_code = 409
    default_message = 'Producto no disponible'


class AuthenticationError(POSError):
    status_code = 401
    default_message = 'PIN incorrecto'


class PersistenceFailure(POSError):
    """Falló la lectura o escritura en el almacenamiento."""
    status_code = 503
    default_message = 'No se pudo acceder al almacenamiento'


class InvalidRequest(POSError):
    """Datos de la petición incompletos o con formato inválido."""
    default_message = 'Datos no recibidos o formato inválido'
