# ==============================================================================
# POS PASTES Y EMPANADAS TONY
# ==============================================================================
# Punto de venta: carrito, cobro, pedidos instantáneos y anticipados,
# corte de caja al final del turno.
# ==============================================================================

__version__ = '1.0.0'
