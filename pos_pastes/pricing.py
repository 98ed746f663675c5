# ==============================================================================
# CÁLCULOS DE PRECIOS E IVA
# ==============================================================================
# Los precios del catálogo YA INCLUYEN IVA (16%). Por eso:
#   - total    = suma de precio * cantidad
#   - subtotal = total / 1.16 (precio sin IVA)
#   - iva      = total - subtotal
#
# Descomponer desde el total (y no sumar el IVA a un subtotal) garantiza que
# subtotal + iva == total después de redondear. Carrito, pedidos, ventas y el
# corte de caja usan SOLO estas funciones.
# ==============================================================================

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from pos_pastes.errors import InvalidLineItem


TAX_RATE = Decimal('0.16')
_TAX_DIVISOR = Decimal('1') + TAX_RATE
_CENT = Decimal('0.01')

Number = Union[int, float, Decimal]


@dataclass(frozen=True)
class PriceBreakdown:
    """Desglose de un total con IVA incluido."""
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {'subtotal': self.subtotal, 'iva': self.tax, 'total': self.total}


def _to_decimal(value: Number) -> Decimal:
    # repr() del float evita arrastrar el error binario (1.005 -> '1.005')
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(repr(value))
        else:
            result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidLineItem(f"Monto inválido: {value!r}")
    if not result.is_finite():
        raise InvalidLineItem(f"Monto inválido: {value!r}")
    return result


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def round2(value: Number) -> float:
    """
    Redondea a 2 decimales (mitad hacia arriba) sin errores de punto flotante.

    Args:
        value: Número a redondear

    Returns:
        Número redondeado; round2(round2(x)) == round2(x)

    Raises:
        InvalidLineItem: NaN, infinito o valor no numérico
    """
    return float(_quantize(_to_decimal(value)))


def _line_values(item: Any) -> Tuple[Decimal, Decimal]:
    """Extrae (precio, cantidad) de un LineItem o de un dict."""
    if isinstance(item, dict):
        price, quantity = item.get('price', 0), item.get('quantity', 0)
    else:
        price, quantity = item.price, item.quantity
    price = _to_decimal(price or 0)
    quantity = _to_decimal(quantity or 0)
    if price < 0 or quantity < 0:
        raise InvalidLineItem(
            f"Item inválido (precio {price}, cantidad {quantity})"
        )
    return price, quantity


def _items_total(items: Optional[Iterable[Any]]) -> Decimal:
    total = Decimal('0')
    for item in items or ():
        price, quantity = _line_values(item)
        total += price * quantity
    return _quantize(total)


def price_breakdown(items: Optional[Iterable[Any]]) -> PriceBreakdown:
    """
    Calcula subtotal, IVA y total de una lista de items con IVA incluido.

    Args:
        items: LineItems o dicts con 'price' y 'quantity' (None = vacío)

    Returns:
        PriceBreakdown; lista vacía -> (0, 0, 0)

    Raises:
        InvalidLineItem: Si algún precio o cantidad es negativo o no finito
    """
    total = _items_total(items)
    subtotal = _quantize(total / _TAX_DIVISOR)
    tax = _quantize(total - subtotal)
    return PriceBreakdown(
        subtotal=float(subtotal),
        tax=float(tax),
        total=float(total)
    )


def is_consistent(subtotal: Number, tax: Number, total: Number) -> bool:
    """Verifica que subtotal + iva redondee al total."""
    return round2(_to_decimal(subtotal) + _to_decimal(tax)) == round2(total)


def calculate_change(total: Number, cash_received: Number) -> float:
    """Cambio a devolver en un pago en efectivo."""
    return round2(_to_decimal(cash_received) - _to_decimal(total))


def pending_amount(total: Number, advance: Optional[Number]) -> float:
    """Saldo pendiente de un pedido anticipado."""
    return round2(_to_decimal(total) - _to_decimal(advance or 0))


def format_order_number(counter: int) -> str:
    """Formatea el número de pedido como '#001'."""
    return f"#{counter:03d}"


def format_currency(amount: Number) -> str:
    """Formatea un monto en pesos: '$1,234.50'."""
    return f"${round2(amount):,.2f}"
