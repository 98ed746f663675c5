# ==============================================================================
# API JSON DEL PUNTO DE VENTA
# ==============================================================================
# Las rutas solo orquestan request → service → response.
# Siempre retornan JSON: {'ok': True, ...} o {'ok': False, 'error': mensaje}.
# ==============================================================================

import math
from datetime import date
from functools import wraps

from flask import Blueprint, current_app, request, session

from pos_pastes.errors import InvalidRequest, POSError
from pos_pastes.models import OrderStatus, OrderType, ProductCategory

api = Blueprint('api', __name__, url_prefix='/api')


# ═══════════════════════════════════════════════════════════════════════════
# UTILIDADES
# ═══════════════════════════════════════════════════════════════════════════

def _container():
    return current_app.extensions['pos_container']


def _payload():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidRequest()
    return data


def _required(data, key):
    value = data.get(key)
    if value is None or value == '':
        raise InvalidRequest(f"Falta el campo '{key}'")
    return value


def _to_float(value, field):
    if value is None or value == '':
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidRequest(f"'{field}' debe ser un número")
    if not math.isfinite(number):
        raise InvalidRequest(f"'{field}' debe ser un número finito")
    return number


def _to_int(value, field):
    if isinstance(value, float) and not value.is_integer():
        raise InvalidRequest(f"'{field}' debe ser un entero")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidRequest(f"'{field}' debe ser un entero")


def _to_enum(enum_cls, value, field):
    if value in (None, ''):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidRequest(f"Valor inválido para '{field}': {value}")


def _to_date(value, field):
    if value in (None, ''):
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidRequest(f"'{field}' debe tener formato AAAA-MM-DD")


def _order_dict(order):
    return dict(order.to_dict(), pendingAmount=order.pending_amount)


def login_required(f):
    """Exige un empleado en sesión; si no, 401."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        employee = _container().auth_service.current_employee()
        if employee is None:
            return {'ok': False, 'error': 'Debes iniciar sesión.'}, 401
        return f(employee, *args, **kwargs)
    return wrapper


@api.errorhandler(POSError)
def _handle_pos_error(error):
    return {'ok': False, 'error': error.message}, error.status_code


# ═══════════════════════════════════════════════════════════════════════════
# SESIÓN
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/login', methods=['POST'])
def login():
    data = _payload()
    auth = _container().auth_service
    employee = auth.login_with_pin(_required(data, 'pin'))
    branch = auth.get_branch(employee.branch_id)
    return {
        'ok': True,
        'employee': employee.to_session(),
        'branch': branch.to_dict() if branch else None,
    }


@api.route('/logout', methods=['POST'])
def logout():
    container = _container()
    container.cart_service.clear()
    container.auth_service.logout()
    return {'ok': True}


@api.route('/session', methods=['GET'])
def session_info():
    return dict(_container().auth_service.session_info(), ok=True)


# ═══════════════════════════════════════════════════════════════════════════
# CATÁLOGO
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/productos', methods=['GET'])
def productos():
    catalog = _container().catalog_service
    category = _to_enum(ProductCategory, request.args.get('category'), 'category')
    if category:
        products = catalog.get_products_by_category(category)
    else:
        products = catalog.get_products()
    if request.args.get('available') in ('1', 'true'):
        products = [p for p in products if p.is_available]
    return {
        'ok': True,
        'categories': catalog.get_categories(),
        'products': [p.to_dict() for p in products],
    }


# ═══════════════════════════════════════════════════════════════════════════
# CARRITO
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/carrito', methods=['GET'])
@login_required
def carrito(employee):
    return {'ok': True, 'cart': _container().cart_service.get_cart()}


@api.route('/carrito/agregar', methods=['POST'])
@login_required
def carrito_agregar(employee):
    product_id = _required(_payload(), 'product_id')
    return {'ok': True, 'cart': _container().cart_service.add_item(product_id)}


@api.route('/carrito/incrementar', methods=['POST'])
@login_required
def carrito_incrementar(employee):
    product_id = _required(_payload(), 'product_id')
    return {'ok': True, 'cart': _container().cart_service.increment_quantity(product_id)}


@api.route('/carrito/decrementar', methods=['POST'])
@login_required
def carrito_decrementar(employee):
    product_id = _required(_payload(), 'product_id')
    return {'ok': True, 'cart': _container().cart_service.decrement_quantity(product_id)}


@api.route('/carrito/cantidad', methods=['POST'])
@login_required
def carrito_cantidad(employee):
    data = _payload()
    product_id = _required(data, 'product_id')
    quantity = _to_int(_required(data, 'quantity'), 'quantity')
    return {'ok': True, 'cart': _container().cart_service.set_quantity(product_id, quantity)}


@api.route('/carrito/eliminar', methods=['POST'])
@login_required
def carrito_eliminar(employee):
    product_id = _required(_payload(), 'product_id')
    return {'ok': True, 'cart': _container().cart_service.remove_item(product_id)}


@api.route('/carrito/limpiar', methods=['POST'])
@login_required
def carrito_limpiar(employee):
    return {'ok': True, 'cart': _container().cart_service.clear()}


# ═══════════════════════════════════════════════════════════════════════════
# COBRO
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/cobrar', methods=['POST'])
@login_required
def cobrar(employee):
    """
    Cobra el carrito de la sesión.
    Espera JSON con: payment_method, cash_received (solo efectivo).
    """
    data = _payload()
    container = _container()
    cart_service = container.cart_service

    cart = cart_service.load()
    sale = container.payment_service.checkout(
        cart,
        _required(data, 'payment_method'),
        employee,
        cash_received=_to_float(data.get('cash_received'), 'cash_received')
    )
    cart_service.store(cart)
    return {'ok': True, 'sale': sale.to_dict(), 'cart': cart.to_dict()}


# ═══════════════════════════════════════════════════════════════════════════
# PEDIDOS
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/pedidos', methods=['POST'])
@login_required
def crear_pedido(employee):
    """
    Crea un pedido instantáneo o anticipado.
    Con 'items' ([{id, quantity}]) se arma desde el catálogo; si no, se usa el
    carrito de la sesión.
    """
    data = _payload()
    container = _container()
    order_type = _to_enum(OrderType, data.get('type'), 'type') or OrderType.INSTANT
    payment_method = _required(data, 'payment_method')
    customer = data.get('customer')
    notes = data.get('notes') or ''
    advance = _to_float(data.get('advance'), 'advance')

    pickup_date = pickup_time = None
    if order_type == OrderType.PREORDER:
        pickup_date = _to_date(_required(data, 'pickup_date'), 'pickup_date')
        pickup_time = _required(data, 'pickup_time')

    items = data.get('items')
    if items:
        if not isinstance(items, list):
            raise InvalidRequest("'items' debe ser una lista")
        items = container.catalog_service.resolve_items(items)
        orders = container.order_service
        if order_type == OrderType.PREORDER:
            order = orders.create_pre_order(
                items, customer, payment_method, pickup_date, pickup_time,
                employee, advance=advance, notes=notes
            )
        else:
            order = orders.create_instant_order(
                items, customer, payment_method, employee, notes=notes
            )
    else:
        cart = container.cart_service.load()
        order = container.payment_service.save_cart_as_order(
            cart, customer, payment_method, employee,
            order_type=order_type,
            pickup_date=pickup_date,
            pickup_time=pickup_time,
            advance=advance,
            notes=notes
        )
        container.cart_service.store(cart)

    return {'ok': True, 'order': _order_dict(order)}, 201


@api.route('/pedidos', methods=['GET'])
@login_required
def listar_pedidos(employee):
    """Filtros: type, status, scope=pending|today."""
    orders = _container().order_service
    scope = request.args.get('scope')
    if scope == 'pending':
        result = orders.list_pending_orders(employee.branch_id)
    elif scope == 'today':
        result = orders.list_today_orders(employee.branch_id)
    else:
        result = orders.list_orders(
            type=_to_enum(OrderType, request.args.get('type'), 'type'),
            status=_to_enum(OrderStatus, request.args.get('status'), 'status'),
            branch_id=employee.branch_id
        )
    return {'ok': True, 'orders': [_order_dict(o) for o in result]}


@api.route('/pedidos/<order_id>', methods=['GET'])
@login_required
def ver_pedido(employee, order_id):
    order = _container().order_service.get_order(order_id)
    return {'ok': True, 'order': _order_dict(order)}


@api.route('/pedidos/<order_id>/estado', methods=['POST'])
@login_required
def cambiar_estado(employee, order_id):
    status = _required(_payload(), 'status')
    order = _container().order_service.update_status(order_id, status, employee)
    return {'ok': True, 'order': _order_dict(order)}


@api.route('/pedidos/<order_id>/entregar', methods=['POST'])
@login_required
def entregar_pedido(employee, order_id):
    container = _container()
    order = container.order_service.mark_as_delivered(order_id, employee)
    sale = container.sales_service.find_sale_for_order(order.id)
    return {
        'ok': True,
        'order': _order_dict(order),
        'sale': sale.to_dict() if sale else None,
    }


@api.route('/pedidos/<order_id>/cancelar', methods=['POST'])
@login_required
def cancelar_pedido(employee, order_id):
    order = _container().order_service.cancel_order(order_id, employee)
    return {'ok': True, 'order': _order_dict(order)}


# ═══════════════════════════════════════════════════════════════════════════
# VENTAS Y CORTE DE CAJA
# ═══════════════════════════════════════════════════════════════════════════

@api.route('/ventas', methods=['GET'])
@login_required
def ventas(employee):
    """Ventas del día (?date=AAAA-MM-DD) o las últimas (?limit=N)."""
    sales_service = _container().sales_service
    day = _to_date(request.args.get('date'), 'date')
    if day is not None:
        sales = sales_service.get_daily_sales(day, employee.branch_id)
    else:
        limit = _to_int(request.args.get('limit', 5), 'limit')
        sales = sales_service.get_recent_sales(limit, employee.branch_id)
    return {'ok': True, 'sales': [s.to_dict() for s in sales]}


@api.route('/corte', methods=['GET'])
@login_required
def corte(employee):
    summary = _container().sales_service.shift_summary(employee)
    return {'ok': True, 'summary': summary.to_dict()}


@api.route('/corte/cerrar', methods=['POST'])
@login_required
def cerrar_turno(employee):
    """
    Cierre de turno: registra el corte, vacía el libro, reinicia la
    numeración de pedidos, vacía el carrito y cierra la sesión.
    """
    container = _container()
    summary = container.sales_service.shift_summary(employee).to_dict()
    container.audit_service.log_shift_closed(employee.name, summary)

    container.sales_service.clear()
    container.order_sequence.reset()
    container.cart_service.clear()
    container.auth_service.logout()
    session.clear()
    return {'ok': True, 'summary': summary}
