import pytest

from pos_pastes.models import AuditType


# 2 × 27 + 15 = 69
COMBO = [{'id': 'ps-001', 'quantity': 2}, {'id': 'bb-001', 'quantity': 1}]


def test_login_required(client):
    for method, url in [
        ('get', '/api/carrito'),
        ('post', '/api/cobrar'),
        ('get', '/api/pedidos'),
        ('get', '/api/corte'),
        ('get', '/api/ventas'),
    ]:
        r = getattr(client, method)(url)
        assert r.status_code == 401
        assert r.get_json()['ok'] is False


def test_login_and_session(client, login):
    r = client.post('/api/login', json={'pin': '111111'})
    assert r.status_code == 401
    assert r.get_json() == {'ok': False, 'error': 'PIN incorrecto'}

    r = client.post('/api/login', json={})
    assert r.status_code == 400

    employee = login('123456')
    assert employee['name'] == 'Juan Pérez'

    data = client.get('/api/session').get_json()
    assert data['authenticated'] is True
    assert data['branch']['name'] == 'Lisboa 22'

    client.post('/api/logout')
    assert client.get('/api/session').get_json()['authenticated'] is False


def test_products_are_public(client):
    data = client.get('/api/productos').get_json()
    assert len(data['products']) == 30
    assert len(data['categories']) == 5

    data = client.get('/api/productos?category=Bebidas').get_json()
    assert {p['category'] for p in data['products']} == {'Bebidas'}

    r = client.get('/api/productos?category=Tacos')
    assert r.status_code == 400


def test_cart_and_cash_checkout(client, login):
    login()
    client.post('/api/carrito/agregar', json={'product_id': 'ps-001'})
    client.post('/api/carrito/agregar', json={'product_id': 'ps-001'})
    client.post('/api/carrito/agregar', json={'product_id': 'bb-002'})
    cart = client.get('/api/carrito').get_json()['cart']
    assert cart['item_count'] == 3
    assert cart['total'] == 72.0
    assert cart['subtotal'] == 62.07
    assert cart['tax'] == 9.93

    r = client.post('/api/carrito/agregar', json={'product_id': 'zz-999'})
    assert r.status_code == 404

    r = client.post('/api/cobrar', json={'payment_method': 'cash', 'cash_received': 50})
    assert r.status_code == 400
    assert client.get('/api/carrito').get_json()['cart']['item_count'] == 3

    r = client.post('/api/cobrar', json={'payment_method': 'cash', 'cash_received': 100})
    assert r.status_code == 200
    sale = r.get_json()['sale']
    assert sale['total'] == 72.0
    assert sale['change'] == 28.0
    assert sale['employeeName'] == 'Juan Pérez'
    assert client.get('/api/carrito').get_json()['cart']['items'] == []

    r = client.post('/api/cobrar', json={'payment_method': 'card'})
    assert r.status_code == 400
    assert r.get_json()['error'] == 'El carrito está vacío'


def test_cart_quantity_operations(client, login):
    login()
    client.post('/api/carrito/agregar', json={'product_id': 'ed-001'})
    client.post('/api/carrito/incrementar', json={'product_id': 'ed-001'})
    cart = client.post('/api/carrito/decrementar', json={'product_id': 'ed-001'}).get_json()['cart']
    assert cart['item_count'] == 1

    cart = client.post('/api/carrito/cantidad', json={'product_id': 'ed-001', 'quantity': 5}).get_json()['cart']
    assert cart['item_count'] == 5
    assert cart['total'] == 110.0

    r = client.post('/api/carrito/cantidad', json={'product_id': 'ed-001', 'quantity': 'muchos'})
    assert r.status_code == 400

    cart = client.post('/api/carrito/eliminar', json={'product_id': 'ed-001'}).get_json()['cart']
    assert cart['items'] == []

    client.post('/api/carrito/agregar', json={'product_id': 'ed-002'})
    cart = client.post('/api/carrito/limpiar').get_json()['cart']
    assert cart['item_count'] == 0


def test_pre_order_from_cart_and_delivery(client, login):
    login()
    client.post('/api/carrito/agregar', json={'product_id': 'pm-003'})
    r = client.post('/api/pedidos', json={
        'type': 'preorder',
        'payment_method': 'transfer',
        'customer': {'name': 'Empresa ABC', 'phone': '5511112222'},
        'pickup_date': '2026-10-20',
        'pickup_time': '13:00',
        'advance': 50,
    })
    assert r.status_code == 201, r.get_json()
    order = r.get_json()['order']
    assert order['orderNumber'] == '#001'
    assert order['total'] == 150.0
    assert order['pendingAmount'] == 100.0
    assert client.get('/api/carrito').get_json()['cart']['items'] == []

    pending = client.get('/api/pedidos?scope=pending').get_json()['orders']
    assert [o['id'] for o in pending] == [order['id']]

    r = client.post(f"/api/pedidos/{order['id']}/estado", json={'status': 'preparing'})
    assert r.get_json()['order']['status'] == 'preparing'

    r = client.post(f"/api/pedidos/{order['id']}/estado", json={'status': 'ready'})
    assert r.get_json()['order']['status'] == 'ready'

    r = client.post(f"/api/pedidos/{order['id']}/entregar")
    assert r.status_code == 200
    body = r.get_json()
    assert body['order']['status'] == 'delivered'
    assert body['sale']['orderId'] == order['id']
    assert body['sale']['total'] == 150.0

    r = client.post(f"/api/pedidos/{order['id']}/entregar")
    assert r.status_code == 409

    sales = client.get('/api/ventas').get_json()['sales']
    assert len(sales) == 1


def test_instant_order_with_explicit_items(client, login):
    login()
    r = client.post('/api/pedidos', json={
        'payment_method': 'cash',
        'items': COMBO,
    })
    assert r.status_code == 201
    order = r.get_json()['order']
    assert (order['subtotal'], order['iva'], order['total']) == (59.48, 9.52, 69.0)
    assert order['customer']['name'] == 'Cliente'

    r = client.post(f"/api/pedidos/{order['id']}/cancelar")
    assert r.get_json()['order']['status'] == 'cancelled'

    r = client.post(f"/api/pedidos/{order['id']}/estado", json={'status': 'delivered'})
    assert r.status_code == 409

    assert client.get('/api/pedidos/no-existe').status_code == 404


def test_order_validation_errors(client, login):
    login()
    r = client.post('/api/pedidos', json={'payment_method': 'cash'})
    assert r.status_code == 400
    assert r.get_json()['error'] == 'El carrito está vacío'

    r = client.post('/api/pedidos', json={
        'type': 'preorder',
        'payment_method': 'cash',
        'items': [{'id': 'ps-001', 'quantity': 20}],
        'pickup_date': '2026-10-20',
        'pickup_time': '13:00',
        'advance': 600,
    })
    assert r.status_code == 400

    r = client.post('/api/pedidos', json={
        'type': 'preorder',
        'payment_method': 'cash',
        'items': [{'id': 'ps-001', 'quantity': 1}],
        'pickup_date': '20/10/2026',
        'pickup_time': '13:00',
    })
    assert r.status_code == 400


def test_shift_close_resets_everything(client, login):
    login()
    client.post('/api/carrito/agregar', json={'product_id': 'ps-001'})
    client.post('/api/cobrar', json={'payment_method': 'cash', 'cash_received': 30})
    client.post('/api/carrito/agregar', json={'product_id': 'bb-001'})
    client.post('/api/cobrar', json={'payment_method': 'card'})
    client.post('/api/pedidos', json={
        'payment_method': 'cash',
        'items': COMBO,
    })
    client.post('/api/carrito/agregar', json={'product_id': 'bb-002'})

    summary = client.get('/api/corte').get_json()['summary']
    assert summary['salesCount'] == 2
    assert summary['cashTotal'] == 27.0
    assert summary['cardTotal'] == 15.0
    assert summary['totalSales'] == 42.0
    assert summary['averageTicket'] == 21.0

    r = client.post('/api/corte/cerrar')
    assert r.status_code == 200
    assert r.get_json()['summary']['totalSales'] == 42.0

    # sesión cerrada
    assert client.get('/api/carrito').status_code == 401

    login()
    assert client.get('/api/carrito').get_json()['cart']['items'] == []
    assert client.get('/api/corte').get_json()['summary']['salesCount'] == 0

    r = client.post('/api/pedidos', json={
        'payment_method': 'cash',
        'items': COMBO,
    })
    assert r.get_json()['order']['orderNumber'] == '#001'

    container = client.application.extensions['pos_container']
    audit = container.audit_service.get_by_type(AuditType.SISTEMA)
    assert any('Corte de caja' in log['message'] for log in audit)


def test_logout_empties_cart_for_next_employee(client, login):
    login('123456')
    client.post('/api/carrito/agregar', json={'product_id': 'ps-001'})
    client.post('/api/logout')

    login('567890')
    cart = client.get('/api/carrito').get_json()['cart']
    assert cart['item_count'] == 0
    assert cart['items'] == []


def test_non_finite_amounts_are_rejected(client, login):
    login()
    for advance in ('nan', 'inf', float('nan')):
        r = client.post('/api/pedidos', json={
            'type': 'preorder',
            'payment_method': 'cash',
            'items': COMBO,
            'pickup_date': '2026-10-20',
            'pickup_time': '13:00',
            'advance': advance,
        })
        assert r.status_code == 400
        assert r.get_json()['ok'] is False

    client.post('/api/carrito/agregar', json={'product_id': 'ps-001'})
    for cash in ('nan', 'inf', '-inf', float('inf')):
        r = client.post('/api/cobrar', json={'payment_method': 'cash', 'cash_received': cash})
        assert r.status_code == 400

    assert client.get('/api/carrito').get_json()['cart']['item_count'] == 1
    assert client.get('/api/corte').get_json()['summary']['salesCount'] == 0


def test_explicit_items_take_catalog_name_and_price(client, login):
    login()
    r = client.post('/api/pedidos', json={
        'payment_method': 'card',
        'items': [{'id': 'ps-001', 'name': 'Regalo', 'price': 0.01, 'quantity': 1}],
    })
    assert r.status_code == 201
    order = r.get_json()['order']
    assert order['total'] == 27.0
    assert order['items'] == [
        {'id': 'ps-001', 'name': 'Minero Tradicional', 'price': 27.0, 'quantity': 1}
    ]

    # el precio enviado no se usa, ni siquiera si no es numérico
    r = client.post('/api/pedidos', json={
        'payment_method': 'card',
        'items': [{'id': 'bb-001', 'price': 'abc', 'quantity': 2}],
    })
    assert r.status_code == 201
    assert r.get_json()['order']['total'] == 30.0


@pytest.mark.parametrize('items, status', [
    ([{'id': 'ps-001', 'quantity': 1}, {'id': 'bb-001', 'quantity': 0}], 400),
    ([{'id': 'ps-001', 'quantity': 1.7}], 400),
    ([{'id': 'ps-001', 'quantity': -1}], 400),
    ([{'id': 'ps-001', 'quantity': 'dos'}], 400),
    (['ps-001'], 400),
    ([{'quantity': 1}], 400),
    ([{'id': 'zz-999', 'quantity': 1}], 404),
])
def test_invalid_explicit_items(client, login, items, status):
    login()
    r = client.post('/api/pedidos', json={'payment_method': 'cash', 'items': items})
    assert r.status_code == status
    assert r.get_json()['ok'] is False
    assert client.get('/api/pedidos').get_json()['orders'] == []
