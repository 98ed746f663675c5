import json
import os

import pytest

from pos_pastes.app_container import AppContainer
from pos_pastes.errors import PersistenceFailure
from pos_pastes.repositories import (
    AuditRepository,
    IMutableRepository,
    IRepository,
    OrderRepository,
    ProductRepository,
    SalesRepository,
    SequenceRepository,
)


@pytest.fixture(params=['memory', 'json'])
def data_dir(request, tmp_path):
    return None if request.param == 'memory' else str(tmp_path / 'data')


def test_save_get_list_update(data_dir):
    repo = OrderRepository(data_dir)
    first = repo.save({'orderNumber': '#001', 'status': 'pending'})
    second = repo.save({'orderNumber': '#002', 'status': 'ready'})

    assert repo.get(first)['orderNumber'] == '#001'
    assert repo.get(first)['id'] == first
    assert repo.get('nope') is None
    assert [o['id'] for o in repo.list()] == [first, second]
    assert [o['id'] for o in repo.list(status='ready')] == [second]

    updated = repo.update(first, {'status': 'delivered'})
    assert updated['status'] == 'delivered'
    assert repo.get(first)['status'] == 'delivered'
    assert repo.update('nope', {'status': 'x'}) is None
    assert [o['id'] for o in repo.list_by_status('pending', 'ready')] == [second]


def test_returned_records_are_copies(data_dir):
    repo = OrderRepository(data_dir)
    record_id = repo.save({'status': 'pending'})
    repo.get(record_id)['status'] = 'hacked'
    assert repo.get(record_id)['status'] == 'pending'


def test_explicit_id_is_kept(data_dir):
    repo = ProductRepository(data_dir)
    assert repo.save({'id': 'ps-001', 'name': 'Minero'}) == 'ps-001'
    repo.set_availability('ps-001', False)
    assert repo.list_available() == []


def test_sales_repository_is_insert_only(data_dir):
    repo = SalesRepository(data_dir)
    assert not hasattr(repo, 'update')
    assert not hasattr(repo, 'delete')
    assert isinstance(repo, IRepository)
    assert not isinstance(repo, IMutableRepository)

    sale_id = repo.save({'total': 69.0, 'orderId': 'o-1', 'createdAt': '2026-10-18T12:00:00'})
    assert repo.get_by_order('o-1')['id'] == sale_id
    assert repo.get_by_order('o-2') is None
    assert len(repo.list_between('2026-10-18T00:00:00', '2026-10-19T00:00:00')) == 1
    assert repo.list_between('2026-10-19T00:00:00', '2026-10-20T00:00:00') == []


def test_sequence_repository(data_dir):
    repo = SequenceRepository(data_dir)
    assert repo.current('orders') == 0
    repo.set_value('orders', 5)
    repo.set_value('orders', 6)
    assert repo.current('orders') == 6
    assert len(repo.list()) == 1


def test_audit_repository_newest_first(data_dir):
    repo = AuditRepository(data_dir)
    repo.log('VENTA', 'Juan', 'primera')
    repo.log('PEDIDO', '', 'segunda')
    logs = repo.list()
    assert [l['message'] for l in logs] == ['segunda', 'primera']
    assert logs[0]['user'] == 'sistema'
    assert repo.get(logs[1]['id'])['type'] == 'VENTA'
    assert [l['message'] for l in repo.get_by_type('VENTA')] == ['primera']


def test_json_backend_persists_across_instances(tmp_path):
    data_dir = str(tmp_path)
    record_id = OrderRepository(data_dir).save({'status': 'pending'})

    assert OrderRepository(data_dir).get(record_id)['status'] == 'pending'
    with open(os.path.join(data_dir, 'orders.json'), encoding='utf-8') as f:
        assert record_id in json.load(f)
    assert not os.path.exists(os.path.join(data_dir, 'orders.json.tmp'))


def test_memory_backend_is_per_instance():
    repo = OrderRepository(None)
    repo.save({'status': 'pending'})
    assert repo.is_mock
    assert OrderRepository(None).list() == []


def test_corrupt_file_raises_persistence_failure(tmp_path):
    repo = OrderRepository(str(tmp_path))
    with open(repo.file_path, 'w', encoding='utf-8') as f:
        f.write('{ no es json')

    with pytest.raises(PersistenceFailure):
        repo.list()
    with pytest.raises(PersistenceFailure):
        repo.save({'status': 'pending'})


def test_wrong_shape_raises_persistence_failure(tmp_path):
    repo = SalesRepository(str(tmp_path))
    with open(repo.file_path, 'w', encoding='utf-8') as f:
        json.dump([1, 2, 3], f)
    with pytest.raises(PersistenceFailure):
        repo.list()


def test_unwritable_location_raises_persistence_failure(tmp_path):
    blocker = tmp_path / 'archivo'
    blocker.write_text('no soy un directorio', encoding='utf-8')
    with pytest.raises(PersistenceFailure):
        OrderRepository(str(blocker / 'data'))


def test_container_json_mode_end_to_end(tmp_path, employee):
    container = AppContainer(str(tmp_path))
    container.seed()
    order = container.order_service.create_instant_order(
        [{'id': 'ps-001', 'name': 'Minero', 'price': 27.0, 'quantity': 2}],
        None, 'cash', employee
    )
    container.order_service.mark_as_delivered(order.id, employee)

    # un contenedor nuevo lee lo mismo del disco
    fresh = AppContainer(str(tmp_path))
    assert fresh.order_service.get_order(order.id).sale_id
    assert len(fresh.sales_service.get_daily_sales()) == 1
    assert len(fresh.catalog_service.get_products()) == 30
    assert fresh.order_sequence.current() == 1
