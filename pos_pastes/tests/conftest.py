import pytest

from pos_pastes.app_container import AppContainer
from pos_pastes.config import TestingConfig
from pos_pastes.main import create_app
from pos_pastes.models import Employee, EmployeeRole, Product, ProductCategory


@pytest.fixture
def container():
    # modo mock: todo en memoria, sin datos semilla
    c = AppContainer(data_dir=None)
    yield c
    c.reset()


@pytest.fixture
def employee():
    return Employee(id='emp-001', name='Juan Pérez', branch_id='suc-001')


@pytest.fixture
def other_employee():
    return Employee(
        id='emp-003', name='Admin', branch_id='suc-001', role=EmployeeRole.ADMIN
    )


@pytest.fixture
def paste():
    return Product(id='ps-001', name='Minero Tradicional', price=27.0,
                   category=ProductCategory.PASTES_SALADOS)


@pytest.fixture
def refresco():
    return Product(id='bb-002', name='Refresco 355ml', price=18.0,
                   category=ProductCategory.BEBIDAS)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    AppContainer.reset_instance()


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def login(client):
    def _login(pin='123456'):
        r = client.post('/api/login', json={'pin': pin})
        assert r.status_code == 200, r.get_json()
        return r.get_json()['employee']
    return _login
