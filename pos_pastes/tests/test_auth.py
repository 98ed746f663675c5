import pytest
from flask import Flask, session
from werkzeug.security import check_password_hash

from pos_pastes.errors import AuthenticationError
from pos_pastes.models import EmployeeRole


@pytest.fixture
def auth(container):
    container.auth_service.seed_if_empty()
    return container.auth_service


@pytest.fixture
def request_ctx():
    app = Flask(__name__)
    app.secret_key = 'test'
    with app.test_request_context():
        yield


def test_seed_stores_hashed_pins(container, auth):
    employees = container.employee_repo.list()
    assert [e['name'] for e in employees] == ['Juan Pérez', 'María García', 'Admin']
    for data in employees:
        assert data['pin'] != '123456'
        assert data['pin'].startswith(('scrypt:', 'pbkdf2:'))
    assert check_password_hash(employees[0]['pin'], '123456')

    # sembrar de nuevo no duplica
    auth.seed_if_empty()
    assert len(container.employee_repo.list()) == 3
    assert len(container.branch_repo.list()) == 1


def test_login_with_pin(auth, request_ctx):
    employee = auth.login_with_pin('999999')
    assert employee.name == 'Admin'
    assert employee.role == EmployeeRole.ADMIN
    assert employee.is_admin()
    assert session['employee']['id'] == employee.id
    assert 'pin' not in session['employee']

    current = auth.current_employee()
    assert current.id == employee.id
    assert current.branch_id == employee.branch_id


def test_wrong_pin(auth, request_ctx):
    with pytest.raises(AuthenticationError):
        auth.login_with_pin('000000')
    with pytest.raises(AuthenticationError):
        auth.login_with_pin('')
    assert auth.current_employee() is None


def test_inactive_employee_cannot_login(container, auth, request_ctx):
    juan = container.employee_repo.list()[0]
    container.employee_repo.update(juan['id'], {'isActive': False})
    with pytest.raises(AuthenticationError):
        auth.login_with_pin('123456')


def test_logout_is_audited(container, auth, request_ctx):
    auth.login_with_pin('567890')
    auth.logout()
    assert auth.current_employee() is None
    messages = [l['message'] for l in container.audit_repo.list(type='SESION')]
    assert messages == ['María García cerró sesión', 'María García inició sesión']


def test_get_branch_falls_back_to_first(auth):
    branch = auth.get_branch('suc-001')
    assert branch.name == 'Lisboa 22'
    assert auth.get_branch('no-existe').id == 'suc-001'
    assert auth.get_branch(None).id == 'suc-001'


def test_create_employee_requires_six_digits(auth):
    with pytest.raises(AuthenticationError):
        auth.create_employee('Edith', '12', 'suc-001')
    edith = auth.create_employee('Edith', '246810', 'suc-001')
    assert edith.role == EmployeeRole.CASHIER
    assert check_password_hash(edith.pin_hash, '246810')
