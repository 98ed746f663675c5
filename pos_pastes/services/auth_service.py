# ==============================================================================
# SERVICIO DE AUTENTICACIÓN
# ==============================================================================
# Inicio de sesión por PIN de 6 dígitos y resolución de sucursal.
# El empleado en turno vive en session['employee'].
#
# Los PIN se guardan SOLO como hash (werkzeug.security); aquí se valida,
# el repositorio solo persiste.
# ==============================================================================

from typing import Any, Dict, List, Optional

from flask import session
from werkzeug.security import check_password_hash, generate_password_hash

from pos_pastes.errors import AuthenticationError
from pos_pastes.models import Branch, Employee, EmployeeRole
from pos_pastes.repositories.interfaces import IEmployeeRepository, IMutableRepository
from pos_pastes.services.audit_service import AuditService


# Datos de arranque para modo mock / primera ejecución
DEFAULT_BRANCHES = [
    Branch(
        id='suc-001',
        name='Lisboa 22',
        address='Calle Lisboa #22, Centro',
        phone='55 2676 6580'
    ),
]

# (id, nombre, PIN, rol)
DEFAULT_EMPLOYEES = [
    ('emp-001', 'Juan Pérez', '123456', EmployeeRole.CASHIER),
    ('emp-002', 'María García', '567890', EmployeeRole.CASHIER),
    ('emp-003', 'Admin', '999999', EmployeeRole.ADMIN),
]


class AuthService:
    """
    Servicio de identidad.

    Responsabilidades:
    - Validar PIN contra empleados activos
    - Guardar / leer el empleado de la sesión
    - Resolver la sucursal del empleado
    """

    SESSION_KEY = 'employee'

    def __init__(
        self,
        employee_repo: IEmployeeRepository,
        branch_repo: IMutableRepository,
        audit_service: AuditService = None
    ):
        self.employee_repo = employee_repo
        self.branch_repo = branch_repo
        self.audit_service = audit_service

    def seed_if_empty(self) -> None:
        """Crea sucursal y empleados por defecto si no hay ninguno."""
        if not self.branch_repo.list():
            for branch in DEFAULT_BRANCHES:
                self.branch_repo.save(branch.to_dict())
        if not self.employee_repo.list():
            branch_id = self.branch_repo.list()[0]['id']
            for emp_id, name, pin, role in DEFAULT_EMPLOYEES:
                self.create_employee(name, pin, branch_id, role, employee_id=emp_id)

    def create_employee(
        self,
        name: str,
        pin: str,
        branch_id: str,
        role: EmployeeRole = EmployeeRole.CASHIER,
        employee_id: Optional[str] = None
    ) -> Employee:
        """
        Registra un empleado con su PIN hasheado.

        Raises:
            AuthenticationError: PIN que no es de 6 dígitos
        """
        pin = str(pin or '')
        if len(pin) != 6 or not pin.isdigit():
            raise AuthenticationError('El PIN debe tener 6 dígitos')
        data = {
            'name': name,
            'branchId': branch_id,
            'role': EmployeeRole(role).value,
            'pin': generate_password_hash(pin),
            'isActive': True,
        }
        if employee_id:
            data['id'] = employee_id
        data['id'] = self.employee_repo.save(data)
        return Employee.from_dict(data)

    # =========================================================================
    # SESIÓN
    # =========================================================================

    def login_with_pin(self, pin: str) -> Employee:
        """
        Inicia sesión con el PIN del empleado.

        Args:
            pin: PIN de 6 dígitos en texto plano

        Returns:
            Empleado autenticado (queda guardado en la sesión)

        Raises:
            AuthenticationError: PIN incorrecto o empleado inactivo
        """
        pin = str(pin or '').strip()
        if not pin:
            raise AuthenticationError('Ingresa tu PIN')

        for data in self.employee_repo.list_active():
            if check_password_hash(data.get('pin', ''), pin):
                employee = Employee.from_dict(data)
                session[self.SESSION_KEY] = employee.to_session()
                session.modified = True
                if self.audit_service:
                    self.audit_service.log_login(employee.name, employee.id)
                return employee

        raise AuthenticationError('PIN incorrecto')

    def current_employee(self) -> Optional[Employee]:
        """Empleado de la sesión actual, o None si no hay sesión."""
        data = session.get(self.SESSION_KEY)
        if not data:
            return None
        return Employee.from_dict(data)

    def logout(self) -> None:
        employee = self.current_employee()
        session.pop(self.SESSION_KEY, None)
        if employee and self.audit_service:
            self.audit_service.log_logout(employee.name, employee.id)

    # =========================================================================
    # SUCURSALES Y EMPLEADOS
    # =========================================================================

    def get_branch(self, branch_id: Optional[str]) -> Optional[Branch]:
        """Sucursal por ID; si no existe, la primera registrada."""
        data = self.branch_repo.get(branch_id) if branch_id else None
        if data is None:
            branches = self.branch_repo.list()
            data = branches[0] if branches else None
        return Branch.from_dict(data) if data else None

    def get_employees(self) -> List[Employee]:
        return [Employee.from_dict(e) for e in self.employee_repo.list_active()]

    def session_info(self) -> Dict[str, Any]:
        """Datos de la sesión para la UI (empleado + sucursal)."""
        employee = self.current_employee()
        if employee is None:
            return {'authenticated': False}
        branch = self.get_branch(employee.branch_id)
        return {
            'authenticated': True,
            'employee': employee.to_session(),
            'branch': branch.to_dict() if branch else None,
        }
