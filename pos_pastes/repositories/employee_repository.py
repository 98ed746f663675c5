# ==============================================================================
# REPOSITORIOS DE EMPLEADOS Y SUCURSALES
# ==============================================================================
# Encapsula el acceso a employees.json y branches.json
# El PIN se guarda solo como hash (werkzeug); la validación vive en AuthService.
# ==============================================================================

from typing import Any, Dict, List

from .base import DictRepository


class EmployeeRepository(DictRepository):
    """
    Formato de datos en employees.json:
    {
        "emp-001": {
            "id": "emp-001",
            "name": "Tony",
            "branchId": "suc-001",
            "role": "admin",
            "pin": "scrypt:...",
            "isActive": true
        }
    }
    """

    collection = 'employees'

    def list_active(self) -> List[Dict[str, Any]]:
        """Empleados que pueden iniciar sesión."""
        return [e for e in self.get_all().values() if e.get('isActive', True)]

    def list_by_branch(self, branch_id: str) -> List[Dict[str, Any]]:
        return self.list(branchId=branch_id)

    # NOTA: La validación del PIN se hace SOLO en AuthService
    # usando check_password_hash.


class BranchRepository(DictRepository):
    """Formato de datos en branches.json: {id: {id, name, address, phone, isActive}}"""

    collection = 'branches'

    def list_active(self) -> List[Dict[str, Any]]:
        return [b for b in self.get_all().values() if b.get('isActive', True)]
