# ==============================================================================
# REPOSITORIO DE SECUENCIAS
# ==============================================================================
# Encapsula el acceso a sequences.json
# Guarda el último valor emitido de cada contador: {"orders": {"id": "orders", "value": 7}}
# ==============================================================================

from .base import DictRepository


class SequenceRepository(DictRepository):
    """Contadores persistentes (p. ej. número de pedido del turno)."""

    collection = 'sequences'

    def current(self, name: str) -> int:
        """Último valor emitido (0 si el contador no existe)."""
        record = self.get(name)
        return int(record.get('value', 0)) if record else 0

    def set_value(self, name: str, value: int) -> None:
        with self._file_lock:
            if self.update(name, {'value': value}) is None:
                self.save({'id': name, 'value': value})
