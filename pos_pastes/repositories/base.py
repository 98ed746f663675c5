# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a colecciones
# ==============================================================================
# Dos modos con el mismo contrato:
#   - Archivo JSON: un <coleccion>.json dentro del directorio de datos
#   - Memoria ("modo mock"): cuando no hay directorio de datos configurado
# Cualquier error de lectura/escritura se convierte en PersistenceFailure.
# ==============================================================================

import copy
import json
import os
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pos_pastes.errors import PersistenceFailure


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.
    Proporciona lectura/escritura de una colección con manejo de
    concurrencia básico mediante locks.

    Si data_dir es None los datos viven solo en memoria del proceso.
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    # Nombre de la colección (define el nombre del archivo)
    collection = ''

    def __init__(self, data_dir: Optional[str] = None):
        """
        Args:
            data_dir: Directorio de archivos JSON, o None para modo memoria
        """
        self.data_dir = data_dir
        self.file_path = (
            os.path.join(data_dir, f'{self.collection}.json') if data_dir else None
        )
        self._memory = self._empty_data()
        if self.file_path:
            self._ensure_file_exists()

    @property
    def is_mock(self) -> bool:
        """True si la colección vive solo en memoria."""
        return self.file_path is None

    def _ensure_file_exists(self) -> None:
        """Crea el directorio y el archivo con datos vacíos si no existen."""
        try:
            os.makedirs(self.data_dir, exist_ok=True)
        except OSError as e:
            raise PersistenceFailure(f"No se pudo crear {self.data_dir}: {e}")
        if not os.path.exists(self.file_path):
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """Estructura vacía (dict o list) de esta colección."""
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos de la colección.

        Returns:
            Copia de los datos; modificarla no altera el almacenamiento

        Raises:
            PersistenceFailure: Si el archivo no se puede leer o no es JSON válido
        """
        with self._file_lock:
            if self.is_mock:
                return copy.deepcopy(self._memory)
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise PersistenceFailure(
                    f"No se pudo leer {os.path.basename(self.file_path)}: {e}"
                )

    def _write_raw(self, data: Any) -> None:
        """
        Escribe los datos completos de la colección.

        Raises:
            PersistenceFailure: Si hay error de escritura
        """
        with self._file_lock:
            if self.is_mock:
                self._memory = copy.deepcopy(data)
                return
            # Escribir a archivo temporal primero para atomicidad
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise PersistenceFailure(
                    f"No se pudo escribir {os.path.basename(self.file_path)}: {e}"
                )

    def reload(self) -> None:
        """Las subclases pueden sobrescribir para actualizar caché."""
        pass


def _matches(record: Dict[str, Any], filters: Dict[str, Any]) -> bool:
    return all(record.get(key) == value for key, value in filters.items())


class RecordRepository(BaseRepository):
    """
    Colección de documentos indexados por 'id', solo inserción y lectura.

    Ejemplo: sales.json -> {"<id>": {...}, "<id>": {...}}
    El orden de inserción se conserva.
    """

    def _empty_data(self) -> Dict:
        return {}

    def _new_id(self) -> str:
        return uuid.uuid4().hex

    def get_all(self) -> Dict[str, Dict[str, Any]]:
        data = self._read_raw()
        if not isinstance(data, dict):
            raise PersistenceFailure(f"Formato inválido en la colección {self.collection}")
        return data

    def save(self, record: Dict[str, Any]) -> str:
        """
        Inserta un documento nuevo.

        Args:
            record: Datos del documento (si trae 'id' se respeta)

        Returns:
            ID asignado
        """
        with self._file_lock:
            data = self.get_all()
            record_id = record.get('id') or self._new_id()
            data[record_id] = dict(record, id=record_id)
            self._write_raw(data)
        return record_id

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Obtiene un documento por su ID, o None si no existe."""
        return self.get_all().get(record_id)

    def list(self, **filters: Any) -> List[Dict[str, Any]]:
        """
        Lista documentos en orden de inserción.

        Args:
            **filters: Igualdad campo=valor que deben cumplir

        Returns:
            Lista de documentos
        """
        return [r for r in self.get_all().values() if _matches(r, filters)]

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Primer documento cuyo campo coincide, o None."""
        for record in self.get_all().values():
            if record.get(field) == value:
                return record
        return None


class DictRepository(RecordRepository):
    """
    Colección de documentos que además admite actualización parcial.
    Usado por: pedidos, empleados, sucursales, productos, secuencias.
    """

    def update(self, record_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Aplica un parche a un documento existente.

        Args:
            record_id: ID del documento
            patch: Campos a reemplazar

        Returns:
            Documento actualizado o None si no existe
        """
        with self._file_lock:
            data = self.get_all()
            if record_id not in data:
                return None
            data[record_id].update(patch)
            data[record_id]['id'] = record_id
            self._write_raw(data)
            return data[record_id]

    def save_all(self, records: List[Dict[str, Any]]) -> None:
        """Reemplaza la colección completa (usado para cargar datos semilla)."""
        self._write_raw({r['id']: r for r in records})

    def count(self) -> int:
        return len(self.get_all())


class ListRepository(BaseRepository):
    """
    Bitácora basada en lista, más reciente primero.

    Ejemplo: audit.json -> [{...}, {...}]
    """

    def _empty_data(self) -> List:
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        data = self._read_raw()
        if not isinstance(data, list):
            raise PersistenceFailure(f"Formato inválido en la colección {self.collection}")
        return data

    def prepend(self, record: Dict[str, Any], limit: Optional[int] = None) -> None:
        """
        Agrega un registro al inicio.

        Args:
            record: Datos del registro
            limit: Máximo de registros a conservar
        """
        with self._file_lock:
            data = self.get_all()
            data.insert(0, record)
            if limit is not None and len(data) > limit:
                data = data[:limit]
            self._write_raw(data)
