# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Todo se lee de variables de entorno:
#   POS_SECRET_KEY        Clave de sesión (OBLIGATORIA en producción)
#   POS_DATA_DIR          Carpeta de archivos JSON; sin definir = modo mock
#   POS_LOGS_DIR          Carpeta de logs de rendimiento
#   POS_ENABLE_PROFILING  1/0 para medir tiempos de rutas y funciones
#   POS_PRODUCTION        1 = modo producción
# ==============================================================================

import os


_DEFAULT_SECRET = "pos_pastes_dev_secret_key_change_in_production"


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Configuración base (desarrollo)."""

    SECRET_KEY = os.environ.get('POS_SECRET_KEY') or _DEFAULT_SECRET
    SECRET_KEY_FROM_ENV = bool(os.environ.get('POS_SECRET_KEY'))

    # None = modo mock (datos solo en memoria)
    DATA_DIR = os.environ.get('POS_DATA_DIR') or None
    LOGS_DIR = os.environ.get('POS_LOGS_DIR') or os.path.join(os.getcwd(), 'logs')

    ENABLE_PROFILING = _env_flag('POS_ENABLE_PROFILING', True)
    PRODUCTION = _env_flag('POS_PRODUCTION', False)
    TESTING = False

    # Cargar menú, sucursal y empleados por defecto si las colecciones están vacías
    SEED_DATA = True

    # Configuración de cookies de sesión
    SESSION_COOKIE_HTTPONLY = True      # Protege contra XSS
    SESSION_COOKIE_SECURE = False       # False para HTTP local (True solo para HTTPS)
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 12 * 60 * 60  # Un turno

    JSON_AS_ASCII = False


class TestingConfig(Config):
    """Configuración para pytest: modo mock, sin profiling."""

    TESTING = True
    SECRET_KEY = 'pos_pastes_testing'
    SECRET_KEY_FROM_ENV = True
    DATA_DIR = None
    ENABLE_PROFILING = False
    PRODUCTION = False
