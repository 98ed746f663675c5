# ==============================================================================
# APLICACIÓN FLASK - POS Pastes y Empanadas Tony
# ==============================================================================
# create_app() arma la app: configuración, contenedor de dependencias,
# datos iniciales, profiling y la API JSON.
# ==============================================================================

from flask import Flask

from pos_pastes.app_container import AppContainer, get_container
from pos_pastes.config import Config
from pos_pastes.errors import POSError
from pos_pastes.performance_logger import configure as configure_profiling
from pos_pastes.performance_logger import init_profiling
from pos_pastes.routes import api


def create_app(config_object=None):
    """
    Crea la aplicación.

    Args:
        config_object: Clase u objeto de configuración (default: Config)

    Returns:
        App Flask lista para servir
    """
    app = Flask(__name__)
    app.config.from_object(config_object or Config)

    if app.config.get('PRODUCTION') and not app.config.get('SECRET_KEY_FROM_ENV'):
        print("[ADVERTENCIA] POS_PRODUCTION activo sin POS_SECRET_KEY definida")
        print("[ADVERTENCIA] Define la variable de entorno para mayor seguridad")

    # ═══════════════════════════════════════════════════════════════════════
    # CONTENEDOR DE DEPENDENCIAS
    # ═══════════════════════════════════════════════════════════════════════
    data_dir = app.config.get('DATA_DIR')
    AppContainer.reset_instance()
    container = get_container(data_dir)
    app.extensions['pos_container'] = container

    if container.is_mock:
        print("[MODO MOCK] POS_DATA_DIR no definido: los datos viven solo en memoria")
    else:
        print(f"[DATOS] Colecciones JSON en {data_dir}")

    if app.config.get('SEED_DATA'):
        container.seed()

    # ═══════════════════════════════════════════════════════════════════════
    # PROFILING
    # ═══════════════════════════════════════════════════════════════════════
    configure_profiling(
        app.config.get('ENABLE_PROFILING'),
        app.config.get('LOGS_DIR')
    )
    init_profiling(app)

    # ═══════════════════════════════════════════════════════════════════════
    # RUTAS Y ERRORES
    # ═══════════════════════════════════════════════════════════════════════
    app.register_blueprint(api)

    @app.errorhandler(POSError)
    def _handle_pos_error(error):
        return {'ok': False, 'error': error.message}, error.status_code

    @app.route('/health')
    def health():
        return {'ok': True, 'mock': container.is_mock}

    return app
