# ==============================================================================
# CAPA DE RUTAS - API JSON bajo /api
# ==============================================================================

from pos_pastes.routes.api import api

__all__ = ['api']
