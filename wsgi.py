# ==============================================================================
# WSGI Entry Point - Para Gunicorn / producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/           <- Directorio de trabajo
#   ├── wsgi.py          <- Este archivo
#   ├── pyproject.toml
#   └── pos_pastes/      <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
#
# La configuración se toma de variables de entorno (ver pos_pastes/config.py).
# ==============================================================================

from pos_pastes.main import create_app

app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
