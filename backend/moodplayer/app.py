"""
Aplicación principal del backend - Reproductor musical por estado de ánimo.

Este módulo implementa la API REST Flask que expone el pipeline de estado
de ánimo (cámara -> clasificador remoto -> géneros -> catálogo) y los
controles de transporte del reproductor.

La API proporciona endpoints para:
- Abrir/cerrar la cámara y obtener la vista previa
- Detectar el estado de ánimo y cargar una lista de reproducción
- Búsquedas manuales en el catálogo
- Controles de reproducción y eventos del elemento de audio
- Monitoreo de salud del servicio

IMPORTANTE: La cámara NO se abre al arrancar. Solo se activa cuando el
usuario llama a /camera/start.
"""

import atexit
import logging
import os

from flask import Flask
from flask_cors import CORS

from . import __version__
from .core.camera import MediaCaptureSession
from .core.emotion import MoodClassifierClient
from .core.music import CatalogSearchClient
from .core.pipeline import MoodPipelineOrchestrator
from .core.player import PlaybackController

# Importar blueprints
from .routes import health_bp, mood_bp, player_bp

# Configurar logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Configuración por defecto. Cada clave puede sobrescribirse con una
# variable de entorno MOODPLAYER_<CLAVE> o con el dict de create_app().
DEFAULT_CONFIG = {
    'CLASSIFIER_URL': 'http://localhost:5000/detect_emotion',
    'CATALOG_URL': 'https://saavn.dev/api/search/songs',
    'REQUEST_TIMEOUT': 10.0,
    'CAMERA_INDEX': 0,
    'PREFERRED_QUALITY': '320kbps',
    'AUTOPLAY_FIRST_RESULT': True,
    'INCLUDE_METRICS': False,
    'DEBUG': False,
    'HOST': '0.0.0.0',
    'PORT': 8000,
}


def _parse_env_value(raw: str, default):
    """Convierte el texto de una variable de entorno al tipo del valor por defecto."""
    if isinstance(default, bool):
        return raw.strip().lower() in ('1', 'true', 'yes', 'on')
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def load_config() -> dict:
    """
    Construye la configuración a partir de los valores por defecto y el entorno.

    Raises:
        ValueError: Si una variable de entorno numérica no es válida
    """
    config = {}
    for key, default in DEFAULT_CONFIG.items():
        raw = os.environ.get(f'MOODPLAYER_{key}')
        config[key] = default if raw is None else _parse_env_value(raw, default)
    return config


def create_app(config=None):
    """
    Factory function para crear y configurar la aplicación Flask.

    Crea una única instancia de cada componente (sesión de cámara,
    clientes remotos, controlador y orquestador) y la guarda en
    ``app.config``. Los tests pueden inyectar sus propios componentes con
    las claves CAPTURE_SESSION, CLASSIFIER_CLIENT, CATALOG_CLIENT,
    PLAYBACK_CONTROLLER o MOOD_PIPELINE.

    Args:
        config (dict, optional): Diccionario de configuración custom.

    Returns:
        Flask: Aplicación Flask configurada y lista para usar

    Example:
        >>> app = create_app({'CLASSIFIER_URL': 'http://10.0.0.5:5000/detect_emotion'})
        >>> app.run(port=8000, threaded=True)
    """
    app = Flask(__name__)

    app.config.update(load_config())
    app.config['VERSION'] = __version__

    if config:
        app.config.update(config)

    # Habilitar CORS para permitir requests desde el frontend
    CORS(app)

    timeout = float(app.config['REQUEST_TIMEOUT'])

    session = app.config.get('CAPTURE_SESSION') or MediaCaptureSession(
        camera_index=int(app.config['CAMERA_INDEX'])
    )
    classifier = app.config.get('CLASSIFIER_CLIENT') or MoodClassifierClient(
        app.config['CLASSIFIER_URL'], timeout=timeout
    )
    catalog = app.config.get('CATALOG_CLIENT') or CatalogSearchClient(
        app.config['CATALOG_URL'],
        timeout=timeout,
        preferred_quality=app.config['PREFERRED_QUALITY']
    )
    controller = app.config.get('PLAYBACK_CONTROLLER') or PlaybackController()
    pipeline = app.config.get('MOOD_PIPELINE') or MoodPipelineOrchestrator(
        session=session,
        classifier=classifier,
        catalog=catalog,
        controller=controller,
        autoplay=bool(app.config['AUTOPLAY_FIRST_RESULT'])
    )

    app.config['CAPTURE_SESSION'] = pipeline.session
    app.config['PLAYBACK_CONTROLLER'] = pipeline.controller
    app.config['MOOD_PIPELINE'] = pipeline

    logger.info(f"Clasificador: {app.config['CLASSIFIER_URL']}")
    logger.info(f"Catálogo: {app.config['CATALOG_URL']} (calidad {app.config['PREFERRED_QUALITY']})")
    logger.info("La cámara se activará solo al usar /camera/start")

    # Registrar blueprints
    app.register_blueprint(health_bp)
    app.register_blueprint(mood_bp)
    app.register_blueprint(player_bp)

    logger.info("Blueprints registrados")

    # Liberar la cámara al cerrar el proceso (no por petición: el stream
    # debe sobrevivir entre /camera/start y /mood)
    atexit.register(pipeline.close)

    return app


def main():
    """
    Función principal para ejecutar el servidor de desarrollo.

    Para producción, usar un servidor WSGI como Gunicorn.

    Example:
        $ python -m moodplayer.app
    """
    print("=" * 70)
    print(f"Backend Mood Music Player v{__version__}")
    print("=" * 70)

    app = create_app()

    print("\nEndpoints disponibles:")
    print("  GET  /health                - Verificación de estado")
    print("  POST /camera/start          - Abrir la cámara")
    print("  POST /camera/stop           - Cerrar la cámara")
    print("  GET  /camera/snapshot       - Vista previa JPEG")
    print("  POST /mood                  - Detectar estado de ánimo y cargar canciones")
    print("  POST /search                - Búsqueda manual en el catálogo")
    print("  GET  /player                - Estado del reproductor")
    print("  POST /player/<acción>       - Controles de transporte")
    print("\n" + "=" * 70)
    print(f"Servidor iniciando en http://{app.config['HOST']}:{app.config['PORT']}")
    print("=" * 70 + "\n")

    app.run(
        host=app.config['HOST'],
        port=int(app.config['PORT']),
        debug=app.config['DEBUG'],
        threaded=True
    )


if __name__ == "__main__":
    main()
