"""
Blueprint para endpoints de cámara y del pipeline de estado de ánimo.

Proporciona endpoints para abrir y cerrar la cámara, ejecutar el pipeline
completo (captura -> clasificación -> géneros -> búsqueda) y lanzar
búsquedas manuales en el catálogo.
"""

from flask import Blueprint, Response, current_app, jsonify

from ..core.errors import MoodPlayerError
from .responses import bad_request, error_response, get_param, internal_error

mood_bp = Blueprint('mood', __name__)


def _get_pipeline():
    return current_app.config['MOOD_PIPELINE']


def _outcome_response(pipeline, outcome) -> dict:
    response = outcome.to_dict()
    response['status'] = pipeline.status_message
    response['player'] = pipeline.controller.to_dict()
    return response


def _with_metrics(response: dict) -> dict:
    """Añade la duración de las etapas si INCLUDE_METRICS está activo."""
    if current_app.config.get('INCLUDE_METRICS', False):
        metrics = _get_pipeline().metrics
        response['processing_time_ms'] = {
            stage: round(duration * 1000, 2)
            for stage in ('capture', 'classification', 'search')
            if (duration := metrics.last_duration(stage)) is not None
        }
    return response


@mood_bp.route('/camera/start', methods=['POST'])
def start_camera():
    """
    Abre la cámara para la vista previa.

    Example:
        POST /camera/start

        Response:
        {
            "status": "Camera started! Click capture when ready.",
            "camera_active": true,
            ...
        }

    Error cases:
        - 503: No hay acceso a la cámara
    """
    pipeline = _get_pipeline()
    result = pipeline.start_camera()
    if result.is_failure():
        return error_response(result.error())
    return jsonify(pipeline.to_dict()), 200


@mood_bp.route('/camera/stop', methods=['POST'])
def stop_camera():
    """Cierra la cámara. Siempre responde 200."""
    pipeline = _get_pipeline()
    pipeline.stop_camera()
    return jsonify(pipeline.to_dict()), 200


@mood_bp.route('/camera/snapshot', methods=['GET'])
def camera_snapshot():
    """
    Devuelve el frame actual de la cámara en JPEG (vista previa).

    Error cases:
        - 503: La cámara no está abierta o no devuelve frames
    """
    session = current_app.config['CAPTURE_SESSION']
    try:
        image = session.capture_snapshot()
    except MoodPlayerError as e:
        return error_response(e)
    return Response(image, mimetype='image/jpeg')


@mood_bp.route('/mood', methods=['POST'])
def detect_mood():
    """
    Ejecuta el pipeline completo sobre el frame actual de la cámara.

    Workflow:
    1. Captura una instantánea de la cámara abierta
    2. La envía al clasificador remoto
    3. Mapea el estado de ánimo a géneros
    4. Busca el primer género en el catálogo y sustituye la cola
    5. Cierra la cámara

    Example:
        POST /mood

        Response:
        {
            "mood": "Happy",
            "emotion": "happy",
            "genres": ["pop", "dance", "upbeat"],
            "query": "pop",
            "tracks": [...],
            "status": "You're looking happy! ...",
            "player": {...}
        }

    Error cases:
        - 409: Ya hay un análisis en curso
        - 502: Falló el clasificador o el catálogo
        - 503: La cámara no está abierta
        - 500: Error interno del servidor
    """
    try:
        pipeline = _get_pipeline()
        result = pipeline.run()

        if result.is_failure():
            return error_response(result.error())

        return jsonify(_with_metrics(_outcome_response(pipeline, result.value()))), 200

    except Exception as e:
        current_app.logger.error(f"Error en /mood: {str(e)}", exc_info=True)
        return internal_error(e)


@mood_bp.route('/search', methods=['POST'])
def search_songs():
    """
    Busca canciones con un término manual y sustituye la cola.

    Request:
        {"query": "acoustic"}   (también como query string o formulario)

    Error cases:
        - 400: Falta el parámetro "query"
        - 409: Ya hay un análisis en curso
        - 502: Falló el catálogo
        - 500: Error interno del servidor
    """
    query = get_param('query')
    if not isinstance(query, str) or not query.strip():
        return bad_request('Falta el parámetro "query"', 'Debes indicar un término de búsqueda')

    try:
        pipeline = _get_pipeline()
        result = pipeline.search(query.strip())

        if result.is_failure():
            return error_response(result.error())

        return jsonify(_with_metrics(_outcome_response(pipeline, result.value()))), 200

    except Exception as e:
        current_app.logger.error(f"Error en /search: {str(e)}", exc_info=True)
        return internal_error(e)


@mood_bp.route('/status', methods=['GET'])
def get_status():
    """Mensaje de estado, estado de ánimo actual y estado de la cámara."""
    return jsonify(_get_pipeline().to_dict()), 200
