"""
Blueprint para endpoints de salud y monitoreo de la API.

Proporciona endpoints para verificar el estado del servicio y consultar
las métricas de latencia de las etapas del pipeline.
"""

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Endpoint de verificación de estado del servicio.

    Example:
        GET /health

        Response:
        {
            "status": "ok",
            "version": "1.0.0",
            "camera_active": false,
            "pipeline_busy": false
        }
    """
    pipeline = current_app.config['MOOD_PIPELINE']
    return jsonify({
        'status': 'ok',
        'version': current_app.config.get('VERSION'),
        'camera_active': pipeline.session.is_active,
        'pipeline_busy': pipeline.is_busy,
    }), 200


@health_bp.route('/metrics', methods=['GET'])
def metrics_summary():
    """Estadísticas de latencia (segundos) por etapa: captura, clasificación, búsqueda."""
    pipeline = current_app.config['MOOD_PIPELINE']
    return jsonify(pipeline.metrics.get_statistics()), 200
