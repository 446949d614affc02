"""
Utilidades compartidas por los blueprints de la API.

Centraliza la traducción de errores del sistema a respuestas JSON y la
lectura de parámetros, que pueden llegar como JSON, formulario o query.
"""

from typing import Any, Optional

from flask import current_app, jsonify, request

from ..core.errors import (
    CaptureUnavailable,
    ClassificationFailed,
    MoodPlayerError,
    PipelineBusy,
    SearchFailed,
    TrackUnplayable,
)

# Código HTTP de cada tipo de error del sistema
ERROR_STATUS = {
    CaptureUnavailable: 503,
    ClassificationFailed: 502,
    SearchFailed: 502,
    PipelineBusy: 409,
    TrackUnplayable: 422,
}


def error_response(error: MoodPlayerError):
    """
    Construye la respuesta JSON de un error del sistema.

    El detalle técnico solo se expone en modo debug.
    """
    status = ERROR_STATUS.get(type(error), 500)
    body = {
        'error': type(error).__name__,
        'message': error.message,
    }
    if current_app.debug and error.detail:
        body['detail'] = error.detail
    return jsonify(body), status


def bad_request(error: str, message: str):
    return jsonify({'error': error, 'message': message}), 400


def internal_error(e: Exception):
    """Respuesta 500 para errores no previstos (el llamador ya los registró)."""
    return jsonify({
        'error': 'Error interno del servidor',
        'message': MoodPlayerError.default_message,
        'details': str(e)
    }), 500


def get_param(name: str) -> Optional[Any]:
    """Lee un parámetro del cuerpo JSON, del formulario o de la query string."""
    body = request.get_json(silent=True) or {}
    if isinstance(body, dict) and name in body:
        return body[name]
    if name in request.form:
        return request.form[name]
    return request.args.get(name)


def get_float_param(name: str) -> Optional[float]:
    """
    Lee un parámetro numérico.

    Returns:
        float | None: Valor o None si no se envió

    Raises:
        ValueError: Si el valor no es numérico
    """
    value = get_param(name)
    if value is None or value == '':
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"{name} debe ser numérico")
    return float(value)
