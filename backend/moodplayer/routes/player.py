"""
Blueprint para los controles de transporte del reproductor.

La interfaz nunca modifica el estado del reproductor directamente: cada
gesto (clic en una pista, arrastre en la barra de progreso, deslizador de
volumen) se traduce en una llamada a una operación del controlador. Los
eventos del elemento de audio del navegador (avance del tiempo,
metadatos cargados, fin de pista) llegan por ``/player/events``.
"""

from flask import Blueprint, current_app, jsonify

from ..core.errors import TrackUnplayable
from .responses import bad_request, error_response, get_float_param, get_param

player_bp = Blueprint('player', __name__)


def _get_controller():
    return current_app.config['PLAYBACK_CONTROLLER']


def _player_state():
    controller = _get_controller()
    state = controller.to_dict()
    state['status'] = current_app.config['MOOD_PIPELINE'].status_message
    if hasattr(controller.output, 'to_dict'):
        state['output'] = controller.output.to_dict()
    return jsonify(state), 200


def _unplayable(error: TrackUnplayable):
    """Publica el error como mensaje de estado y responde 422."""
    current_app.config['MOOD_PIPELINE'].report_failure(error)
    return error_response(error)


@player_bp.route('/player', methods=['GET'])
def get_player():
    """
    Estado del reproductor y cola actual.

    Example:
        GET /player

        Response:
        {
            "current_track": {"id": "abc", "name": "...", ...},
            "is_playing": true,
            "position": "1:15",
            "duration": "3:42",
            "volume": 0.8,
            "is_muted": false,
            "queue": [...],
            ...
        }
    """
    return _player_state()


@player_bp.route('/player/select', methods=['POST'])
def select_track():
    """
    Selecciona y reproduce una pista de la cola.

    Request:
        {"track_id": "abc123"}

    Error cases:
        - 400: Falta "track_id"
        - 404: La pista no está en la cola
        - 422: La pista no tiene audio reproducible
    """
    track_id = get_param('track_id')
    if track_id in (None, ''):
        return bad_request('Falta el parámetro "track_id"', 'Debes indicar la pista a reproducir')

    controller = _get_controller()
    track = controller.find_track(str(track_id))
    if track is None:
        return jsonify({
            'error': 'Pista no encontrada',
            'message': f'La pista {track_id} no está en la cola'
        }), 404

    try:
        controller.select_track(track)
    except TrackUnplayable as e:
        return _unplayable(e)
    return _player_state()


@player_bp.route('/player/toggle-play', methods=['POST'])
def toggle_play():
    _get_controller().toggle_play()
    return _player_state()


@player_bp.route('/player/seek', methods=['POST'])
def seek():
    """
    Mueve la posición de reproducción.

    Request:
        {"seconds": 42.5}  o  {"fraction": 0.25}

    Error cases:
        - 400: Falta la posición o no es numérica
    """
    try:
        fraction = get_float_param('fraction')
        seconds = get_float_param('seconds')
        controller = _get_controller()
        if fraction is not None:
            controller.seek_fraction(fraction)
        elif seconds is not None:
            controller.seek(seconds)
        else:
            return bad_request('Falta la posición', 'Indica "seconds" o "fraction"')
    except ValueError as e:
        return bad_request('Posición inválida', str(e))
    return _player_state()


@player_bp.route('/player/volume', methods=['POST'])
def set_volume():
    """
    Fija el volumen en [0, 1] (los valores fuera de rango se acotan).

    Error cases:
        - 400: Falta "volume" o no es numérico
    """
    try:
        volume = get_float_param('volume')
        if volume is None:
            return bad_request('Falta el parámetro "volume"', 'Indica un volumen entre 0 y 1')
        _get_controller().set_volume(volume)
    except ValueError as e:
        return bad_request('Volumen inválido', str(e))
    return _player_state()


@player_bp.route('/player/mute', methods=['POST'])
def toggle_mute():
    _get_controller().toggle_mute()
    return _player_state()


@player_bp.route('/player/shuffle', methods=['POST'])
def toggle_shuffle():
    _get_controller().toggle_shuffle()
    return _player_state()


@player_bp.route('/player/repeat', methods=['POST'])
def toggle_repeat():
    _get_controller().toggle_repeat()
    return _player_state()


@player_bp.route('/player/next', methods=['POST'])
def next_track():
    """
    Error cases:
        - 422: Cola vacía o pista actual fuera de la cola
    """
    try:
        _get_controller().next()
    except TrackUnplayable as e:
        return _unplayable(e)
    return _player_state()


@player_bp.route('/player/previous', methods=['POST'])
def previous_track():
    """
    Error cases:
        - 422: Cola vacía o pista actual fuera de la cola
    """
    try:
        _get_controller().previous()
    except TrackUnplayable as e:
        return _unplayable(e)
    return _player_state()


@player_bp.route('/player/events', methods=['POST'])
def media_event():
    """
    Recibe un evento del elemento de audio del cliente.

    Request:
        {"type": "timeupdate", "time": 12.3}
        {"type": "loadedmetadata", "duration": 215.0}
        {"type": "ended"}

    Error cases:
        - 400: Tipo de evento desconocido o valor no numérico
    """
    event_type = get_param('type')
    output = _get_controller().output

    try:
        if event_type == 'timeupdate':
            time = get_float_param('time')
            if time is None:
                return bad_request('Falta el parámetro "time"', 'El evento timeupdate requiere "time"')
            output.notify_time_update(time)
        elif event_type in ('loadedmetadata', 'durationchange'):
            duration = get_float_param('duration')
            if duration is None:
                return bad_request('Falta el parámetro "duration"', 'El evento requiere "duration"')
            output.notify_duration(duration)
        elif event_type == 'ended':
            output.notify_ended()
        else:
            return bad_request('Evento desconocido', f'Tipo de evento no soportado: {event_type}')
    except ValueError as e:
        return bad_request('Valor inválido', str(e))

    return _player_state()
