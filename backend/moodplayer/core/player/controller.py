"""
Controlador de reproducción: máquina de estados del reproductor.

Es el único propietario del ``PlaybackState``, de la cola de reproducción
y de la salida de audio. La capa de presentación nunca modifica el estado
directamente: invoca las operaciones de transporte y se suscribe a los
cambios con ``subscribe()``.

Transiciones:
    select_track      pista actual := t, reproduciendo, posición 0
    toggle_play       alterna reproducción/pausa (sin pista: no hace nada)
    seek              posición acotada a [0, duración] (duración desconocida: nada)
    set_volume        volumen acotado a [0, 1]; silenciado <=> volumen == 0
    toggle_mute       silencia la salida sin tocar el volumen guardado
    toggle_shuffle    afecta a la siguiente decisión de avance
    toggle_repeat     afecta al siguiente fin de pista
    advance           siguiente (aleatoria o circular) / anterior (siempre circular)
    on_track_ended    repetir la misma pista o avanzar a la siguiente

El estado persiste entre cambios de pista: volumen, silencio, aleatorio y
repetir nunca se reinician implícitamente.
"""

import logging
import math
import random
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Optional, Tuple

from ..errors import TrackUnplayable
from ..music.catalog_client import Track
from ..utils import Observable, clamp, format_time, is_known_duration
from .audio_output import AudioOutput, HeadlessAudioOutput, PlaybackObserver

logger = logging.getLogger(__name__)

NEXT = 'next'
PREVIOUS = 'previous'


@dataclass(frozen=True)
class PlaybackState:
    """
    Instantánea inmutable del estado del reproductor.

    Attributes:
        current_track (Track | None): Pista cargada
        is_playing (bool): Reproduciendo o en pausa
        position_seconds (float): Posición actual
        duration_seconds (float): Duración de la pista (0 si desconocida)
        volume (float): Volumen guardado en [0, 1]
        is_muted (bool): Salida silenciada
        is_repeat (bool): Repetir la pista al terminar
        is_shuffle (bool): Avance aleatorio
    """
    current_track: Optional[Track] = None
    is_playing: bool = False
    position_seconds: float = 0.0
    duration_seconds: float = 0.0
    volume: float = 1.0
    is_muted: bool = False
    is_repeat: bool = False
    is_shuffle: bool = False

    @property
    def effective_volume(self) -> float:
        """Volumen que debe sonar realmente."""
        return 0.0 if self.is_muted else self.volume

    def to_dict(self) -> Dict[str, Any]:
        return {
            'current_track': self.current_track.to_dict() if self.current_track else None,
            'is_playing': self.is_playing,
            'position_seconds': self.position_seconds,
            'duration_seconds': self.duration_seconds,
            'position': format_time(self.position_seconds),
            'duration': format_time(self.duration_seconds),
            'volume': self.volume,
            'is_muted': self.is_muted,
            'is_repeat': self.is_repeat,
            'is_shuffle': self.is_shuffle,
        }


class PlaybackController(PlaybackObserver, Observable):
    """
    Máquina de estados del reproductor.

    Las operaciones son seguras entre hilos: el servidor atiende los
    controles de transporte mientras el pipeline sustituye la cola.

    Example:
        >>> controller = PlaybackController()
        >>> controller.load_queue(tracks)
        >>> controller.next()
        >>> controller.state.current_track.name
        'Second song'
    """

    def __init__(self, output: Optional[AudioOutput] = None, rng: Optional[random.Random] = None):
        """
        Args:
            output (AudioOutput): Salida de audio (por defecto HeadlessAudioOutput)
            rng (random.Random): Generador para el modo aleatorio
        """
        Observable.__init__(self)
        self.output = output or HeadlessAudioOutput()
        self.output.bind(self)
        self._rng = rng or random.Random()
        self._state = PlaybackState()
        self._queue: Tuple[Track, ...] = ()
        self._lock = threading.RLock()

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def queue(self) -> Tuple[Track, ...]:
        return self._queue

    def find_track(self, track_id: str) -> Optional[Track]:
        """Busca una pista de la cola por su id."""
        for track in self._queue:
            if track.id == track_id:
                return track
        return None

    # ------------------------------------------------------------------
    # Cola
    # ------------------------------------------------------------------

    def load_queue(self, tracks: Iterable[Track], autoplay: bool = True) -> Tuple[Track, ...]:
        """
        Sustituye la cola completa por el resultado de una nueva búsqueda.

        Las pistas sin audio reproducible se descartan. Si ``autoplay`` es
        True y la cola no queda vacía, se selecciona la primera pista.

        Returns:
            Tuple[Track, ...]: Nueva cola
        """
        with self._lock:
            self._queue = tuple(track for track in tracks if track.is_playable)
            logger.info(f"Cola de reproducción sustituida ({len(self._queue)} pistas)")

            if autoplay and self._queue:
                self.select_track(self._queue[0])
            else:
                self._notify(self._state)

            return self._queue

    # ------------------------------------------------------------------
    # Transporte
    # ------------------------------------------------------------------

    def select_track(self, track: Track) -> PlaybackState:
        """
        Carga una pista y empieza a reproducirla desde el inicio.

        Raises:
            TrackUnplayable: Si la pista no tiene versión de la calidad
                             preferida (el estado no cambia)
        """
        if track is None or not track.is_playable:
            track_id = getattr(track, 'id', None)
            raise TrackUnplayable(f"La pista {track_id} no tiene audio reproducible")

        with self._lock:
            self.output.load(track.audio_url)
            self.output.set_volume(self._state.effective_volume)
            self.output.play()

            logger.info(f"Reproduciendo: {track.name} - {track.artist}")
            return self._commit(
                current_track=track,
                is_playing=True,
                position_seconds=0.0,
                duration_seconds=0.0,
            )

    def toggle_play(self) -> PlaybackState:
        """Alterna reproducción y pausa; sin pista actual no hace nada."""
        with self._lock:
            if self._state.current_track is None:
                return self._state

            if self._state.is_playing:
                self.output.pause()
            else:
                self.output.play()
            return self._commit(is_playing=not self._state.is_playing)

    def seek(self, seconds: float) -> PlaybackState:
        """
        Mueve la posición, acotada a [0, duración].

        Si la duración es 0 o desconocida no hace nada.

        Raises:
            ValueError: Si ``seconds`` no es un número finito
        """
        seconds = float(seconds)
        if not math.isfinite(seconds):
            raise ValueError(f"Posición inválida: {seconds}")

        with self._lock:
            duration = self._state.duration_seconds
            if not is_known_duration(duration):
                return self._state

            target = clamp(seconds, 0.0, duration)
            self.output.seek(target)
            return self._commit(position_seconds=target)

    def seek_fraction(self, fraction: float) -> PlaybackState:
        """
        Mueve la posición a una fracción de la duración (arrastre en la barra).

        Raises:
            ValueError: Si ``fraction`` no es un número finito
        """
        fraction = float(fraction)
        if not math.isfinite(fraction):
            raise ValueError(f"Fracción inválida: {fraction}")

        with self._lock:
            return self.seek(clamp(fraction, 0.0, 1.0) * self._state.duration_seconds)

    def set_volume(self, volume: float) -> PlaybackState:
        """
        Fija el volumen acotado a [0, 1]; un volumen 0 equivale a silenciar.

        Raises:
            ValueError: Si ``volume`` no es un número finito
        """
        volume = float(volume)
        if not math.isfinite(volume):
            raise ValueError(f"Volumen inválido: {volume}")

        with self._lock:
            volume = clamp(volume, 0.0, 1.0)
            self.output.set_volume(volume)
            return self._commit(volume=volume, is_muted=volume == 0)

    def toggle_mute(self) -> PlaybackState:
        """
        Silencia o restaura la salida.

        El volumen guardado no cambia, así que al quitar el silencio se
        recupera exactamente el nivel anterior.
        """
        with self._lock:
            if self._state.is_muted:
                self.output.set_volume(self._state.volume)
                return self._commit(is_muted=False)

            self.output.set_volume(0.0)
            return self._commit(is_muted=True)

    def toggle_shuffle(self) -> PlaybackState:
        with self._lock:
            return self._commit(is_shuffle=not self._state.is_shuffle)

    def toggle_repeat(self) -> PlaybackState:
        with self._lock:
            return self._commit(is_repeat=not self._state.is_repeat)

    def advance(self, direction: str = NEXT) -> PlaybackState:
        """
        Pasa a la pista siguiente o anterior de la cola.

        - Siguiente con aleatorio: índice uniforme en la cola (puede repetir
          la pista actual).
        - Siguiente sin aleatorio: (actual + 1) mod N.
        - Anterior: actual - 1, o N - 1 desde la primera (ignora aleatorio).

        Raises:
            ValueError: Si la dirección no es 'next' ni 'previous'
            TrackUnplayable: Si la cola está vacía o la pista actual no está
                             en ella (el estado no cambia)
        """
        if direction not in (NEXT, PREVIOUS):
            raise ValueError(f"Dirección inválida: {direction}")

        with self._lock:
            size = len(self._queue)
            if size == 0:
                raise TrackUnplayable("La cola de reproducción está vacía")

            current_index = self._index_of(self._state.current_track)
            if current_index is None:
                raise TrackUnplayable("La pista actual no pertenece a la cola")

            if direction == PREVIOUS:
                index = size - 1 if current_index == 0 else current_index - 1
            elif self._state.is_shuffle:
                index = self._rng.randrange(size)
            else:
                index = (current_index + 1) % size

            return self.select_track(self._queue[index])

    def next(self) -> PlaybackState:
        return self.advance(NEXT)

    def previous(self) -> PlaybackState:
        return self.advance(PREVIOUS)

    # ------------------------------------------------------------------
    # Eventos de la salida de audio
    # ------------------------------------------------------------------

    def on_track_ended(self) -> None:
        """
        Fin de pista: repite si está activado, si no avanza a la siguiente.

        Si no se puede avanzar, el reproductor queda en pausa.
        """
        with self._lock:
            if self._state.current_track is None:
                return

            if self._state.is_repeat:
                self.output.seek(0.0)
                self.output.play()
                self._commit(position_seconds=0.0, is_playing=True)
                return

            try:
                self.advance(NEXT)
            except TrackUnplayable as e:
                logger.info(f"Fin de la reproducción: {e}")
                self.output.pause()
                self._commit(is_playing=False)

    def on_time_update(self, seconds: float) -> None:
        with self._lock:
            seconds = float(seconds)
            if math.isfinite(seconds):
                self._commit(position_seconds=max(0.0, seconds))

    def on_duration_known(self, seconds: float) -> None:
        with self._lock:
            seconds = float(seconds)
            self._commit(duration_seconds=seconds if is_known_duration(seconds) else 0.0)

    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            data = self._state.to_dict()
            data['queue'] = [track.to_dict() for track in self._queue]
            return data

    def _index_of(self, track: Optional[Track]) -> Optional[int]:
        if track is None:
            return None
        for index, candidate in enumerate(self._queue):
            if candidate.id == track.id:
                return index
        return None

    def _commit(self, **changes) -> PlaybackState:
        self._state = replace(self._state, **changes)
        self._notify(self._state)
        return self._state
