"""
Interfaz de salida de audio del reproductor.

El controlador de reproducción es el único que da órdenes a la salida de
audio (cargar, reproducir, pausar, posicionar, volumen). En sentido
contrario, la salida notifica al controlador los eventos del medio
(avance del tiempo, duración conocida, fin de pista) a través de la
interfaz ``PlaybackObserver``; es el único punto en el que el estado
cambia sin que el controlador lo haya iniciado.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class PlaybackObserver(ABC):
    """Receptor de los eventos de la salida de audio."""

    @abstractmethod
    def on_time_update(self, seconds: float) -> None:
        pass

    @abstractmethod
    def on_duration_known(self, seconds: float) -> None:
        pass

    @abstractmethod
    def on_track_ended(self) -> None:
        pass


class AudioOutput(ABC):
    """
    Interfaz base para salidas de audio.

    Las implementaciones reciben órdenes del controlador y llaman a
    ``notify_*`` cuando el medio reporta un evento.
    """

    def __init__(self):
        self._observer: Optional[PlaybackObserver] = None

    def bind(self, observer: PlaybackObserver) -> None:
        """Conecta el receptor de eventos (el controlador de reproducción)."""
        self._observer = observer

    @abstractmethod
    def load(self, url: str) -> None:
        """Carga una nueva fuente de audio desde el inicio."""

    @abstractmethod
    def play(self) -> None:
        pass

    @abstractmethod
    def pause(self) -> None:
        pass

    @abstractmethod
    def seek(self, seconds: float) -> None:
        pass

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """Fija el volumen efectivo de salida en [0, 1]."""

    def notify_time_update(self, seconds: float) -> None:
        if self._observer is not None:
            self._observer.on_time_update(seconds)

    def notify_duration(self, seconds: float) -> None:
        if self._observer is not None:
            self._observer.on_duration_known(seconds)

    def notify_ended(self) -> None:
        if self._observer is not None:
            self._observer.on_track_ended()


class HeadlessAudioOutput(AudioOutput):
    """
    Salida de audio sin dispositivo local.

    Registra el último estado ordenado por el controlador para que un
    cliente remoto (el elemento de audio del navegador) lo replique, y le
    devuelve sus eventos mediante ``notify_*``.

    Attributes:
        source (str | None): URL cargada
        playing (bool): Si se ha ordenado reproducir
        position (float): Última posición ordenada en segundos
        volume (float): Volumen efectivo ordenado
    """

    def __init__(self):
        super().__init__()
        self.source: Optional[str] = None
        self.playing = False
        self.position = 0.0
        self.volume = 1.0

    def load(self, url: str) -> None:
        self.source = url
        self.position = 0.0
        self.playing = False
        logger.debug(f"Fuente de audio cargada: {url}")

    def play(self) -> None:
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def seek(self, seconds: float) -> None:
        self.position = seconds

    def set_volume(self, volume: float) -> None:
        self.volume = volume

    def notify_time_update(self, seconds: float) -> None:
        self.position = seconds
        super().notify_time_update(seconds)

    def notify_ended(self) -> None:
        self.playing = False
        super().notify_ended()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'playing': self.playing,
            'position': self.position,
            'volume': self.volume,
        }
