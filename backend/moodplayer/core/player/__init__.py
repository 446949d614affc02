"""
Módulo del reproductor.

Contiene la máquina de estados de reproducción y la interfaz de salida
de audio con la que se comunica.
"""

from .audio_output import AudioOutput, HeadlessAudioOutput, PlaybackObserver
from .controller import PlaybackController, PlaybackState, NEXT, PREVIOUS

__all__ = [
    'AudioOutput',
    'HeadlessAudioOutput',
    'PlaybackObserver',
    'PlaybackController',
    'PlaybackState',
    'NEXT',
    'PREVIOUS',
]
