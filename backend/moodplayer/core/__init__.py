"""
Core - Módulo principal del reproductor musical por estado de ánimo.

Este paquete contiene todos los componentes fundamentales del sistema:
- camera: Sesión de captura de la webcam
- emotion: Cliente del clasificador remoto y esquema de estados de ánimo
- music: Mapeo de estados de ánimo a géneros y cliente del catálogo
- player: Máquina de estados de reproducción y salida de audio
- pipeline: Orquestación del flujo completo
- utils: Utilidades comunes (acotado, Result, suscripciones, métricas)
"""

from . import errors
from . import utils
from . import camera
from . import emotion
from . import music
from . import player
from . import pipeline

# Exponer componentes principales para facilitar imports
from .errors import (
    MoodPlayerError,
    CaptureUnavailable,
    ClassificationFailed,
    SearchFailed,
    TrackUnplayable,
    PipelineBusy,
)
from .camera import MediaCaptureSession
from .emotion import MoodClassifierClient, MoodPrediction
from .music import CatalogSearchClient, Track, genres_for, message_for
from .player import PlaybackController, HeadlessAudioOutput
from .pipeline import MoodPipelineOrchestrator

__all__ = [
    'errors',
    'utils',
    'camera',
    'emotion',
    'music',
    'player',
    'pipeline',
    'MoodPlayerError',
    'CaptureUnavailable',
    'ClassificationFailed',
    'SearchFailed',
    'TrackUnplayable',
    'PipelineBusy',
    'MediaCaptureSession',
    'MoodClassifierClient',
    'MoodPrediction',
    'CatalogSearchClient',
    'Track',
    'genres_for',
    'message_for',
    'PlaybackController',
    'HeadlessAudioOutput',
    'MoodPipelineOrchestrator',
]
