"""
Módulo de reconocimiento de estado de ánimo.

Este paquete contiene el cliente del clasificador remoto y el esquema de
estados de ánimo que usa el resto del sistema.
"""

from .classifier_client import MoodClassifierClient, MoodPrediction
from .schema import normalize_emotion, MOOD_LABELS

__all__ = [
    'MoodClassifierClient',
    'MoodPrediction',
    'normalize_emotion',
    'MOOD_LABELS'
]
