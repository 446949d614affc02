"""
Módulo de normalización de emociones.

Este módulo define el conjunto fijo de estados de ánimo que entiende el
reproductor y normaliza las etiquetas que devuelve el clasificador remoto
(que puede usar sinónimos, mayúsculas o la forma sustantiva, como "fear"
o "surprise") a ese conjunto.

A diferencia de un detector local, aquí una etiqueta desconocida NO se
convierte en "neutral": se devuelve None para que el mapeo de géneros
aplique su propio valor por defecto.
"""

from typing import Dict, List, Optional

# Conjunto fijo de estados de ánimo del sistema
MOOD_LABELS: List[str] = [
    "happy",
    "sad",
    "angry",
    "neutral",
    "surprised",
    "fearful",
    "disgusted",
]

# Sinónimos que pueden llegar del clasificador remoto
EMOTION_SYNONYMS: Dict[str, str] = {
    "happiness": "happy",
    "joy": "happy",
    "sadness": "sad",
    "anger": "angry",
    "calm": "neutral",
    "surprise": "surprised",
    "fear": "fearful",
    "scared": "fearful",
    "disgust": "disgusted",
}


def normalize_emotion(emotion: Optional[str]) -> Optional[str]:
    """
    Normaliza una etiqueta de emoción a una del conjunto estándar.

    Args:
        emotion (str): Etiqueta devuelta por el clasificador

    Returns:
        str | None: Estado de ánimo de MOOD_LABELS, o None si no se reconoce

    Examples:
        >>> normalize_emotion("Happy")
        'happy'

        >>> normalize_emotion("fear")
        'fearful'

        >>> normalize_emotion("confused") is None
        True
    """
    if not emotion or not isinstance(emotion, str):
        return None

    emotion_lower = emotion.lower().strip()

    if emotion_lower in MOOD_LABELS:
        return emotion_lower

    return EMOTION_SYNONYMS.get(emotion_lower)

