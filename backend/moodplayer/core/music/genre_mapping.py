"""
Tabla de mapeo de estados de ánimo a géneros musicales y mensajes.

Cada estado de ánimo tiene una lista ordenada de tres géneros: el primero
es el que se usa para la búsqueda inicial en el catálogo, los otros dos
quedan disponibles para búsquedas manuales. También define el mensaje que
se muestra al usuario cuando se detecta cada estado.

Las funciones son puras (sin E/S) y aceptan las mismas variantes de
etiqueta que ``normalize_emotion`` ("Happy", "fear", "surprise"...).
"""

from typing import Dict, List, Optional

from ..emotion.schema import normalize_emotion

# Género usado cuando la emoción no se reconoce
FALLBACK_GENRE = "pop"

# Mensaje usado cuando la emoción no se reconoce
FALLBACK_MESSAGE = "Here's some music for you! 🎵"

MOOD_TO_GENRES: Dict[str, List[str]] = {
    # Energía alta y valencia positiva
    "happy": ["pop", "dance", "upbeat"],
    "sad": ["ballad", "acoustic", "melancholic"],
    "angry": ["rock", "metal", "intense"],
    "neutral": ["indie", "alternative", "ambient"],
    "surprised": ["electronic", "experimental", "energetic"],
    # Música tranquila para contrarrestar la activación
    "fearful": ["ambient", "classical", "calm"],
    "disgusted": ["punk", "grunge", "heavy"],
}

MOOD_MESSAGES: Dict[str, str] = {
    "happy": "You're looking happy! Here are some upbeat tunes to keep the good vibes going! 🎵",
    "sad": "Feeling blue? These soulful melodies might help lift your spirits 🎵",
    "angry": "Let's channel that energy with some powerful tracks! 🎸",
    "neutral": "Here's a balanced mix of tunes for your relaxed mood 🎵",
    "surprised": "Wow! Here's some exciting music to match your mood! ✨",
    "fearful": "Here are some calming tunes to help you feel more at ease 🎵",
    "disgusted": "Let's turn that mood around with some energetic tracks! 🎵",
}


def genres_for(emotion: Optional[str]) -> List[str]:
    """
    Obtiene los géneros candidatos para una emoción.

    Args:
        emotion (str): Etiqueta de emoción (se normaliza)

    Returns:
        List[str]: Tres géneros en orden de preferencia, o ["pop"] si la
                   emoción no se reconoce

    Examples:
        >>> genres_for("happy")
        ['pop', 'dance', 'upbeat']

        >>> genres_for("fear")
        ['ambient', 'classical', 'calm']

        >>> genres_for("confused")
        ['pop']
    """
    mood = normalize_emotion(emotion)
    if mood is None:
        return [FALLBACK_GENRE]
    return list(MOOD_TO_GENRES[mood])


def primary_genre(emotion: Optional[str]) -> str:
    """Género usado para la búsqueda inicial."""
    return genres_for(emotion)[0]


def message_for(emotion: Optional[str]) -> str:
    """
    Obtiene el mensaje de estado para una emoción.

    Examples:
        >>> message_for("angry")
        "Let's channel that energy with some powerful tracks! 🎸"

        >>> message_for(None)
        "Here's some music for you! 🎵"
    """
    mood = normalize_emotion(emotion)
    if mood is None:
        return FALLBACK_MESSAGE
    return MOOD_MESSAGES[mood]
