"""
Módulo de traducción de estados de ánimo a música.

Contiene el mapeo estado de ánimo -> géneros/mensajes y el cliente del
catálogo remoto que convierte un género en una lista de pistas.
"""

from .genre_mapping import genres_for, message_for, primary_genre, MOOD_TO_GENRES, MOOD_MESSAGES
from .catalog_client import CatalogSearchClient, Track, AudioAsset

__all__ = [
    'genres_for',
    'message_for',
    'primary_genre',
    'MOOD_TO_GENRES',
    'MOOD_MESSAGES',
    'CatalogSearchClient',
    'Track',
    'AudioAsset',
]
