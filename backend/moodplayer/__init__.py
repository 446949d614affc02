"""
Mood Music Player - backend.

Detecta el estado de ánimo del usuario a partir de una foto, lo traduce a
géneros musicales, busca canciones en un catálogo remoto y las reproduce
con controles de transporte completos.
"""

__version__ = "1.0.0"
