"""
Excepciones del sistema de reproducción por estado de ánimo.

Cada etapa del pipeline y del reproductor tiene su propio tipo de error,
de forma que la capa que lo recupera (orquestador, controlador o rutas)
pueda traducirlo a un mensaje de estado concreto sin inspeccionar textos.

Todas las excepciones llevan un ``message`` pensado para mostrarse al
usuario; el texto técnico (causa original) se conserva en ``detail``.
"""

from typing import Optional


class MoodPlayerError(Exception):
    """Excepción base del sistema."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, detail: Optional[str] = None, message: Optional[str] = None):
        self.detail = detail
        self.message = message or self.default_message
        super().__init__(detail or self.message)


class CaptureUnavailable(MoodPlayerError):
    """La cámara no está disponible (permisos, hardware o sesión inactiva)."""

    default_message = "Failed to access camera. Please check permissions."


class ClassificationFailed(MoodPlayerError):
    """Fallo de red o respuesta inválida del clasificador de emociones."""

    default_message = "Failed to detect mood. Please try again."


class SearchFailed(MoodPlayerError):
    """Fallo de red o respuesta mal formada del catálogo de canciones."""

    default_message = "Failed to fetch songs. Please try again."


class TrackUnplayable(MoodPlayerError):
    """La pista seleccionada no tiene un audio de la calidad requerida."""

    default_message = "High quality version not available for this song."


class PipelineBusy(MoodPlayerError):
    """Ya hay una ejecución del pipeline en curso."""

    default_message = "Already analyzing your mood. Please wait."
