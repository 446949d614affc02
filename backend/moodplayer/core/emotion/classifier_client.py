"""
Cliente del servicio remoto de clasificación de estado de ánimo.

El modelo de reconocimiento facial vive en otro servicio; este cliente
solo envía la instantánea JPEG por HTTP y valida la respuesta.

Contrato del servicio:
    POST <endpoint>
    Content-Type: multipart/form-data
    image: capture.jpg (image/jpeg)

    Response 200:
    {
        "mood": "Happy",
        "emotion": "happy"
    }
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

import requests

from ..errors import ClassificationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoodPrediction:
    """
    Resultado del clasificador.

    Attributes:
        mood (str): Etiqueta para mostrar al usuario ("Happy")
        emotion (str): Clave de las tablas de géneros y mensajes ("happy")
    """
    mood: str
    emotion: str

    def to_dict(self) -> Dict[str, str]:
        return {'mood': self.mood, 'emotion': self.emotion}


class MoodClassifierClient:
    """
    Cliente HTTP del clasificador de estado de ánimo.

    No reintenta: ante cualquier fallo lanza ``ClassificationFailed`` y el
    llamador decide el siguiente paso.

    Example:
        >>> client = MoodClassifierClient("http://localhost:5000/detect_emotion")
        >>> client.classify(jpeg_bytes)
        MoodPrediction(mood='Happy', emotion='happy')
    """

    def __init__(self, endpoint: str, timeout: float = 10.0, session: requests.Session = None):
        """
        Args:
            endpoint (str): URL completa del endpoint de clasificación
            timeout (float): Timeout en segundos de la petición
            session (requests.Session): Sesión HTTP opcional (reutiliza conexiones)
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def classify(self, image_payload: bytes) -> MoodPrediction:
        """
        Envía la imagen al servicio remoto y devuelve el estado de ánimo.

        Args:
            image_payload (bytes): Imagen JPEG capturada

        Returns:
            MoodPrediction: Estado de ánimo detectado

        Raises:
            ClassificationFailed: Error de red, timeout, respuesta no exitosa
                                  o cuerpo que no se puede interpretar
        """
        if not image_payload:
            raise ClassificationFailed("La imagen a clasificar está vacía")

        files = {'image': ('capture.jpg', image_payload, 'image/jpeg')}

        try:
            response = self.session.post(self.endpoint, files=files, timeout=self.timeout)
        except requests.Timeout as e:
            raise ClassificationFailed(f"Timeout del clasificador tras {self.timeout}s: {e}")
        except requests.RequestException as e:
            raise ClassificationFailed(f"Error de red al contactar el clasificador: {e}")

        if not response.ok:
            raise ClassificationFailed(f"El clasificador respondió HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ClassificationFailed(f"Respuesta del clasificador no es JSON: {e}")

        prediction = self._parse(data)
        logger.info(f"Estado de ánimo detectado: {prediction.mood} ({prediction.emotion})")
        return prediction

    @staticmethod
    def _parse(data: Any) -> MoodPrediction:
        if not isinstance(data, dict):
            raise ClassificationFailed("Respuesta del clasificador con formato inesperado")

        emotion = data.get('emotion')
        if not isinstance(emotion, str) or not emotion.strip():
            raise ClassificationFailed("Respuesta del clasificador sin campo 'emotion'")

        mood = data.get('mood')
        if not isinstance(mood, str) or not mood.strip():
            mood = emotion.strip().capitalize()

        return MoodPrediction(mood=mood.strip(), emotion=emotion.strip())
