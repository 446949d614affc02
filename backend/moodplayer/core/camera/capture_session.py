"""
Módulo de captura de cámara usando OpenCV.

Este módulo proporciona la sesión de captura que posee el stream de la
webcam: lo abre cuando el usuario lo pide, expone el último frame para la
vista previa y produce una instantánea JPEG para el clasificador de
estado de ánimo.
"""

import logging
import threading
from typing import Callable, Optional

import cv2
import numpy as np

from ..errors import CaptureUnavailable

logger = logging.getLogger(__name__)


class MediaCaptureSession:
    """
    Sesión de captura que posee en exclusiva el stream de la webcam.

    El stream solo existe entre ``start()`` y ``stop()``; la sesión nunca
    lo abre por su cuenta. ``capture_snapshot()`` no detiene el stream:
    decide el orquestador cuándo hacerlo.

    Attributes:
        camera_index (int): Índice de la cámara a utilizar (default: 0)
        jpeg_quality (int): Calidad de compresión JPEG [0, 100]
        cap (cv2.VideoCapture): Objeto de captura de OpenCV (None si inactiva)

    Example:
        >>> with MediaCaptureSession(camera_index=0) as session:
        ...     image = session.capture_snapshot()
        >>> len(image) > 0
        True
    """

    def __init__(
        self,
        camera_index: int = 0,
        jpeg_quality: int = 90,
        capture_factory: Optional[Callable[[int], 'cv2.VideoCapture']] = None
    ):
        """
        Inicializa la sesión sin abrir la cámara.

        Args:
            camera_index (int): Índice de la cámara a utilizar
            jpeg_quality (int): Calidad JPEG de las instantáneas
            capture_factory: Constructor del dispositivo de captura.
                             Por defecto ``cv2.VideoCapture``.
        """
        self.camera_index = camera_index
        self.jpeg_quality = jpeg_quality
        self._capture_factory = capture_factory or cv2.VideoCapture
        self.cap = None
        self._preview: Optional[np.ndarray] = None
        self._lock = threading.RLock()

    @property
    def is_active(self) -> bool:
        """True si el stream está abierto."""
        return self.cap is not None

    def start(self) -> None:
        """
        Abre la conexión con la webcam.

        Si la sesión ya está activa no hace nada.

        Raises:
            CaptureUnavailable: Si no se puede abrir la cámara
        """
        with self._lock:
            if self.is_active:
                return

            try:
                cap = self._capture_factory(self.camera_index)
            except cv2.error as e:
                raise CaptureUnavailable(f"Error al iniciar la cámara: {e}")

            if cap is None or not cap.isOpened():
                if cap is not None:
                    cap.release()
                raise CaptureUnavailable(
                    f"No se pudo abrir la cámara con índice {self.camera_index}. "
                    "Verifica permisos y que no esté en uso por otra aplicación."
                )

            self.cap = cap
            logger.info(f"Cámara {self.camera_index} abierta correctamente")

    def stop(self) -> None:
        """
        Libera la cámara y limpia la vista previa.

        Siempre tiene éxito; si la sesión no está activa no hace nada.
        """
        with self._lock:
            if self.cap is None:
                return
            try:
                self.cap.release()
            finally:
                self.cap = None
                self._preview = None
                logger.info("Recursos de cámara liberados")

    close = stop

    def read_preview(self) -> Optional[np.ndarray]:
        """
        Lee el frame actual para la vista previa en vivo.

        Returns:
            np.ndarray | None: Frame BGR o None si no hay frame disponible

        Raises:
            CaptureUnavailable: Si la sesión no está activa
        """
        with self._lock:
            self._require_active()
            success, frame = self.cap.read()
            if not success or frame is None:
                logger.warning("No se pudo leer el frame de la cámara")
                return None
            self._preview = frame
            return frame

    def capture_snapshot(self) -> bytes:
        """
        Captura el frame actual a su resolución nativa y lo codifica en JPEG.

        Returns:
            bytes: Imagen JPEG comprimida

        Raises:
            CaptureUnavailable: Si la sesión no está activa, no hay frame
                                o la codificación falla
        """
        with self._lock:
            frame = self.read_preview()
            if frame is None:
                raise CaptureUnavailable("La cámara no devolvió ningún frame")

            ok, buffer = cv2.imencode(
                '.jpg', frame, [int(cv2.IMWRITE_JPEG_QUALITY), self.jpeg_quality]
            )
            if not ok:
                raise CaptureUnavailable("No se pudo codificar el frame como JPEG")

            height, width = frame.shape[:2]
            logger.debug(f"Instantánea capturada ({width}x{height}, {len(buffer)} bytes)")
            return buffer.tobytes()

    def get_properties(self) -> dict:
        """
        Obtiene las propiedades actuales de la cámara.

        Returns:
            dict: Diccionario con propiedades de la cámara (ancho, alto, fps)
        """
        with self._lock:
            if not self.is_active:
                return {}

            return {
                'width': int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
                'height': int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
                'fps': int(self.cap.get(cv2.CAP_PROP_FPS))
            }

    def _require_active(self) -> None:
        if not self.is_active:
            raise CaptureUnavailable(
                "La cámara no está abierta. Llama a start() antes de capturar."
            )

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
