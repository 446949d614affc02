"""
Pipeline de estado de ánimo a lista de reproducción.

Este módulo orquesta el flujo completo desde la cámara hasta la cola de
reproducción:

    captura -> clasificación -> mapeo a géneros -> búsqueda -> encolado -> parar cámara

Cada etapa publica un mensaje de estado antes de pasar a la siguiente.
Las etapas se encadenan con ``Result``: el primer fallo detiene el
pipeline, deja la cola y el reproductor como estaban y muestra el mensaje
de error de esa etapa. No hay reintentos automáticos; el usuario repite
la acción.

La cámara solo se detiene cuando el pipeline termina con éxito. Si falla
la clasificación o la búsqueda, la cámara sigue abierta para que el
usuario pueda volver a capturar sin reiniciarla.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..camera import MediaCaptureSession
from ..emotion import MoodClassifierClient, MoodPrediction
from ..errors import CaptureUnavailable, MoodPlayerError, PipelineBusy
from ..music import CatalogSearchClient, Track, genres_for, message_for
from ..player import PlaybackController
from ..utils import Failure, Observable, PerformanceMetrics, Result, Success, attempt, get_metrics

logger = logging.getLogger(__name__)

CAMERA_READY_MESSAGE = "Camera started! Click capture when ready."
CAMERA_STOPPED_MESSAGE = "Camera stopped."
CAMERA_NOT_STARTED_MESSAGE = "Camera is not started. Click Start Camera first."
ANALYZING_MESSAGE = "Analyzing your mood..."


@dataclass(frozen=True)
class PipelineOutcome:
    """
    Resultado de una ejecución completa del pipeline.

    Attributes:
        prediction (MoodPrediction | None): Estado de ánimo (None en búsquedas manuales)
        genres (tuple): Géneros candidatos
        query (str): Término buscado en el catálogo
        tracks (tuple): Pistas reproducibles encontradas (puede estar vacía)
    """
    prediction: Optional[MoodPrediction]
    genres: Tuple[str, ...]
    query: str
    tracks: Tuple[Track, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mood': self.prediction.mood if self.prediction else None,
            'emotion': self.prediction.emotion if self.prediction else None,
            'genres': list(self.genres),
            'query': self.query,
            'tracks': [track.to_dict() for track in self.tracks],
        }


class MoodPipelineOrchestrator(Observable):
    """
    Orquestador del pipeline de estado de ánimo.

    Integra los siguientes componentes:
    1. Sesión de captura (MediaCaptureSession)
    2. Clasificador remoto (MoodClassifierClient)
    3. Mapeo de géneros y mensajes (genre_mapping)
    4. Catálogo remoto (CatalogSearchClient)
    5. Controlador de reproducción (PlaybackController)

    Solo admite una ejecución a la vez: una llamada concurrente a ``run()``
    o ``search()`` devuelve un fallo ``PipelineBusy`` sin tocar el estado.

    Attributes:
        session: Sesión de captura de la cámara
        classifier: Cliente del clasificador
        catalog: Cliente del catálogo
        controller: Controlador de reproducción
        autoplay (bool): Reproducir la primera pista al recibir resultados
        mood (str | None): Etiqueta del último estado de ánimo detectado
        emotion (str | None): Clave del último estado de ánimo detectado
        genres (List[str]): Géneros del último estado de ánimo

    Example:
        >>> orchestrator = MoodPipelineOrchestrator(session, classifier, catalog, controller)
        >>> orchestrator.start_camera()
        >>> result = orchestrator.run()
        >>> if result.is_success():
        ...     print(orchestrator.status_message)
        You're looking happy! Here are some upbeat tunes to keep the good vibes going! 🎵
    """

    def __init__(
        self,
        session: MediaCaptureSession,
        classifier: MoodClassifierClient,
        catalog: CatalogSearchClient,
        controller: PlaybackController,
        autoplay: bool = True,
        metrics: Optional[PerformanceMetrics] = None
    ):
        Observable.__init__(self)
        self.session = session
        self.classifier = classifier
        self.catalog = catalog
        self.controller = controller
        self.autoplay = autoplay
        self.metrics = metrics or get_metrics()

        self.mood: Optional[str] = None
        self.emotion: Optional[str] = None
        self.genres: List[str] = []
        self._status_message = ''
        self._busy = threading.Lock()

    @property
    def status_message(self) -> str:
        return self._status_message

    @property
    def is_busy(self) -> bool:
        return self._busy.locked()

    # ------------------------------------------------------------------
    # Cámara
    # ------------------------------------------------------------------

    def start_camera(self) -> Result[None]:
        """
        Abre la cámara para la vista previa.

        Returns:
            Result[None]: Fallo con CaptureUnavailable si no hay acceso
        """
        result = attempt(self.session.start)
        if result.is_success():
            self._set_status(CAMERA_READY_MESSAGE)
        else:
            self.report_failure(result.error())
        return result

    def stop_camera(self) -> None:
        """Cierra la cámara; si ya estaba cerrada no hace nada."""
        if self.session.is_active:
            self.session.stop()
            self._set_status(CAMERA_STOPPED_MESSAGE)

    def close(self) -> None:
        """Libera la cámara al destruir el componente."""
        self.session.stop()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def run(self) -> Result[PipelineOutcome]:
        """
        Ejecuta el pipeline completo una vez.

        Returns:
            Result[PipelineOutcome]: Éxito con las pistas encontradas, o el
                                     error de la etapa que falló
        """
        if not self._busy.acquire(blocking=False):
            logger.warning("Pipeline ya en ejecución, petición rechazada")
            return Failure(PipelineBusy("Ejecución del pipeline en curso"))

        try:
            self._set_status(ANALYZING_MESSAGE)

            result = (
                self._capture()
                .flat_map(self._classify)
                .map(self._map_genres)
                .flat_map(self._search_for_mood)
            )

            if result.is_success():
                self.session.stop()
            else:
                self.report_failure(result.error())

            return result
        finally:
            self._busy.release()

    def search(self, query: str) -> Result[PipelineOutcome]:
        """
        Ejecuta solo la etapa de búsqueda con un término manual.

        Sirve tanto para buscar otro género como para reintentar una
        búsqueda fallida. El estado de ánimo actual no cambia.
        """
        if not self._busy.acquire(blocking=False):
            logger.warning("Pipeline ya en ejecución, búsqueda rechazada")
            return Failure(PipelineBusy("Ejecución del pipeline en curso"))

        try:
            return self._search_and_enqueue(query, None, (query,)).on_failure(self.report_failure)
        finally:
            self._busy.release()

    def _capture(self) -> Result[bytes]:
        if not self.session.is_active:
            return Failure(CaptureUnavailable(
                "Captura solicitada con la cámara cerrada",
                message=CAMERA_NOT_STARTED_MESSAGE
            ))

        with self.metrics.measure('capture'):
            return attempt(self.session.capture_snapshot)

    def _classify(self, image: bytes) -> Result[MoodPrediction]:
        with self.metrics.measure('classification', metadata={'bytes': len(image)}):
            result = attempt(self.classifier.classify, image)

        if result.is_success():
            prediction = result.value()
            self.mood = prediction.mood
            self.emotion = prediction.emotion
            self._set_status(message_for(prediction.emotion))
        return result

    def _map_genres(self, prediction: MoodPrediction) -> Tuple[MoodPrediction, List[str]]:
        self.genres = genres_for(prediction.emotion)
        logger.info(f"Estado de ánimo '{prediction.emotion}' -> géneros {self.genres}")
        return prediction, self.genres

    def _search_for_mood(self, mapped: Tuple[MoodPrediction, List[str]]) -> Result[PipelineOutcome]:
        prediction, genres = mapped
        return self._search_and_enqueue(genres[0], prediction, genres)

    def _search_and_enqueue(
        self,
        query: str,
        prediction: Optional[MoodPrediction],
        genres
    ) -> Result[PipelineOutcome]:
        with self.metrics.measure('search', metadata={'query': query}):
            result = attempt(self.catalog.search, query)

        if result.is_failure():
            return result

        tracks = tuple(result.value())
        if tracks:
            self.controller.load_queue(tracks, autoplay=self.autoplay)
            if prediction is None:
                self._set_status(f"Found {len(tracks)} songs for '{query}'.")
        else:
            logger.info(f"Sin pistas reproducibles para '{query}', la cola no cambia")
            self._set_status(f"No playable songs found for '{query}'. Try another search.")

        return Success(PipelineOutcome(
            prediction=prediction,
            genres=tuple(genres),
            query=query,
            tracks=tracks,
        ))

    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self._status_message,
            'mood': self.mood,
            'emotion': self.emotion,
            'genres': list(self.genres),
            'busy': self.is_busy,
            'camera_active': self.session.is_active,
        }

    def _set_status(self, message: str) -> None:
        self._status_message = message
        self._notify(self.to_dict())

    def report_failure(self, error: MoodPlayerError) -> None:
        """Publica como mensaje de estado el error de una etapa o del reproductor."""
        logger.warning(f"{type(error).__name__}: {error.detail or error.message}")
        self._set_status(error.message)
