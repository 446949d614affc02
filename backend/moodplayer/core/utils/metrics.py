"""
Módulo de instrumentación y medición de rendimiento.

Mide la latencia de cada etapa del pipeline de estado de ánimo (captura,
clasificación remota, búsqueda en el catálogo) para poder detectar qué
servicio externo está ralentizando la experiencia del usuario.
"""

import json
import logging
import statistics
import threading
import time
from collections import defaultdict, deque
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Deque, Dict, Optional

logger = logging.getLogger(__name__)

# Mediciones conservadas por etapa (las más antiguas se descartan)
DEFAULT_MAX_SAMPLES = 1000


class PerformanceMetrics:
    """
    Gestor de métricas de rendimiento del sistema.

    Guarda en memoria la duración de las últimas ``max_samples`` ejecuciones
    de cada etapa, de modo que un servidor de larga duración no acumula
    mediciones sin límite. Es seguro usarlo desde varios hilos (el servidor
    Flask atiende peticiones en paralelo).
    """

    def __init__(self, max_samples: int = DEFAULT_MAX_SAMPLES):
        """
        Args:
            max_samples: Número máximo de mediciones guardadas por etapa
        """
        if max_samples < 1:
            raise ValueError(f"max_samples debe ser positivo: {max_samples}")
        self.max_samples = max_samples
        self.measurements: Dict[str, Deque[float]] = defaultdict(self._new_buffer)
        self.metadata: Dict[str, Deque[Dict[str, Any]]] = defaultdict(self._new_buffer)
        self._lock = threading.Lock()

    def _new_buffer(self) -> deque:
        return deque(maxlen=self.max_samples)

    @contextmanager
    def measure(self, stage_name: str, metadata: Optional[Dict] = None):
        """
        Context manager para medir el tiempo de ejecución de una etapa.

        La medición se registra aunque la etapa lance una excepción.

        Args:
            stage_name: Nombre de la etapa a medir
            metadata: Información adicional sobre la medición

        Yields:
            Diccionario donde se guardará el tiempo medido

        Example:
            with metrics.measure('classification') as timing:
                prediction = classifier.classify(image)
            print(f"Tardó {timing['duration']} segundos")
        """
        start_time = time.perf_counter()
        timing_info = {'stage': stage_name}

        try:
            yield timing_info
        finally:
            duration = time.perf_counter() - start_time
            timing_info['duration'] = duration
            timing_info['timestamp'] = datetime.now().isoformat()
            if metadata:
                timing_info.update(metadata)

            with self._lock:
                self.measurements[stage_name].append(duration)
                self.metadata[stage_name].append(timing_info)

            logger.debug(f"[METRICS] {stage_name}: {duration * 1000:.1f} ms")

    def last_duration(self, stage_name: str) -> Optional[float]:
        """Duración de la última medición de una etapa, o None."""
        with self._lock:
            times = self.measurements.get(stage_name)
            return times[-1] if times else None

    def get_statistics(self, stage_name: Optional[str] = None) -> Dict:
        """
        Calcula estadísticas sobre las mediciones realizadas.

        Args:
            stage_name: Etapa específica (None para todas)

        Returns:
            Diccionario con estadísticas por etapa
        """
        with self._lock:
            if stage_name:
                stages = {stage_name: list(self.measurements.get(stage_name, []))}
            else:
                stages = {name: list(times) for name, times in self.measurements.items()}

        stats = {}
        for name, times in stages.items():
            if not times:
                continue

            stats[name] = {
                'count': len(times),
                'mean': statistics.mean(times),
                'median': statistics.median(times),
                'stdev': statistics.stdev(times) if len(times) > 1 else 0.0,
                'min': min(times),
                'max': max(times),
                'total': sum(times)
            }

        return stats

    def save_to_json(self, filepath: Path) -> Path:
        """
        Guarda las mediciones y estadísticas en formato JSON.

        Args:
            filepath: Ruta del archivo de salida

        Returns:
            Path: Ruta del archivo escrito
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with self._lock:
            raw = {name: list(times) for name, times in self.measurements.items()}

        data = {
            'timestamp': datetime.now().isoformat(),
            'statistics': self.get_statistics(),
            'raw_measurements': raw,
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Métricas guardadas en: {filepath}")
        return filepath


# Instancia global para uso en la aplicación
_global_metrics = None


def get_metrics() -> PerformanceMetrics:
    """
    Obtiene la instancia global de métricas.

    Returns:
        Instancia de PerformanceMetrics
    """
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = PerformanceMetrics()
    return _global_metrics

