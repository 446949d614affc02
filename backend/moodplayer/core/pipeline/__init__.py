"""
Módulo de pipeline de estado de ánimo.

Este módulo integra los componentes del sistema para crear un flujo
completo desde la captura de la cámara hasta la cola de reproducción.
"""

from .mood_pipeline import MoodPipelineOrchestrator, PipelineOutcome

__all__ = ['MoodPipelineOrchestrator', 'PipelineOutcome']
