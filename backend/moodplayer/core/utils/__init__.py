"""
Módulo de utilidades comunes del sistema.

Este paquete contiene funciones reutilizables que se usan en diferentes
partes del sistema (acotado de valores, formateo de tiempos, encadenado
de etapas, suscripciones y métricas).
"""

from .math import clamp, format_time, is_known_duration
from .result import Result, Success, Failure, attempt
from .observable import Observable
from .metrics import PerformanceMetrics, get_metrics

__all__ = [
    'clamp',
    'format_time',
    'is_known_duration',
    'Result',
    'Success',
    'Failure',
    'attempt',
    'Observable',
    'PerformanceMetrics',
    'get_metrics',
]
