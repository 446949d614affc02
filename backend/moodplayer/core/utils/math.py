"""
Utilidades numéricas comunes del sistema.

Este módulo centraliza las funciones de acotado y formateo que usan el
controlador de reproducción (volumen, posición) y la serialización del
estado hacia la interfaz.
"""

import math
from typing import Optional


def clamp(x: float, lo: float, hi: float) -> float:
    """
    Restringe un valor al rango [lo, hi].

    Args:
        x (float): Valor a restringir
        lo (float): Límite inferior
        hi (float): Límite superior

    Returns:
        float: Valor restringido al rango [lo, hi]

    Examples:
        >>> clamp(5.0, 0.0, 10.0)
        5.0
        >>> clamp(15.0, 0.0, 10.0)
        10.0
        >>> clamp(-5.0, 0.0, 10.0)
        0.0
    """
    return max(lo, min(hi, x))


def is_known_duration(duration: Optional[float]) -> bool:
    """
    Indica si una duración reportada por la salida de audio es utilizable.

    Los elementos de audio reportan NaN o infinito mientras no han cargado
    los metadatos (o para streams en vivo); ambos casos y el 0 se tratan
    como duración desconocida.

    Examples:
        >>> is_known_duration(215.3)
        True
        >>> is_known_duration(float('nan'))
        False
        >>> is_known_duration(0)
        False
    """
    if duration is None:
        return False
    return math.isfinite(duration) and duration > 0


def format_time(seconds: Optional[float]) -> str:
    """
    Formatea segundos como ``m:ss`` para mostrar en la barra de progreso.

    Valores ausentes o no numéricos se muestran como ``0:00``.

    Examples:
        >>> format_time(0)
        '0:00'
        >>> format_time(75.9)
        '1:15'
        >>> format_time(float('nan'))
        '0:00'
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return '0:00'
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
