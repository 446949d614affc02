"""
Mecanismo mínimo de suscripción para la capa de presentación.

El controlador de reproducción y el orquestador publican su estado a los
suscriptores tras cada cambio, en lugar de exponer variables compartidas.
"""

import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class Observable:
    """
    Mixin que mantiene una lista de callbacks y los notifica en orden.

    Un callback que lanza una excepción se registra en el log y no impide
    que el resto reciba la notificación.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Registra un callback que recibirá cada nuevo estado.

        Returns:
            Callable[[], None]: Función que cancela la suscripción
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, payload: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception(f"Error en suscriptor {listener!r}")
