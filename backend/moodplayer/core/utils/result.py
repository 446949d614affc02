"""
Tipo Result para encadenar etapas que pueden fallar.

El pipeline de estado de ánimo es una secuencia finita de etapas
(captura, clasificación, mapeo, búsqueda, encolado). Cada etapa devuelve
un ``Success`` con su valor o un ``Failure`` con el error del sistema que
la detuvo; ``flat_map`` encadena la siguiente etapa solo si la anterior
tuvo éxito, de modo que el primer fallo corta la cadena.

Solo se capturan los errores del propio sistema (``MoodPlayerError``);
cualquier otra excepción es un bug y se propaga.

Example:
    >>> result = (
    ...     attempt(session.capture_snapshot)
    ...     .flat_map(lambda image: attempt(classifier.classify, image))
    ... )
    >>> if result.is_failure():
    ...     print(result.error().message)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from ..errors import MoodPlayerError

T = TypeVar('T')


class Result(ABC, Generic[T]):
    """Resultado de una etapa: éxito con valor o fallo con error."""

    @abstractmethod
    def is_success(self) -> bool:
        ...

    def is_failure(self) -> bool:
        return not self.is_success()

    @abstractmethod
    def value(self) -> T:
        """
        Devuelve el valor de éxito.

        Raises:
            ValueError: Si el resultado es un fallo
        """

    @abstractmethod
    def error(self) -> MoodPlayerError:
        """
        Devuelve el error del fallo.

        Raises:
            ValueError: Si el resultado es un éxito
        """

    @abstractmethod
    def map(self, fn: Callable[[T], Any]) -> 'Result[Any]':
        """Transforma el valor de éxito; un fallo se propaga sin cambios."""

    @abstractmethod
    def flat_map(self, fn: Callable[[T], 'Result[Any]']) -> 'Result[Any]':
        """Encadena una etapa que devuelve otro Result."""

    @abstractmethod
    def on_failure(self, fn: Callable[[MoodPlayerError], Any]) -> 'Result[T]':
        """Ejecuta ``fn`` con el error si es un fallo; devuelve el mismo Result."""


@dataclass(frozen=True)
class Success(Result[T]):
    _value: T

    def __repr__(self) -> str:
        return f"Success({self._value!r})"

    def is_success(self) -> bool:
        return True

    def value(self) -> T:
        return self._value

    def error(self) -> MoodPlayerError:
        raise ValueError("Un Success no tiene error")

    def map(self, fn: Callable[[T], Any]) -> Result[Any]:
        return Success(fn(self._value))

    def flat_map(self, fn: Callable[[T], Result[Any]]) -> Result[Any]:
        return fn(self._value)

    def on_failure(self, fn: Callable[[MoodPlayerError], Any]) -> Result[T]:
        return self


@dataclass(frozen=True)
class Failure(Result[T]):
    _error: MoodPlayerError

    def __repr__(self) -> str:
        return f"Failure({self._error!r})"

    def is_success(self) -> bool:
        return False

    def value(self) -> T:
        raise ValueError(f"Un Failure no tiene valor: {self._error}")

    def error(self) -> MoodPlayerError:
        return self._error

    def map(self, fn: Callable[[T], Any]) -> Result[Any]:
        return self

    def flat_map(self, fn: Callable[[T], Result[Any]]) -> Result[Any]:
        return self

    def on_failure(self, fn: Callable[[MoodPlayerError], Any]) -> Result[T]:
        fn(self._error)
        return self


def attempt(fn: Callable[..., T], *args, **kwargs) -> Result[T]:
    """
    Ejecuta ``fn`` y envuelve su resultado en un Result.

    Los ``MoodPlayerError`` se convierten en ``Failure``; el resto de
    excepciones se propagan.
    """
    try:
        return Success(fn(*args, **kwargs))
    except MoodPlayerError as e:
        return Failure(e)
