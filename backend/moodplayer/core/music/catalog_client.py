"""
Cliente del catálogo remoto de canciones y modelo de pista.

El catálogo devuelve para cada canción varias versiones de audio con
distinta calidad. Solo se admiten las canciones que tienen la versión de
calidad preferida (por defecto "320kbps"); el resto se descartan al
ingerir la respuesta y nunca llegan a la cola de reproducción.

Contrato del servicio:
    GET <endpoint>?query=<género>

    Response 200:
    {
        "data": {
            "results": [
                {
                    "id": "abc123",
                    "name": "Song",
                    "artists": {"primary": [{"name": "Artist"}]},
                    "image": [{"quality": "50x50", "url": "..."}],
                    "downloadUrl": [{"quality": "320kbps", "url": "..."}]
                }
            ]
        }
    }
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..errors import SearchFailed

logger = logging.getLogger(__name__)

# Calidad de audio preferida (la más alta que ofrece el catálogo)
DEFAULT_QUALITY = "320kbps"


@dataclass(frozen=True)
class AudioAsset:
    """Una versión descargable de la pista."""
    quality: str
    url: str


@dataclass(frozen=True)
class Track:
    """
    Pista normalizada del catálogo.

    Attributes:
        id (str): Identificador opaco del catálogo
        name (str): Título
        artist (str): Nombre del artista principal ("" si no viene)
        image_url (str | None): Carátula
        assets (tuple): Versiones de audio disponibles
        preferred_quality (str): Calidad exigida para reproducir
    """
    id: str
    name: str
    artist: str = ""
    image_url: Optional[str] = None
    assets: Tuple[AudioAsset, ...] = field(default_factory=tuple)
    preferred_quality: str = DEFAULT_QUALITY

    @property
    def playable_asset(self) -> Optional[AudioAsset]:
        """Versión de la calidad preferida, o None si no existe."""
        for asset in self.assets:
            if asset.quality == self.preferred_quality:
                return asset
        return None

    @property
    def is_playable(self) -> bool:
        return self.playable_asset is not None

    @property
    def audio_url(self) -> Optional[str]:
        asset = self.playable_asset
        return asset.url if asset else None

    @classmethod
    def from_catalog_data(cls, data: Dict[str, Any], preferred_quality: str = DEFAULT_QUALITY) -> 'Track':
        """
        Construye una pista desde una entrada cruda del catálogo.

        Los campos opcionales ausentes o con tipo inesperado se ignoran.

        Raises:
            ValueError: Si la entrada no tiene id
        """
        track_id = data.get('id')
        if track_id in (None, ''):
            raise ValueError("Entrada del catálogo sin id")

        variants = data.get('downloadUrl')
        if not isinstance(variants, list):
            variants = []

        assets = []
        for variant in variants:
            if isinstance(variant, dict) and variant.get('quality') and variant.get('url'):
                assets.append(AudioAsset(quality=str(variant['quality']), url=str(variant['url'])))

        return cls(
            id=str(track_id),
            name=str(data.get('name') or ''),
            artist=_primary_artist(data.get('artists')),
            image_url=_first_image(data.get('image')),
            assets=tuple(assets),
            preferred_quality=preferred_quality,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'artist': self.artist,
            'image_url': self.image_url,
            'audio_url': self.audio_url,
        }


def _primary_artist(artists: Any) -> str:
    if not isinstance(artists, dict):
        return ''
    primary = artists.get('primary')
    if isinstance(primary, list) and primary and isinstance(primary[0], dict):
        return str(primary[0].get('name') or '')
    return ''


def _first_image(images: Any) -> Optional[str]:
    if isinstance(images, list) and images and isinstance(images[0], dict):
        return images[0].get('url')
    return None


class CatalogSearchClient:
    """
    Cliente HTTP del buscador de canciones.

    Example:
        >>> client = CatalogSearchClient("https://saavn.dev/api/search/songs")
        >>> tracks = client.search("pop")
        >>> all(track.is_playable for track in tracks)
        True
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        preferred_quality: str = DEFAULT_QUALITY,
        session: requests.Session = None
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.preferred_quality = preferred_quality
        self.session = session or requests.Session()

    def search(self, query: str) -> List[Track]:
        """
        Busca canciones y devuelve solo las reproducibles, en el orden del catálogo.

        Args:
            query (str): Género o término de búsqueda

        Returns:
            List[Track]: Pistas con versión de la calidad preferida

        Raises:
            SearchFailed: Consulta vacía, error de red, timeout, respuesta no
                          exitosa o cuerpo mal formado
        """
        if not query or not query.strip():
            raise SearchFailed("La consulta de búsqueda está vacía")

        try:
            response = self.session.get(
                self.endpoint,
                params={'query': query.strip()},
                timeout=self.timeout
            )
        except requests.Timeout as e:
            raise SearchFailed(f"Timeout del catálogo tras {self.timeout}s: {e}")
        except requests.RequestException as e:
            raise SearchFailed(f"Error de red al contactar el catálogo: {e}")

        if not response.ok:
            raise SearchFailed(f"El catálogo respondió HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise SearchFailed(f"Respuesta del catálogo no es JSON: {e}")

        results = self._extract_results(payload)
        tracks = self.parse_results(results)

        logger.info(
            f"Búsqueda '{query}': {len(tracks)} de {len(results)} canciones "
            f"con calidad {self.preferred_quality}"
        )
        return tracks

    def parse_results(self, results: List[Any]) -> List[Track]:
        """Normaliza las entradas y descarta las que no son reproducibles."""
        tracks = []
        for entry in results:
            if not isinstance(entry, dict):
                continue
            try:
                track = Track.from_catalog_data(entry, self.preferred_quality)
            except (ValueError, TypeError) as e:
                logger.debug(f"Entrada descartada: {e}")
                continue
            if track.is_playable:
                tracks.append(track)
        return tracks

    @staticmethod
    def _extract_results(payload: Any) -> List[Any]:
        data = payload.get('data') if isinstance(payload, dict) else None
        results = data.get('results') if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise SearchFailed("Respuesta del catálogo sin 'data.results'")
        return results
