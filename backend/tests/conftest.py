"""Configuración y fixtures de los tests"""

import random
from unittest.mock import Mock

import pytest

from moodplayer.core.camera import MediaCaptureSession
from moodplayer.core.emotion import MoodClassifierClient, MoodPrediction
from moodplayer.core.music import CatalogSearchClient
from moodplayer.core.pipeline import MoodPipelineOrchestrator
from moodplayer.core.player import HeadlessAudioOutput, PlaybackController
from moodplayer.core.utils import PerformanceMetrics

from factories import FakeVideoCapture, make_catalog_entry, make_track


@pytest.fixture
def fake_capture():
    return FakeVideoCapture()


@pytest.fixture
def capture_session(fake_capture):
    return MediaCaptureSession(camera_index=0, capture_factory=lambda index: fake_capture)


@pytest.fixture
def tracks():
    return [make_track(track_id) for track_id in ('a', 'b', 'c')]


@pytest.fixture
def catalog_payload():
    """Respuesta de búsqueda con 3 entradas, una sin la variante de 320kbps"""
    return {
        'success': True,
        'data': {
            'total': 3,
            'results': [
                make_catalog_entry('s1'),
                make_catalog_entry('s2', qualities=('96kbps', '160kbps')),
                make_catalog_entry('s3'),
            ],
        },
    }


@pytest.fixture
def output():
    return HeadlessAudioOutput()


@pytest.fixture
def controller(output):
    return PlaybackController(output=output, rng=random.Random(7))


@pytest.fixture
def classifier():
    client = Mock(spec=MoodClassifierClient)
    client.classify.return_value = MoodPrediction(mood='Happy', emotion='happy')
    return client


@pytest.fixture
def catalog():
    client = Mock(spec=CatalogSearchClient)
    client.search.return_value = [make_track(f'p{i}') for i in range(5)]
    return client


@pytest.fixture
def orchestrator(capture_session, classifier, catalog, controller):
    return MoodPipelineOrchestrator(
        session=capture_session,
        classifier=classifier,
        catalog=catalog,
        controller=controller,
        metrics=PerformanceMetrics(),
    )
