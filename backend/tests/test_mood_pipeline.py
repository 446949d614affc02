"""Tests del pipeline estado de ánimo -> lista de reproducción"""

import threading
from unittest.mock import Mock

import pytest

from moodplayer.core.emotion import MoodPrediction
from moodplayer.core.errors import (
    CaptureUnavailable,
    ClassificationFailed,
    PipelineBusy,
    SearchFailed,
)
from moodplayer.core.music import MOOD_MESSAGES, CatalogSearchClient
from moodplayer.core.pipeline import MoodPipelineOrchestrator
from moodplayer.core.pipeline.mood_pipeline import (
    ANALYZING_MESSAGE,
    CAMERA_NOT_STARTED_MESSAGE,
    CAMERA_READY_MESSAGE,
    CAMERA_STOPPED_MESSAGE,
)
from moodplayer.core.utils import PerformanceMetrics

from factories import FakeVideoCapture, make_catalog_entry, make_response, make_track


@pytest.fixture
def started(orchestrator):
    orchestrator.start_camera()
    return orchestrator


class TestCamera:
    """Tests de apertura y cierre de la cámara desde el orquestador"""

    def test_start_camera(self, orchestrator):
        result = orchestrator.start_camera()

        assert result.is_success()
        assert orchestrator.session.is_active
        assert orchestrator.status_message == CAMERA_READY_MESSAGE

    def test_start_camera_failure(self, orchestrator):
        orchestrator.session._capture_factory = lambda index: FakeVideoCapture(opened=False)

        result = orchestrator.start_camera()

        assert result.is_failure()
        assert isinstance(result.error(), CaptureUnavailable)
        assert orchestrator.status_message == 'Failed to access camera. Please check permissions.'

    def test_stop_camera(self, started):
        started.stop_camera()

        assert not started.session.is_active
        assert started.status_message == CAMERA_STOPPED_MESSAGE

    def test_stop_inactive_camera_keeps_status(self, orchestrator):
        orchestrator.stop_camera()
        assert orchestrator.status_message == ''

    def test_close_releases_camera(self, started, fake_capture):
        started.close()
        assert fake_capture.released


class TestRun:
    """Tests de ejecuciones completas del pipeline"""

    def test_success(self, started, classifier, catalog, controller):
        result = started.run()

        assert result.is_success()
        outcome = result.value()
        assert outcome.prediction.mood == 'Happy'
        assert outcome.genres == ('pop', 'dance', 'upbeat')
        assert outcome.query == 'pop'
        assert len(outcome.tracks) == 5

        classifier.classify.assert_called_once()
        image = classifier.classify.call_args[0][0]
        assert image.startswith(b'\xff\xd8')
        catalog.search.assert_called_once_with('pop')

        assert len(controller.queue) == 5
        assert controller.state.current_track.id == 'p0'
        assert controller.state.is_playing
        assert started.mood == 'Happy'
        assert started.emotion == 'happy'
        assert started.genres == ['pop', 'dance', 'upbeat']
        assert started.status_message == MOOD_MESSAGES['happy']
        assert not started.session.is_active

    def test_unknown_emotion_searches_fallback_genre(self, started, classifier, catalog):
        classifier.classify.return_value = MoodPrediction(mood='Confused', emotion='confused')

        result = started.run()

        assert result.value().genres == ('pop',)
        catalog.search.assert_called_once_with('pop')
        assert started.status_message == "Here's some music for you! 🎵"

    def test_capture_without_camera(self, orchestrator, classifier, controller):
        result = orchestrator.run()

        assert isinstance(result.error(), CaptureUnavailable)
        assert orchestrator.status_message == CAMERA_NOT_STARTED_MESSAGE
        classifier.classify.assert_not_called()
        assert controller.queue == ()

    def test_classification_failure_keeps_queue_and_camera(self, started, classifier, catalog, controller, tracks):
        controller.load_queue(tracks)
        before = controller.state
        classifier.classify.side_effect = ClassificationFailed('HTTP 500')

        result = started.run()

        assert isinstance(result.error(), ClassificationFailed)
        assert started.status_message == 'Failed to detect mood. Please try again.'
        assert started.session.is_active
        assert controller.queue == tuple(tracks)
        assert controller.state == before
        catalog.search.assert_not_called()

    def test_search_failure_keeps_queue_and_camera(self, started, catalog, controller, tracks):
        controller.load_queue(tracks)
        catalog.search.side_effect = SearchFailed('timeout')

        result = started.run()

        assert isinstance(result.error(), SearchFailed)
        assert started.status_message == 'Failed to fetch songs. Please try again.'
        assert started.session.is_active
        assert controller.queue == tuple(tracks)
        assert started.mood == 'Happy'

    def test_empty_results_keep_queue(self, started, catalog, controller, tracks):
        controller.load_queue(tracks)
        catalog.search.return_value = []

        result = started.run()

        assert result.is_success()
        assert result.value().tracks == ()
        assert controller.queue == tuple(tracks)
        assert "No playable songs found for 'pop'" in started.status_message
        assert not started.session.is_active

    def test_malformed_catalog_entries_do_not_break_run(self, capture_session, classifier, controller):
        entry = make_catalog_entry('bad')
        entry['artists'] = {'primary': {'name': 'x'}}
        entry['downloadUrl'] = 5
        session = Mock()
        session.get.return_value = make_response({'data': {'results': [entry]}})
        orchestrator = MoodPipelineOrchestrator(
            session=capture_session,
            classifier=classifier,
            catalog=CatalogSearchClient('https://catalog.example/search', session=session),
            controller=controller,
            metrics=PerformanceMetrics(),
        )
        orchestrator.start_camera()

        result = orchestrator.run()

        assert result.is_success()
        assert result.value().tracks == ()
        assert "No playable songs found for 'pop'" in orchestrator.status_message

    def test_without_autoplay(self, started, controller):
        started.autoplay = False

        started.run()

        assert len(controller.queue) == 5
        assert controller.state.current_track is None

    def test_unexpected_errors_propagate(self, started, classifier):
        classifier.classify.side_effect = RuntimeError('bug')

        with pytest.raises(RuntimeError):
            started.run()
        assert not started.is_busy

    def test_records_stage_metrics(self, started):
        started.run()

        stats = started.metrics.get_statistics()
        assert set(stats) == {'capture', 'classification', 'search'}

    def test_concurrent_run_is_rejected(self, started, classifier):
        entered = threading.Event()
        release = threading.Event()

        def slow_classify(image):
            entered.set()
            release.wait(5)
            return MoodPrediction(mood='Sad', emotion='sad')

        classifier.classify.side_effect = slow_classify
        worker = threading.Thread(target=started.run)
        worker.start()
        try:
            assert entered.wait(5)
            assert started.is_busy

            second = started.run()
            manual = started.search('rock')

            assert isinstance(second.error(), PipelineBusy)
            assert isinstance(manual.error(), PipelineBusy)
            assert started.status_message == ANALYZING_MESSAGE
        finally:
            release.set()
            worker.join(5)

        assert classifier.classify.call_count == 1
        assert not started.is_busy


class TestManualSearch:
    """Tests de búsquedas manuales sin cámara"""

    def test_search_replaces_queue(self, orchestrator, catalog, controller):
        catalog.search.return_value = [make_track('m1'), make_track('m2')]

        result = orchestrator.search('acoustic')

        assert result.is_success()
        assert result.value().prediction is None
        catalog.search.assert_called_once_with('acoustic')
        assert [track.id for track in controller.queue] == ['m1', 'm2']
        assert orchestrator.status_message == "Found 2 songs for 'acoustic'."

    def test_search_keeps_mood(self, started, catalog):
        started.run()

        started.search('dance')

        assert started.mood == 'Happy'
        assert started.genres == ['pop', 'dance', 'upbeat']

    def test_search_failure(self, orchestrator, catalog, controller):
        catalog.search.side_effect = SearchFailed('HTTP 503')

        result = orchestrator.search('jazz')

        assert result.is_failure()
        assert orchestrator.status_message == 'Failed to fetch songs. Please try again.'
        assert controller.queue == ()


class TestStatusNotifications:
    """Tests de los suscriptores del estado"""

    def test_run_publishes_each_stage(self, started):
        statuses = []
        started.subscribe(lambda data: statuses.append(data['status']))

        started.run()

        assert statuses == [ANALYZING_MESSAGE, MOOD_MESSAGES['happy']]

    def test_failing_subscriber_does_not_break_pipeline(self, started):
        def broken(data):
            raise RuntimeError('listener bug')

        received = []
        started.subscribe(broken)
        started.subscribe(received.append)

        assert started.run().is_success()
        assert received

    def test_to_dict(self, started):
        data = started.to_dict()

        assert data == {
            'status': CAMERA_READY_MESSAGE,
            'mood': None,
            'emotion': None,
            'genres': [],
            'busy': False,
            'camera_active': True,
        }
