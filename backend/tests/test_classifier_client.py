"""Tests del cliente del clasificador remoto"""

from unittest.mock import Mock

import pytest
import requests

from moodplayer.core.emotion import MoodClassifierClient, MoodPrediction
from moodplayer.core.errors import ClassificationFailed

from factories import make_response

JPEG = b'\xff\xd8\xff\xe0fake-jpeg'


class TestMoodClassifierClient:
    """Tests de las peticiones de clasificación y la validación de respuestas"""

    @pytest.fixture
    def session(self):
        return Mock()

    @pytest.fixture
    def client(self, session):
        return MoodClassifierClient('http://classifier.local/detect_emotion', timeout=5, session=session)

    def test_classify_success(self, client, session):
        session.post.return_value = make_response({'mood': 'Happy', 'emotion': 'happy'})

        prediction = client.classify(JPEG)

        assert prediction == MoodPrediction(mood='Happy', emotion='happy')
        assert prediction.to_dict() == {'mood': 'Happy', 'emotion': 'happy'}

    def test_sends_multipart_image(self, client, session):
        session.post.return_value = make_response({'mood': 'Sad', 'emotion': 'sad'})

        client.classify(JPEG)

        session.post.assert_called_once_with(
            'http://classifier.local/detect_emotion',
            files={'image': ('capture.jpg', JPEG, 'image/jpeg')},
            timeout=5,
        )

    def test_missing_mood_defaults_to_capitalized_emotion(self, client, session):
        session.post.return_value = make_response({'emotion': 'angry'})

        assert client.classify(JPEG).mood == 'Angry'

    def test_empty_payload_rejected_without_request(self, client, session):
        with pytest.raises(ClassificationFailed):
            client.classify(b'')
        session.post.assert_not_called()

    def test_timeout(self, client, session):
        session.post.side_effect = requests.Timeout('slow')

        with pytest.raises(ClassificationFailed) as exc_info:
            client.classify(JPEG)
        assert exc_info.value.message == 'Failed to detect mood. Please try again.'

    def test_network_error(self, client, session):
        session.post.side_effect = requests.ConnectionError('refused')

        with pytest.raises(ClassificationFailed):
            client.classify(JPEG)

    def test_http_error(self, client, session):
        session.post.return_value = make_response({'error': 'no face'}, status_code=500)

        with pytest.raises(ClassificationFailed) as exc_info:
            client.classify(JPEG)
        assert '500' in exc_info.value.detail

    def test_invalid_json(self, client, session):
        session.post.return_value = make_response(json_error=ValueError('bad json'))

        with pytest.raises(ClassificationFailed):
            client.classify(JPEG)

    @pytest.mark.parametrize('payload', [
        {'mood': 'Happy'},
        {'mood': 'Happy', 'emotion': ''},
        {'emotion': None},
        ['happy'],
        None,
    ])
    def test_missing_emotion(self, client, session, payload):
        session.post.return_value = make_response(payload)

        with pytest.raises(ClassificationFailed):
            client.classify(JPEG)
