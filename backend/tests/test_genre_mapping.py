"""Tests de normalización de emociones y de las tablas de géneros y mensajes"""

import pytest

from moodplayer.core.emotion import normalize_emotion
from moodplayer.core.emotion.schema import MOOD_LABELS
from moodplayer.core.music import MOOD_MESSAGES, MOOD_TO_GENRES, genres_for, message_for, primary_genre
from moodplayer.core.music.genre_mapping import FALLBACK_MESSAGE


class TestNormalizeEmotion:
    """Tests de normalización de etiquetas"""

    @pytest.mark.parametrize('label,expected', [
        ('happy', 'happy'),
        ('Happy', 'happy'),
        ('  SAD ', 'sad'),
        ('joy', 'happy'),
        ('fear', 'fearful'),
        ('surprise', 'surprised'),
        ('disgust', 'disgusted'),
        ('calm', 'neutral'),
    ])
    def test_known_labels(self, label, expected):
        assert normalize_emotion(label) == expected

    @pytest.mark.parametrize('label', ['confused', '', None, 42])
    def test_unknown_labels_are_none(self, label):
        assert normalize_emotion(label) is None


class TestGenreMapping:
    """Tests de la tabla estado de ánimo -> géneros"""

    def test_every_mood_has_three_genres(self):
        for mood in MOOD_LABELS:
            assert len(MOOD_TO_GENRES[mood]) == 3
            assert mood in MOOD_MESSAGES

    @pytest.mark.parametrize('emotion,genres', [
        ('happy', ['pop', 'dance', 'upbeat']),
        ('sad', ['ballad', 'acoustic', 'melancholic']),
        ('angry', ['rock', 'metal', 'intense']),
        ('neutral', ['indie', 'alternative', 'ambient']),
        ('surprised', ['electronic', 'experimental', 'energetic']),
        ('fearful', ['ambient', 'classical', 'calm']),
        ('disgusted', ['punk', 'grunge', 'heavy']),
    ])
    def test_genres_for(self, emotion, genres):
        assert genres_for(emotion) == genres

    def test_synonym_uses_same_genres(self):
        assert genres_for('Fear') == genres_for('fearful')

    def test_unknown_emotion_falls_back_to_pop(self):
        assert genres_for('confused') == ['pop']
        assert genres_for(None) == ['pop']
        assert primary_genre('confused') == 'pop'

    def test_primary_genre(self):
        assert primary_genre('angry') == 'rock'

    def test_genres_for_returns_copy(self):
        genres = genres_for('happy')
        genres.clear()
        assert MOOD_TO_GENRES['happy'] == ['pop', 'dance', 'upbeat']


class TestMoodMessages:
    """Tests de los mensajes de estado por estado de ánimo"""

    def test_message_for_known_mood(self):
        assert message_for('happy') == MOOD_MESSAGES['happy']
        assert message_for('Sad').startswith('Feeling blue?')

    def test_message_for_unknown_mood(self):
        assert message_for('confused') == FALLBACK_MESSAGE
        assert message_for(None) == "Here's some music for you! 🎵"
