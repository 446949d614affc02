"""Tests del modelo de pista y del cliente del catálogo"""

from unittest.mock import Mock

import pytest
import requests

from moodplayer.core.errors import SearchFailed
from moodplayer.core.music import CatalogSearchClient, Track

from factories import make_catalog_entry, make_response


class TestTrackModel:
    """Tests de construcción de Track desde datos del catálogo"""

    def test_from_catalog_data(self):
        track = Track.from_catalog_data(make_catalog_entry('x1'))

        assert track.id == 'x1'
        assert track.name == 'Song x1'
        assert track.artist == 'Artist x1'
        assert track.image_url == 'https://img.example/x1_50.jpg'
        assert len(track.assets) == 3

    def test_playable_asset_is_preferred_quality(self):
        track = Track.from_catalog_data(make_catalog_entry('x1'))

        assert track.playable_asset.quality == '320kbps'
        assert track.audio_url == 'https://cdn.example/x1_320kbps.mp4'
        assert track.is_playable

    def test_no_playable_asset_without_preferred_quality(self):
        track = Track.from_catalog_data(make_catalog_entry('x1', qualities=('48kbps', '160kbps')))

        assert track.playable_asset is None
        assert track.audio_url is None
        assert not track.is_playable

    def test_custom_preferred_quality(self):
        track = Track.from_catalog_data(
            make_catalog_entry('x1', qualities=('160kbps',)), preferred_quality='160kbps'
        )
        assert track.is_playable

    def test_malformed_nested_fields_are_ignored(self):
        track = Track.from_catalog_data({
            'id': 'x1',
            'artists': {'primary': {'name': 'Solo'}},
            'image': 'https://img.example/x1.jpg',
            'downloadUrl': 5,
        })

        assert track.artist == ''
        assert track.image_url is None
        assert track.assets == ()

    def test_missing_optional_fields(self):
        track = Track.from_catalog_data({'id': 42, 'downloadUrl': None})

        assert track.id == '42'
        assert track.name == ''
        assert track.artist == ''
        assert track.image_url is None
        assert track.assets == ()

    def test_missing_id_rejected(self):
        with pytest.raises(ValueError):
            Track.from_catalog_data({'name': 'No id'})

    def test_to_dict(self):
        data = Track.from_catalog_data(make_catalog_entry('x1')).to_dict()

        assert data == {
            'id': 'x1',
            'name': 'Song x1',
            'artist': 'Artist x1',
            'image_url': 'https://img.example/x1_50.jpg',
            'audio_url': 'https://cdn.example/x1_320kbps.mp4',
        }


class TestCatalogSearchClient:
    """Tests de la búsqueda remota y del filtrado"""

    @pytest.fixture
    def session(self):
        return Mock()

    @pytest.fixture
    def client(self, session):
        return CatalogSearchClient('https://catalog.example/search', timeout=3, session=session)

    def test_search_filters_unplayable_entries(self, client, session, catalog_payload):
        session.get.return_value = make_response(catalog_payload)

        tracks = client.search('pop')

        assert [track.id for track in tracks] == ['s1', 's3']
        session.get.assert_called_once_with(
            'https://catalog.example/search', params={'query': 'pop'}, timeout=3
        )

    def test_search_preserves_order(self, client, session):
        entries = [make_catalog_entry(f'id{i}') for i in range(5)]
        session.get.return_value = make_response({'data': {'results': entries}})

        tracks = client.search('dance')

        assert [track.id for track in tracks] == ['id0', 'id1', 'id2', 'id3', 'id4']

    def test_search_skips_malformed_entries(self, client, session):
        results = ['garbage', None, {'name': 'no id'}, make_catalog_entry('ok')]
        session.get.return_value = make_response({'data': {'results': results}})

        assert [track.id for track in client.search('rock')] == ['ok']

    def test_empty_results(self, client, session):
        session.get.return_value = make_response({'data': {'results': []}})
        assert client.search('rock') == []

    def test_empty_query_fails_without_request(self, client, session):
        with pytest.raises(SearchFailed):
            client.search('   ')
        session.get.assert_not_called()

    def test_network_error(self, client, session):
        session.get.side_effect = requests.ConnectionError('unreachable')

        with pytest.raises(SearchFailed) as exc_info:
            client.search('pop')
        assert exc_info.value.message == 'Failed to fetch songs. Please try again.'

    def test_timeout(self, client, session):
        session.get.side_effect = requests.Timeout('slow')

        with pytest.raises(SearchFailed):
            client.search('pop')

    def test_http_error(self, client, session):
        session.get.return_value = make_response({'error': 'boom'}, status_code=500)

        with pytest.raises(SearchFailed):
            client.search('pop')

    def test_invalid_json(self, client, session):
        session.get.return_value = make_response(json_error=ValueError('not json'))

        with pytest.raises(SearchFailed):
            client.search('pop')

    @pytest.mark.parametrize('payload', [
        {},
        {'data': None},
        {'data': {'results': None}},
        {'data': {'results': 'nope'}},
        ['not', 'a', 'dict'],
    ])
    def test_missing_results(self, client, session, payload):
        session.get.return_value = make_response(payload)

        with pytest.raises(SearchFailed):
            client.search('pop')

    def test_primary_artists_not_a_list(self, client, session):
        entry = make_catalog_entry('x1')
        entry['artists'] = {'primary': {'name': 'Solo'}}
        session.get.return_value = make_response({'data': {'results': [entry]}})

        tracks = client.search('pop')

        assert [track.id for track in tracks] == ['x1']
        assert tracks[0].artist == ''

    @pytest.mark.parametrize('download_url', [5, 'https://cdn.example/x1.mp4', {'quality': '320kbps'}])
    def test_download_url_not_a_list(self, client, session, download_url):
        entry = make_catalog_entry('x1')
        entry['downloadUrl'] = download_url
        session.get.return_value = make_response({'data': {'results': [entry, make_catalog_entry('ok')]}})

        assert [track.id for track in client.search('pop')] == ['ok']
