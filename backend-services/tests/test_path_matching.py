import pytest

from utils.path_util import capture_name, is_capture, match_path, split_path


def test_literal_path_matches_itself():
    assert match_path('/v1/api/rest/albums', '/v1/api/rest/albums') is True


def test_capture_matches_any_non_empty_segment():
    assert match_path('/v1/albums/:offset', '/v1/albums/10') is True
    assert match_path('/v1/albums/:offset', '/v1/albums/abc') is True


def test_capture_rejects_empty_segment():
    assert match_path('/v1/albums/:offset', '/v1/albums/') is False


@pytest.mark.parametrize(
    'path',
    [
        '/v1/albums',
        '/v1/albums/10/tracks',
        '/v1/albums/10/',
        'v1/albums/10',
    ],
)
def test_segment_count_must_agree(path):
    assert match_path('/v1/albums/:offset', path) is False


def test_literals_are_case_sensitive():
    assert match_path('/v1/albums', '/v1/Albums') is False


def test_trailing_slash_is_significant():
    assert match_path('/v1/albums', '/v1/albums/') is False
    assert match_path('/v1/albums/', '/v1/albums/') is True


def test_multiple_captures():
    template = '/v1/artists/:artist/albums/:album'
    assert match_path(template, '/v1/artists/7/albums/3') is True
    assert match_path(template, '/v1/artists/7/songs/3') is False


def test_segment_helpers():
    assert split_path('/a/:b') == ['', 'a', ':b']
    assert is_capture(':id') is True
    assert is_capture('id') is False
    assert capture_name(':id') == 'id'
