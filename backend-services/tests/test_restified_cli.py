import importlib.util
import json
import os
import sys

import pytest

from conftest import sample_config_data

_CLI_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir, 'ops', 'restified_cli.py'))


@pytest.fixture
def cli():
    spec = importlib.util.spec_from_file_location('restified_cli', _CLI_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(cli, monkeypatch, *argv):
    monkeypatch.setattr(sys, 'argv', ['restified_cli', *argv])
    return cli.main()


def test_lint_valid_config(cli, monkeypatch, tmp_path, capsys):
    path = tmp_path / 'configuration.json'
    path.write_text(json.dumps(sample_config_data()), encoding='utf-8')
    assert _run(cli, monkeypatch, 'lint', str(path)) == 0
    assert '2 endpoint(s)' in capsys.readouterr().out


def test_lint_invalid_config(cli, monkeypatch, tmp_path, capsys):
    path = tmp_path / 'configuration.json'
    path.write_text(json.dumps({'headers': {'hasura-m-auth': 'x'}}), encoding='utf-8')
    assert _run(cli, monkeypatch, 'lint', str(path)) == 1
    assert 'CFG001' in capsys.readouterr().out


def test_lint_strict_fails_on_overlap(cli, monkeypatch, tmp_path, capsys):
    data = sample_config_data()
    data['restifiedEndpoints'].append({'path': '/v1/api/rest/albums/latest', 'methods': ['GET'], 'query': 'query { x }'})
    path = tmp_path / 'configuration.json'
    path.write_text(json.dumps(data), encoding='utf-8')
    assert _run(cli, monkeypatch, 'lint', str(path)) == 0
    assert _run(cli, monkeypatch, 'lint', '--strict', str(path)) == 1
    assert 'overlap: /v1/api/rest/albums/latest' in capsys.readouterr().out


def test_translate_posts_envelope(cli, monkeypatch, capsys):
    sent = {}

    class FakeResp:
        status_code = 200
        text = '{"data": {}}'

        def json(self):
            return {'data': {}}

    def fake_post(self, url, json=None, headers=None):
        sent.update(url=url, json=json, headers=headers)
        return FakeResp()

    monkeypatch.setenv('BASE_URL', 'http://localhost:8787')
    monkeypatch.setattr(cli.requests.Session, 'post', fake_post)
    rc = _run(
        cli, monkeypatch,
        '--base-url', 'http://gateway.test',
        'translate', '/v1/api/rest/albums/10',
        '--query', 'limit=5',
        '--header', 'X-Hasura-Role=user',
        '--secret', 's3cret',
    )
    assert rc == 0
    assert sent['url'] == 'http://gateway.test/'
    assert sent['json'] == {'path': '/v1/api/rest/albums/10', 'method': 'GET', 'query': 'limit=5'}
    assert sent['headers']['hasura-m-auth'] == 's3cret'
    assert sent['headers']['X-Hasura-Role'] == 'user'
    assert 'HTTP 200' in capsys.readouterr().out
