"""
Pytest configuration for backend-services tests.

Ensures the backend-services directory is on sys.path so imports like
`from utils...` resolve correctly when tests run from the repo root in CI.
"""

# External imports
import os
import sys

# Tests never pool clients or export spans
os.environ.setdefault('ENABLE_HTTPX_CLIENT_CACHE', 'false')
os.environ.setdefault('GRAPHQL_SERVER_URL', 'http://graphql.test/graphql')
os.environ.setdefault('LOG_LEVEL', 'INFO')
os.environ.pop('OTEL_EXPORTER_OTLP_ENDPOINT', None)
os.environ.pop('HTTP_TIMEOUT', None)

_HERE = os.path.dirname(__file__)
_PROJECT_ROOT = os.path.abspath(os.path.join(_HERE, os.pardir))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# TEST-ONLY shared secret - DO NOT use this in production
TEST_SECRET = 'test-only-secret'
UPSTREAM_URL = 'http://graphql.test/graphql'

ALBUMS_QUERY = 'query Albums($offset: Int, $limit: Int) { Album(offset: $offset, limit: $limit) { Title } }'
ADD_ALBUM_QUERY = 'mutation AddAlbum($title: String) { insert_Album(object: {Title: $title}) { AlbumId } }'


def sample_config_data():
    return {
        'headers': {'hasura-m-auth': TEST_SECRET},
        'graphqlServer': {
            'headers': {
                'forward': ['X-Hasura-Role'],
                'additional': {'Content-Type': 'application/json'},
            }
        },
        'restifiedEndpoints': [
            {'path': '/v1/api/rest/albums/:offset', 'methods': ['GET'], 'query': ALBUMS_QUERY},
            {'path': '/v1/api/rest/albums', 'methods': ['POST', 'PUT'], 'query': ADD_ALBUM_QUERY},
        ],
    }


@pytest.fixture
def config_data():
    return sample_config_data()


@pytest.fixture
def config(config_data):
    from utils.config_util import parse_config
    return parse_config(config_data)


@pytest.fixture
def settings():
    from utils.config_util import GatewaySettings
    return GatewaySettings(graphql_server_url=UPSTREAM_URL, env='')


@pytest.fixture
def app(config, settings):
    from restified import create_app
    from utils.tracing_util import NoopObserver
    return create_app(config=config, settings=settings, observer=NoopObserver())


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://testserver') as c:
        yield c


@pytest.fixture
def auth_headers():
    return {'hasura-m-auth': TEST_SECRET}


@pytest.fixture
def upstream(monkeypatch):
    """Route GraphQL calls to an in-process handler and record what was sent.

    Tests set `upstream.reply` to an httpx.Response (or an exception to raise).
    """
    from services.graphql_service import GraphQLService

    class _Upstream:
        def __init__(self):
            self.calls = []
            self.reply = httpx.Response(200, json={'data': {}})

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.calls.append(request)
            if isinstance(self.reply, Exception):
                raise self.reply
            return self.reply

    recorder = _Upstream()
    transport = httpx.MockTransport(recorder.handler)
    monkeypatch.setattr(
        GraphQLService,
        'get_http_client',
        classmethod(lambda cls, pooled=None: httpx.AsyncClient(transport=transport)),
    )
    return recorder


@pytest_asyncio.fixture(autouse=True)
async def reset_http_client():
    """Reset the pooled httpx client between tests to prevent connection pool exhaustion."""
    from services.graphql_service import GraphQLService
    await GraphQLService.aclose_http_client()
    yield
    await GraphQLService.aclose_http_client()
