from starlette.datastructures import Headers

from utils.gateway_utils import (
    authenticate,
    compose_upstream_headers,
    forwarded_headers,
    get_header,
    injected_headers,
    redact_sensitive_header,
    sanitize_headers,
)


def test_authenticate_requires_exact_value():
    assert authenticate({'hasura-m-auth': 'secret'}, 'hasura-m-auth', 'secret') is True
    assert authenticate({'hasura-m-auth': 'Secret'}, 'hasura-m-auth', 'secret') is False
    assert authenticate({'hasura-m-auth': 'secret '}, 'hasura-m-auth', 'secret') is False
    assert authenticate({}, 'hasura-m-auth', 'secret') is False
    assert authenticate(None, 'hasura-m-auth', 'secret') is False


def test_authenticate_header_name_is_case_insensitive():
    assert authenticate({'Hasura-M-Auth': 'secret'}, 'hasura-m-auth', 'secret') is True
    assert authenticate(Headers({'hasura-m-auth': 'secret'}), 'HASURA-M-AUTH', 'secret') is True


def test_get_header_lookup():
    assert get_header({'X-Hasura-Role': 'user'}, 'x-hasura-role') == 'user'
    assert get_header({'X-Other': 'v'}, 'x-hasura-role') is None


def test_forwarded_headers_copy_present_values_under_configured_name():
    inbound = {'x-hasura-role': 'editor', 'x-unrelated': '1'}
    assert forwarded_headers(inbound, ['X-Hasura-Role', 'X-Hasura-User-Id']) == {'X-Hasura-Role': 'editor'}


def test_forwarded_headers_keep_empty_values():
    assert forwarded_headers({'X-Hasura-Role': ''}, ['X-Hasura-Role']) == {'X-Hasura-Role': ''}


def test_forwarded_headers_with_no_policy():
    assert forwarded_headers({'X-Hasura-Role': 'user'}, []) == {}


def test_injected_headers_come_from_config(config):
    assert injected_headers(config) == {'Content-Type': 'application/json'}


def test_compose_defaults_to_json_content_type():
    assert compose_upstream_headers({}, {}, {}) == {'Content-Type': 'application/json'}


def test_injected_headers_win_over_forwarded():
    headers = compose_upstream_headers(
        {},
        {'X-Hasura-Role': 'from-client'},
        {'x-hasura-role': 'admin'},
    )
    assert headers == {'Content-Type': 'application/json', 'x-hasura-role': 'admin'}


def test_forwarded_headers_win_over_propagation():
    headers = compose_upstream_headers(
        {'traceparent': '00-aaaa-bbbb-01'},
        {'Traceparent': '00-cccc-dddd-01'},
        {},
    )
    assert headers == {'Content-Type': 'application/json', 'Traceparent': '00-cccc-dddd-01'}


def test_injected_content_type_replaces_default():
    headers = compose_upstream_headers({}, {}, {'content-type': 'application/graphql+json'})
    assert headers == {'content-type': 'application/graphql+json'}


def test_redaction_covers_secret_headers():
    assert redact_sensitive_header('hasura-m-auth', 'secret') == '[REDACTED]'
    assert redact_sensitive_header('Authorization', 'Bearer abc') == '[REDACTED]'
    assert redact_sensitive_header('x-custom-secret', 'v', extra_sensitive=['X-Custom-Secret']) == '[REDACTED]'
    assert redact_sensitive_header('x-hasura-role', 'user') == 'user'


def test_sanitize_headers_strips_control_characters():
    assert sanitize_headers('a\r\nb\0c<script>') == 'abc'
