# External imports
import re
from typing import Dict, Iterable, List, Mapping
import logging

from opentelemetry import propagate

# Internal imports
from models.config_model import RestifiedConfig

_logger = logging.getLogger('restified.gateway')

# Sensitive headers that should NEVER be logged (even if sanitized)
SENSITIVE_HEADERS = {
    'authorization',
    'proxy-authorization',
    'www-authenticate',
    'x-api-key',
    'api-key',
    'cookie',
    'set-cookie',
    'x-csrf-token',
    'csrf-token',
    'hasura-m-auth',
    'x-hasura-ddn-token',
}

def sanitize_headers(value: str):
    """Sanitize header values before they reach the logs.

    Removes:
    - Newline characters (CRLF injection)
    - HTML tags
    - Null bytes
    """
    try:
        value = value.replace('\n', '').replace('\r', '').replace('\0', '')

        value = re.sub(r'<[^>]+>', '', value)

        if len(value) > 8192:
            value = value[:8192] + '...[TRUNCATED]'

        return value
    except Exception:
        return ''

def redact_sensitive_header(header_name: str, header_value: str, extra_sensitive: Iterable[str] = ()) -> str:
    """Redact sensitive header values for logging purposes.

    Args:
        header_name: Header name (case-insensitive)
        header_value: Header value to potentially redact
        extra_sensitive: Additional header names to treat as sensitive
            (e.g. the configured shared-secret headers)

    Returns:
        Redacted value if sensitive, original value otherwise
    """
    try:
        header_lower = header_name.lower()
        sensitive = SENSITIVE_HEADERS | {h.lower() for h in extra_sensitive}

        if header_lower in sensitive or header_lower.replace('-', '_') in sensitive:
            return '[REDACTED]'

        if 'bearer' in header_value.lower()[:10]:
            return 'Bearer [REDACTED]'

        if header_value.startswith('Basic '):
            return 'Basic [REDACTED]'

        if re.match(r'^eyJ[a-zA-Z0-9_\-]+\.', header_value):
            return '[REDACTED_JWT]'

        return header_value
    except Exception:
        return '[REDACTION_ERROR]'

def log_headers_safely(request_id: str, headers: Mapping[str, str], extra_sensitive: Iterable[str] = ()):
    """Log inbound headers at DEBUG with sanitizing and redaction."""
    if not _logger.isEnabledFor(logging.DEBUG):
        return
    headers_to_log = {}
    for key, value in headers.items():
        headers_to_log[key] = redact_sensitive_header(key, sanitize_headers(value), extra_sensitive)
    if headers_to_log:
        _logger.debug(f'{request_id} | Request headers: {headers_to_log}')

def get_header(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup for plain dicts and Starlette Headers alike."""
    if not headers:
        return None
    value = headers.get(name)
    if value is not None:
        return value
    name_lower = name.lower()
    for key, candidate in headers.items():
        if key.lower() == name_lower:
            return candidate
    return None

def authenticate(headers: Mapping[str, str] | None, header_name: str, expected_value: str) -> bool:
    """True iff the request carries `header_name` with exactly `expected_value`."""
    value = get_header(headers, header_name)
    return value is not None and value == expected_value

def forwarded_headers(headers: Mapping[str, str] | None, forward_list: List[str]) -> Dict[str, str]:
    """Copy each configured header from the inbound request when present.

    Values are forwarded unchanged and keyed by the configured name.
    """
    forwarded = {}
    for name in forward_list or []:
        value = get_header(headers, name)
        if value is not None:
            forwarded[name] = value
    return forwarded

def injected_headers(config: RestifiedConfig) -> Dict[str, str]:
    return dict(config.additional_headers)

def propagation_headers() -> Dict[str, str]:
    """Trace-context headers for the active span; empty when nothing is being traced."""
    carrier: Dict[str, str] = {}
    propagate.inject(carrier)
    return carrier

def _merge_headers(target: Dict[str, str], source: Mapping[str, str]) -> None:
    for key, value in source.items():
        for existing in [k for k in target if k.lower() == key.lower()]:
            del target[existing]
        target[key] = value

def compose_upstream_headers(
    propagation: Mapping[str, str],
    forwarded: Mapping[str, str],
    injected: Mapping[str, str],
) -> Dict[str, str]:
    """Build the upstream header set.

    Order: JSON content type, then propagation, forwarded and injected headers.
    Later sets replace earlier ones on a (case-insensitive) name collision.
    """
    headers = {'Content-Type': 'application/json'}
    _merge_headers(headers, propagation)
    _merge_headers(headers, forwarded)
    _merge_headers(headers, injected)
    return headers
