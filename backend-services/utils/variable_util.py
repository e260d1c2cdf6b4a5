"""
GraphQL variable extraction.

Variables come from three sources, applied in order so later sources win on a
key collision: path captures, then the query string, then the JSON body.
"""

import json
import math
from typing import Any
from urllib.parse import parse_qsl

from models.endpoint_model import EndpointTemplate
from models.request_model import RawRequest
from utils.path_util import capture_name, is_capture, split_path


def _reject_constant(name: str) -> Any:
    raise ValueError(f'Unsupported JSON constant: {name}')


def _finite_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f'Number out of range: {text}')
    return number


def parse_value(value: str) -> Any:
    """Parse a path or query value as a JSON literal, falling back to the raw string.

    '42' -> 42, 'true' -> True, '{"a": 1}' -> {'a': 1}, 'abc' -> 'abc'.
    NaN, Infinity and numerals that overflow a float (e.g. '1e400') are not
    representable in the upstream JSON body and stay strings.
    """
    try:
        return json.loads(value, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError:
        return value


def path_variables(template: str, path: str) -> dict[str, Any]:
    variables: dict[str, Any] = {}
    request_parts = split_path(path)
    for index, segment in enumerate(split_path(template)):
        if not is_capture(segment):
            continue
        # A capture without a request segment is skipped.
        value = request_parts[index] if index < len(request_parts) else None
        if value:
            variables[capture_name(segment)] = parse_value(value)
    return variables


def query_variables(query: str | None) -> dict[str, Any]:
    variables: dict[str, Any] = {}
    if not query:
        return variables
    if query.startswith('?'):
        query = query[1:]
    for key, value in parse_qsl(query, keep_blank_values=True):
        variables[key] = parse_value(value)
    return variables


def body_variables(body: Any) -> dict[str, Any]:
    if isinstance(body, dict):
        return dict(body)
    return {}


def extract_variables(raw_request: RawRequest, endpoint: EndpointTemplate) -> dict[str, Any]:
    """Build the GraphQL variables for a matched endpoint.

    Precedence (lowest to highest): path captures, query parameters, body keys.
    Body values are merged shallowly and nested structures pass through untouched.
    """
    variables = path_variables(endpoint.path, raw_request.path)
    variables.update(query_variables(raw_request.query))
    variables.update(body_variables(raw_request.body))
    return variables
