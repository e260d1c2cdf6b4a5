"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

import logging
import traceback
from typing import Any, Awaitable, Callable, Mapping

from pydantic import ValidationError

from models.config_model import RestifiedConfig
from models.outcome_model import (
    EndpointNotFound,
    InternalFailure,
    MalformedRequest,
    TranslationOutcome,
    Unauthorized,
    UpstreamFailure,
)
from models.request_model import RawRequest
from services.endpoint_service import EndpointService
from services.graphql_service import GraphQLService
from utils.correlation_util import get_correlation_id
from utils.gateway_utils import (
    authenticate,
    compose_upstream_headers,
    forwarded_headers,
    injected_headers,
    propagation_headers,
)
from utils.tracing_util import NoopObserver, TranslationObserver, mark_error, mark_ok
from utils.variable_util import extract_variables

logger = logging.getLogger('restified.gateway')


class GatewayService:
    """Translates RESTified requests into GraphQL calls.

    One instance serves every request for a given configuration; it holds no
    per-request state.
    """

    def __init__(
        self,
        config: RestifiedConfig,
        graphql_url: str,
        observer: TranslationObserver | None = None,
    ) -> None:
        self.config = config
        self.graphql_url = graphql_url
        self.observer = observer or NoopObserver()

    def authenticate(self, headers: Mapping[str, str] | None) -> Unauthorized | None:
        for header_name, expected in self.config.headers.items():
            if not authenticate(headers, header_name, expected):
                return Unauthorized(header=header_name)
        return None

    @staticmethod
    async def parse_request(
        load_body: Callable[[], Awaitable[Any]], request_id: str = ''
    ) -> RawRequest | MalformedRequest:
        try:
            body = await load_body()
        except ValueError as e:
            logger.info(f'{request_id} | Request body is not valid JSON: {e}')
            return MalformedRequest(problems=('body: not valid JSON',))
        try:
            return RawRequest.model_validate(body)
        except ValidationError as e:
            problems = tuple(
                f"{'.'.join(str(p) for p in err.get('loc', ())) or 'body'}: {err.get('msg')}"
                for err in e.errors()
            )
            logger.info(f'{request_id} | Invalid translation request: {problems}')
            return MalformedRequest(problems=problems)

    async def translate(
        self,
        headers: Mapping[str, str] | None,
        load_body: Callable[[], Awaitable[Any]],
        request_id: str | None = None,
    ) -> TranslationOutcome:
        """
        Run one translation.

        Steps, each terminal on failure: authenticate, parse the body, resolve
        the endpoint, extract variables, execute upstream. Unexpected errors
        become an InternalFailure; nothing propagates to the caller.
        """
        request_id = request_id or get_correlation_id() or ''
        try:
            with self.observer.span('authentication') as span:
                denied = self.authenticate(headers)
                if denied is not None:
                    mark_error(span, 'Unauthorized request!')
                    logger.warning(f'{request_id} | Unauthorized request: missing or invalid {denied.header} header')
                    return denied
                mark_ok(span)

            raw_request = await self.parse_request(load_body, request_id)
            if isinstance(raw_request, MalformedRequest):
                return raw_request

            with self.observer.span(
                'resolve-endpoint',
                {'request.path': raw_request.path, 'request.body_method': raw_request.method},
            ) as span:
                endpoint = EndpointService.resolve(self.config.restified_endpoints, raw_request)
                if isinstance(endpoint, EndpointNotFound):
                    mark_error(span, 'Endpoint not found')
                    logger.info(f'{request_id} | No endpoint for {raw_request.method} {raw_request.path}')
                    return endpoint
                span.set_attribute('endpoint.path', endpoint.path)
                mark_ok(span)

            with self.observer.span('extract-variables', {'endpoint.path': endpoint.path}) as span:
                variables = extract_variables(raw_request, endpoint)
                span.set_attribute('variables.count', len(variables))
                span.set_attribute('variables.keys', ','.join(sorted(variables)))

            logger.info(f'{request_id} | Translating {raw_request.method} {raw_request.path} via {endpoint.path}')
            with self.observer.span(
                'execute-graphql',
                {'graphql.server_url': self.graphql_url, 'graphql.query_length': len(endpoint.query)},
            ) as span:
                forwarded = forwarded_headers(headers, self.config.forward_headers)
                span.set_attribute('headers.forwarded_count', len(forwarded))
                upstream_headers = compose_upstream_headers(
                    propagation_headers(), forwarded, injected_headers(self.config)
                )
                outcome = await GraphQLService.execute(
                    endpoint.query, variables, upstream_headers, self.graphql_url, request_id
                )
                if isinstance(outcome, UpstreamFailure):
                    if outcome.status_code is not None:
                        span.set_attribute('response.status', outcome.status_code)
                    mark_error(span, outcome.message)
                    logger.error(f'{request_id} | Upstream failure with code GTW007: {outcome.message}')
                    return outcome
                span.set_attribute(
                    'response.has_errors',
                    isinstance(outcome.payload, dict) and bool(outcome.payload.get('errors')),
                )
                mark_ok(span)
            return outcome
        except Exception as e:
            logger.error(f'{request_id} | Translation failed with code GTW006: {e}', exc_info=True)
            return InternalFailure(error=str(e), stack=traceback.format_exc())
