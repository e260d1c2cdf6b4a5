"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

import logging
import time
import uuid

from fastapi import APIRouter, Request

from services.gateway_service import GatewayService
from utils.gateway_utils import log_headers_safely
from utils.response_util import respond_outcome
from utils.tracing_util import mark_error, mark_ok

gateway_router = APIRouter()

logger = logging.getLogger('restified.gateway')

"""
Translate a RESTified request

Request:
{
    "path": "/v1/api/rest/albums/10",
    "method": "GET",
    "query": "limit=5",
    "body": null
}
Response:
<GraphQL response body>
"""


@gateway_router.api_route(
    '/',
    methods=['GET', 'POST', 'PUT', 'DELETE', 'PATCH', 'HEAD', 'OPTIONS'],
    description='Translate a REST-shaped request into the configured GraphQL operation',
)
async def restified_gateway(request: Request):
    request_id = getattr(request.state, 'request_id', None) or str(uuid.uuid4())
    start_time = time.time() * 1000
    gateway: GatewayService = request.app.state.gateway
    development = request.app.state.settings.development
    try:
        with gateway.observer.span(
            'handle-request',
            {'request.url': str(request.url), 'request.method': request.method},
            carrier=request.headers,
        ) as span:
            log_headers_safely(request_id, request.headers, gateway.config.headers.keys())
            outcome = await gateway.translate(request.headers, request.json, request_id)
            response = respond_outcome(outcome, request_id, development)
            span.set_attribute('response.status', response.status_code)
            if response.status_code >= 500:
                mark_error(span, f'Request failed with status {response.status_code}')
            else:
                mark_ok(span)
            logger.info(f'{request_id} | RESTified gateway status code: {response.status_code}')
            return response
    finally:
        logger.info(f'{request_id} | Gateway time {time.time() * 1000 - start_time}ms')


@gateway_router.get('/health', description='Liveness check')
async def health():
    return {'status': 'healthy'}
