"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

import os
import logging
from typing import Any, Dict

import httpx

from models.outcome_model import GraphQLOutcome, GraphQLSuccess, UpstreamFailure

logger = logging.getLogger('restified.gateway')


class GraphQLService:

    _http_client: httpx.AsyncClient | None = None

    @staticmethod
    def _build_timeout() -> httpx.Timeout:
        """No timeout unless HTTP_TIMEOUT is set (seconds, applied to every phase)."""
        raw = os.getenv('HTTP_TIMEOUT')
        if raw is None or not raw.strip():
            return httpx.Timeout(None)
        try:
            return httpx.Timeout(float(raw))
        except ValueError:
            logger.warning(f'Ignoring invalid HTTP_TIMEOUT={raw!r}; upstream calls have no timeout')
            return httpx.Timeout(None)

    @staticmethod
    def _build_limits() -> httpx.Limits:
        """Pool limits with env overrides.

        Defaults:
        - max_connections: 100 (total across hosts)
        - max_keepalive_connections: 50 (pooled, idle)
        - keepalive_expiry: 30s
        """
        try:
            max_conns = int(os.getenv('HTTP_MAX_CONNECTIONS', 100))
        except ValueError:
            max_conns = 100
        try:
            max_keep = int(os.getenv('HTTP_MAX_KEEPALIVE', 50))
        except ValueError:
            max_keep = 50
        try:
            expiry = float(os.getenv('HTTP_KEEPALIVE_EXPIRY', 30.0))
        except ValueError:
            expiry = 30.0
        return httpx.Limits(max_connections=max_conns, max_keepalive_connections=max_keep, keepalive_expiry=expiry)

    @staticmethod
    def _client_cache_enabled() -> bool:
        return os.getenv('ENABLE_HTTPX_CLIENT_CACHE', 'true').lower() != 'false'

    @classmethod
    def get_http_client(cls, pooled: bool | None = None) -> httpx.AsyncClient:
        """Return a pooled AsyncClient by default for connection reuse.

        Set ENABLE_HTTPX_CLIENT_CACHE=false (or pass pooled=False) to disable
        pooling and create a fresh client the caller must close.
        """
        if pooled is None:
            pooled = cls._client_cache_enabled()
        if pooled:
            if cls._http_client is None:
                cls._http_client = httpx.AsyncClient(
                    timeout=cls._build_timeout(),
                    limits=cls._build_limits(),
                )
            return cls._http_client
        return httpx.AsyncClient(
            timeout=cls._build_timeout(),
            limits=cls._build_limits(),
        )

    @classmethod
    async def aclose_http_client(cls) -> None:
        try:
            if cls._http_client is not None:
                await cls._http_client.aclose()
        finally:
            cls._http_client = None

    @staticmethod
    async def execute(
        query: str,
        variables: Dict[str, Any],
        headers: Dict[str, str],
        upstream_url: str,
        request_id: str = '',
    ) -> GraphQLOutcome:
        """
        POST a GraphQL operation upstream, once.

        A 2xx response is returned untouched (GraphQL `errors` included).
        Non-2xx statuses, transport errors and unparseable bodies become an
        UpstreamFailure. Nothing is retried.
        """
        pooled = GraphQLService._client_cache_enabled()
        client = GraphQLService.get_http_client(pooled)
        try:
            http_response = await client.post(
                upstream_url,
                json={'query': query, 'variables': variables},
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error(f'{request_id} | GraphQL transport error to {upstream_url}: {e}')
            return UpstreamFailure(message=f'GraphQL request to {upstream_url} failed: {e}')
        finally:
            if not pooled:
                await client.aclose()

        status = http_response.status_code
        status_text = getattr(http_response, 'reason_phrase', '') or ''
        logger.info(f'{request_id} | GraphQL upstream status code: {status}')
        if not 200 <= status < 300:
            return UpstreamFailure(
                message=f'GraphQL request to {upstream_url} failed: {status} {status_text}'.rstrip(),
                status_code=status,
                status_text=status_text,
            )

        try:
            payload = http_response.json()
        except ValueError as e:
            logger.error(f'{request_id} | GraphQL upstream malformed JSON: {e}')
            return UpstreamFailure(
                message=f'GraphQL response from {upstream_url} is not valid JSON',
                status_code=status,
                status_text=status_text,
            )
        return GraphQLSuccess(payload=payload)
