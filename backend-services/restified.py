"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

from logging.handlers import RotatingFileHandler
from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from dotenv import load_dotenv
import logging
import json
import re
import os
import sys
import uvicorn
import uuid

from models.config_model import RestifiedConfig
from models.response_model import ResponseModel
from routes.gateway_routes import gateway_router
from services.gateway_service import GatewayService
from services.graphql_service import GraphQLService
from utils.config_util import ConfigurationError, GatewaySettings, load_config_from_env
from utils.constants import Headers, Messages
from utils.correlation_util import set_correlation_id
from utils.error_codes import ErrorCode
from utils.response_util import process_response
from utils.tracing_util import TranslationObserver, configure_tracing

load_dotenv()

"""Logging configuration

Prefer file logging to LOGS_DIR/restified.log when LOGS_DIR is set and
writable; console logging is always on so container platforms capture logs.
Respects LOG_FORMAT=json|plain and LOG_LEVEL.
"""

DEFAULT_REDACTED_HEADERS = ['authorization', 'cookie', 'hasura-m-auth', 'x-hasura-ddn-token']

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'time': self.formatTime(record, '%Y-%m-%dT%H:%M:%S'),
            'name': record.name,
            'level': record.levelname,
            'message': record.getMessage(),
        }
        try:
            return json.dumps(payload, ensure_ascii=False)
        except Exception:
            return f'{payload}'

class RedactFilter(logging.Filter):
    """Logging redaction filter for sensitive data.

    Redacts:
    - Authorization headers (Bearer, Basic, pat, ...)
    - Shared-secret and any REDACTED_HEADERS header values
    - Access/refresh tokens and JWTs
    - Passwords and secrets
    - Cookies
    """

    PATTERNS = [
        re.compile(r'(?i)(authorization\s*[:=]\s*)([^;\r\n]+)'),

        re.compile(r'(?i)(access[_-]?token\s*["\']?\s*[:=]\s*["\']?)([^"\';\r\n\s]+)(["\']?)'),
        re.compile(r'(?i)(refresh[_-]?token\s*["\']?\s*[:=]\s*["\']?)([^"\';\r\n\s]+)(["\']?)'),

        re.compile(r'(?i)(password\s*["\']?\s*[:=]\s*["\']?)([^"\';\r\n]+)(["\']?)'),
        re.compile(r'(?i)(secret\s*["\']?\s*[:=]\s*["\']?)([^"\';\r\n\s]+)(["\']?)'),

        re.compile(r'(?i)(cookie\s*[:=]\s*)([^;\r\n]+)'),

        re.compile(r'\b(eyJ[a-zA-Z0-9_\-]+\.eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+)\b'),
    ]

    def __init__(self, header_names=None):
        super().__init__()
        self.header_patterns = [
            re.compile(r'(?i)(["\']?' + re.escape(name) + r'["\']?\s*[:=]\s*["\']?)([^"\';,}\r\n\s]+)(["\']?)')
            for name in (header_names or [])
            if name
        ]

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = str(record.getMessage())
            red = msg

            for pat in self.PATTERNS + self.header_patterns:
                if pat.groups >= 2:
                    red = pat.sub(lambda m: (
                        m.group(1) +
                        '[REDACTED]' +
                        (m.group(3) if m.lastindex and m.lastindex >= 3 else '')
                    ), red)
                else:
                    red = pat.sub('[REDACTED]', red)

            if red != msg:
                record.msg = red
                record.args = None
        except Exception:
            pass
        return True

def redacted_header_names() -> list[str]:
    extra = [h.strip() for h in os.getenv('REDACTED_HEADERS', '').split(',') if h.strip()]
    return DEFAULT_REDACTED_HEADERS + extra

_env_logs_dir = os.getenv('LOGS_DIR')
_fmt_is_json = os.getenv('LOG_FORMAT', 'plain').lower() == 'json'
_log_level = getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)

def _formatter() -> logging.Formatter:
    return JSONFormatter() if _fmt_is_json else logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

_file_handler = None
if _env_logs_dir:
    try:
        os.makedirs(_env_logs_dir, exist_ok=True)
        _file_handler = RotatingFileHandler(
            filename=os.path.join(_env_logs_dir, 'restified.log'),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        _file_handler.setFormatter(_formatter())
        _file_handler.addFilter(RedactFilter(redacted_header_names()))
    except OSError as _e:
        logging.getLogger('restified.gateway').warning(f'File logging disabled ({_e}); using console logging only')
        _file_handler = None

# Configure all restified loggers to use the same handlers and prevent propagation
def configure_logger(logger_name):
    logger = logging.getLogger(logger_name)
    logger.setLevel(_log_level)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(_log_level)
    console.setFormatter(_formatter())
    console.addFilter(RedactFilter(redacted_header_names()))
    logger.addHandler(console)

    if _file_handler is not None:
        logger.addHandler(_file_handler)
    return logger

gateway_logger = configure_logger('restified.gateway')

@asynccontextmanager
async def app_lifespan(app: FastAPI):
    if getattr(app.state, 'gateway', None) is None:
        settings: GatewaySettings = app.state.settings
        try:
            config = load_config_from_env(settings)
        except ConfigurationError as e:
            gateway_logger.critical(f'Startup aborted with code {ErrorCode.CFG_INVALID}: {e}')
            raise
        app.state.gateway = GatewayService(config, settings.graphql_server_url, app.state.observer)
    gateway: GatewayService = app.state.gateway
    gateway_logger.info(
        f'RESTified gateway ready: {len(gateway.config.restified_endpoints)} endpoint(s), '
        f'GraphQL server {gateway.graphql_url}'
    )
    try:
        yield
    finally:
        gateway_logger.info('Closing HTTP clients...')
        try:
            await GraphQLService.aclose_http_client()
        except Exception as e:
            gateway_logger.error(f'Error closing HTTP client: {e}')
        gateway_logger.info('Graceful shutdown complete')

def create_app(
    config: RestifiedConfig | None = None,
    settings: GatewaySettings | None = None,
    observer: TranslationObserver | None = None,
) -> FastAPI:
    """Build the gateway application.

    When `config` is omitted the lifespan loads it from the environment, so an
    invalid or missing configuration fails startup rather than the first request.
    """
    settings = settings or GatewaySettings()
    if observer is None:
        observer = configure_tracing(settings.otel_exporter_otlp_endpoint, settings.otel_exporter_pat)

    app = FastAPI(
        title='restified',
        description='Configuration-driven gateway that serves REST-shaped requests from a GraphQL server.',
        version='1.0.0',
        lifespan=app_lifespan,
    )
    app.state.settings = settings
    app.state.observer = observer
    app.state.gateway = (
        GatewayService(config, settings.graphql_server_url, observer) if config is not None else None
    )

    @app.middleware('http')
    async def request_id_middleware(request: Request, call_next):
        rid = request.headers.get('x-request-id') or request.headers.get('request-id')
        if not rid:
            rid = str(uuid.uuid4())
        request.state.request_id = rid
        set_correlation_id(rid)
        gateway_logger.info(f'{rid} | Entry: method={request.method} path={str(request.url.path)}')
        response = await call_next(request)
        response.headers[Headers.X_REQUEST_ID] = rid
        return response

    @app.exception_handler(500)
    async def internal_server_error_handler(request: Request, exc: Exception):
        gateway_logger.error(f'Unhandled error on {request.url.path}: {exc}', exc_info=exc)
        return process_response(ResponseModel(
            status_code=500,
            error_code=ErrorCode.GTW_INTERNAL_ERROR,
            message=Messages.INTERNAL_SERVER_ERROR,
        ))

    app.include_router(gateway_router, tags=['Gateway'])
    return app

restified = create_app()

def main():
    settings = GatewaySettings()
    gateway_logger.info(f'Starting RESTified gateway on {settings.host}:{settings.port}')
    gateway_logger.info(f'GraphQL Server URL: {settings.graphql_server_url}')
    try:
        uvicorn.run(
            'restified:restified',
            host=settings.host,
            port=settings.port,
            reload=settings.dev_reload,
            log_level='info',
        )
    except Exception as e:
        gateway_logger.error(f'Failed to start server: {str(e)}')
        raise

if __name__ == '__main__':
    main()
