from fastapi.responses import JSONResponse
import logging

from models.outcome_model import (
    EndpointNotFound,
    GraphQLSuccess,
    InternalFailure,
    MalformedRequest,
    TranslationOutcome,
    Unauthorized,
    UpstreamFailure,
)
from models.response_model import ResponseModel
from utils.constants import Headers, Messages, REQUIRED_REQUEST_SHAPE
from utils.error_codes import ErrorCode

logger = logging.getLogger('restified.gateway')

def _normalize_headers(hdrs: dict | None) -> dict | None:
    if not hdrs:
        return hdrs

    out = dict(hdrs)
    rid = out.pop(Headers.REQUEST_ID, None) or out.get('Request-Id') or out.get(Headers.X_REQUEST_ID)

    if rid and Headers.X_REQUEST_ID not in out:
        out[Headers.X_REQUEST_ID] = rid
    return out

def _with_body_length(resp: JSONResponse) -> JSONResponse:
    blen = len(getattr(resp, 'body', b'') or b'')
    if blen > 0:
        resp.headers['X-Body-Length'] = str(blen)
    return resp

def process_response(response: ResponseModel) -> JSONResponse:
    """Render a ResponseModel.

    Success bodies are passed through verbatim. Error bodies always carry
    `message` and `error_code`, plus any extra `details` fields.
    """
    try:
        headers = _normalize_headers(response.response_headers)
        if 200 <= int(response.status_code) < 300:
            return _with_body_length(JSONResponse(content=response.response, status_code=response.status_code, headers=headers))

        content = {'message': response.message or Messages.INTERNAL_SERVER_ERROR}
        if response.details:
            content.update(response.details)
        if response.error_code:
            content['error_code'] = response.error_code
        return _with_body_length(JSONResponse(content=content, status_code=response.status_code, headers=headers))
    except Exception as e:
        logger.error(f'An error occurred while processing the response: {e}')
        return JSONResponse(content={'message': 'Unable to process response', 'error_code': ErrorCode.GTW_INTERNAL_ERROR}, status_code=500)

def outcome_to_model(outcome: TranslationOutcome, request_id: str | None = None, development: bool = False) -> ResponseModel:
    """Map a translation outcome onto the HTTP status/error taxonomy.

    200 success, 401 unauthorized, 400 malformed, 404 not found, 500 for
    upstream and internal failures. Stack traces only appear in development.
    """
    response_headers = {Headers.REQUEST_ID: request_id} if request_id else None

    if isinstance(outcome, GraphQLSuccess):
        return ResponseModel(status_code=200, response_headers=response_headers, response=outcome.payload)

    if isinstance(outcome, Unauthorized):
        return ResponseModel(
            status_code=401,
            response_headers=response_headers,
            error_code=ErrorCode.AUTH_UNAUTHORIZED,
            message=Messages.UNAUTHORIZED,
        )

    if isinstance(outcome, MalformedRequest):
        details = {'required': REQUIRED_REQUEST_SHAPE}
        if outcome.problems:
            details['problems'] = list(outcome.problems)
        return ResponseModel(
            status_code=400,
            response_headers=response_headers,
            error_code=ErrorCode.REQ_MALFORMED,
            message=Messages.INVALID_REQUEST_BODY,
            details=details,
        )

    if isinstance(outcome, EndpointNotFound):
        return ResponseModel(
            status_code=404,
            response_headers=response_headers,
            error_code=ErrorCode.GTW_ENDPOINT_NOT_FOUND,
            message=Messages.ENDPOINT_NOT_FOUND,
            details={'requestedPath': outcome.path, 'requestedMethod': outcome.method},
        )

    if isinstance(outcome, UpstreamFailure):
        details = {'error': outcome.message}
        if outcome.status_code is not None:
            details['upstreamStatus'] = outcome.status_code
        return ResponseModel(
            status_code=500,
            response_headers=response_headers,
            error_code=ErrorCode.GTW_UPSTREAM_FAILURE,
            message=Messages.INTERNAL_SERVER_ERROR,
            details=details,
        )

    if isinstance(outcome, InternalFailure):
        details = {'error': outcome.error, 'stack': outcome.stack} if development else None
        return ResponseModel(
            status_code=500,
            response_headers=response_headers,
            error_code=ErrorCode.GTW_INTERNAL_ERROR,
            message=Messages.INTERNAL_SERVER_ERROR,
            details=details,
        )

    logger.error(f'{request_id} | Unhandled translation outcome: {type(outcome).__name__}')
    return ResponseModel(
        status_code=500,
        response_headers=response_headers,
        error_code=ErrorCode.GTW_INTERNAL_ERROR,
        message=Messages.INTERNAL_SERVER_ERROR,
    )

def respond_outcome(outcome: TranslationOutcome, request_id: str | None = None, development: bool = False) -> JSONResponse:
    return process_response(outcome_to_model(outcome, request_id, development))
