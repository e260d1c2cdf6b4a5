"""
Centralized Error Code Registry

Single source of truth for the error codes the gateway puts in its error bodies.

Usage:
    from utils.error_codes import ErrorCode

    return ResponseModel(
        status_code=404,
        error_code=ErrorCode.GTW_ENDPOINT_NOT_FOUND,
        message='Endpoint not found'
    )
"""


class ErrorCode:
    """
    Centralized error code constants.

    Naming Convention:
        - Format: CATEGORY_DESCRIPTION = 'PREFIX###'
        - Prefixes: AUTH, REQ, GTW, CFG
    """

    # ========================================================================
    # Authentication Errors (AUTH001-AUTH999)
    # ========================================================================
    AUTH_UNAUTHORIZED = 'AUTH001'  # Shared-secret header missing or wrong

    # ========================================================================
    # Request Errors (REQ001-REQ999)
    # ========================================================================
    REQ_MALFORMED = 'REQ001'  # Body is not {path, method, query?, body?}

    # ========================================================================
    # Gateway Errors (GTW001-GTW999)
    # ========================================================================
    GTW_ENDPOINT_NOT_FOUND = 'GTW003'  # No template matches path + method
    GTW_INTERNAL_ERROR = 'GTW006'  # Unexpected failure during translation
    GTW_UPSTREAM_FAILURE = 'GTW007'  # Non-2xx or transport error from GraphQL

    # ========================================================================
    # Configuration Errors (CFG001-CFG999)
    # ========================================================================
    CFG_INVALID = 'CFG001'  # Configuration missing or failed validation

