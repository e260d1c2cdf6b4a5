"""
Path template matching for RESTified endpoints.

Templates are split on '/' exactly like request paths. A template segment that
starts with ':' captures the request segment at the same position; every other
segment must match verbatim (case-sensitive, no trailing-slash tolerance).
"""

CAPTURE_MARKER = ':'


def split_path(path: str) -> list[str]:
    return path.split('/')


def is_capture(segment: str) -> bool:
    return segment.startswith(CAPTURE_MARKER)


def capture_name(segment: str) -> str:
    return segment[len(CAPTURE_MARKER):]


def match_path(template: str, path: str) -> bool:
    """Return True when `path` satisfies `template`.

    Args:
        template: Endpoint path template (e.g. '/v1/users/:id')
        path: Concrete request path (e.g. '/v1/users/42')

    Returns:
        True if the segment counts agree, every capture lines up with a
        non-empty segment and every literal segment is equal.
    """
    template_parts = split_path(template)
    path_parts = split_path(path)

    if len(template_parts) != len(path_parts):
        return False

    for expected, actual in zip(template_parts, path_parts):
        if is_capture(expected):
            if not actual:
                return False
        elif expected != actual:
            return False
    return True
