"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

# External imports
import logging
from typing import Sequence

# Internal imports
from models.endpoint_model import EndpointTemplate
from models.outcome_model import EndpointNotFound
from models.request_model import RawRequest
from utils.path_util import is_capture, match_path, split_path

logger = logging.getLogger('restified.gateway')


class EndpointService:

    @staticmethod
    def resolve(
        table: Sequence[EndpointTemplate], raw_request: RawRequest
    ) -> EndpointTemplate | EndpointNotFound:
        """
        Find the endpoint serving a request.

        Templates are tried in declaration order; the first one whose path
        matches and whose methods include the request method wins.
        """
        for endpoint in table:
            if match_path(endpoint.path, raw_request.path) and raw_request.method in endpoint.methods:
                return endpoint
        return EndpointNotFound(path=raw_request.path, method=raw_request.method)

    @staticmethod
    def _segments_overlap(left: str, right: str) -> bool:
        if is_capture(left) and is_capture(right):
            return True
        if is_capture(left):
            return bool(right)
        if is_capture(right):
            return bool(left)
        return left == right

    @staticmethod
    def templates_overlap(first: EndpointTemplate, second: EndpointTemplate) -> bool:
        """True when some concrete (path, method) pair matches both templates."""
        if not (first.methods & second.methods):
            return False
        first_parts = split_path(first.path)
        second_parts = split_path(second.path)
        if len(first_parts) != len(second_parts):
            return False
        return all(
            EndpointService._segments_overlap(a, b) for a, b in zip(first_parts, second_parts)
        )

    @staticmethod
    def find_overlapping_endpoints(
        table: Sequence[EndpointTemplate],
    ) -> list[tuple[EndpointTemplate, EndpointTemplate]]:
        """
        Report (earlier, later) pairs of templates that can match the same request.

        Resolution still picks the earlier one; this only surfaces configuration
        that relies on declaration order.
        """
        overlaps = []
        for index, earlier in enumerate(table):
            for later in table[index + 1:]:
                if EndpointService.templates_overlap(earlier, later):
                    overlaps.append((earlier, later))
        return overlaps
