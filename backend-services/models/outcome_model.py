"""
Translation outcomes.

Every terminal state of a translation is one of the dataclasses below; the
gateway returns them instead of raising so callers can branch exhaustively.
"""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class GraphQLSuccess:
    payload: Any


@dataclass(frozen=True)
class UpstreamFailure:
    message: str
    status_code: int | None = None
    status_text: str | None = None


@dataclass(frozen=True)
class Unauthorized:
    header: str | None = None


@dataclass(frozen=True)
class MalformedRequest:
    problems: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EndpointNotFound:
    path: str
    method: str


@dataclass(frozen=True)
class InternalFailure:
    error: str
    stack: str | None = None


GraphQLOutcome = Union[GraphQLSuccess, UpstreamFailure]

TranslationOutcome = Union[
    GraphQLSuccess,
    Unauthorized,
    MalformedRequest,
    EndpointNotFound,
    UpstreamFailure,
    InternalFailure,
]
