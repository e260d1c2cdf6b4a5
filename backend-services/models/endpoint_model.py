"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

# External imports
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

HttpMethod = Literal['GET', 'POST', 'PUT', 'DELETE']


class EndpointTemplate(BaseModel):
    """A RESTified endpoint: a path template, the methods it accepts and the
    GraphQL operation it runs.

    Loaded once with the gateway configuration and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(
        ...,
        min_length=1,
        description='Slash-delimited path template; segments starting with ":" capture a value',
        examples=['/v1/api/rest/albums/:offset'],
    )
    methods: frozenset[HttpMethod] = Field(
        ..., description='HTTP methods accepted by the endpoint', examples=[['GET', 'POST']]
    )
    query: str = Field(
        ...,
        min_length=1,
        description='GraphQL operation document sent upstream as-is',
        examples=['query Albums($offset: Int) { Album(offset: $offset) { Title } }'],
    )

    @field_validator('methods')
    @classmethod
    def _require_methods(cls, value: frozenset) -> frozenset:
        if not value:
            raise ValueError('at least one method is required')
        return value
