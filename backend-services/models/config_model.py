"""
The contents of this file are property of Doorman Dev, LLC
Review the Apache License 2.0 for valid authorization of use
See https://github.com/apidoorman/doorman for more information
"""

# External imports
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Internal imports
from models.endpoint_model import EndpointTemplate


class GraphQLServerHeadersModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    forward: tuple[str, ...] = Field(
        default=(),
        description='Inbound headers copied to the upstream call when present',
        examples=[['X-Hasura-Role']],
    )
    additional: dict[str, str] = Field(
        default_factory=dict,
        description='Headers always set on the upstream call; they win over forwarded headers',
        examples=[{'Content-Type': 'application/json'}],
    )


class GraphQLServerModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    headers: GraphQLServerHeadersModel = Field(default_factory=GraphQLServerHeadersModel)


class RestifiedConfig(BaseModel):
    """Gateway configuration: shared-secret headers, upstream header policy and
    the endpoint table, in declaration order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    headers: dict[str, str] = Field(
        ...,
        description='Shared-secret headers every inbound request must carry',
        examples=[{'hasura-m-auth': 'change-me'}],
    )
    graphql_server: GraphQLServerModel = Field(
        default_factory=GraphQLServerModel, alias='graphqlServer'
    )
    restified_endpoints: tuple[EndpointTemplate, ...] = Field(
        ..., alias='restifiedEndpoints', description='Endpoint table; the first match wins'
    )

    @field_validator('headers')
    @classmethod
    def _require_secret_header(cls, value: dict[str, str]) -> dict[str, str]:
        if not value:
            raise ValueError('at least one shared-secret header is required')
        return value

    @property
    def forward_headers(self) -> tuple[str, ...]:
        return self.graphql_server.headers.forward

    @property
    def additional_headers(self) -> dict[str, str]:
        return self.graphql_server.headers.additional
