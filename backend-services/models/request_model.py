from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from models.endpoint_model import HttpMethod


class RawRequest(BaseModel):
    """The simulated REST call carried in the body of an inbound request."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1)
    method: HttpMethod
    query: str | None = None
    body: Any = None
