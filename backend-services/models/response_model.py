from typing import Any

from pydantic import BaseModel, Field


class ResponseModel(BaseModel):
    status_code: int = Field(200)

    response_headers: dict | None = Field(None)

    response: Any = Field(None)
    message: str | None = Field(None, min_length=1, max_length=255)

    error_code: str | None = Field(None, min_length=1, max_length=255)
    details: dict[str, Any] | None = Field(None)
