"""Shared schema base and generic response bodies."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


class ApiModel(BaseModel):
    """Base for wire schemas: camelCase JSON keys, snake_case attributes, ORM-readable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Body used for confirmations and for every error response."""

    message: str = Field(..., description="Human-readable outcome")
