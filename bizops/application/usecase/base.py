"""Shared request model and parsing helpers for use cases."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from bizops.domain.error import InvalidEmailError, InvalidMobileNumberError
from bizops.domain.value import EmailAddress, MobileNumber


class RequestModel(BaseModel):
    """Base for request bodies.

    Fields are camelCase on the wire and unknown fields are rejected, so a
    body that fits no request shape fails validation instead of being
    silently reinterpreted.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


def parse_email(raw: str) -> EmailAddress:
    """Normalize an email or raise ``InvalidEmailError``."""
    try:
        return EmailAddress(raw)
    except PydanticValidationError:
        raise InvalidEmailError()


def parse_mobile_number(raw: str | None) -> str | None:
    """Normalize an optional mobile number or raise ``InvalidMobileNumberError``."""
    if raw is None or raw == "":
        return None
    try:
        return MobileNumber(raw).root
    except PydanticValidationError:
        raise InvalidMobileNumberError()


def has_field(value: dict[str, Any], field: str) -> bool:
    """Whether a raw request body carries ``field`` in snake or camel case."""
    return field in value or to_camel(field) in value
