"""Lead contact details captured with each submission."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator


class LeadRejectedError(Exception):
    """Raised when submitted contact fields fail schema checks.

    Attributes:
        field_errors: Field name -> human-readable problem.
    """

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = field_errors
        super().__init__(f"Lead contact rejected: {sorted(field_errors)}")


class LeadContact(BaseModel):
    """Validated contact identity of a respondent.

    Attributes:
        first_name: Given name.
        last_name: Family name.
        email: Contact e-mail used to deliver the report link.
        company: Organisation name.
        role: Job role of the respondent.
        consent: Must be True; the respondent agrees to receive results.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    company: str = Field(..., min_length=1, max_length=255)
    role: str = Field(..., min_length=1, max_length=255)
    consent: bool = Field(..., strict=True)

    @field_validator("consent")
    @classmethod
    def consent_must_be_given(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("You must agree to receive results")
        return value


def parse_lead(data: Mapping[str, Any]) -> LeadContact:
    """Validate raw contact fields.

    Args:
        data: Submitted lead fields.

    Returns:
        The validated LeadContact.

    Raises:
        LeadRejectedError: With one message per offending field.
    """
    try:
        return LeadContact.model_validate(dict(data))
    except ValidationError as exc:
        field_errors: dict[str, str] = {}
        for error in exc.errors(include_url=False):
            field = str(error["loc"][0]) if error["loc"] else "lead"
            field_errors.setdefault(field, error["msg"])
        raise LeadRejectedError(field_errors) from exc
