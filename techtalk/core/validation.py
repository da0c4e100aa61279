"""
Contact form validation.

The form schema mirrors what the contact page enforces in the browser:
name, email and message are required, email must look like an address,
company / phone / locale are free text. Validation never raises; callers get
either a Valid result carrying a ValidatedSubmission or an Invalid result
mapping each failing field to its reason codes ("required", "invalid_format").
"""

import logging
from ipaddress import IPv4Address
from typing import Any, Dict, List, Mapping, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from techtalk.models.contact import (
    Invalid,
    SubmissionInput,
    Valid,
    ValidatedSubmission,
    ValidationResult,
)

logger = logging.getLogger(__name__)

REQUIRED = "required"
INVALID_FORMAT = "invalid_format"


def is_plausible_email(value: str) -> bool:
    """
    Check the local-part@domain shape of an email address.

    The domain must either end in a top-level label of at least two letters
    or be a bracketed IPv4 literal such as ``user@[192.168.0.1]``.
    No DNS lookups are made.
    """
    try:
        info = validate_email(
            value,
            check_deliverability=False,
            globally_deliverable=False,
            allow_domain_literal=True,
        )
    except EmailNotValidError:
        return False

    domain_address = getattr(info, "domain_address", None)
    if domain_address is not None:
        return isinstance(domain_address, IPv4Address)

    tld = info.domain.rsplit(".", 1)[-1]
    return len(tld) >= 2 and tld.isalpha()


class ContactFormSchema(BaseModel):
    name: str
    company: str = ""
    phone: str = ""
    email: str
    message: str
    locale: str = ""

    @field_validator("name", "message")
    @classmethod
    def must_not_be_blank(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError(REQUIRED, "This field is required")
        return value

    @field_validator("email")
    @classmethod
    def must_be_email(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError(REQUIRED, "Email is required")
        if not is_plausible_email(value):
            raise PydanticCustomError(INVALID_FORMAT, "Enter a valid email address")
        return value


def collect_field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Fold a pydantic ValidationError into field -> [reason, ...]."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        reason = REQUIRED if error["type"] == "missing" else error["type"]
        reasons = errors.setdefault(field, [])
        if reason not in reasons:
            reasons.append(reason)
    return errors


def validate(raw: Union[SubmissionInput, Mapping[str, Any]]) -> ValidationResult:
    """
    Validate a contact form submission.

    Args:
        raw: SubmissionInput, or any mapping of form field name to value

    Returns:
        Valid(submission) when every rule passes, otherwise Invalid(errors)
        with every failing field listed (no short-circuit).
    """
    if not isinstance(raw, SubmissionInput):
        raw = SubmissionInput.from_mapping(raw)

    try:
        form = ContactFormSchema.model_validate(raw.model_dump())
    except ValidationError as e:
        errors = collect_field_errors(e)
        logger.debug(f"Contact form rejected: {errors}")
        return Invalid(errors=errors)

    return Valid(submission=ValidatedSubmission(**form.model_dump()))
