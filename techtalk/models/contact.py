from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

# Order matters: field errors and webhook payloads follow it
CONTACT_FIELDS = ("name", "company", "phone", "email", "message", "locale")


class SubmissionInput(BaseModel):
    """Raw contact form values exactly as the browser sent them."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    company: str = ""
    phone: str = ""
    email: str = ""
    message: str = ""
    locale: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_string(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            # Repeated form keys: the last one wins, like starlette's FormData
            value = value[-1] if value else ""
        if not isinstance(value, str):
            return str(value)
        return value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SubmissionInput":
        return cls.model_validate({key: data[key] for key in CONTACT_FIELDS if key in data})


class ValidatedSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    company: str = ""
    phone: str = ""
    email: str
    message: str
    locale: str = ""


class Valid(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["valid"] = "valid"
    submission: ValidatedSubmission


class Invalid(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["invalid"] = "invalid"
    errors: Dict[str, List[str]]

    @model_validator(mode="after")
    def check_errors_not_empty(self):
        if not self.errors:
            raise ValueError("Invalid result needs at least one field error")
        empty = [field for field, reasons in self.errors.items() if not reasons]
        if empty:
            raise ValueError(f"Fields without error reasons: {', '.join(empty)}")
        return self


ValidationResult = Union[Valid, Invalid]


class Delivered(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["delivered"] = "delivered"


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failed"] = "failed"
    reason: str


DispatchOutcome = Union[Delivered, Failed]


NOTIFICATION_FAILED_WARNING = "notification failed"


class SubmissionResult(BaseModel):
    """What the contact form gets back after a submission."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    field_errors: Optional[Dict[str, List[str]]] = Field(default=None, alias="fieldErrors")
    warning: Optional[str] = None

    @classmethod
    def accepted(cls, warning: Optional[str] = None) -> "SubmissionResult":
        return cls(ok=True, warning=warning)

    @classmethod
    def rejected(cls, field_errors: Dict[str, List[str]]) -> "SubmissionResult":
        return cls(ok=False, field_errors=field_errors)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
