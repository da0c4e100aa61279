from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional


class Address(BaseModel):
    """Address returned by the postal code API (postcode.teraren.com)."""

    model_config = ConfigDict(extra="ignore")

    prefecture: str
    city: str
    suburb: str = ""
    street_address: Optional[str] = None

    @field_validator("suburb", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def form_values(self) -> Dict[str, str]:
        """Values the demo form patches into its prefecture/city/street fields."""
        return {
            "prefecture": self.prefecture,
            "city": f"{self.city}{self.suburb}",
            "street": self.street_address or "",
        }


class AddressRegistration(BaseModel):
    zip1: str = Field(..., max_length=3)
    zip2: str = Field(..., max_length=4)
    prefecture: str
    city: str
    street: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def drop_blank_inputs(cls, data: Any) -> Any:
        # HTML forms post untouched inputs as "", which counts as not filled in
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value != ""}
        return data


class Toast(BaseModel):
    message: str
    description: str = ""
    type: str = "success"


class AddressRegistrationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    toast: Optional[Toast] = None
    field_errors: Optional[Dict[str, List[str]]] = Field(default=None, alias="fieldErrors")

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
