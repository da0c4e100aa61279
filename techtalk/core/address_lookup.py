"""
Postal code -> address lookup for the address form demo.

Uses the public postal code REST API at https://postcode.teraren.com/.
Lookups never raise: anything that goes wrong (bad code, API error, network
error, unexpected body) comes back as None and is logged.
"""

import httpx
import logging
import re
import unicodedata
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from techtalk.core.config import Settings, get_settings
from techtalk.core.validation import collect_field_errors
from techtalk.models.address import Address, AddressRegistration, AddressRegistrationResult, Toast

logger = logging.getLogger(__name__)

POSTAL_CODE_PATTERN = re.compile(r"^[0-9]{7}$")

REGISTERED_MESSAGE = "登録しました！"

# pydantic error types -> reason codes shown next to the demo fields
REASON_CODES = {
    "string_too_long": "too_long",
    "string_type": "invalid_format",
}


def normalize_postal_code(postal_code: str) -> Optional[str]:
    """
    Turn user input such as "100-0001" or "１００－０００１" into "1000001".

    Returns None when the result is not exactly seven digits.
    """
    if not postal_code:
        return None
    code = unicodedata.normalize("NFKC", postal_code)
    code = re.sub(r"[\s\-]", "", code)
    if not POSTAL_CODE_PATTERN.match(code):
        return None
    return code


async def lookup_address(postal_code: str, settings: Optional[Settings] = None) -> Optional[Address]:
    if settings is None:
        settings = get_settings()

    code = normalize_postal_code(postal_code)
    if code is None:
        logger.info(f"Postal code lookup skipped, malformed code ({len(postal_code or '')} chars)")
        return None

    url = f"{settings.postcode_api_base_url.rstrip('/')}/postcodes/{code}.json"

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                url,
                headers={"Accept": "application/json"},
                timeout=settings.postcode_timeout_seconds,
            )
    except httpx.HTTPError as e:
        logger.error(f"Postal code API request failed for {code}: {str(e)}")
        return None

    if not response.is_success:
        logger.info(f"Postal code API returned {response.status_code} for {code}")
        return None

    try:
        return Address.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        logger.error(f"Unexpected postal code API response for {code}: {str(e)}")
        return None


def register_address(form: Mapping[str, Any]) -> AddressRegistrationResult:
    """
    Validate the address demo form and build the confirmation toast.

    All field errors are collected; a missing field is reported as "required".
    """
    try:
        registration = AddressRegistration.model_validate(dict(form))
    except ValidationError as e:
        errors = {
            field: [REASON_CODES.get(reason, reason) for reason in reasons]
            for field, reasons in collect_field_errors(e).items()
        }
        return AddressRegistrationResult(ok=False, field_errors=errors)

    description = f"{registration.prefecture}{registration.city}{registration.street or ''}"
    logger.info(f"Address registered: {description}")
    return AddressRegistrationResult(
        ok=True,
        toast=Toast(message=REGISTERED_MESSAGE, description=description, type="success"),
    )
