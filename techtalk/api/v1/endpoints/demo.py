"""
Server side of the form library demos.

- GET  /v1/demo/postcodes/{postal_code}: address for a Japanese postal code,
  plus the values the demo form patches into its fields
- POST /v1/demo/conform/value: registers the address form and returns the
  toast shown after a successful submit
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from techtalk.api.v1.endpoints.forms import read_form_fields
from techtalk.core.address_lookup import lookup_address, normalize_postal_code, register_address
from techtalk.core.config import Settings, get_settings

router = APIRouter()


@router.get("/postcodes/{postal_code}")
async def get_address(postal_code: str, settings: Settings = Depends(get_settings)):
    address = await lookup_address(postal_code, settings)
    if address is None:
        raise HTTPException(status_code=404, detail=f"No address found for postal code '{postal_code}'")

    return {
        "postal_code": normalize_postal_code(postal_code),
        "address": address.model_dump(),
        "fields": address.form_values(),
    }


@router.post("/conform/value")
async def register_address_form(request: Request):
    fields = await read_form_fields(request)
    result = register_address(fields)

    status_code = 200 if result.ok else 422
    return JSONResponse(status_code=status_code, content=result.to_response())
