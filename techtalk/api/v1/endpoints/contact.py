"""
Contact form endpoint.

POST /v1/contact takes the contact page's form (url-encoded, multipart or
JSON) and answers with {ok: true}, {ok: true, warning: ...} or
{ok: false, fieldErrors: {...}}.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
import logging

from techtalk.api.v1.endpoints.forms import read_form_fields
from techtalk.core.submission import SubmissionController

router = APIRouter()
logger = logging.getLogger(__name__)


def get_submission_controller(request: Request) -> SubmissionController:
    """The controller built at startup (see main.lifespan)"""
    controller = getattr(request.app.state, "submission_controller", None)
    if controller is None:
        logger.error("Contact submission controller is not initialized")
        raise HTTPException(status_code=503, detail="Contact form is not available")
    return controller


@router.post("/contact", tags=["Contact"])
async def submit_contact(
    request: Request,
    controller: SubmissionController = Depends(get_submission_controller),
):
    fields = await read_form_fields(request)
    result = await controller.submit(fields)

    status_code = 200 if result.ok else 422
    return JSONResponse(status_code=status_code, content=result.to_response())
