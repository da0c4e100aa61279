from fastapi import APIRouter
from techtalk.api.v1.endpoints import contact
from techtalk.api.v1.endpoints import demo

api_router = APIRouter(prefix="/v1")

api_router.include_router(contact.router)
api_router.include_router(demo.router, prefix="/demo", tags=["Demo"])
