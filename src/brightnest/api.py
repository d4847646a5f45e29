from fastapi import APIRouter

from brightnest.modules.parent_registration.router import router as parent_registration_router
from brightnest.modules.waitlist.router import router as waitlist_router

api_router = APIRouter()

api_router.include_router(
    parent_registration_router,
    prefix="/parent-registration",
    tags=["Parent Registration"],
)

api_router.include_router(waitlist_router, prefix="/waitlist", tags=["Waitlist"])
