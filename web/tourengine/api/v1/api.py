from fastapi import APIRouter

from .endpoints import schedules, pricing


# Create main API router
api_v1_router = APIRouter()

# Include schedule endpoints
api_v1_router.include_router(
    schedules.router,
    prefix="/schedules",
    tags=["schedules"]
)

# Include pricing endpoints
api_v1_router.include_router(
    pricing.router,
    prefix="/pricing",
    tags=["pricing"]
)
