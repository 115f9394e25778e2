from fastapi import APIRouter

from app.core.config.scoring import get_scoring_config
from app.services.assessment import assessment_enabled

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    get_scoring_config()
    return {
        "status": "healthy",
        "assessment": "enabled" if assessment_enabled() else "disabled",
    }
