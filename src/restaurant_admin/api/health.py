from fastapi import APIRouter

from restaurant_admin.db.base import utcnow

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check():
    """
    Простейший health-check эндпоинт.
    """
    return {
        "status": "ok",
        "timestamp": utcnow()
    }
