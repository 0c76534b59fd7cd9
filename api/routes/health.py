from fastapi import APIRouter

from fundmanager.db import check_db_connection

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
def health():
    database = check_db_connection()
    return {
        "status": "healthy" if database else "degraded",
        "services": {"database": database},
    }
