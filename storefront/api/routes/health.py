"""
Health API Routes
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from storefront.database import Database, get_database

router = APIRouter()


@router.get("/health")
async def health_check(database: Database = Depends(get_database)) -> JSONResponse:
    """Application and database health"""
    db = database.health()
    ok = bool(db.get("ok"))
    return JSONResponse(
        status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if ok else "degraded",
            "database": db,
        },
    )
