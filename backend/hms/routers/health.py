"""Health check router."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hms.database import execute_with_retry, get_db, ping_database

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/ready")
def readiness_check(db: Session = Depends(get_db)):
    """Readiness check (database connectivity)."""
    try:
        execute_with_retry(lambda: ping_database(db.get_bind()), retries=2, delay=0.5)
    except SQLAlchemyError:
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "checks": {"database": "unavailable"}},
        )
    return {"status": "ready", "checks": {"database": "ok"}}
