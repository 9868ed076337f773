import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.config import settings
from storefront.database import get_session
from storefront.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/check")
def health_check(response: Response, session: Session = Depends(get_session)):
    database = "ok"
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check: database unreachable")
        database = "failed"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "env": settings.env,
        "timestamp": utcnow().isoformat(),
    }
