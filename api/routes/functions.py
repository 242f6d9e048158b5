"""
Scheduled job endpoints.

An external cron calls these with ``Authorization: Bearer <service role key>``.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, require_service_role
from api.middleware import make_serializable
from app.clock import utcnow
from domain.schemas.receipt_schemas import ExpireReceiptsResponse, ProcessRemindersResponse
from services.job_service import JobService

router = APIRouter(
    prefix="/functions",
    tags=["Jobs"],
    dependencies=[Depends(require_service_role)],
)
logger = logging.getLogger("dogoods.api.functions")


def _job_failed(job: str, exc: Exception) -> JSONResponse:
    logger.error("Job %s failed: %s", job, exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=make_serializable(
            {"success": False, "error": str(exc), "timestamp": utcnow().isoformat()}
        ),
    )


@router.post("/expire-receipts", response_model=ExpireReceiptsResponse)
def expire_receipts(db: Session = Depends(get_db)):
    """Expire pending receipts past their pickup deadline"""
    try:
        return JobService.run_expire_receipts(db)
    except Exception as exc:
        return _job_failed("expire-receipts", exc)


@router.post("/process-pickup-reminders", response_model=ProcessRemindersResponse)
def process_pickup_reminders(db: Session = Depends(get_db)):
    """Create reminder notifications (and SMS) for upcoming pickups"""
    try:
        return JobService.process_pickup_reminders(db)
    except Exception as exc:
        return _job_failed("process-pickup-reminders", exc)
