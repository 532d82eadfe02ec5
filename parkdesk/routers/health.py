# parkdesk/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + auto-clear scheduler.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy import text
from parkdesk.database import get_db
from parkdesk.models.scheduler_run import SchedulerRun
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Whether the auto-clear scheduler is running and when it last fired
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "scheduler": {"running": False, "last_run_at": None},
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    scheduler = getattr(request.app.state, "scheduler", None)
    if scheduler is not None:
        result["scheduler"]["running"] = scheduler.running
        if result["database"] == "ok":
            last = db.query(SchedulerRun).filter(SchedulerRun.job_name == scheduler.job_name).first()
            if last:
                result["scheduler"]["last_run_at"] = last.last_run_at.isoformat()

    return result
