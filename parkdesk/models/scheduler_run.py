# parkdesk/models/scheduler_run.py
"""
Last-run marker per scheduled job.
auto_clear_service claims a calendar day here before clearing, so a
restart (or a second worker) cannot fire the same day twice.
"""

from sqlalchemy import Column, String, Date, DateTime
from parkdesk.database import Base


class SchedulerRun(Base):
    __tablename__ = "scheduler_runs"

    job_name = Column(String(100), primary_key=True)
    last_run_on = Column(Date, nullable=False)
    last_run_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<SchedulerRun {self.job_name} last={self.last_run_on}>"
