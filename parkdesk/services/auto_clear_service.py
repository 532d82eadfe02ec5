# parkdesk/services/auto_clear_service.py
"""
Daily auto-clear of the parking lot.

At AUTO_CLEAR_TIME (local wall clock, 18:00 by default) every active session is
completed, every slot is freed and, with AUTO_CLEAR_PURGE_VEHICLES, all vehicle
records are deleted. The same clear backs the manual DELETE /api/vehicles.

Exactly once per calendar day: before clearing, the scheduler claims the date
in scheduler_runs with a conditional update and commits it. A restart, or a
second worker, that wakes up the same day loses the claim and does nothing.
A failed clear is logged and not retried; the next day's run is unaffected.
"""

import asyncio
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from parkdesk.config import settings
from parkdesk.database import SessionLocal
from parkdesk.models.parking_session import ParkingSession, STATUS_ACTIVE, STATUS_COMPLETED
from parkdesk.models.parking_slot import ParkingSlot
from parkdesk.models.scheduler_run import SchedulerRun
from parkdesk.models.vehicle import Vehicle
from parkdesk.utils.logger import get_logger

logger = get_logger(__name__)

JOB_NAME = "auto_clear"


def clear_parking(db: Session, purge_vehicles: bool = True) -> dict:
    """Close all active sessions and free all slots in one transaction."""
    # Lock slots first, same order as session_service, so in-flight entries
    # either finish before the clear or start after it.
    db.query(ParkingSlot.id).order_by(ParkingSlot.id).with_for_update().all()

    now = datetime.utcnow()
    sessions_closed = (
        db.query(ParkingSession)
        .filter(ParkingSession.status == STATUS_ACTIVE)
        .update({ParkingSession.status: STATUS_COMPLETED, ParkingSession.exit_time: now},
                synchronize_session=False)
    )
    slots_freed = (
        db.query(ParkingSlot)
        .filter(ParkingSlot.is_occupied == True)  # noqa: E712
        .update({ParkingSlot.is_occupied: False}, synchronize_session=False)
    )
    vehicles_removed = 0
    if purge_vehicles:
        db.query(ParkingSession).delete(synchronize_session=False)
        vehicles_removed = db.query(Vehicle).delete(synchronize_session=False)
    db.commit()

    logger.info(f"[AutoClear] Closed {sessions_closed} sessions, freed {slots_freed} slots, "
                f"removed {vehicles_removed} vehicles")
    return {
        "sessions_closed": sessions_closed,
        "slots_freed": slots_freed,
        "vehicles_removed": vehicles_removed,
    }


class AutoClearScheduler:
    def __init__(self, session_factory=SessionLocal, run_at: Optional[time] = None,
                 job_name: str = JOB_NAME, purge_vehicles: Optional[bool] = None):
        self.session_factory = session_factory
        self.run_at = run_at or settings.auto_clear_at
        self.job_name = job_name
        self.purge_vehicles = settings.AUTO_CLEAR_PURGE_VEHICLES if purge_vehicles is None else purge_vehicles
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def next_run_after(self, now: datetime) -> datetime:
        """Today's trigger if it is still ahead, otherwise tomorrow's."""
        candidate = datetime.combine(now.date(), self.run_at)
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate

    def claim(self, db: Session, now: datetime) -> bool:
        """Record today as run. False if this job already ran today."""
        today: date = now.date()
        claimed = (
            db.query(SchedulerRun)
            .filter(SchedulerRun.job_name == self.job_name, SchedulerRun.last_run_on < today)
            .update({SchedulerRun.last_run_on: today, SchedulerRun.last_run_at: now},
                    synchronize_session=False)
        )
        if not claimed:
            if db.query(SchedulerRun.job_name).filter(SchedulerRun.job_name == self.job_name).first():
                db.rollback()
                return False
            db.add(SchedulerRun(job_name=self.job_name, last_run_on=today, last_run_at=now))
        try:
            db.commit()
        except IntegrityError:
            # Another worker inserted the first-ever marker concurrently
            db.rollback()
            return False
        return True

    def run_once(self, now: Optional[datetime] = None) -> bool:
        """Fire the clear if today's run is not yet claimed. Returns True if it cleared."""
        now = now or datetime.now()
        db = self.session_factory()
        try:
            if not self.claim(db, now):
                logger.info(f"[AutoClear] {self.job_name} already ran on {now.date()} — skipped")
                return False
            try:
                clear_parking(db, purge_vehicles=self.purge_vehicles)
            except Exception as e:
                db.rollback()
                logger.error(f"[AutoClear] Clear failed, will not retry today: {e}", exc_info=True)
                return False
            return True
        finally:
            db.close()

    async def _loop(self):
        while True:
            now = datetime.now()
            next_run = self.next_run_after(now)
            logger.info(f"[AutoClear] Next run at {next_run:%Y-%m-%d %H:%M}")
            await asyncio.sleep((next_run - now).total_seconds())
            try:
                await asyncio.to_thread(self.run_once)
            except Exception as e:
                logger.error(f"[AutoClear] Run aborted: {e}", exc_info=True)

    def start(self):
        """Spawn the scheduler task on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=f"scheduler-{self.job_name}")
        logger.info(f"[AutoClear] Scheduler started, daily at {self.run_at:%H:%M}")

    async def stop(self):
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("[AutoClear] Scheduler stopped")
