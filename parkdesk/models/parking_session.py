# parkdesk/models/parking_session.py
"""
Parking sessions: one vehicle's continuous occupancy of one slot.
Created active on entry, completed exactly once on exit.
The partial unique indexes back up the service-level checks: a slot and a
vehicle can each appear in at most one active session.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, text
from parkdesk.database import Base

STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"

_ACTIVE_ONLY = text("status = 'active'")


class ParkingSession(Base):
    __tablename__ = "parking_sessions"
    __table_args__ = (
        Index("uq_active_session_slot", "slot_id", unique=True,
              sqlite_where=_ACTIVE_ONLY, postgresql_where=_ACTIVE_ONLY),
        Index("uq_active_session_vehicle", "vehicle_id", unique=True,
              sqlite_where=_ACTIVE_ONLY, postgresql_where=_ACTIVE_ONLY),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    slot_id = Column(Integer, ForeignKey("parking_slots.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    entry_time = Column(DateTime, nullable=False, index=True)
    exit_time = Column(DateTime)
    status = Column(String(20), default=STATUS_ACTIVE, nullable=False, index=True)  # active | completed

    def __repr__(self):
        return f"<ParkingSession {self.id} slot={self.slot_id} vehicle={self.vehicle_id} status={self.status}>"
