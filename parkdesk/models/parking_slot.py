# parkdesk/models/parking_slot.py
"""
Parking slots, the shared resource every session contends for.
is_occupied is only ever flipped by session_service and auto_clear_service.
"""

from sqlalchemy import Column, Integer, String, Boolean
from parkdesk.database import Base


class ParkingSlot(Base):
    __tablename__ = "parking_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_number = Column(String(20), unique=True, nullable=False, index=True)
    slot_type = Column(String(20), nullable=False)      # same values as Vehicle.vehicle_type
    is_occupied = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<ParkingSlot {self.slot_number} type={self.slot_type} occupied={self.is_occupied}>"
