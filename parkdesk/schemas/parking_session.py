# parkdesk/schemas/parking_session.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SessionStart(BaseModel):
    vehicle_id: int
    slot_id: int


class SessionStarted(BaseModel):
    id: int
    message: str


class ActiveSessionOut(BaseModel):
    """Session joined with its vehicle and slot, as listed on the dashboard."""
    id: int
    vehicle_id: int
    slot_id: int
    user_id: int
    entry_time: datetime
    exit_time: Optional[datetime]
    status: str
    vehicle_number: str
    vehicle_type: str
    slot_number: str
