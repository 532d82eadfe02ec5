# parkdesk/schemas/parking_slot.py
from pydantic import BaseModel, Field
from parkdesk.schemas.vehicle import VehicleType


class SlotCreate(BaseModel):
    slot_number: str = Field(min_length=1)
    slot_type: VehicleType


class SlotOut(BaseModel):
    id: int
    slot_number: str
    slot_type: str
    is_occupied: bool

    class Config:
        from_attributes = True
