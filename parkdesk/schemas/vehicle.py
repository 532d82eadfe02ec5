# parkdesk/schemas/vehicle.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional

VehicleType = Literal["Car", "Bike", "Truck", "Other"]


class VehicleCreate(BaseModel):
    vehicle_number: str = Field(min_length=1)
    vehicle_type: VehicleType
    model: Optional[str] = None
    color: Optional[str] = None
    owner_name: Optional[str] = None
    phone_number: Optional[str] = None


class VehicleOut(BaseModel):
    id: int
    vehicle_number: str
    vehicle_type: str
    model: Optional[str]
    color: Optional[str]
    owner_name: Optional[str]
    phone_number: Optional[str]
    user_id: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True
