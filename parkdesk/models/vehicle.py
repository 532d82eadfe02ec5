# parkdesk/models/vehicle.py
"""
Registered vehicles table.
A vehicle belongs to the user who registered it and may hold at most
one active parking session at a time.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from parkdesk.database import Base

VEHICLE_TYPES = ("Car", "Bike", "Truck", "Other")


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_number = Column(String(50), unique=True, nullable=False, index=True)
    vehicle_type = Column(String(20), nullable=False)   # Car | Bike | Truck | Other
    model = Column(String(100))
    color = Column(String(50))
    owner_name = Column(String(200))
    phone_number = Column(String(50))
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Vehicle {self.vehicle_number} type={self.vehicle_type}>"
