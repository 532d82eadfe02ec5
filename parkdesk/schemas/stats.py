# parkdesk/schemas/stats.py
from pydantic import BaseModel


class StatsOut(BaseModel):
    activeSessions: int
    totalVehicles: int
    availableSlots: int
    occupiedSlots: int
    totalSlots: int


class VehicleTypeCountsOut(BaseModel):
    total: int
    carCount: int
    bikeCount: int
    truckCount: int
    otherCount: int


class ClearResultOut(BaseModel):
    sessions_closed: int
    slots_freed: int
    vehicles_removed: int
