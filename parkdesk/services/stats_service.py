# parkdesk/services/stats_service.py
"""
Dashboard counts, derived from current table state. Read-only.
Counts taken during in-flight entries/exits may not add up exactly;
slot counts come from a single grouped query so they always do.
"""

from sqlalchemy import func
from sqlalchemy.orm import Session
from parkdesk.models.parking_session import ParkingSession, STATUS_ACTIVE
from parkdesk.models.parking_slot import ParkingSlot
from parkdesk.models.vehicle import Vehicle
from parkdesk.services.auth_service import TokenUser
from parkdesk.services.session_service import owned_by


def get_stats(db: Session, user: TokenUser) -> dict:
    active_sessions = owned_by(
        db.query(func.count(ParkingSession.id)).filter(ParkingSession.status == STATUS_ACTIVE),
        ParkingSession, user,
    ).scalar()
    total_vehicles = owned_by(db.query(func.count(Vehicle.id)), Vehicle, user).scalar()

    by_state = dict(
        db.query(ParkingSlot.is_occupied, func.count(ParkingSlot.id))
        .group_by(ParkingSlot.is_occupied)
        .all()
    )
    available = by_state.get(False, 0)
    occupied = by_state.get(True, 0)

    return {
        "activeSessions": active_sessions or 0,
        "totalVehicles": total_vehicles or 0,
        "availableSlots": available,
        "occupiedSlots": occupied,
        "totalSlots": available + occupied,
    }


def get_vehicle_type_counts(db: Session) -> dict:
    """Vehicles currently on record, broken down by type."""
    counts = dict(
        db.query(Vehicle.vehicle_type, func.count(Vehicle.id))
        .group_by(Vehicle.vehicle_type)
        .all()
    )
    return {
        "total": sum(counts.values()),
        "carCount": counts.get("Car", 0),
        "bikeCount": counts.get("Bike", 0),
        "truckCount": counts.get("Truck", 0),
        "otherCount": counts.get("Other", 0),
    }
