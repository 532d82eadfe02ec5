# parkdesk/routers/vehicles.py
"""Vehicle registry: list, register, remove, and manual bulk clear."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parkdesk.config import settings
from parkdesk.database import get_db
from parkdesk.dependencies import get_current_user, require_admin
from parkdesk.schemas.stats import ClearResultOut
from parkdesk.schemas.vehicle import VehicleCreate, VehicleOut
from parkdesk.services import session_service
from parkdesk.services.auth_service import TokenUser
from parkdesk.services.auto_clear_service import clear_parking

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List your vehicles")
def list_vehicles(db: Session = Depends(get_db), user: TokenUser = Depends(get_current_user)):
    return session_service.list_vehicles(db, user)


@router.post("/vehicles", response_model=VehicleOut, status_code=status.HTTP_201_CREATED,
             summary="Register a vehicle")
def register_vehicle(body: VehicleCreate, db: Session = Depends(get_db),
                     user: TokenUser = Depends(get_current_user)):
    return session_service.register_vehicle(db, body, user)


@router.delete("/vehicles/{vehicle_number}", summary="Remove a vehicle by number")
def remove_vehicle(vehicle_number: str, db: Session = Depends(get_db),
                   user: TokenUser = Depends(get_current_user)):
    """Removes the vehicle; if it is parked, its session is closed and its slot freed."""
    session_service.remove_vehicle_by_number(db, vehicle_number, user)
    return {"message": "Vehicle removed", "vehicle_number": vehicle_number}


@router.delete("/vehicles", response_model=ClearResultOut, summary="Clear the lot now (same as the daily auto-clear)")
def clear_all_vehicles(db: Session = Depends(get_db), user: TokenUser = Depends(require_admin)):
    return clear_parking(db, purge_vehicles=settings.AUTO_CLEAR_PURGE_VEHICLES)
