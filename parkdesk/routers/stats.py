# parkdesk/routers/stats.py
"""Dashboard statistics."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parkdesk.database import get_db
from parkdesk.dependencies import get_current_user
from parkdesk.schemas.stats import StatsOut, VehicleTypeCountsOut
from parkdesk.services import stats_service
from parkdesk.services.auth_service import TokenUser

router = APIRouter()


@router.get("/stats", response_model=StatsOut, summary="Active sessions, vehicles and slot availability")
def get_stats(db: Session = Depends(get_db), user: TokenUser = Depends(get_current_user)):
    return stats_service.get_stats(db, user)


@router.get("/stats/vehicle-types", response_model=VehicleTypeCountsOut, summary="Vehicles on record by type")
def get_vehicle_type_counts(db: Session = Depends(get_db), user: TokenUser = Depends(get_current_user)):
    return stats_service.get_vehicle_type_counts(db)
