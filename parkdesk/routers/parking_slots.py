# parkdesk/routers/parking_slots.py
"""Parking slot listing and setup."""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from parkdesk.database import get_db
from parkdesk.dependencies import get_current_user, require_admin
from parkdesk.schemas.parking_slot import SlotCreate, SlotOut
from parkdesk.services import session_service
from parkdesk.services.auth_service import TokenUser

router = APIRouter()


@router.get("/parking-slots", response_model=list[SlotOut], summary="All slots, by slot number")
def list_slots(db: Session = Depends(get_db), user: TokenUser = Depends(get_current_user)):
    return session_service.list_slots(db)


@router.get("/parking-slots/available", response_model=list[SlotOut], summary="Free slots, optionally by type")
def list_available_slots(slot_type: Optional[str] = Query(None, alias="type"),
                         db: Session = Depends(get_db), user: TokenUser = Depends(get_current_user)):
    return session_service.list_available_slots(db, slot_type)


@router.post("/parking-slots", response_model=SlotOut, status_code=status.HTTP_201_CREATED,
             summary="Add a slot (admin)")
def create_slot(body: SlotCreate, db: Session = Depends(get_db), user: TokenUser = Depends(require_admin)):
    return session_service.create_slot(db, body)
