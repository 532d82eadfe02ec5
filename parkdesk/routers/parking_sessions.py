# parkdesk/routers/parking_sessions.py
"""Vehicle entry and exit."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from parkdesk.database import get_db
from parkdesk.dependencies import get_current_user
from parkdesk.schemas.parking_session import ActiveSessionOut, SessionStart, SessionStarted
from parkdesk.services import session_service
from parkdesk.services.auth_service import TokenUser

router = APIRouter()


@router.get("/parking-sessions", response_model=list[ActiveSessionOut], summary="Your active sessions")
def list_sessions(db: Session = Depends(get_db), user: TokenUser = Depends(get_current_user)):
    return session_service.list_active_sessions(db, user)


@router.post("/parking-sessions", response_model=SessionStarted, status_code=status.HTTP_201_CREATED,
             summary="Park a vehicle in a slot")
def start_session(body: SessionStart, db: Session = Depends(get_db),
                  user: TokenUser = Depends(get_current_user)):
    session_id = session_service.start_session(db, body.vehicle_id, body.slot_id, user)
    return {"id": session_id, "message": "Parking session started"}


@router.put("/parking-sessions/{session_id}/exit", summary="Exit a parked vehicle")
def exit_session(session_id: int, db: Session = Depends(get_db),
                 user: TokenUser = Depends(get_current_user)):
    session_service.end_session(db, session_id, user)
    return {"message": "Vehicle exited successfully"}
