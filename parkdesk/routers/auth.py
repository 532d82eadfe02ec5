# parkdesk/routers/auth.py
"""Account registration and login."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from parkdesk.database import get_db
from parkdesk.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserOut
from parkdesk.services import auth_service

router = APIRouter()


@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
             summary="Create a staff account")
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    token, user = auth_service.register_user(db, body)
    return {"token": token, "user": UserOut.model_validate(user)}


@router.post("/auth/login", response_model=AuthResponse, summary="Exchange credentials for a bearer token")
def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    client_ip = request.client.host if request.client else None
    token, user = auth_service.login(db, body, ip_address=client_ip)
    return {"token": token, "user": UserOut.model_validate(user)}
