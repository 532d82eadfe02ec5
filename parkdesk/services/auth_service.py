# parkdesk/services/auth_service.py
"""
Account registration, login and bearer tokens.
Passwords: werkzeug PBKDF2/scrypt hashes. Tokens: HS256 JWTs carrying {id, email, role}.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash

from parkdesk.config import settings
from parkdesk.models.user import User, LoginAttempt
from parkdesk.schemas.user import RegisterRequest, LoginRequest
from parkdesk.services.exceptions import AuthenticationError, ConflictError
from parkdesk.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class TokenUser:
    id: int
    email: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def issue_token(user: User) -> str:
    claims = {"id": user.id, "email": user.email, "role": user.role}
    if settings.JWT_EXPIRE_MINUTES:
        claims["exp"] = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> TokenUser:
    """Verify a bearer token. Raises jwt.InvalidTokenError on any defect."""
    claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    try:
        return TokenUser(id=int(claims["id"]), email=claims["email"], role=claims.get("role", "user"))
    except (KeyError, TypeError, ValueError) as e:
        raise jwt.InvalidTokenError(f"Malformed token claims: {e}") from e


def register_user(db: Session, body: RegisterRequest) -> Tuple[str, User]:
    if db.query(User.id).filter(User.email == body.email).first():
        logger.warning(f"[Auth] Registration rejected, email taken: {body.email}")
        raise ConflictError("Email already registered")

    user = User(
        email=body.email,
        password_hash=generate_password_hash(body.password),
        full_name=body.full_name,
        phone_number=body.phone_number,
        role="user",
        created_at=datetime.utcnow(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered")
    db.refresh(user)
    logger.info(f"[Auth] Registered user {user.id} ({user.email})")
    return issue_token(user), user


def login(db: Session, body: LoginRequest, ip_address: Optional[str] = None) -> Tuple[str, User]:
    """Check credentials and record the attempt, successful or not."""
    user = db.query(User).filter(User.email == body.email).first()
    success = user is not None and check_password_hash(user.password_hash, body.password)

    db.add(LoginAttempt(
        email=body.email,
        ip_address=body.ip_address or ip_address,
        success=success,
        attempted_at=datetime.utcnow(),
    ))
    db.commit()

    if not success:
        logger.warning(f"[Auth] Failed login for {body.email}")
        raise AuthenticationError("Invalid credentials")
    logger.info(f"[Auth] User {user.id} logged in")
    return issue_token(user), user
