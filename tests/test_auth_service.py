"""Unit tests for password handling, tokens and login auditing."""

import jwt
import pytest
from parkdesk.config import settings
from parkdesk.models.user import LoginAttempt
from parkdesk.schemas.user import LoginRequest, RegisterRequest
from parkdesk.services import auth_service
from parkdesk.services.exceptions import AuthenticationError, ConflictError


def register(db, email="kim@lot.test", password="hunter2"):
    return auth_service.register_user(db, RegisterRequest(email=email, password=password, full_name="Kim"))


class TestAuthService:
    def test_password_is_hashed(self, db):
        _, user = register(db)
        assert user.password_hash != "hunter2"

    def test_token_round_trips_identity(self, db):
        token, user = register(db)
        decoded = auth_service.decode_token(token)
        assert (decoded.id, decoded.email, decoded.role) == (user.id, "kim@lot.test", "user")
        assert not decoded.is_admin

    def test_tampered_token_rejected(self, db):
        token, _ = register(db)
        forged = jwt.encode({"id": 1, "email": "x", "role": "admin"}, "wrong-secret-wrong-secret-wrong-secret",
                            algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(jwt.InvalidTokenError):
            auth_service.decode_token(forged)

    def test_token_without_identity_rejected(self):
        token = jwt.encode({"email": "x"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(jwt.InvalidTokenError):
            auth_service.decode_token(token)

    def test_duplicate_email(self, db):
        register(db)
        with pytest.raises(ConflictError):
            register(db)

    def test_every_login_attempt_is_recorded(self, db):
        register(db)
        auth_service.login(db, LoginRequest(email="kim@lot.test", password="hunter2"), ip_address="10.0.0.5")
        with pytest.raises(AuthenticationError):
            auth_service.login(db, LoginRequest(email="kim@lot.test", password="wrong"))
        with pytest.raises(AuthenticationError):
            auth_service.login(db, LoginRequest(email="ghost@lot.test", password="x"))

        attempts = db.query(LoginAttempt).order_by(LoginAttempt.id).all()
        assert [a.success for a in attempts] == [True, False, False]
        assert attempts[0].ip_address == "10.0.0.5"
