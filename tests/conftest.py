"""Shared fixtures: a throwaway SQLite database per test and a few users."""

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

_TMP = tempfile.mkdtemp(prefix="parkdesk-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_TMP, 'default.db')}")
os.environ.setdefault("LOG_DIR", os.path.join(_TMP, "logs"))
os.environ["AUTO_CLEAR_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "parkdesk-test-secret-0123456789abcdef"

from datetime import datetime

import pytest
from sqlalchemy import func
from sqlalchemy.orm import sessionmaker

from parkdesk.database import create_tables, make_engine
from parkdesk.models.parking_session import ParkingSession, STATUS_ACTIVE
from parkdesk.models.parking_slot import ParkingSlot
from parkdesk.models.user import User
from parkdesk.schemas.parking_slot import SlotCreate
from parkdesk.schemas.vehicle import VehicleCreate
from parkdesk.services import session_service
from parkdesk.services.auth_service import TokenUser


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'parkdesk.db'}")
    create_tables(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def _make_user(db, email, role="user") -> TokenUser:
    user = User(email=email, password_hash="x", full_name=email.split("@")[0],
                role=role, created_at=datetime.utcnow())
    db.add(user)
    db.commit()
    return TokenUser(id=user.id, email=user.email, role=user.role)


@pytest.fixture
def staff(db):
    return _make_user(db, "staff@lot.test")


@pytest.fixture
def other_staff(db):
    return _make_user(db, "other@lot.test")


@pytest.fixture
def admin(db):
    return _make_user(db, "admin@lot.test", role="admin")


@pytest.fixture
def make_slot(db):
    def _make(number="A-01", slot_type="Car"):
        return session_service.create_slot(db, SlotCreate(slot_number=number, slot_type=slot_type))
    return _make


@pytest.fixture
def make_vehicle(db):
    def _make(user, number="KA-01-1234", vehicle_type="Car"):
        return session_service.register_vehicle(
            db, VehicleCreate(vehicle_number=number, vehicle_type=vehicle_type), user
        )
    return _make


def assert_slot_invariant(db):
    """Every slot is occupied iff exactly one active session references it."""
    db.expire_all()
    for slot in db.query(ParkingSlot).all():
        active = db.query(func.count(ParkingSession.id)).filter(
            ParkingSession.slot_id == slot.id, ParkingSession.status == STATUS_ACTIVE
        ).scalar()
        assert active <= 1, f"slot {slot.slot_number} has {active} active sessions"
        assert slot.is_occupied == (active == 1), f"slot {slot.slot_number} flag out of sync"
