# parkdesk/services/session_service.py
"""
Parking session lifecycle: vehicle registration, entry (claim a slot) and exit (free it).

Slot state is derived from sessions: a slot is occupied iff an active session
references it. Every operation that touches both tables does so in a single
transaction, and row locks are always taken slot first, session second
(auto_clear_service follows the same order).

  - start_session: compare-and-swap on parking_slots.is_occupied + session insert
  - end_session:   conditional active→completed update + slot release
  - remove_vehicle_by_number: completes any active session (conditionally, like
    end_session) and releases its slot, then deletes the vehicle
"""

from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from parkdesk.models.parking_session import ParkingSession, STATUS_ACTIVE, STATUS_COMPLETED
from parkdesk.models.parking_slot import ParkingSlot
from parkdesk.models.vehicle import Vehicle
from parkdesk.schemas.parking_slot import SlotCreate
from parkdesk.schemas.vehicle import VehicleCreate
from parkdesk.services.auth_service import TokenUser
from parkdesk.services.exceptions import ConflictError, NotFoundError
from parkdesk.services.notification_service import add_notification
from parkdesk.utils.logger import get_logger

logger = get_logger(__name__)


def owned_by(query, model, user: TokenUser):
    """Restrict a query to the user's rows. Admins see everything."""
    if user.is_admin:
        return query
    return query.filter(model.user_id == user.id)


def _has_active_session(db: Session, vehicle_id: int) -> bool:
    return db.query(ParkingSession.id).filter(
        ParkingSession.vehicle_id == vehicle_id,
        ParkingSession.status == STATUS_ACTIVE,
    ).first() is not None


# ── Vehicles ──────────────────────────────────────────────────────────────────

def list_vehicles(db: Session, user: TokenUser):
    q = owned_by(db.query(Vehicle), Vehicle, user)
    return q.order_by(Vehicle.created_at.desc(), Vehicle.id.desc()).all()


def register_vehicle(db: Session, body: VehicleCreate, user: TokenUser) -> Vehicle:
    existing = db.query(Vehicle.id).filter(Vehicle.vehicle_number == body.vehicle_number).first()
    if existing:
        logger.warning(f"[Vehicle] Duplicate registration for {body.vehicle_number}")
        raise ConflictError("Vehicle already registered")

    vehicle = Vehicle(
        vehicle_number=body.vehicle_number,
        vehicle_type=body.vehicle_type,
        model=body.model,
        color=body.color,
        owner_name=body.owner_name,
        phone_number=body.phone_number,
        user_id=user.id,
        created_at=datetime.utcnow(),
    )
    db.add(vehicle)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Vehicle already registered")
    db.refresh(vehicle)
    logger.info(f"[Vehicle] Registered {vehicle.vehicle_number} ({vehicle.vehicle_type}) for user {user.id}")
    return vehicle


def remove_vehicle_by_number(db: Session, vehicle_number: str, user: TokenUser) -> None:
    """Delete a vehicle and its session history, releasing its slot if it is parked."""
    vehicle = owned_by(
        db.query(Vehicle).filter(Vehicle.vehicle_number == vehicle_number), Vehicle, user
    ).first()
    if not vehicle:
        raise NotFoundError("Vehicle not found")

    active = db.query(ParkingSession).filter(
        ParkingSession.vehicle_id == vehicle.id,
        ParkingSession.status == STATUS_ACTIVE,
    ).first()
    if active:
        active_id, slot_id = active.id, active.slot_id
        db.query(ParkingSlot.id).filter(ParkingSlot.id == slot_id).with_for_update().first()
        closed = (
            db.query(ParkingSession)
            .filter(ParkingSession.id == active_id, ParkingSession.status == STATUS_ACTIVE)
            .update({ParkingSession.exit_time: datetime.utcnow(),
                     ParkingSession.status: STATUS_COMPLETED}, synchronize_session=False)
        )
        # Exited meanwhile: the slot may already belong to another session
        if closed == 1:
            db.query(ParkingSlot).filter(ParkingSlot.id == slot_id).update(
                {ParkingSlot.is_occupied: False}, synchronize_session=False
            )
            logger.info(f"[Session] Session {active_id} released slot {slot_id} on vehicle removal")

    db.query(ParkingSession).filter(ParkingSession.vehicle_id == vehicle.id).delete(synchronize_session=False)
    deleted = db.query(Vehicle).filter(Vehicle.id == vehicle.id).delete(synchronize_session=False)
    if not deleted:
        # Cleared by auto-clear between our read and delete
        db.rollback()
        raise NotFoundError("Vehicle not found")
    db.commit()
    logger.info(f"[Vehicle] Removed {vehicle_number}")


# ── Slots ─────────────────────────────────────────────────────────────────────

def list_slots(db: Session):
    return db.query(ParkingSlot).order_by(ParkingSlot.slot_number).all()


def list_available_slots(db: Session, slot_type: str = None):
    q = db.query(ParkingSlot).filter(ParkingSlot.is_occupied == False)  # noqa: E712
    if slot_type:
        q = q.filter(ParkingSlot.slot_type == slot_type)
    return q.order_by(ParkingSlot.slot_number).all()


def create_slot(db: Session, body: SlotCreate) -> ParkingSlot:
    if db.query(ParkingSlot.id).filter(ParkingSlot.slot_number == body.slot_number).first():
        raise ConflictError(f"Slot {body.slot_number} already exists")
    slot = ParkingSlot(slot_number=body.slot_number, slot_type=body.slot_type, is_occupied=False)
    db.add(slot)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Slot {body.slot_number} already exists")
    db.refresh(slot)
    logger.info(f"[Slot] Created {slot.slot_number} ({slot.slot_type})")
    return slot


# ── Sessions ──────────────────────────────────────────────────────────────────

def list_active_sessions(db: Session, user: TokenUser) -> list[dict]:
    """Active sessions joined with vehicle and slot details, newest entry first."""
    q = (
        db.query(ParkingSession, Vehicle.vehicle_number, Vehicle.vehicle_type, ParkingSlot.slot_number)
        .join(Vehicle, ParkingSession.vehicle_id == Vehicle.id)
        .join(ParkingSlot, ParkingSession.slot_id == ParkingSlot.id)
        .filter(ParkingSession.status == STATUS_ACTIVE)
    )
    rows = owned_by(q, ParkingSession, user).order_by(ParkingSession.entry_time.desc()).all()
    return [
        {
            "id": s.id,
            "vehicle_id": s.vehicle_id,
            "slot_id": s.slot_id,
            "user_id": s.user_id,
            "entry_time": s.entry_time,
            "exit_time": s.exit_time,
            "status": s.status,
            "vehicle_number": vehicle_number,
            "vehicle_type": vehicle_type,
            "slot_number": slot_number,
        }
        for s, vehicle_number, vehicle_type, slot_number in rows
    ]


def start_session(db: Session, vehicle_id: int, slot_id: int, user: TokenUser) -> int:
    """
    Park a vehicle in a slot. Returns the new session id.

    The slot is claimed with a conditional UPDATE (only if currently free), so
    of two concurrent requests for the same slot exactly one sees a row count
    of 1. The loser rolls back without having written anything.
    """
    slot = db.query(ParkingSlot).filter(ParkingSlot.id == slot_id).first()
    if not slot:
        raise NotFoundError("Slot not found")
    slot_number = slot.slot_number

    vehicle = owned_by(db.query(Vehicle).filter(Vehicle.id == vehicle_id), Vehicle, user).first()
    if not vehicle:
        raise NotFoundError("Vehicle not found")
    vehicle_number = vehicle.vehicle_number
    owner_id = vehicle.user_id or user.id

    if _has_active_session(db, vehicle_id):
        logger.warning(f"[Session] {vehicle_number} is already parked — entry to {slot_number} rejected")
        raise ConflictError("Vehicle already parked")

    claimed = (
        db.query(ParkingSlot)
        .filter(ParkingSlot.id == slot_id, ParkingSlot.is_occupied == False)  # noqa: E712
        .update({ParkingSlot.is_occupied: True}, synchronize_session=False)
    )
    if claimed != 1:
        db.rollback()
        logger.warning(f"[Session] Slot {slot_number} already occupied — entry of {vehicle_number} rejected")
        raise ConflictError("Slot already occupied")

    session = ParkingSession(
        vehicle_id=vehicle_id,
        slot_id=slot_id,
        user_id=owner_id,
        entry_time=datetime.utcnow(),
        status=STATUS_ACTIVE,
    )
    db.add(session)
    add_notification(db, owner_id, "Vehicle parked",
                     f"{vehicle_number} parked in slot {slot_number}")
    try:
        db.flush()
        session_id = session.id
        db.commit()
    except IntegrityError:
        db.rollback()
        # Vehicle deleted (auto-clear or removal) while we waited on the slot lock
        if db.query(Vehicle.id).filter(Vehicle.id == vehicle_id).first() is None:
            logger.warning(f"[Session] {vehicle_number} was removed during entry to {slot_number}")
            raise NotFoundError("Vehicle not found")
        if _has_active_session(db, vehicle_id):
            raise ConflictError("Vehicle already parked")
        raise ConflictError("Slot already occupied")

    logger.info(f"[Session] #{session_id} started: {vehicle_number} → slot {slot_number}")
    return session_id


def end_session(db: Session, session_id: int, user: TokenUser) -> None:
    """
    Exit a vehicle: complete its session and free the slot.

    Only an active session can be completed; a second exit is a ConflictError
    so it can never free a slot that another session has since claimed.
    A session removed by auto-clear mid-request is reported as NotFoundError.
    """
    session = owned_by(
        db.query(ParkingSession).filter(ParkingSession.id == session_id), ParkingSession, user
    ).first()
    if not session:
        raise NotFoundError("Session not found")
    if session.status != STATUS_ACTIVE:
        raise ConflictError("Session already completed")
    slot_id, owner_id, vehicle_id = session.slot_id, session.user_id, session.vehicle_id

    slot = db.query(ParkingSlot.slot_number).filter(ParkingSlot.id == slot_id).with_for_update().first()
    closed = (
        db.query(ParkingSession)
        .filter(ParkingSession.id == session_id, ParkingSession.status == STATUS_ACTIVE)
        .update({ParkingSession.exit_time: datetime.utcnow(),
                 ParkingSession.status: STATUS_COMPLETED}, synchronize_session=False)
    )
    if closed != 1:
        db.rollback()
        if db.query(ParkingSession.id).filter(ParkingSession.id == session_id).first() is None:
            raise NotFoundError("Session not found")
        raise ConflictError("Session already completed")

    db.query(ParkingSlot).filter(ParkingSlot.id == slot_id).update(
        {ParkingSlot.is_occupied: False}, synchronize_session=False
    )
    vehicle = db.query(Vehicle.vehicle_number).filter(Vehicle.id == vehicle_id).first()
    label = vehicle.vehicle_number if vehicle else f"Vehicle {vehicle_id}"
    slot_label = slot.slot_number if slot else slot_id
    add_notification(db, owner_id, "Vehicle exited", f"{label} left slot {slot_label}")
    db.commit()
    logger.info(f"[Session] #{session_id} completed, slot {slot_label} released")
