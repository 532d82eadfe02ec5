"""
Initialize database: creates all tables, optionally seeds slots and an admin.
Run once before first launch, or after adding new models.
Usage:
  python scripts/setup/init_db.py
  python scripts/setup/init_db.py --slots Car:A:20 Bike:B:10 --admin admin@lot.local:secret
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import argparse
from datetime import datetime
from sqlalchemy import inspect, text
from werkzeug.security import generate_password_hash

from parkdesk.database import create_tables, engine, SessionLocal
from parkdesk.config import settings
from parkdesk.models.parking_slot import ParkingSlot
from parkdesk.models.user import User
from parkdesk.models.vehicle import VEHICLE_TYPES


def seed_slots(db, definition: str) -> int:
    """definition = TYPE:PREFIX:COUNT, e.g. Car:A:20 → A-01 … A-20."""
    slot_type, prefix, count = definition.split(":")
    if slot_type not in VEHICLE_TYPES:
        raise ValueError(f"Unknown slot type {slot_type!r}, expected one of {VEHICLE_TYPES}")
    created = 0
    for n in range(1, int(count) + 1):
        number = f"{prefix}-{n:02d}"
        if db.query(ParkingSlot.id).filter(ParkingSlot.slot_number == number).first():
            continue
        db.add(ParkingSlot(slot_number=number, slot_type=slot_type, is_occupied=False))
        created += 1
    db.commit()
    return created


def seed_admin(db, credentials: str) -> bool:
    email, password = credentials.split(":", 1)
    if db.query(User.id).filter(User.email == email).first():
        return False
    db.add(User(email=email, password_hash=generate_password_hash(password),
                full_name="Administrator", role="admin", created_at=datetime.utcnow()))
    db.commit()
    return True


def main():
    parser = argparse.ArgumentParser(description="ParkDesk DB initialization")
    parser.add_argument("--slots", nargs="*", default=[], help="TYPE:PREFIX:COUNT, repeatable")
    parser.add_argument("--admin", help="EMAIL:PASSWORD of an admin account to create")
    args = parser.parse_args()

    print("🗄️  ParkDesk DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    db = SessionLocal()
    try:
        for definition in args.slots:
            print(f"🅿️  {definition}: {seed_slots(db, definition)} slots added")
        if args.admin:
            print("👤 Admin created" if seed_admin(db, args.admin) else "👤 Admin already exists")
    finally:
        db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn parkdesk.main:app --host {settings.BACKEND_HOST} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
