"""Tests for dashboard statistics."""

from unittest.mock import MagicMock
from parkdesk.services import session_service, stats_service


class TestStats:
    def test_counts_reflect_lot_state(self, db, staff, other_staff, make_slot, make_vehicle):
        slots = [make_slot(f"A-0{i}") for i in range(1, 5)]
        mine = make_vehicle(staff, "KA-1")
        make_vehicle(staff, "KA-2")
        theirs = make_vehicle(other_staff, "MH-1")
        session_service.start_session(db, mine.id, slots[0].id, staff)
        session_service.start_session(db, theirs.id, slots[1].id, other_staff)

        stats = stats_service.get_stats(db, staff)

        assert stats["activeSessions"] == 1
        assert stats["totalVehicles"] == 2
        assert stats["availableSlots"] == 2
        assert stats["occupiedSlots"] == 2
        assert stats["totalSlots"] == 4

    def test_available_plus_occupied_is_total(self, db, staff, make_slot, make_vehicle):
        slots = [make_slot(f"B-0{i}") for i in range(1, 4)]
        vehicle = make_vehicle(staff)
        session_id = session_service.start_session(db, vehicle.id, slots[2].id, staff)
        session_service.end_session(db, session_id, staff)
        session_service.start_session(db, vehicle.id, slots[0].id, staff)

        stats = stats_service.get_stats(db, staff)
        assert stats["availableSlots"] + stats["occupiedSlots"] == stats["totalSlots"] == 3

    def test_empty_lot(self, db, staff):
        assert stats_service.get_stats(db, staff) == {
            "activeSessions": 0, "totalVehicles": 0,
            "availableSlots": 0, "occupiedSlots": 0, "totalSlots": 0,
        }

    def test_vehicle_type_counts(self, db, staff, make_vehicle):
        make_vehicle(staff, "C-1", "Car")
        make_vehicle(staff, "C-2", "Car")
        make_vehicle(staff, "B-1", "Bike")
        make_vehicle(staff, "T-1", "Truck")

        assert stats_service.get_vehicle_type_counts(db) == {
            "total": 4, "carCount": 2, "bikeCount": 1, "truckCount": 1, "otherCount": 0,
        }

    def test_missing_groups_default_to_zero(self):
        db = MagicMock()
        db.query.return_value.group_by.return_value.all.return_value = [("Bike", 3)]
        counts = stats_service.get_vehicle_type_counts(db)
        assert counts["bikeCount"] == 3
        assert counts["carCount"] == 0
        assert counts["total"] == 3
