from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from appointment_desk.schemas.appointment import (
    AppointmentId,
    AppointmentRecord,
    AppointmentStatus,
)
from appointment_desk.services.exceptions import ServerError


def _utc_iso(days_ago: int) -> str:
    moment = datetime(2025, 9, 30, 10, 0, tzinfo=timezone.utc) - timedelta(days=days_ago)
    return moment.isoformat().replace("+00:00", "Z")


_SEED_APPOINTMENTS: List[Dict[str, object]] = [
    {
        "status": "COMPLETED",
        "service": {"id": 11, "title": "Home Deep Cleaning", "price": "2499"},
        "address": {"state": "Karnataka", "area": "Indiranagar", "district": "Bengaluru Urban", "landmark": "Metro Station"},
        "bookedBy": {"firstName": "Asha", "lastName": "Rao", "phoneNumber": "9000000001", "email": "asha.rao@example.com"},
    },
    {
        "status": "COMPLETED",
        "service": {"id": 12, "title": "AC Servicing", "price": "799"},
        "address": {"state": "Maharashtra", "area": "Andheri West", "district": "Mumbai Suburban"},
        "bookedBy": {"firstName": "Vikram", "lastName": None, "phoneNumber": "9000000002", "email": None},
    },
    {
        "status": "COMPLETED",
        "service": {"id": 13, "title": "Plumbing Repair", "price": "499"},
        "address": {"state": "Tamil Nadu", "area": "Adyar", "district": "Chennai", "landmark": "Gandhi Nagar Park"},
        "bookedBy": {"firstName": None, "lastName": None, "phoneNumber": "9000000003", "email": "guest@example.com"},
    },
    {
        "status": "SCHEDULED",
        "service": {"id": 14, "title": "Pest Control", "price": "1299"},
        "address": {"state": "Delhi", "area": "Saket", "district": "South Delhi"},
        "bookedBy": {"firstName": "Meera", "lastName": "Iyer", "phoneNumber": "9000000004", "email": "meera@example.com"},
    },
    {
        "status": "ACCEPTED",
        "service": {"id": 11, "title": "Home Deep Cleaning", "price": "2499"},
        "address": {"state": "Telangana", "area": "Gachibowli", "district": "Hyderabad"},
        "bookedBy": {"firstName": "Rahul", "lastName": "Verma", "phoneNumber": "9000000005", "email": None},
    },
    {
        "status": "CANCELLED",
        "service": {"id": 15, "title": "Sofa Shampooing", "price": "899"},
        "address": {"state": "Karnataka", "area": "Jayanagar", "district": "Bengaluru Urban"},
        "bookedBy": {"firstName": "Priya", "lastName": "Nair", "phoneNumber": "9000000006", "email": "priya.nair@example.com"},
    },
]


class AppointmentRepository:
    """In-memory stand-in for the remote appointment service."""

    def __init__(self, seed: bool = True) -> None:
        self._counter = itertools.count(1)
        self._appointments: Dict[AppointmentId, AppointmentRecord] = {}
        if seed:
            self._seed_defaults()

    def _seed_defaults(self) -> None:
        for days_ago, payload in enumerate(_SEED_APPOINTMENTS, start=1):
            record = dict(payload)
            record["id"] = next(self._counter)
            record["createdAt"] = _utc_iso(days_ago)
            self.add(AppointmentRecord.model_validate(record))

    def add(self, record: AppointmentRecord) -> AppointmentRecord:
        self._appointments[record.id] = record
        return record

    async def list(self, status: AppointmentStatus | None = None) -> List[AppointmentRecord]:
        return [
            record
            for record in self._appointments.values()
            if status is None or record.status == status
        ]

    async def delete(self, appointment_id: AppointmentId) -> AppointmentRecord:
        record = self._appointments.pop(appointment_id, None)
        if record is None:
            raise ServerError(
                "Request failed with status code 404",
                status_code=404,
                server_message="Appointment not found",
            )
        return record


@dataclass
class MockDataStore:
    appointments: AppointmentRepository


_mock_store: Optional[MockDataStore] = None


def get_mock_store() -> MockDataStore:
    global _mock_store
    if _mock_store is None:
        _mock_store = MockDataStore(appointments=AppointmentRepository())
    return _mock_store


def reset_mock_store() -> None:
    global _mock_store
    _mock_store = None
