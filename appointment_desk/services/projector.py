"""Search filtering and display formatting for appointment rows."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from appointment_desk.schemas.appointment import Address, AppointmentRecord, BookedBy

NAME_PLACEHOLDER = "N/A"
MISSING_VALUE = "--"


def full_name(booked_by: BookedBy) -> str:
    """Join first and last name with single spaces; empty when both are absent."""

    parts = f"{booked_by.first_name or ''} {booked_by.last_name or ''}".split()
    return " ".join(parts)


def display_name(booked_by: BookedBy) -> str:
    if not booked_by.first_name and not booked_by.last_name:
        return NAME_PLACEHOLDER
    return full_name(booked_by)


def display_email(booked_by: BookedBy) -> str:
    return booked_by.email or MISSING_VALUE


def display_phone(booked_by: BookedBy, prefix: str = "+91") -> str:
    return f"{prefix} {booked_by.phone_number or MISSING_VALUE}".strip()


def display_address(address: Optional[Address]) -> str:
    if address is None:
        return ""
    text = f"{address.area}, {address.district}, {address.state}"
    if address.landmark:
        text += f", Near {address.landmark}"
    return text


def searchable_fields(record: AppointmentRecord) -> Tuple[str, str, str]:
    # The "N/A" placeholder is display-only and never matched against.
    booked_by = record.booked_by
    return (
        full_name(booked_by).lower(),
        (booked_by.email or "").lower(),
        (booked_by.phone_number or "").lower(),
    )


def matches(record: AppointmentRecord, query: str) -> bool:
    needle = query.lower()
    if not needle:
        return True
    return any(needle in field for field in searchable_fields(record))


def project(records: Iterable[AppointmentRecord], query: str) -> List[AppointmentRecord]:
    """Return the records matching ``query`` in their original order."""

    return [record for record in records if matches(record, query)]


class FilterProjector:
    """Caches the last projection, keyed by store version and query."""

    def __init__(self) -> None:
        self._key: Optional[Tuple[int, str]] = None
        self._result: List[AppointmentRecord] = []

    def project(
        self, records: Iterable[AppointmentRecord], query: str, *, version: Optional[int] = None
    ) -> List[AppointmentRecord]:
        if version is None:
            return project(records, query)
        key = (version, query)
        if key != self._key:
            self._result = project(records, query)
            self._key = key
        return list(self._result)
