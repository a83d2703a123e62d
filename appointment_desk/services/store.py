from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Set, Tuple

from appointment_desk.schemas.appointment import AppointmentId, AppointmentRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionSnapshot:
    """Read-only view of the store at one point in time."""

    records: Tuple[AppointmentRecord, ...]
    pending: FrozenSet[AppointmentId]
    version: int

    def ids(self) -> List[AppointmentId]:
        return [record.id for record in self.records]


class CollectionStateStore:
    """Holds the loaded appointments and the ids with a delete in flight.

    Every mutation bumps ``version`` so readers can tell snapshots apart
    without comparing contents.
    """

    def __init__(self) -> None:
        self._records: List[AppointmentRecord] = []
        self._pending: Set[AppointmentId] = set()
        self._version = 0

    def _bump(self) -> None:
        self._version += 1

    def replace(self, records: Iterable[AppointmentRecord]) -> None:
        unique: List[AppointmentRecord] = []
        seen: Set[AppointmentId] = set()
        for record in records:
            if record.id in seen:
                logger.warning("Dropping duplicate appointment id %s", record.id)
                continue
            seen.add(record.id)
            unique.append(record)
        self._records = unique
        # A replacement may drop records whose delete is still running.
        self._pending &= seen
        self._bump()

    def remove_by_id(self, appointment_id: AppointmentId) -> bool:
        remaining = [record for record in self._records if record.id != appointment_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        self._pending.discard(appointment_id)
        self._bump()
        return True

    def contains(self, appointment_id: AppointmentId) -> bool:
        return any(record.id == appointment_id for record in self._records)

    def mark_pending(self, appointment_id: AppointmentId) -> bool:
        if not self.contains(appointment_id):
            return False
        if appointment_id not in self._pending:
            self._pending.add(appointment_id)
            self._bump()
        return True

    def clear_pending(self, appointment_id: AppointmentId) -> None:
        if appointment_id in self._pending:
            self._pending.discard(appointment_id)
            self._bump()

    def is_pending(self, appointment_id: AppointmentId) -> bool:
        return appointment_id in self._pending

    def snapshot(self) -> CollectionSnapshot:
        return CollectionSnapshot(
            records=tuple(self._records),
            pending=frozenset(self._pending),
            version=self._version,
        )
