from __future__ import annotations

import logging
from collections import Counter
from typing import Protocol

from appointment_desk.schemas.appointment import AppointmentDeleteResult, AppointmentId
from appointment_desk.services.exceptions import ServiceError
from appointment_desk.services.notifications import Notifier
from appointment_desk.services.results import ErrorKind, Result, classify
from appointment_desk.services.store import CollectionStateStore

logger = logging.getLogger(__name__)

DELETE_SUCCESS_NOTICE = "Appointment deleted successfully"
DELETE_FAILED_NOTICE = "Failed to delete appointment"
DELETE_ERROR_NOTICE = "An error occurred while deleting the appointment"


class AppointmentDeleter(Protocol):
    async def delete(self, appointment_id: AppointmentId) -> AppointmentDeleteResult: ...


class OptimisticDeleteCoordinator:
    """Deletes one appointment remotely, then commits or keeps it locally.

    The record leaves the store only after the service confirms with a 200.
    Any other outcome keeps the record and reports a generic failure.
    """

    def __init__(
        self,
        gateway: AppointmentDeleter,
        store: CollectionStateStore,
        notifier: Notifier,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._notifier = notifier
        self._attempts: Counter = Counter()

    def is_deleting(self, appointment_id: AppointmentId) -> bool:
        return self._attempts[appointment_id] > 0

    async def delete_by_id(self, appointment_id: AppointmentId) -> Result[None]:
        self._attempts[appointment_id] += 1
        if not self._store.mark_pending(appointment_id):
            logger.info("Appointment %s is not loaded; deleting remotely only", appointment_id)
        try:
            return await self._attempt(appointment_id)
        finally:
            self._attempts[appointment_id] -= 1
            if self._attempts[appointment_id] <= 0:
                del self._attempts[appointment_id]
                self._store.clear_pending(appointment_id)

    async def _attempt(self, appointment_id: AppointmentId) -> Result[None]:
        try:
            reply = await self._gateway.delete(appointment_id)
        except ServiceError as exc:
            logger.warning("Deleting appointment %s failed: %s", appointment_id, exc)
            self._notifier.error(DELETE_ERROR_NOTICE)
            return Result.failure(classify(exc), DELETE_ERROR_NOTICE)
        except Exception:
            logger.exception("Unexpected error while deleting appointment %s", appointment_id)
            self._notifier.error(DELETE_ERROR_NOTICE)
            return Result.failure(ErrorKind.UNEXPECTED, DELETE_ERROR_NOTICE)

        if reply.status_code != 200:
            logger.warning(
                "Deleting appointment %s returned status %s", appointment_id, reply.status_code
            )
            self._notifier.error(DELETE_FAILED_NOTICE)
            return Result.failure(ErrorKind.SERVER, DELETE_FAILED_NOTICE)

        self._store.remove_by_id(appointment_id)
        self._notifier.success(DELETE_SUCCESS_NOTICE)
        return Result.success(None)
