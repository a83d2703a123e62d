from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Protocol

from appointment_desk.schemas.appointment import (
    AppointmentListResult,
    AppointmentRecord,
    AppointmentStatus,
)
from appointment_desk.services.exceptions import ServiceError
from appointment_desk.services.notifications import Notifier
from appointment_desk.services.results import ErrorKind, Result, classify, error_message
from appointment_desk.services.store import CollectionStateStore

logger = logging.getLogger(__name__)

DEFAULT_FETCH_ERROR = "An error occurred while fetching appointments"
NON_SUCCESS_FETCH_ERROR = "Failed to load appointments. Server returned an error."
FETCH_FAILED_NOTICE = "Unable to load appointments"
FETCH_SUCCESS_NOTICE = "Appointments loaded"


class LifecycleState(str, Enum):
    INITIAL = "initial"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


_TRANSITIONS: Dict[LifecycleState, FrozenSet[LifecycleState]] = {
    LifecycleState.INITIAL: frozenset({LifecycleState.LOADING}),
    LifecycleState.LOADING: frozenset(
        {LifecycleState.LOADING, LifecycleState.SUCCESS, LifecycleState.ERROR}
    ),
    LifecycleState.SUCCESS: frozenset({LifecycleState.LOADING}),
    LifecycleState.ERROR: frozenset({LifecycleState.LOADING}),
}


class AppointmentLister(Protocol):
    async def list_by_status(self, status: AppointmentStatus) -> AppointmentListResult: ...


class FetchLifecycleController:
    """Drives ``initial -> loading -> success | error`` around the list call.

    Overlapping fetches are allowed. Each resolved fetch is applied to the
    store as it arrives and the lifecycle settles on the outcome of whichever
    fetch resolves last. With ``discard_stale_responses`` a reply to anything
    but the most recently issued fetch is dropped instead.
    """

    def __init__(
        self,
        gateway: AppointmentLister,
        store: CollectionStateStore,
        notifier: Notifier,
        *,
        status_filter: AppointmentStatus = AppointmentStatus.COMPLETED,
        discard_stale_responses: bool = False,
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._notifier = notifier
        self._status_filter = status_filter
        self._discard_stale = discard_stale_responses
        self._state = LifecycleState.INITIAL
        self._error: Optional[str] = None
        self._issued = 0
        self._in_flight = 0
        self._resolved = 0

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight > 0

    @property
    def has_resolved(self) -> bool:
        """True once any fetch outcome has been applied."""
        return self._resolved > 0

    def _transition(self, target: LifecycleState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise RuntimeError(f"Illegal lifecycle transition {self._state.value} -> {target.value}")
        self._state = target

    async def fetch_all(self) -> Result[List[AppointmentRecord]]:
        self._issued += 1
        token = self._issued
        self._in_flight += 1
        self._transition(LifecycleState.LOADING)
        logger.info("Fetching %s appointments (request %s)", self._status_filter.value, token)
        try:
            result = await self._request()
        finally:
            self._in_flight -= 1

        if self._discard_stale and token != self._issued:
            logger.warning("Discarding stale appointment list for request %s", token)
            return result
        self._apply(result)
        return result

    async def retry(self) -> Result[List[AppointmentRecord]]:
        return await self.fetch_all()

    async def _request(self) -> Result[List[AppointmentRecord]]:
        try:
            reply = await self._gateway.list_by_status(self._status_filter)
        except ServiceError as exc:
            logger.warning("Appointment list request failed: %s", exc)
            return Result.failure(classify(exc), error_message(exc, DEFAULT_FETCH_ERROR))
        except Exception:
            logger.exception("Unexpected error while fetching appointments")
            return Result.failure(ErrorKind.UNEXPECTED, DEFAULT_FETCH_ERROR)
        if reply.status_code != 200:
            logger.warning("Appointment list returned status %s", reply.status_code)
            return Result.failure(ErrorKind.SERVER, NON_SUCCESS_FETCH_ERROR)
        return Result.success(list(reply.appointments))

    def _apply(self, result: Result[List[AppointmentRecord]]) -> None:
        self._resolved += 1
        if result.ok:
            self._store.replace(result.value or [])
            self._notifier.success(FETCH_SUCCESS_NOTICE)
        else:
            self._notifier.error(FETCH_FAILED_NOTICE)

        if self._in_flight > 0 and not self._discard_stale:
            # Another fetch is still running; its outcome decides the state.
            return
        if result.ok:
            self._error = None
            self._transition(LifecycleState.SUCCESS)
        else:
            self._error = result.message
            self._transition(LifecycleState.ERROR)
