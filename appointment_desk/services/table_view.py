"""The completed-appointments table: fetch, search and delete in one place."""

from __future__ import annotations

import logging
from typing import List, Optional

from appointment_desk.schemas.appointment import (
    AppointmentId,
    AppointmentRecord,
    AppointmentStatus,
)
from appointment_desk.schemas.view import AppointmentRow, TableViewState
from appointment_desk.services.appointment import AppointmentService
from appointment_desk.services.deletion import OptimisticDeleteCoordinator
from appointment_desk.services.fetch import FetchLifecycleController, LifecycleState
from appointment_desk.services.notifications import (
    LoggingNavigator,
    LoggingNotifier,
    Navigator,
    Notifier,
)
from appointment_desk.services.projector import (
    FilterProjector,
    display_address,
    display_email,
    display_name,
    display_phone,
)
from appointment_desk.services.results import Result
from appointment_desk.services.store import CollectionStateStore

logger = logging.getLogger(__name__)

DEFAULT_DETAILS_PATH = "/appointment/{appointment_id}"
NO_APPOINTMENTS_MESSAGE = "No appointments available"


class AppointmentTableView:
    def __init__(
        self,
        gateway: AppointmentService,
        *,
        notifier: Notifier | None = None,
        navigator: Navigator | None = None,
        status_filter: AppointmentStatus = AppointmentStatus.COMPLETED,
        details_path: str = DEFAULT_DETAILS_PATH,
        phone_prefix: str = "+91",
        discard_stale_responses: bool = False,
    ) -> None:
        self.store = CollectionStateStore()
        self.notifier = notifier or LoggingNotifier()
        self.navigator = navigator or LoggingNavigator()
        self.fetcher = FetchLifecycleController(
            gateway,
            self.store,
            self.notifier,
            status_filter=status_filter,
            discard_stale_responses=discard_stale_responses,
        )
        self.deleter = OptimisticDeleteCoordinator(gateway, self.store, self.notifier)
        self._projector = FilterProjector()
        self._details_path = details_path
        self._phone_prefix = phone_prefix
        self.query = ""

    async def start(self) -> Result[List[AppointmentRecord]]:
        logger.info("Loading appointment table")
        return await self.fetcher.fetch_all()

    async def refresh(self) -> Result[List[AppointmentRecord]]:
        return await self.fetcher.fetch_all()

    async def retry(self) -> Result[List[AppointmentRecord]]:
        return await self.fetcher.retry()

    async def delete(self, appointment_id: AppointmentId) -> Result[None]:
        return await self.deleter.delete_by_id(appointment_id)

    def view_details(self, appointment_id: AppointmentId) -> str:
        path = self._details_path.format(appointment_id=appointment_id)
        self.navigator.push(path)
        return path

    def set_query(self, query: Optional[str]) -> None:
        self.query = query or ""

    def clear_query(self) -> None:
        self.query = ""

    def filtered(self) -> List[AppointmentRecord]:
        snapshot = self.store.snapshot()
        return self._projector.project(snapshot.records, self.query, version=snapshot.version)

    def _row(self, serial: int, record: AppointmentRecord, deleting: bool) -> AppointmentRow:
        booked_by = record.booked_by
        return AppointmentRow(
            serial=serial,
            id=record.id,
            name=display_name(booked_by),
            phone=display_phone(booked_by, self._phone_prefix),
            email=display_email(booked_by),
            service_title=record.service.title if record.service else "",
            address=display_address(record.address),
            status=record.status,
            deleting=deleting,
        )

    def render(self) -> TableViewState:
        fetcher = self.fetcher
        lifecycle = fetcher.state.value

        if not fetcher.has_resolved:
            return TableViewState(
                mode="loading",
                lifecycle=lifecycle,
                refreshing=fetcher.is_refreshing,
                query=self.query,
                search_enabled=False,
                refresh_enabled=not fetcher.is_refreshing,
            )

        if fetcher.state is LifecycleState.ERROR:
            return TableViewState(
                mode="error",
                lifecycle=lifecycle,
                refreshing=fetcher.is_refreshing,
                error=fetcher.error,
                query=self.query,
                refresh_enabled=not fetcher.is_refreshing,
            )

        snapshot = self.store.snapshot()
        records = self._projector.project(snapshot.records, self.query, version=snapshot.version)
        rows = [
            self._row(index, record, record.id in snapshot.pending)
            for index, record in enumerate(records, start=1)
        ]
        empty_message = None
        if not rows:
            if self.query:
                empty_message = f'No matching appointments found for "{self.query}"'
            else:
                empty_message = NO_APPOINTMENTS_MESSAGE
        return TableViewState(
            mode="table",
            lifecycle=lifecycle,
            refreshing=fetcher.is_refreshing,
            query=self.query,
            rows=rows,
            total=len(snapshot.records),
            empty_message=empty_message,
            refresh_enabled=not fetcher.is_refreshing,
        )
