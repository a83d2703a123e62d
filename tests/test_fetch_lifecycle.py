import asyncio
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from appointment_desk.schemas.appointment import (
    AppointmentListResult,
    AppointmentRecord,
    AppointmentStatus,
    BookedBy,
)
from appointment_desk.services.exceptions import (
    ServerError,
    TransportError,
    UnexpectedError,
)
from appointment_desk.services.fetch import (
    DEFAULT_FETCH_ERROR,
    FETCH_FAILED_NOTICE,
    FETCH_SUCCESS_NOTICE,
    NON_SUCCESS_FETCH_ERROR,
    FetchLifecycleController,
    LifecycleState,
)
from appointment_desk.services.results import ErrorKind
from appointment_desk.services.store import CollectionStateStore


def _record(appointment_id):
    return AppointmentRecord(
        id=appointment_id,
        status="COMPLETED",
        booked_by=BookedBy(phone_number=f"90000000{appointment_id:02d}"),
    )


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))


class StubLister:
    """Returns queued outcomes; exceptions in the queue are raised."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.statuses = []

    async def list_by_status(self, status):
        self.statuses.append(status)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class GatedLister:
    """Each call waits for its own event so tests control resolution order."""

    def __init__(self, outcomes) -> None:
        self.outcomes = list(outcomes)
        self.gates = [asyncio.Event() for _ in self.outcomes]
        self.calls = 0

    async def list_by_status(self, status):
        index = self.calls
        self.calls += 1
        await self.gates[index].wait()
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _ok(*ids):
    return AppointmentListResult(status_code=200, appointments=[_record(i) for i in ids])


def _controller(gateway, store=None, **kwargs):
    store = store or CollectionStateStore()
    notifier = RecordingNotifier()
    return FetchLifecycleController(gateway, store, notifier, **kwargs), store, notifier


def test_controller_starts_in_initial_state() -> None:
    controller, _, _ = _controller(StubLister())

    assert controller.state is LifecycleState.INITIAL
    assert controller.error is None
    assert controller.is_refreshing is False
    assert controller.has_resolved is False


def test_successful_fetch_replaces_collection_wholesale() -> None:
    store = CollectionStateStore()
    store.replace([_record(1), _record(2)])
    controller, store, notifier = _controller(StubLister(_ok(3)), store)

    result = asyncio.run(controller.fetch_all())

    assert result.ok is True
    assert [r.id for r in result.value] == [3]
    assert store.snapshot().ids() == [3]
    assert controller.state is LifecycleState.SUCCESS
    assert controller.error is None
    assert notifier.messages == [("success", FETCH_SUCCESS_NOTICE)]


def test_fetch_uses_configured_status_filter() -> None:
    gateway = StubLister(_ok(), _ok())
    controller, _, _ = _controller(gateway, status_filter=AppointmentStatus.SCHEDULED)

    asyncio.run(controller.fetch_all())

    assert gateway.statuses == [AppointmentStatus.SCHEDULED]


def test_empty_reply_is_success_with_empty_collection() -> None:
    store = CollectionStateStore()
    store.replace([_record(1)])
    controller, store, _ = _controller(StubLister(AppointmentListResult(status_code=200)), store)

    result = asyncio.run(controller.fetch_all())

    assert result.ok is True
    assert store.snapshot().ids() == []
    assert controller.state is LifecycleState.SUCCESS


@pytest.mark.parametrize(
    "failure, kind, message",
    [
        (
            ServerError("Request failed with status code 500", status_code=500, server_message="Database offline"),
            ErrorKind.SERVER,
            "Database offline",
        ),
        (
            ServerError("Request failed with status code 503", status_code=503),
            ErrorKind.SERVER,
            "Request failed with status code 503",
        ),
        (TransportError("timed out"), ErrorKind.TRANSPORT, "timed out"),
        (TransportError(""), ErrorKind.TRANSPORT, DEFAULT_FETCH_ERROR),
        (UnexpectedError("Malformed appointment list received"), ErrorKind.UNEXPECTED, "Malformed appointment list received"),
    ],
)
def test_failed_fetch_keeps_collection_and_reports_error(failure, kind, message) -> None:
    store = CollectionStateStore()
    store.replace([_record(1)])
    controller, store, notifier = _controller(StubLister(failure), store)

    result = asyncio.run(controller.fetch_all())

    assert result.ok is False
    assert result.error_kind is kind
    assert result.message == message
    assert store.snapshot().ids() == [1]
    assert controller.state is LifecycleState.ERROR
    assert controller.error == message
    assert notifier.messages == [("error", FETCH_FAILED_NOTICE)]


def test_non_200_success_status_is_a_server_failure() -> None:
    controller, store, _ = _controller(StubLister(AppointmentListResult(status_code=204)))

    result = asyncio.run(controller.fetch_all())

    assert result.error_kind is ErrorKind.SERVER
    assert controller.state is LifecycleState.ERROR
    assert controller.error == NON_SUCCESS_FETCH_ERROR


def test_retry_after_error_recovers() -> None:
    gateway = StubLister(TransportError("connection refused"), _ok(1, 2))
    controller, store, notifier = _controller(gateway)

    asyncio.run(controller.fetch_all())
    assert controller.state is LifecycleState.ERROR

    result = asyncio.run(controller.retry())

    assert result.ok is True
    assert controller.state is LifecycleState.SUCCESS
    assert controller.error is None
    assert store.snapshot().ids() == [1, 2]
    assert [kind for kind, _ in notifier.messages] == ["error", "success"]


def test_refreshing_flag_tracks_in_flight_fetches() -> None:
    async def scenario():
        gateway = GatedLister([_ok(1)])
        controller, _, _ = _controller(gateway)

        task = asyncio.create_task(controller.fetch_all())
        await asyncio.sleep(0)
        assert controller.state is LifecycleState.LOADING
        assert controller.is_refreshing is True
        assert controller.has_resolved is False

        gateway.gates[0].set()
        await task
        assert controller.is_refreshing is False
        assert controller.has_resolved is True

    asyncio.run(scenario())


def test_overlapping_fetches_last_response_wins() -> None:
    async def scenario():
        gateway = GatedLister([_ok(1), TransportError("timed out")])
        controller, store, notifier = _controller(gateway)

        first = asyncio.create_task(controller.fetch_all())
        second = asyncio.create_task(controller.fetch_all())
        await asyncio.sleep(0)

        # The second call fails first; the first still runs so we stay loading.
        gateway.gates[1].set()
        await second
        assert controller.state is LifecycleState.LOADING
        assert controller.is_refreshing is True

        gateway.gates[0].set()
        await first
        assert controller.state is LifecycleState.SUCCESS
        assert store.snapshot().ids() == [1]
        assert len(notifier.messages) == 2

    asyncio.run(scenario())


def test_stale_responses_are_dropped_when_enabled() -> None:
    async def scenario():
        gateway = GatedLister([_ok(1), _ok(2)])
        controller, store, notifier = _controller(gateway, discard_stale_responses=True)

        older = asyncio.create_task(controller.fetch_all())
        newer = asyncio.create_task(controller.fetch_all())
        await asyncio.sleep(0)

        gateway.gates[1].set()
        await newer
        assert controller.state is LifecycleState.SUCCESS
        assert store.snapshot().ids() == [2]

        gateway.gates[0].set()
        await older
        assert store.snapshot().ids() == [2]
        assert notifier.messages == [("success", FETCH_SUCCESS_NOTICE)]

    asyncio.run(scenario())


def test_unexpected_exception_becomes_error_state() -> None:
    store = CollectionStateStore()
    store.replace([_record(1)])
    controller, store, notifier = _controller(StubLister(KeyError("allAppointments"), _ok(2)), store)

    result = asyncio.run(controller.fetch_all())

    assert result.ok is False
    assert result.error_kind is ErrorKind.UNEXPECTED
    assert result.message == DEFAULT_FETCH_ERROR
    assert controller.state is LifecycleState.ERROR
    assert controller.error == DEFAULT_FETCH_ERROR
    assert controller.is_refreshing is False
    assert store.snapshot().ids() == [1]
    assert notifier.messages == [("error", FETCH_FAILED_NOTICE)]

    assert asyncio.run(controller.retry()).ok is True
    assert controller.state is LifecycleState.SUCCESS
