from __future__ import annotations

import logging

from pydantic import ValidationError

from appointment_desk.clients.gateway import AppointmentGatewayClient
from appointment_desk.schemas.appointment import (
    AppointmentDeleteResult,
    AppointmentId,
    AppointmentListResponse,
    AppointmentListResult,
    AppointmentStatus,
)
from appointment_desk.services.exceptions import ServiceError, UnexpectedError
from appointment_desk.services.mock_store import AppointmentRepository, get_mock_store

logger = logging.getLogger(__name__)

DEFAULT_LIST_PATH = "/appointment/getallappointement"
DEFAULT_DELETE_PATH = "/appointment/deleteappointement/{appointment_id}"


class AppointmentService:
    """List and delete operations of the remote appointment service."""

    def __init__(
        self,
        client: AppointmentGatewayClient,
        *,
        repository: AppointmentRepository | None = None,
        list_path: str = DEFAULT_LIST_PATH,
        delete_path: str = DEFAULT_DELETE_PATH,
    ) -> None:
        self._client = client
        self._repository = repository
        self._list_path = list_path
        self._delete_path = delete_path
        if self._client.use_mock_data:
            self._repository = repository or get_mock_store().appointments

    async def list_by_status(self, status: AppointmentStatus) -> AppointmentListResult:
        logger.info("Listing appointments with status %s", status.value)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock appointment repository not configured")
            return AppointmentListResult(
                status_code=200,
                appointments=await self._repository.list(status),
            )

        try:
            response = await self._client.get(self._list_path, params={"status": status.value})
            body = AppointmentListResponse.model_validate(response.data or {})
            return AppointmentListResult(
                status_code=response.status_code,
                appointments=body.all_appointments or [],
            )
        except ServiceError:
            raise
        except ValidationError as exc:
            logger.exception("Appointment list payload failed validation")
            raise UnexpectedError("Malformed appointment list received", cause=exc) from exc
        except Exception as exc:
            logger.exception("Unexpected error while listing appointments")
            raise UnexpectedError("Failed to list appointments", cause=exc) from exc

    async def delete(self, appointment_id: AppointmentId) -> AppointmentDeleteResult:
        logger.info("Deleting appointment %s", appointment_id)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock appointment repository not configured")
            await self._repository.delete(appointment_id)
            return AppointmentDeleteResult(status_code=200, message="Appointment deleted")

        try:
            path = self._delete_path.format(appointment_id=appointment_id)
        except (KeyError, IndexError, ValueError) as exc:
            raise UnexpectedError("Delete path template is invalid", cause=exc) from exc

        try:
            response = await self._client.get(path)
            message = None
            if isinstance(response.data, dict) and isinstance(response.data.get("message"), str):
                message = response.data["message"]
            return AppointmentDeleteResult(status_code=response.status_code, message=message)
        except ServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error while deleting appointment %s", appointment_id)
            raise UnexpectedError("Failed to delete appointment", cause=exc) from exc
