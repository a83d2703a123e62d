from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from appointment_desk.clients.gateway import AppointmentGatewayClient
from appointment_desk.config import Settings, get_settings
from appointment_desk.services import AppointmentService, AppointmentTableView


@lru_cache(maxsize=1)
def get_gateway_client_cached() -> AppointmentGatewayClient:
    settings = get_settings()
    return AppointmentGatewayClient(
        settings.gateway_base_url,
        timeout=settings.gateway_timeout,
        use_mock_data=settings.use_mock_data,
        token=settings.gateway_token,
    )


def get_gateway_client(settings: Settings = Depends(get_settings)) -> AppointmentGatewayClient:
    return get_gateway_client_cached()


def get_appointment_service(
    client: AppointmentGatewayClient = Depends(get_gateway_client),
    settings: Settings = Depends(get_settings),
) -> AppointmentService:
    return AppointmentService(
        client,
        list_path=settings.list_path,
        delete_path=settings.delete_path,
    )


@lru_cache(maxsize=1)
def get_table_view_cached() -> AppointmentTableView:
    settings = get_settings()
    service = get_appointment_service(get_gateway_client_cached(), settings)
    return AppointmentTableView(
        service,
        status_filter=settings.status_filter,
        details_path=settings.details_path,
        phone_prefix=settings.phone_prefix,
        discard_stale_responses=settings.discard_stale_responses,
    )


def get_table_view() -> AppointmentTableView:
    return get_table_view_cached()
