from functools import lru_cache

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from appointment_desk.schemas.appointment import AppointmentStatus


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="Appointment Desk")
    gateway_base_url: AnyHttpUrl | None = Field(
        default=None
    )
    gateway_timeout: float = Field(
        default=10.0
    )
    gateway_token: str | None = Field(
        default=None
    )
    use_mock_data: bool = Field(
        default=True
    )
    status_filter: AppointmentStatus = Field(
        default=AppointmentStatus.COMPLETED
    )
    list_path: str = Field(default="/appointment/getallappointement")
    delete_path: str = Field(default="/appointment/deleteappointement/{appointment_id}")
    details_path: str = Field(default="/appointment/{appointment_id}")
    phone_prefix: str = Field(default="+91")
    discard_stale_responses: bool = Field(
        default=False
    )

    model_config = SettingsConfigDict(env_prefix="APPOINTMENT_DESK_", case_sensitive=False)

    @field_validator("status_filter", mode="before")
    def _normalize_status(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
