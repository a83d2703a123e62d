from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from appointment_desk.schemas.appointment import AppointmentId, AppointmentStatus


class AppointmentRow(BaseModel):
    serial: int
    id: AppointmentId
    name: str
    phone: str
    email: str
    service_title: str = ""
    address: str = ""
    status: AppointmentStatus
    deleting: bool = False


class TableViewState(BaseModel):
    mode: Literal["loading", "error", "table"]
    lifecycle: str
    refreshing: bool = False
    error: Optional[str] = None
    query: str = ""
    rows: List[AppointmentRow] = Field(default_factory=list)
    total: int = 0
    empty_message: Optional[str] = None
    search_enabled: bool = True
    refresh_enabled: bool = True


class DeleteOutcome(BaseModel):
    ok: bool
    message: Optional[str] = None
    view: TableViewState


class NavigationIntent(BaseModel):
    redirect: str
