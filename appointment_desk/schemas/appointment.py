from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

AppointmentId = Union[int, str]


class AppointmentStatus(str, Enum):
    ACCEPTED = "ACCEPTED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    SCHEDULED = "SCHEDULED"


class ServiceInfo(BaseModel):
    id: int
    title: str
    price: Optional[str] = None


class Address(BaseModel):
    state: str
    area: str
    district: str
    landmark: Optional[str] = None


class BookedBy(BaseModel):
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    phone_number: str = Field(alias="phoneNumber")
    email: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class AppointmentRecord(BaseModel):
    id: AppointmentId
    status: AppointmentStatus
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    service: Optional[ServiceInfo] = None
    address: Optional[Address] = None
    booked_by: BookedBy = Field(alias="bookedBy")

    model_config = ConfigDict(populate_by_name=True)


class AppointmentListResponse(BaseModel):
    """Body of the list endpoint; ``allAppointments`` may be missing or null."""

    all_appointments: Optional[List[AppointmentRecord]] = Field(default=None, alias="allAppointments")
    message: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class AppointmentListResult(BaseModel):
    status_code: int
    appointments: List[AppointmentRecord] = Field(default_factory=list)


class AppointmentDeleteResult(BaseModel):
    status_code: int
    message: Optional[str] = None
