from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# Required-field checks happen in the use cases so that they answer 400, not 422.
class IntakeRequestSchema(_CamelModel):
    email: str | None = None
    service: str | None = None
    date: str | None = None
    time: str | None = None
    client_name: str | None = Field(default=None, alias="clientName")
    phone: str | None = None
    participants: int | str | None = 1
    notes: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")
    unit_id: int | str | None = Field(default=None, alias="unitId")


class SaveBookingSchema(_CamelModel):
    client_name: str | None = Field(default=None, alias="clientName")
    email: str | None = None
    phone: str | None = None
    service: str | None = None
    participants: int | str | None = None
    date: str | None = None
    time: str | None = None
    status: str | None = None
    notes: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")

    def store_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude={"session_id"})


class StatusUpdateSchema(BaseModel):
    status: str | None = None


class RescheduleSchema(BaseModel):
    date: str | None = None
    time: str | None = None


class PhoneValidationSchema(BaseModel):
    phone: str | None = None


class ContactSchema(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    message: str | None = None
