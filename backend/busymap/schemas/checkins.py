"""Schemas for check-ins."""

from datetime import datetime

from pydantic import Field, model_validator

from busymap.schemas.common import CamelModel


class CheckinCreate(CamelModel):
    """Schema for reporting presence at a location."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    venue_id: str | None = None
    user_id: str | None = Field(default=None, max_length=128)
    session_id: str | None = Field(default=None, max_length=128)
    is_anonymous: bool = False

    @model_validator(mode="after")
    def require_identity(self) -> "CheckinCreate":
        """Anonymous check-ins need a session id, others a user id."""
        if self.is_anonymous and not self.session_id:
            raise ValueError("Anonymous check-ins require a session_id")
        if not self.is_anonymous and not self.user_id:
            raise ValueError("Check-ins require a user_id unless anonymous")
        return self


class CheckinResponse(CamelModel):
    """Response schema for a check-in."""

    id: str
    venue_id: str | None = None
    latitude: float
    longitude: float
    is_anonymous: bool
    created_at: datetime
