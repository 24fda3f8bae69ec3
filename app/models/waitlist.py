from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.services.validation import normalize_email

# Fields an admin listing may sort on; anything else falls back to DEFAULT_SORT_FIELD
SORTABLE_FIELDS = ("createdAt", "email", "source")
DEFAULT_SORT_FIELD = "createdAt"

# Listing projection — provenance (ipAddress, userAgent) is never returned
LIST_PROJECTION = {"_id": 1, "email": 1, "createdAt": 1, "source": 1}


class WaitlistEntry(BaseModel):
    """One waitlist document, keyed by normalized email."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    email: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="createdAt",
    )
    source: str
    ip_address: Optional[str] = Field(default=None, alias="ipAddress")
    user_agent: Optional[str] = Field(default=None, alias="userAgent")

    @field_validator("email")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_email(value)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)
