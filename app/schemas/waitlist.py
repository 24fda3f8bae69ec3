from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


# Email is validated by the handler so a malformed value renders the
# waitlist-specific 400 message instead of a schema error.
class WaitlistEmailRequest(BaseModel):
    email: Any = None


class WaitlistCreated(BaseModel):
    id: str
    email: str


class WaitlistCreateResponse(BaseModel):
    success: bool = True
    message: str = "Successfully added to waitlist"
    data: WaitlistCreated


class WaitlistCheckResponse(BaseModel):
    success: bool = True
    exists: bool


class WaitlistStats(BaseModel):
    totalCount: int
    timestamp: str


class WaitlistStatsResponse(BaseModel):
    success: bool = True
    data: WaitlistStats


class WaitlistListItem(BaseModel):
    id: str
    email: str
    createdAt: Optional[datetime] = None
    source: Optional[str] = None


class Pagination(BaseModel):
    currentPage: int
    totalPages: int
    totalCount: int
    hasNextPage: bool
    hasPrevPage: bool
    limit: int


class Sorting(BaseModel):
    sortBy: str
    sortOrder: str


class WaitlistListData(BaseModel):
    entries: list[WaitlistListItem]
    pagination: Pagination
    sorting: Sorting


class WaitlistListResponse(BaseModel):
    success: bool = True
    data: WaitlistListData


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str
    database: str
