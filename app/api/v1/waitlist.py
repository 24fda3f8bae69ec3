import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, status

from app.core.errors import DuplicateEmailError, InvalidEmailError, StoreError
from app.models.waitlist import WaitlistEntry
from app.schemas.waitlist import (
    WaitlistCheckResponse,
    WaitlistCreated,
    WaitlistCreateResponse,
    WaitlistEmailRequest,
    WaitlistStats,
    WaitlistStatsResponse,
)
from app.db.session import get_store
from app.services.validation import is_valid_email, normalize_email
from app.services.waitlist_store import WaitlistStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/waitlist", tags=["waitlist"])


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _clean_email(payload: Optional[WaitlistEmailRequest], message: str) -> str:
    raw = payload.email if payload is not None else None
    if not isinstance(raw, str) or not is_valid_email(raw.strip()):
        raise InvalidEmailError(message)
    return normalize_email(raw)


@router.get("/stats", response_model=WaitlistStatsResponse)
async def waitlist_stats(store: WaitlistStore = Depends(get_store)):
    try:
        total = await store.count()
    except StoreError:
        raise StoreError("Failed to get waitlist statistics")
    return WaitlistStatsResponse(
        data=WaitlistStats(totalCount=total, timestamp=utc_timestamp()),
    )


@router.post("", response_model=WaitlistCreateResponse, status_code=status.HTTP_201_CREATED)
async def join_waitlist(
    request: Request,
    payload: Optional[WaitlistEmailRequest] = Body(default=None),
    store: WaitlistStore = Depends(get_store),
):
    email = _clean_email(payload, "Please provide a valid email address")

    entry = WaitlistEntry(
        email=email,
        source=request.app.state.settings.WAITLIST_SOURCE,
        ipAddress=request.client.host if request.client else None,
        userAgent=request.headers.get("user-agent"),
    )
    try:
        # Fast path only; the unique index decides races between callers
        if await store.exists(email):
            raise DuplicateEmailError()
        entry_id = await store.insert(entry)
    except DuplicateEmailError:
        logger.info("Duplicate waitlist signup", extra={"email": email})
        raise
    except StoreError:
        raise StoreError("Internal server error. Please try again later.")

    logger.info("New waitlist entry: %s", email)
    return WaitlistCreateResponse(data=WaitlistCreated(id=entry_id, email=email))


@router.post("/check", response_model=WaitlistCheckResponse)
async def check_email(
    payload: Optional[WaitlistEmailRequest] = Body(default=None),
    store: WaitlistStore = Depends(get_store),
):
    email = _clean_email(payload, "Invalid email format")
    try:
        exists = await store.exists(email)
    except StoreError:
        raise StoreError("Failed to check email")
    return WaitlistCheckResponse(exists=exists)
