from __future__ import annotations

import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.errors import StoreError
from app.db.session import get_store
from app.schemas.waitlist import (
    Pagination,
    Sorting,
    WaitlistListData,
    WaitlistListItem,
    WaitlistListResponse,
)
from app.services.waitlist_store import ListParams, WaitlistStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


# ── Waitlist ──────────────────────────────────────────────────────────────────

# Query values arrive as raw strings: non-numeric or out-of-range values fall
# back to defaults instead of failing the request.
@router.get("/waitlist", response_model=WaitlistListResponse)
async def list_waitlist(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    sortBy: Optional[str] = Query(None),
    sortOrder: Optional[str] = Query(None),
    store: WaitlistStore = Depends(get_store),
):
    params = ListParams.resolve(page=page, limit=limit, sort_by=sortBy, sort_order=sortOrder)
    try:
        entries, total = await store.list(params)
    except StoreError:
        raise StoreError("Failed to get waitlist entries")

    total_pages = math.ceil(total / params.limit)
    return WaitlistListResponse(
        data=WaitlistListData(
            entries=[WaitlistListItem(**e) for e in entries],
            pagination=Pagination(
                currentPage=params.page,
                totalPages=total_pages,
                totalCount=total,
                hasNextPage=params.page < total_pages,
                hasPrevPage=params.page > 1,
                limit=params.limit,
            ),
            sorting=Sorting(sortBy=params.sort_by, sortOrder=params.sort_order),
        ),
    )
