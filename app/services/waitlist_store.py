"""
Waitlist store adapter.

All access to the waitlist collection goes through WaitlistStore. Uniqueness
of the normalized email is enforced by the unique index on `email`, never by
an application-level check alone: a duplicate on insert surfaces as
DuplicateEmailError whether or not the caller pre-checked.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from app.core.errors import DuplicateEmailError, StoreError, StoreUnavailableError
from app.models.waitlist import (
    DEFAULT_SORT_FIELD,
    LIST_PROJECTION,
    SORTABLE_FIELDS,
    WaitlistEntry,
)
from app.services.validation import normalize_email

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
# skip is sent to the server as a BSON int64
MAX_SKIP = 2 ** 63 - 1


async def ensure_indexes(collection) -> None:
    # create_index is a no-op when an identical index already exists
    await collection.create_index([("email", ASCENDING)], unique=True)


# ── Listing parameters ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ListParams:
    page: int
    limit: int
    sort_by: str
    sort_order: str   # "asc" | "desc"

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def direction(self) -> int:
        return ASCENDING if self.sort_order == "asc" else DESCENDING

    @classmethod
    def resolve(
        cls,
        page=None,
        limit=None,
        sort_by=None,
        sort_order=None,
    ) -> "ListParams":
        page_num = _to_int(page)
        if page_num is None or page_num < 1:
            page_num = 1

        limit_num = _to_int(limit)
        if limit_num is None or limit_num < 1:
            limit_num = DEFAULT_PAGE_SIZE
        limit_num = min(limit_num, MAX_PAGE_SIZE)
        page_num = min(page_num, MAX_SKIP // limit_num + 1)

        field = sort_by if sort_by in SORTABLE_FIELDS else DEFAULT_SORT_FIELD
        order = "asc" if sort_order == "asc" else "desc"
        return cls(page=page_num, limit=limit_num, sort_by=field, sort_order=order)


def _to_int(value) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _serialize(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "email": doc.get("email"),
        "createdAt": doc.get("createdAt"),
        "source": doc.get("source"),
    }


# ── Adapter ───────────────────────────────────────────────────────────────────

class WaitlistStore:
    def __init__(self, collection):
        self.collection = collection

    async def insert(self, entry: WaitlistEntry) -> str:
        try:
            result = await self.collection.insert_one(entry.to_document())
        except DuplicateKeyError:
            raise DuplicateEmailError()
        except ConnectionFailure as exc:
            logger.error("Insert failed, store unreachable: %s", exc)
            raise StoreUnavailableError()
        except PyMongoError as exc:
            logger.error("Insert failed: %s", exc)
            raise StoreError()
        return str(result.inserted_id)

    async def exists(self, email: str) -> bool:
        doc = await self._call(
            self.collection.find_one({"email": normalize_email(email)}, {"_id": 1})
        )
        return doc is not None

    async def count(self) -> int:
        return await self._call(self.collection.count_documents({}))

    async def list(self, params: ListParams) -> tuple[list[dict], int]:
        total = await self._call(self.collection.count_documents({}))
        cursor = (
            self.collection.find({}, LIST_PROJECTION)
            .sort(params.sort_by, params.direction)
            .skip(params.skip)
            .limit(params.limit)
        )
        docs = await self._call(cursor.to_list(length=params.limit))
        return [_serialize(d) for d in docs], total

    async def _call(self, awaitable):
        try:
            return await awaitable
        except ConnectionFailure as exc:
            logger.error("Store unreachable: %s", exc)
            raise StoreUnavailableError()
        except PyMongoError as exc:
            logger.error("Store query failed: %s", exc)
            raise StoreError()
