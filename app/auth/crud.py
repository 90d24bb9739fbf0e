# backend/app/auth/crud.py
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext
from pymongo.errors import DuplicateKeyError

from app.auth.errors import ConflictError
from app.database import DELIVERIES, SELLERS, USERS


class PasswordHasher:
    """
    bcrypt through passlib; ``rounds=10`` matches the legacy cost factor.

    Every call runs in the threadpool.
    """

    def __init__(self, rounds: int = 10):
        self.ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(self.ctx.hash, password)

    async def verify(self, plain: str, hashed: Optional[str]) -> bool:
        if not hashed:
            return False
        try:
            return await run_in_threadpool(self.ctx.verify, plain, hashed)
        except ValueError:
            # stored value is not a recognisable hash
            return False

    async def dummy_verify(self) -> None:
        await run_in_threadpool(self.ctx.dummy_verify)


class DocumentStore:
    """One collection of principals keyed by email."""

    def __init__(self, collection, duplicate_message: str):
        self.collection = collection
        self.duplicate_message = duplicate_message

    async def find_by_email(self, email: str) -> Optional[dict]:
        return await self.collection.find_one({"email": email})

    async def find_by_id(self, doc_id: Any) -> Optional[dict]:
        try:
            oid = doc_id if isinstance(doc_id, ObjectId) else ObjectId(doc_id)
        except (InvalidId, TypeError):
            return None
        return await self.collection.find_one({"_id": oid})

    async def create(self, doc: Dict[str, Any]) -> dict:
        doc = dict(doc)
        doc.setdefault("createdAt", datetime.utcnow())
        try:
            res = await self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise ConflictError(self.duplicate_message) from exc
        doc["_id"] = res.inserted_id
        return doc

    async def save(
        self,
        doc_id: ObjectId,
        set_fields: Optional[Dict[str, Any]] = None,
        unset_fields: Iterable[str] = (),
        guard: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Apply one atomic update. ``guard`` adds conditions the document must still meet."""
        query = {"_id": doc_id}
        if guard:
            query.update(guard)

        update: Dict[str, Any] = {}
        if set_fields:
            update["$set"] = dict(set_fields)
        unset = {name: "" for name in unset_fields}
        if unset:
            update["$unset"] = unset
        if not update:
            return False

        res = await self.collection.update_one(query, update)
        return res.matched_count == 1

    async def delete(self, doc_id: ObjectId) -> bool:
        res = await self.collection.delete_one({"_id": doc_id})
        return res.deleted_count == 1


class CredentialStore:
    def __init__(self, db):
        self.users = DocumentStore(db[USERS], "Email already registered")
        self.deliveries = DocumentStore(db[DELIVERIES], "Email already registered as delivery agent")
        self.sellers = DocumentStore(db[SELLERS], "Seller profile already exists for this email")

    async def ensure_indexes(self) -> None:
        for store in (self.users, self.deliveries, self.sellers):
            await store.collection.create_index("email", unique=True)
