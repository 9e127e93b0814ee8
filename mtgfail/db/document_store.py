"""
Document store.

A minimal key/collection store: per-document get/set plus a batched
multi-get. `SqlDocumentStore` persists JSON bodies through async
SQLAlchemy; every call opens its own session so one store instance can be
shared by many concurrent workers.
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mtgfail.models.db import DocumentDB
from mtgfail.models.failure import DocumentDecodeError, DocumentFetchError, PersistenceError

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class DocumentRef:
    """Address of a document. Building one performs no I/O."""

    collection: str
    key: str


@dataclass(frozen=True)
class DocumentSnapshot:
    """A document's state at read time, before decoding."""

    ref: DocumentRef
    data: dict[str, Any] | None

    @property
    def exists(self) -> bool:
        return self.data is not None

    def to_model(self, model: type[M]) -> M:
        """
        Decode the body into a new instance of `model`.

        Raises:
            DocumentDecodeError: If the document is missing or invalid
        """
        if self.data is None:
            raise DocumentDecodeError(self.ref.key, detail="document does not exist")
        try:
            return model.model_validate(self.data)
        except ValidationError as e:
            raise DocumentDecodeError(self.ref.key, detail=str(e)) from e


class DocumentStore(Protocol):
    """What the sync and deck pipelines need from a store."""

    def document(self, collection: str, key: str) -> DocumentRef: ...

    async def set(self, ref: DocumentRef, data: dict[str, Any]) -> None: ...

    async def get(self, ref: DocumentRef) -> DocumentSnapshot: ...

    async def get_all(self, refs: Sequence[DocumentRef]) -> list[DocumentSnapshot]: ...


async def _get_document(session: AsyncSession, ref: DocumentRef) -> DocumentDB | None:
    result = await session.execute(
        select(DocumentDB).where(
            DocumentDB.collection == ref.collection,
            DocumentDB.key == ref.key,
        )
    )
    return result.scalar_one_or_none()


class SqlDocumentStore:
    """Document store backed by the `documents` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def document(self, collection: str, key: str) -> DocumentRef:
        return DocumentRef(collection=collection, key=key)

    async def set(self, ref: DocumentRef, data: dict[str, Any]) -> None:
        """
        Insert or replace a document body.

        Raises:
            PersistenceError: If the write fails
        """
        try:
            async with self._session_factory() as session:
                existing = await _get_document(session, ref)
                if existing:
                    existing.body = data
                else:
                    session.add(DocumentDB(collection=ref.collection, key=ref.key, body=data))
                await session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(ref.key, detail=str(e)) from e

    async def get(self, ref: DocumentRef) -> DocumentSnapshot:
        snapshots = await self.get_all([ref])
        return snapshots[0]

    async def get_all(self, refs: Sequence[DocumentRef]) -> list[DocumentSnapshot]:
        """
        Fetch many documents at once.

        Returns one snapshot per ref, in ref order. Missing documents yield
        snapshots with `data=None`.

        Raises:
            DocumentFetchError: If the read fails
        """
        keys_by_collection: dict[str, set[str]] = defaultdict(set)
        for ref in refs:
            keys_by_collection[ref.collection].add(ref.key)

        found: dict[DocumentRef, dict[str, Any]] = {}
        try:
            async with self._session_factory() as session:
                for collection, keys in keys_by_collection.items():
                    result = await session.execute(
                        select(DocumentDB).where(
                            DocumentDB.collection == collection,
                            DocumentDB.key.in_(keys),
                        )
                    )
                    for doc in result.scalars():
                        found[DocumentRef(doc.collection, doc.key)] = doc.body
        except SQLAlchemyError as e:
            raise DocumentFetchError("Cannot read documents", detail=str(e)) from e

        return [DocumentSnapshot(ref=ref, data=found.get(ref)) for ref in refs]
