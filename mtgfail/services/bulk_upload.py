"""
Bulk upload of catalog entries into the document store.

One producer feeds a bounded queue; a fixed pool of workers drains it and
upserts each entry into the "cards" collection. A failed write is logged and
skipped, the batch always runs to completion unless cancelled.
"""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TypeVar, cast

from mtgfail.config import CARDS_COLLECTION
from mtgfail.db.document_store import DocumentStore
from mtgfail.models.card import Bulk, CardEntry
from mtgfail.models.failure import UploadCancelledError
from mtgfail.services.normalizer import normalize_name

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Queue close marker, one per worker
_CLOSED = object()


@dataclass
class UploadReport:
    """
    Result of a completed bulk upload.

    Attributes:
        total: Entries in the bulk mapping
        written: Successful writes
        failed_keys: Document keys whose write failed
    """

    total: int
    written: int = 0
    failed_keys: list[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        """Entries that were tried, successfully or not."""
        return self.written + len(self.failed_keys)


async def _until_cancelled(aw: Awaitable[T], cancel: asyncio.Event) -> T:
    """
    Await `aw` unless `cancel` is set first.

    Raises:
        UploadCancelledError: If cancel fires before `aw` completes
    """
    work = asyncio.ensure_future(aw)
    stop = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait({work, stop}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (work, stop):
            if not task.done():
                task.cancel()

    if work in done:
        return work.result()
    raise UploadCancelledError("Bulk upload cancelled")


async def upload_bulk(
    bulk: Bulk,
    store: DocumentStore,
    workers: int,
    *,
    cancel: asyncio.Event | None = None,
    write_attempts: int = 1,
) -> UploadReport:
    """
    Write every entry of `bulk` to the "cards" collection.

    Args:
        bulk: Normalized name -> entry
        store: Document store, must be safe for concurrent use
        workers: Number of concurrent writers
        cancel: Shared cancellation signal, polled between and during writes
        write_attempts: Attempts per entry before it is counted as failed

    Returns:
        UploadReport once every entry has been attempted

    Raises:
        ValueError: If workers or write_attempts is below 1
        UploadCancelledError: If cancel is set before or during the upload
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    if write_attempts < 1:
        raise ValueError(f"write_attempts must be at least 1, got {write_attempts}")

    if cancel is None:
        cancel = asyncio.Event()
    if cancel.is_set():
        raise UploadCancelledError("Bulk upload cancelled before dispatch")

    queue: asyncio.Queue[CardEntry | object] = asyncio.Queue(maxsize=workers)
    report = UploadReport(total=len(bulk))

    async def produce() -> None:
        # Not raced against cancel; a blocked put ends when the finally below cancels it
        for entry in bulk.values():
            await queue.put(entry)
        for _ in range(workers):
            await queue.put(_CLOSED)

    async def write(entry: CardEntry) -> None:
        key = normalize_name(entry.name)
        ref = store.document(CARDS_COLLECTION, key)

        for attempt in range(1, write_attempts + 1):
            try:
                await _until_cancelled(store.set(ref, entry.to_document()), cancel)
            except UploadCancelledError:
                raise
            except Exception as e:
                if attempt < write_attempts:
                    logger.debug("Write %d/%d for %r failed: %s", attempt, write_attempts, key, e)
                    continue
                logger.error("Cannot write document %r, skipping: %s", key, e)
                report.failed_keys.append(key)
                return
            report.written += 1
            return

    async def work() -> None:
        while True:
            if cancel.is_set():
                raise UploadCancelledError("Bulk upload cancelled")
            item = await _until_cancelled(queue.get(), cancel)
            if item is _CLOSED:
                return
            await write(cast(CardEntry, item))

    tasks = [asyncio.create_task(produce(), name="bulk-upload-producer")]
    tasks += [asyncio.create_task(work(), name=f"bulk-upload-worker-{i}") for i in range(workers)]

    logger.info("Uploading %d cards with %d workers", report.total, workers)
    try:
        await asyncio.gather(*tasks)
    except UploadCancelledError:
        logger.warning(
            "Bulk upload cancelled after %d of %d entries", report.attempted, report.total
        )
        raise
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    logger.info(
        "Bulk upload complete: %d written, %d failed",
        report.written,
        len(report.failed_keys),
    )
    return report
