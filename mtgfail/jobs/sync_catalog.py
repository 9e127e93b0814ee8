"""
Sync the Scryfall catalog into the document store.

Downloads the catalog, folds it into one document per card name and uploads
it with a bounded worker pool. Run as a standalone script or from a scheduler.
"""

import argparse
import asyncio
import logging

from mtgfail.config import settings
from mtgfail.db.database import get_document_store, init_db
from mtgfail.db.document_store import DocumentStore
from mtgfail.parsers.catalog import parse_catalog
from mtgfail.services.bulk_upload import UploadReport, upload_bulk
from mtgfail.services.catalog import fetch_catalog

logger = logging.getLogger(__name__)


async def run_sync(
    workers: int | None = None,
    store: DocumentStore | None = None,
    cancel: asyncio.Event | None = None,
) -> UploadReport:
    """
    Run one catalog sync.

    Args:
        workers: Upload pool size, defaults to settings.upload_workers
        store: Target store, defaults to the SQL document store
        cancel: Shared cancellation signal for the upload

    Returns:
        UploadReport of the upload
    """
    if workers is None:
        workers = settings.upload_workers
    if store is None:
        await init_db()
        store = get_document_store()

    data = await fetch_catalog()
    parsed = parse_catalog(data, settings.collision_policy)
    # Raw bytes are no longer needed once parsed
    del data

    return await upload_bulk(
        parsed.bulk,
        store,
        workers,
        cancel=cancel,
        write_attempts=settings.upload_write_attempts,
    )


def main() -> None:
    """CLI entry point for running a catalog sync."""
    parser = argparse.ArgumentParser(description="Sync the Scryfall catalog")
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.upload_workers,
        help="Number of concurrent upload workers",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    report = asyncio.run(run_sync(workers=args.workers))
    logger.info("Synced %d of %d cards", report.written, report.total)


if __name__ == "__main__":
    main()
