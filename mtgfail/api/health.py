"""
Liveness and readiness probes.

Readiness means the card document store answers a lookup, not that it
holds a catalog.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from mtgfail.config import CARDS_COLLECTION
from mtgfail.db.database import get_document_store
from mtgfail.db.document_store import DocumentStore
from mtgfail.models.failure import TransientFetchError

router = APIRouter(tags=["health"])

# Never written, only looked up
READY_PROBE_KEY = "__ready__"


class HealthResponse(BaseModel):
    status: str
    store: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Process is up. Does not touch the store."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> HealthResponse:
    """Look up a document in the cards collection; 503 if the store cannot be read."""
    try:
        await store.get(store.document(CARDS_COLLECTION, READY_PROBE_KEY))
    except TransientFetchError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", store="unreachable")
    return HealthResponse(status="ready", store="reachable")
