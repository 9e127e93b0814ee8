"""
Deck API endpoints.

Imports deck lists from supported sites and resolves card lists against the
card documents.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from mtgfail.db.database import get_document_store
from mtgfail.db.document_store import DocumentStore
from mtgfail.models.card import CardShort
from mtgfail.models.failure import ApiResponse
from mtgfail.parsers.deck_list import parse_deck_list
from mtgfail.scrapers.deck_sources import fetch_deck_list
from mtgfail.services.deck_resolver import build_deck, count_cards

router = APIRouter(prefix="/decks", tags=["decks"])


class ImportRequest(BaseModel):
    """Request to import a deck hosted on a deck site."""

    url: str = Field(..., description="Deck page URL on tappedout.net or deckbox.org")


class BuildRequest(BaseModel):
    """Request to resolve a card list."""

    cards: dict[str, int] = Field(..., description="Card name -> quantity")


class DeckCountsResponse(BaseModel):
    """Card counts of a resolved deck."""

    cards: dict[str, int]
    total: int
    source_url: str | None = None


class DeckResponse(BaseModel):
    """A resolved deck with its counts."""

    cards: list[CardShort]
    counts: dict[str, int]
    total: int


@router.post("/import", response_model=ApiResponse[DeckCountsResponse])
async def import_deck(
    request: ImportRequest,
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> ApiResponse[DeckCountsResponse]:
    """
    Fetch a deck list from its site and resolve it.

    Unsupported hosts are rejected with 422 before any request is made.
    """
    text = await fetch_deck_list(request.url)
    deck_list = parse_deck_list(text)
    deck = await build_deck(store, deck_list.all_cards())
    counts = count_cards(deck)

    return ApiResponse.success(
        DeckCountsResponse(cards=counts, total=len(deck), source_url=request.url)
    )


@router.post("/build", response_model=ApiResponse[DeckResponse])
async def build(
    request: BuildRequest,
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> ApiResponse[DeckResponse]:
    """Resolve a card list into a deck."""
    deck = await build_deck(store, request.cards)
    counts = count_cards(deck)

    return ApiResponse.success(DeckResponse(cards=deck.cards, counts=counts, total=len(deck)))
