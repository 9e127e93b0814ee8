"""
Deck resolution against the document store.

`build_deck` looks up every requested card with one multi-get and decodes
the snapshots concurrently. Unlike bulk upload, a single bad document is
fatal: a deck is either exactly what was asked for or an error.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable, Mapping

from mtgfail.config import CARDS_COLLECTION
from mtgfail.db.document_store import DocumentSnapshot, DocumentStore
from mtgfail.models.card import CardShort
from mtgfail.models.deck import Deck, DeckCountMap
from mtgfail.models.failure import DecodeError, DocumentFetchError, EmptyResultError, KnownError
from mtgfail.services.normalizer import normalize_name

logger = logging.getLogger(__name__)


async def _decode(snapshot: DocumentSnapshot) -> tuple[str, CardShort]:
    """Decode into a new CardShort, never into a shared target."""
    card = await asyncio.to_thread(snapshot.to_model, CardShort)
    return snapshot.ref.key, card


async def build_deck(
    store: DocumentStore,
    deck_list: Mapping[str, int] | Iterable[str],
) -> Deck:
    """
    Resolve card names into a Deck.

    Args:
        store: Document store holding the "cards" collection
        deck_list: Name -> quantity, or names where repeats count as copies

    Returns:
        Deck with `quantity` copies of every requested card

    Raises:
        DocumentFetchError: If the multi-get fails, nothing is decoded
        DocumentDecodeError: If any document is missing or malformed
    """
    if isinstance(deck_list, Mapping):
        wanted = Counter(dict(deck_list))
    else:
        wanted = Counter(deck_list)

    # Distinct keys only, several display names may share one document
    quantities: dict[str, int] = {}
    for name, qty in wanted.items():
        if qty < 1:
            continue
        key = normalize_name(name)
        quantities[key] = quantities.get(key, 0) + qty

    refs = [store.document(CARDS_COLLECTION, key) for key in quantities]

    try:
        snapshots = await store.get_all(refs)
    except KnownError:
        logger.error("Cannot get cards for %d names", len(refs))
        raise
    except Exception as e:
        logger.error("Cannot get cards for %d names: %s", len(refs), e)
        raise DocumentFetchError("Cannot read card documents", detail=str(e)) from e

    tasks = [asyncio.create_task(_decode(snapshot)) for snapshot in snapshots]

    deck = Deck()
    try:
        for next_done in asyncio.as_completed(tasks):
            key, card = await next_done
            deck.cards.extend([card] * quantities[key])
    except DecodeError as e:
        logger.error("Cannot extract card data: %s (%s)", e, e.detail)
        raise
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        # Collect every outcome so no failed decode outlives the call
        await asyncio.gather(*tasks, return_exceptions=True)

    return deck


def count_cards(deck: Deck) -> DeckCountMap:
    """
    Count copies of each card in a deck.

    Raises:
        EmptyResultError: If the deck has no cards
    """
    if not deck.cards:
        raise EmptyResultError("Deck has no cards")

    counts: DeckCountMap = {}
    for card in deck.cards:
        counts[card.name] = counts.get(card.name, 0) + 1
    return counts
