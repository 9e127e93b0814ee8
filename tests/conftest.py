import asyncio
from collections.abc import Sequence
from typing import Any

import pytest

from mtgfail.db.document_store import DocumentRef, DocumentSnapshot
from mtgfail.models.card import CardEntry
from mtgfail.models.failure import PersistenceError


class FakeDocumentStore:
    """In-memory document store that records every call."""

    def __init__(
        self,
        documents: dict[str, dict[str, Any]] | None = None,
        *,
        fail_keys: Sequence[str] = (),
        fail_times: dict[str, int] | None = None,
        write_delay: float = 0.0,
        get_all_error: Exception | None = None,
    ):
        # Keyed by (collection, key); plain keys land in "cards"
        self.documents: dict[tuple[str, str], dict[str, Any]] = {
            ("cards", key): body for key, body in (documents or {}).items()
        }
        self.fail_keys = set(fail_keys)
        self.fail_times = dict(fail_times or {})
        self.write_delay = write_delay
        self.get_all_error = get_all_error
        self.write_attempts: list[str] = []
        self.get_all_calls: list[list[DocumentRef]] = []

    def document(self, collection: str, key: str) -> DocumentRef:
        return DocumentRef(collection=collection, key=key)

    async def set(self, ref: DocumentRef, data: dict[str, Any]) -> None:
        self.write_attempts.append(ref.key)
        if self.write_delay:
            await asyncio.sleep(self.write_delay)
        if ref.key in self.fail_keys:
            raise PersistenceError(ref.key, detail="rejected")
        if self.fail_times.get(ref.key, 0) > 0:
            self.fail_times[ref.key] -= 1
            raise PersistenceError(ref.key, detail="flaky")
        self.documents[(ref.collection, ref.key)] = data

    async def get(self, ref: DocumentRef) -> DocumentSnapshot:
        return (await self.get_all([ref]))[0]

    async def get_all(self, refs: Sequence[DocumentRef]) -> list[DocumentSnapshot]:
        self.get_all_calls.append(list(refs))
        if self.get_all_error is not None:
            raise self.get_all_error
        return [
            DocumentSnapshot(ref=ref, data=self.documents.get((ref.collection, ref.key)))
            for ref in refs
        ]


def card_record(name: str, **overrides: Any) -> dict[str, Any]:
    """A trimmed Scryfall default-cards record."""
    record: dict[str, Any] = {
        "object": "card",
        "id": f"id-{name}",
        "oracle_id": f"oracle-{name}",
        "name": name,
        "lang": "en",
        "set": "lea",
        "set_name": "Limited Edition Alpha",
        "mana_cost": "{R}",
        "cmc": 1.0,
        "type_line": "Instant",
        "oracle_text": "Deal 3 damage to any target.",
        "colors": ["R"],
        "rarity": "common",
        "legalities": {"standard": "not_legal", "legacy": "legal"},
        "image_uris": {
            "small": f"https://cards.scryfall.io/small/{name}.jpg?1559591477",
            "normal": f"https://cards.scryfall.io/normal/{name}.jpg?1559591477",
            "large": f"https://cards.scryfall.io/large/{name}.jpg?1559591477",
            "png": f"https://cards.scryfall.io/png/{name}.png?1559591477",
        },
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_store():
    """Factory for fake document stores."""
    return FakeDocumentStore


@pytest.fixture
def sample_bulk() -> dict[str, CardEntry]:
    """Three catalog entries keyed by name."""
    names = ["Lightning Bolt", "Counterspell", "Dark Ritual"]
    return {name: CardEntry.model_validate(card_record(name)) for name in names}


@pytest.fixture
def make_record():
    """Factory for raw catalog records."""
    return card_record


@pytest.fixture
def sample_arena_export() -> str:
    """Sample Arena deck export for testing."""
    return """Deck
4 Lightning Bolt (LEB) 163
4 Monastery Swiftspear (BRO) 144
20 Mountain (NEO) 290

Sideboard
2 Abrade (VOW) 139"""
