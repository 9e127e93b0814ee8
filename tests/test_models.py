import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from mtgfail.main import app
from mtgfail.models.card import CardEntry, CardShort
from mtgfail.models.deck import Deck, DeckList
from mtgfail.models.failure import (
    ApiResponse,
    CatalogFormatError,
    DecodeError,
    DocumentFetchError,
    FailureKind,
    OutcomeType,
    TransientFetchError,
    UploadCancelledError,
)


class TestCardEntry:
    def test_set_alias(self, make_record) -> None:
        entry = CardEntry.model_validate(make_record("Opt", set="xln"))

        assert entry.set_code == "xln"
        assert entry.to_document()["set"] == "xln"

    def test_keeps_unknown_feed_fields(self, make_record) -> None:
        entry = CardEntry.model_validate(make_record("Opt", artist="Tyler Jacobson"))

        assert entry.to_document()["artist"] == "Tyler Jacobson"

    def test_immutable(self, make_record) -> None:
        entry = CardEntry.model_validate(make_record("Opt"))

        with pytest.raises(ValidationError):
            entry.name = "Shock"  # type: ignore[misc]


class TestCardShort:
    def test_projects_catalog_document(self, make_record) -> None:
        card = CardShort.model_validate(make_record("Lightning Bolt"))

        assert card.cost == "{R}"
        assert card.set_code == "lea"
        assert card.image.startswith("https://cards.scryfall.io/normal/")

    def test_multi_faced_card(self) -> None:
        card = CardShort.model_validate(
            {
                "name": "Fire // Ice",
                "card_faces": [
                    {"name": "Fire", "mana_cost": "{1}{R}", "image_uris": {"normal": "fire.jpg"}},
                    {"name": "Ice", "mana_cost": "{1}{U}"},
                ],
            }
        )

        assert card.cost == "{1}{R} // {1}{U}"
        assert card.image == "fire.jpg"

    def test_serializes_set_key(self) -> None:
        card = CardShort(name="Opt", set_code="xln")

        assert card.model_dump(by_alias=True)["set"] == "xln"


class TestDecks:
    def test_deck_length(self) -> None:
        deck = Deck(cards=[CardShort(name="Opt"), CardShort(name="Opt")])

        assert len(deck) == 2

    def test_deck_list_totals(self) -> None:
        deck_list = DeckList(cards={"Opt": 4}, sideboard={"Negate": 2, "Opt": 1})

        assert deck_list.maindeck_count() == 4
        assert deck_list.all_cards() == {"Opt": 5, "Negate": 2}


class TestErrors:
    def test_status_codes(self) -> None:
        assert TransientFetchError("down").status_code == 503
        assert DocumentFetchError("down").status_code == 503
        assert DecodeError("bad").status_code == 422
        assert CatalogFormatError("bad").status_code == 502
        assert UploadCancelledError("stop").status_code == 499

    def test_status_code_override(self) -> None:
        assert DecodeError("bad", status_code=400).status_code == 400

    def test_to_response(self) -> None:
        response = DocumentFetchError("Cannot get documents", detail="timeout").to_response()

        assert response.outcome == OutcomeType.KNOWN_FAILURE
        assert response.failure is not None
        assert response.failure.kind == FailureKind.SERVICE_UNAVAILABLE
        assert response.failure.detail == "timeout"

    def test_unknown_failure_hides_message(self) -> None:
        response = ApiResponse.unknown_failure(RuntimeError("secret"))

        assert response.failure is not None
        assert "secret" not in response.failure.message
        assert response.failure.detail == "RuntimeError"


class TestExceptionHandlers:
    def test_unexpected_error_becomes_unknown_failure(self) -> None:
        @app.get("/_boom")
        async def boom() -> None:
            raise RuntimeError("boom")

        client = TestClient(app, raise_server_exceptions=False)
        try:
            response = client.get("/_boom")
        finally:
            app.router.routes = [r for r in app.router.routes if getattr(r, "path", "") != "/_boom"]

        assert response.status_code == 500
        assert response.json()["outcome"] == "unknown_failure"
