"""Tests for the catalog download and sync job."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from mtgfail.jobs.sync_catalog import run_sync
from mtgfail.models.failure import TransientFetchError, UpstreamStatusError
from mtgfail.services.catalog import fetch_catalog

INDEX_URL = "https://api.scryfall.com/bulk-data"
DOWNLOAD_URL = "https://data.scryfall.io/default-cards/default-cards-20261018.json"

INDEX = {
    "data": [
        {"type": "oracle_cards", "download_uri": "https://data.scryfall.io/oracle.json"},
        {"type": "default_cards", "download_uri": DOWNLOAD_URL},
    ]
}


class TestFetchCatalog:
    @respx.mock
    async def test_downloads_default_cards(self) -> None:
        respx.get(INDEX_URL).mock(return_value=httpx.Response(200, json=INDEX))
        respx.get(DOWNLOAD_URL).mock(return_value=httpx.Response(200, content=b"[null]"))

        assert await fetch_catalog() == b"[null]"

    @respx.mock
    async def test_missing_bulk_type(self) -> None:
        respx.get(INDEX_URL).mock(return_value=httpx.Response(200, json={"data": []}))

        with pytest.raises(ValueError, match="default_cards"):
            await fetch_catalog()

    @respx.mock
    async def test_index_error_status(self) -> None:
        respx.get(INDEX_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(UpstreamStatusError):
            await fetch_catalog()

    @respx.mock
    async def test_download_error_status(self) -> None:
        respx.get(INDEX_URL).mock(return_value=httpx.Response(200, json=INDEX))
        respx.get(DOWNLOAD_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(UpstreamStatusError) as exc_info:
            await fetch_catalog()

        assert exc_info.value.upstream_status == 404

    @respx.mock
    async def test_network_error(self) -> None:
        respx.get(INDEX_URL).mock(side_effect=httpx.ConnectError("no route to host"))

        with pytest.raises(TransientFetchError):
            await fetch_catalog()


class TestRunSync:
    async def test_fetch_parse_upload(self, make_store, make_record) -> None:
        catalog = json.dumps(
            [make_record("Lightning Bolt"), None, make_record("Fire // Ice")]
        ).encode()
        store = make_store()

        with patch(
            "mtgfail.jobs.sync_catalog.fetch_catalog",
            new_callable=AsyncMock,
            return_value=catalog,
        ):
            report = await run_sync(workers=2, store=store)

        assert report.total == 2
        assert report.written == 2
        assert set(store.documents) == {("cards", "Lightning Bolt"), ("cards", "Fire  Ice")}

    async def test_store_failures_do_not_fail_sync(self, make_store, make_record) -> None:
        catalog = json.dumps([make_record("Lightning Bolt"), make_record("Opt")]).encode()
        store = make_store(fail_keys=["Opt"])

        with patch(
            "mtgfail.jobs.sync_catalog.fetch_catalog",
            new_callable=AsyncMock,
            return_value=catalog,
        ):
            report = await run_sync(workers=1, store=store)

        assert report.failed_keys == ["Opt"]
        assert report.written == 1
