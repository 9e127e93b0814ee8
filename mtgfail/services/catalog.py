"""
Catalog download.

Resolves the current default-cards file from Scryfall's bulk-data index and
downloads it.
"""

import logging

import httpx

from mtgfail.config import settings
from mtgfail.models.failure import TransientFetchError, UpstreamStatusError

logger = logging.getLogger(__name__)


async def get_catalog_url(client: httpx.AsyncClient) -> str:
    """
    Fetch the download URL of the configured bulk data type.

    Raises:
        UpstreamStatusError: If the index answers with an error status
        ValueError: If the index lists no such bulk data
    """
    response = await client.get(settings.catalog_index_url)
    if response.status_code != 200:
        raise UpstreamStatusError(
            "Unexpected status from bulk data index",
            upstream_status=response.status_code,
            detail=settings.catalog_index_url,
        )

    for item in response.json()["data"]:
        if item["type"] == settings.catalog_type:
            return str(item["download_uri"])

    raise ValueError(f"Could not find {settings.catalog_type} bulk data URL")


async def fetch_catalog(client: httpx.AsyncClient | None = None) -> bytes:
    """
    Download the catalog JSON.

    Args:
        client: Optional httpx client for connection reuse

    Returns:
        Raw catalog bytes (a JSON array, ~100MB)

    Raises:
        UpstreamStatusError: On a non-200 response
        TransientFetchError: On network failure
    """
    if client is None:
        async with httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            follow_redirects=True,
            timeout=30.0,
        ) as own_client:
            return await fetch_catalog(own_client)

    try:
        url = await get_catalog_url(client)
        logger.info("Downloading catalog from %s", url)

        # Stream download due to file size
        buffer = bytearray()
        async with client.stream("GET", url, timeout=300.0) as response:
            if response.status_code != 200:
                raise UpstreamStatusError(
                    "Unexpected status from catalog download",
                    upstream_status=response.status_code,
                    detail=url,
                )
            async for chunk in response.aiter_bytes(8192):
                buffer.extend(chunk)
    except httpx.TransportError as e:
        logger.error("Get cards failed: %s", e)
        raise TransientFetchError("Cannot download catalog", detail=str(e)) from e

    logger.info("Downloaded %d bytes of catalog data", len(buffer))
    return bytes(buffer)
