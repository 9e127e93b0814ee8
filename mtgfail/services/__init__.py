"""
mtgfail services.

Catalog sync and deck resolution against the document store.
"""

from mtgfail.services.bulk_upload import UploadReport, upload_bulk
from mtgfail.services.catalog import fetch_catalog
from mtgfail.services.deck_resolver import build_deck, count_cards
from mtgfail.services.normalizer import normalize_entry, normalize_name, strip_query

__all__ = [
    "UploadReport",
    "build_deck",
    "count_cards",
    "fetch_catalog",
    "normalize_entry",
    "normalize_name",
    "strip_query",
    "upload_bulk",
]
