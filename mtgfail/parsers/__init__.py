from mtgfail.parsers.catalog import Bulk, CatalogParseResult, load_bulk, parse_catalog
from mtgfail.parsers.deck_list import parse_deck_list
from mtgfail.parsers.deckbox import normalize_export

__all__ = [
    "Bulk",
    "CatalogParseResult",
    "load_bulk",
    "normalize_export",
    "parse_catalog",
    "parse_deck_list",
]
