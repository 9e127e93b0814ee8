from mtgfail.models.card import Bulk, CardEntry, CardFace, CardShort, ImageUris
from mtgfail.models.deck import Deck, DeckCountMap, DeckList
from mtgfail.models.failure import (
    ApiResponse,
    CatalogFormatError,
    DecodeError,
    DocumentDecodeError,
    DocumentFetchError,
    EmptyResultError,
    FailureDetail,
    FailureKind,
    KnownError,
    NormalizationError,
    OutcomeType,
    PersistenceError,
    TransientFetchError,
    UnsupportedSourceError,
    UploadCancelledError,
    UpstreamStatusError,
)

__all__ = [
    "ApiResponse",
    "Bulk",
    "CardEntry",
    "CardFace",
    "CardShort",
    "CatalogFormatError",
    "Deck",
    "DeckCountMap",
    "DeckList",
    "DecodeError",
    "DocumentDecodeError",
    "DocumentFetchError",
    "EmptyResultError",
    "FailureDetail",
    "FailureKind",
    "ImageUris",
    "KnownError",
    "NormalizationError",
    "OutcomeType",
    "PersistenceError",
    "TransientFetchError",
    "UnsupportedSourceError",
    "UploadCancelledError",
    "UpstreamStatusError",
]
