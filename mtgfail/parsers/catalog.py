"""
Scryfall catalog parser.

Folds the bulk-data JSON array into a `Bulk` mapping keyed by normalized
card name. Individual bad records never abort the parse; only an
unreadable stream or a non-array top level does.

Bulk data: https://scryfall.com/docs/api/bulk-data
"""

import json
import logging
from dataclasses import dataclass, field
from typing import IO

from pydantic import ValidationError

from mtgfail.config import CollisionPolicy
from mtgfail.models.card import Bulk, CardEntry
from mtgfail.models.failure import CatalogFormatError
from mtgfail.services.normalizer import normalize_entry, normalize_name

logger = logging.getLogger(__name__)


@dataclass
class CatalogParseResult:
    """
    Outcome of a catalog parse.

    Attributes:
        bulk: Normalized name -> entry
        skipped: Feed indexes of null or invalid records
        conflicts: Normalized names seen more than once
    """

    bulk: Bulk = field(default_factory=dict)
    skipped: list[int] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)


def _read(data: bytes | str | IO[bytes]) -> list[object]:
    if hasattr(data, "read"):
        try:
            data = data.read()
        except OSError as e:
            raise CatalogFormatError("Cannot read catalog stream", detail=str(e)) from e

    try:
        records = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogFormatError("Catalog is not valid JSON", detail=str(e)) from e

    if not isinstance(records, list):
        raise CatalogFormatError(
            "Catalog must be a JSON array",
            detail=f"got {type(records).__name__}",
        )
    return records


def parse_catalog(
    data: bytes | str | IO[bytes],
    policy: CollisionPolicy = CollisionPolicy.LAST_WINS,
) -> CatalogParseResult:
    """
    Parse a catalog into a name-keyed mapping.

    Args:
        data: JSON array as bytes, text, or a binary stream
        policy: What to do when two records share a normalized name

    Returns:
        CatalogParseResult with the bulk mapping and skip/conflict bookkeeping

    Raises:
        CatalogFormatError: If the stream cannot be read or is not a JSON array
    """
    records = _read(data)
    result = CatalogParseResult()

    for index, record in enumerate(records):
        if record is None:
            logger.warning("Null catalog entry at index %d, skipping", index)
            result.skipped.append(index)
            continue

        if not isinstance(record, dict):
            logger.warning("Catalog entry at index %d is not an object, skipping", index)
            result.skipped.append(index)
            continue

        try:
            entry = CardEntry.model_validate(record)
        except ValidationError as e:
            logger.warning("Invalid catalog entry at index %d, skipping: %s", index, e)
            result.skipped.append(index)
            continue

        key = normalize_name(entry.name)
        if key in result.bulk:
            result.conflicts.append(key)
            if policy is CollisionPolicy.FIRST_WINS:
                continue
            if policy is CollisionPolicy.REPORT:
                logger.warning("Duplicate catalog name %r at index %d replaces earlier entry", key, index)

        result.bulk[key] = normalize_entry(entry)

    logger.info(
        "Parsed %d catalog entries into %d cards (%d skipped, %d collisions)",
        len(records),
        len(result.bulk),
        len(result.skipped),
        len(result.conflicts),
    )
    return result


def load_bulk(
    data: bytes | str | IO[bytes],
    policy: CollisionPolicy = CollisionPolicy.LAST_WINS,
) -> Bulk:
    """Parse a catalog and return only the name-keyed mapping."""
    return parse_catalog(data, policy).bulk
