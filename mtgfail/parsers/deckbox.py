"""
deckbox.org export normalizer.

The export endpoint (https://deckbox.org/sets/<id>/export) serves a small
HTML page with one "qty CardName" per <br>-separated line and the sideboard
under a "Sideboard:" paragraph. This module turns it into the canonical
plain-text list understood by `parse_deck_list`.

Note: Page structure may change; an export with no card lines is rejected.
"""

import html
import logging
import re

from mtgfail.models.failure import NormalizationError
from mtgfail.parsers.deck_list import CARD_LINE

logger = logging.getLogger(__name__)

BODY_PATTERN = re.compile(r"<body[^>]*>(.*?)</body>", re.DOTALL | re.IGNORECASE)
BREAK_PATTERN = re.compile(r"<br\s*/?>|</?p[^>]*>|</?div[^>]*>|</?li[^>]*>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"<[^>]+>")


def normalize_export(body: str) -> str:
    """
    Convert a deckbox export page into canonical text.

    Args:
        body: Raw export response text

    Returns:
        "qty CardName" lines, sideboard after a blank line and "Sideboard" header

    Raises:
        NormalizationError: If no card lines are found
    """
    match = BODY_PATTERN.search(body)
    content = match.group(1) if match else body

    content = BREAK_PATTERN.sub("\n", content)
    content = html.unescape(TAG_PATTERN.sub("", content))

    main: list[str] = []
    sideboard: list[str] = []
    target = main

    for raw in content.splitlines():
        line = " ".join(raw.split())
        if not line:
            continue
        if line.lower().rstrip(":") == "sideboard":
            target = sideboard
            continue

        card = CARD_LINE.match(line)
        if card:
            qty, name = card.groups()
            target.append(f"{int(qty)} {name}")

    if not main and not sideboard:
        logger.debug("deckbox export without card lines: %.200s", body)
        raise NormalizationError(
            "Unexpected deckbox export format",
            detail="no card lines found",
        )

    lines = list(main)
    if sideboard:
        lines += ["", "Sideboard", *sideboard]
    return "\n".join(lines) + "\n"
