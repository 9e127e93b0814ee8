"""
Canonical plain-text deck list parser.

Format is "qty CardName" per line. A "Sideboard" header or the first blank
line after maindeck cards starts the sideboard, a "Deck" header switches
back to the maindeck. Example:
    4 Lightning Bolt
    4x Monastery Swiftspear (BRO) 144

    Sideboard
    2 Pyroblast
"""

import re

from mtgfail.models.deck import DeckList

# Matches: "4 Lightning Bolt", "4x Lightning Bolt (LEB) 163"
CARD_LINE = re.compile(r"^(\d+)x?\s+(.+?)(?:\s+\([A-Za-z0-9]+\)(?:\s+\S+)?)?$")

SECTION_HEADERS = frozenset({"deck", "maindeck", "main", "commander", "companion"})
SIDEBOARD_HEADERS = frozenset({"sideboard", "sideboard:", "sb:"})


def parse_deck_list(text: str) -> DeckList:
    """
    Parse canonical text into maindeck and sideboard quantities.

    Lines that are neither cards nor known headers are ignored.
    """
    deck = DeckList()
    target = deck.cards

    for raw in text.splitlines():
        line = raw.strip()

        if not line:
            if deck.cards:
                target = deck.sideboard
            continue

        lowered = line.lower()
        if lowered in SIDEBOARD_HEADERS:
            target = deck.sideboard
            continue
        if lowered.rstrip(":") in SECTION_HEADERS:
            target = deck.cards
            continue

        # Tappedout marks sideboard lines with an "SB:" prefix
        if lowered.startswith("sb:"):
            match = CARD_LINE.match(line[3:].strip())
            if match:
                qty, name = match.groups()
                deck.sideboard[name] = deck.sideboard.get(name, 0) + int(qty)
            continue

        match = CARD_LINE.match(line)
        if not match:
            continue
        qty, name = match.groups()
        target[name] = target.get(name, 0) + int(qty)

    return deck
