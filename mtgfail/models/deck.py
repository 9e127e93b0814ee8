from dataclasses import dataclass, field

from mtgfail.models.card import CardShort

# Card name -> number of copies
DeckCountMap = dict[str, int]


@dataclass
class Deck:
    """
    A resolved deck.

    Attributes:
        cards: One CardShort per physical copy, order is not meaningful
    """

    cards: list[CardShort] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)


@dataclass
class DeckList:
    """
    A deck list parsed from canonical plain text.

    Attributes:
        cards: Maindeck cards {name: quantity}
        sideboard: Sideboard cards {name: quantity}
    """

    cards: dict[str, int] = field(default_factory=dict)
    sideboard: dict[str, int] = field(default_factory=dict)

    def maindeck_count(self) -> int:
        """Total cards in maindeck."""
        return sum(self.cards.values())

    def all_cards(self) -> dict[str, int]:
        """Maindeck and sideboard quantities combined."""
        combined = dict(self.cards)
        for name, qty in self.sideboard.items():
            combined[name] = combined.get(name, 0) + qty
        return combined
