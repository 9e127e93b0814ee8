"""
Card models.

`CardEntry` mirrors one record of Scryfall's default-cards bulk data. Only
the fields the pipeline reads are declared; every other key of the feed is
kept as an extra so the stored document is the full record.

`CardShort` is the projection used inside decks.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class ImageUris(BaseModel):
    """Image URLs keyed by resolution or crop."""

    model_config = ConfigDict(frozen=True, extra="allow")

    small: str = ""
    normal: str = ""
    large: str = ""
    png: str = ""
    art_crop: str = ""
    border_crop: str = ""


class CardFace(BaseModel):
    """One face of a multi-faced card (split, transform, modal DFC...)."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    mana_cost: str = ""
    type_line: str = ""
    oracle_text: str = ""
    colors: list[str] = Field(default_factory=list)
    image_uris: ImageUris | None = None


class CardEntry(BaseModel):
    """
    A single catalog record.

    Attributes:
        id: Scryfall ID of this printing
        oracle_id: ID shared by every printing of the same card
        name: Display name, split cards use "A // B"
        set_code: Set code (serialized as "set")
        cmc: Converted mana cost
        legalities: Format name -> "legal", "not_legal", "banned"...
        card_faces: Present only for multi-faced cards
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: str = ""
    oracle_id: str = ""
    name: str
    set_code: str = Field(default="", alias="set")
    mana_cost: str = ""
    cmc: float = 0.0
    oracle_text: str = ""
    type_line: str = ""
    colors: list[str] = Field(default_factory=list)
    rarity: str = ""
    legalities: dict[str, str] = Field(default_factory=dict)
    image_uris: ImageUris | None = None
    card_faces: list[CardFace] | None = None

    def to_document(self) -> dict[str, Any]:
        """Serialize for the document store, feed key names included."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _representative_image(data: dict[str, Any]) -> str:
    """Pick the normal-size image of a card, falling back to its first face."""
    uris = data.get("image_uris")
    if isinstance(uris, dict) and uris.get("normal"):
        return str(uris["normal"])

    faces = data.get("card_faces")
    if isinstance(faces, list) and faces and isinstance(faces[0], dict):
        face_uris = faces[0].get("image_uris")
        if isinstance(face_uris, dict) and face_uris.get("normal"):
            return str(face_uris["normal"])

    return ""


class CardShort(BaseModel):
    """
    Deck-facing projection of a card.

    Validates from either a stored CardShort body or a full CardEntry
    document (mana_cost -> cost, normal image -> image).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    cost: str = Field(default="", validation_alias=AliasChoices("cost", "mana_cost"))
    cmc: float = 0.0
    image: str = ""
    rarity: str = ""
    set_code: str = Field(
        default="",
        validation_alias=AliasChoices("set", "set_code"),
        serialization_alias="set",
    )
    colors: list[str] = Field(default_factory=list)
    oracle_text: str = ""

    @model_validator(mode="before")
    @classmethod
    def _project_entry(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        projected = dict(data)
        if "image" not in projected:
            projected["image"] = _representative_image(data)

        # Multi-faced cards carry their costs on the faces only
        if "cost" not in projected and not projected.get("mana_cost"):
            faces = data.get("card_faces")
            if isinstance(faces, list):
                costs = [f.get("mana_cost", "") for f in faces if isinstance(f, dict)]
                projected["mana_cost"] = " // ".join(c for c in costs if c)

        return projected


# Normalized card name -> catalog record
Bulk = dict[str, CardEntry]
