"""
Name and URL normalization for catalog records.

Card names become document keys, so the split-card separator is removed:
"Fire // Ice" is stored under "Fire  Ice". Scryfall appends the download
timestamp to image URLs as a query string; that suffix is not part of the
resource and is stripped.
"""

from mtgfail.models.card import CardEntry, ImageUris

SPLIT_CARD_SEPARATOR = "//"


def normalize_name(name: str) -> str:
    """Remove every split-card separator from a display name."""
    if SPLIT_CARD_SEPARATOR in name:
        return name.replace(SPLIT_CARD_SEPARATOR, "")
    return name


def strip_query(url: str) -> str:
    """Return the URL up to (not including) the first '?'."""
    return url.split("?", 1)[0]


def normalize_image_uris(uris: ImageUris) -> ImageUris:
    """Strip query strings from every image URL, extras included."""
    data = uris.model_dump()
    return ImageUris.model_validate(
        {key: strip_query(value) if isinstance(value, str) else value for key, value in data.items()}
    )


def normalize_entry(entry: CardEntry) -> CardEntry:
    """
    Return a copy of the entry with clean image URLs on the card and its faces.

    The display name is left as published; use `normalize_name` for keys.
    """
    update: dict[str, object] = {}

    if entry.image_uris is not None:
        update["image_uris"] = normalize_image_uris(entry.image_uris)

    if entry.card_faces:
        update["card_faces"] = [
            face.model_copy(update={"image_uris": normalize_image_uris(face.image_uris)})
            if face.image_uris is not None
            else face
            for face in entry.card_faces
        ]

    if not update:
        return entry
    return entry.model_copy(update=update)
