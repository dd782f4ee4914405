"""String helpers shared by services and definition helpers."""

import re
import unicodedata

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """
    URL slug for a title: "My Form!" -> "my-form".

    Accents are transliterated to ASCII; every other run of non-alphanumeric
    characters becomes a single hyphen.
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_ALPHANUMERIC.sub("-", ascii_text.lower()).strip("-")


def casefold_key(text: str) -> str:
    """Case- and diacritic-insensitive sort key."""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()
