"""Small text helpers: truncation, HTML escaping and IRI encoding."""

from __future__ import annotations

from urllib.parse import quote_plus

_IRI_KEEP = "/#%[]=:;$&()+,!?*@'~"

_HTML_REPLACEMENTS = (
    ("&", "&amp;"),
    (">", "&gt;"),
    ("<", "&lt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def ellipsis(text: str, length: int) -> str:
    """Cut ``text`` to ``length`` characters, ending with an ellipsis."""
    if len(text) <= length:
        return text
    if length < 1:
        raise ValueError(f"length must be at least 1, got {length}")
    return text[: length - 1] + "…"


def escape(text: str) -> str:
    """Escape the HTML special characters of ``text``."""
    for char, entity in _HTML_REPLACEMENTS:
        text = text.replace(char, entity)
    return text


def iri_encode(text: str) -> str:
    """Query-escape ``text``, keeping characters that are valid in an IRI."""
    return "".join(
        char if char in _IRI_KEEP else quote_plus(char, safe="") for char in text
    )