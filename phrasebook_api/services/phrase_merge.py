"""
Phrase normalization and merge for the sync push operation.

A stored phrase list and an incoming list are combined into one list that
holds at most one phrase per identity (arabic, english lowercased, category),
with incoming phrases replacing stored ones, newest first.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, Union

from phrasebook_api.schemas.phrase import Phrase

DEFAULT_CATEGORY = "Saved"
DEFAULT_SOURCE = "unknown"
KEY_SEPARATOR = "||"

PhraseLike = Union[Phrase, Mapping[str, Any]]


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-01-01T00:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _coerce_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    # bool is an int subclass but "True" is never a meaningful phrase field
    if isinstance(value, bool):
        return ""
    # JSON numbers: 1.0 reads as "1", the way a JavaScript client would print it
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def normalize_phrase(raw: Any) -> Phrase:
    """
    Coerce a loosely-typed record into a canonical Phrase.

    Missing or wrong-typed text fields become empty strings, ``category``
    falls back to "Saved", ``createdAt`` to the current time and ``source``
    to "unknown". Never raises.
    """
    if isinstance(raw, Phrase):
        raw = raw.to_record()
    elif not isinstance(raw, Mapping):
        raw = {}

    category = _coerce_str(raw.get("category")).strip()
    created_at = _coerce_str(raw.get("createdAt"))
    source = _coerce_str(raw.get("source"))

    return Phrase(
        arabic=_coerce_str(raw.get("arabic")).strip(),
        english=_coerce_str(raw.get("english")).strip(),
        transliteration=_coerce_str(raw.get("transliteration")).strip(),
        category=category or DEFAULT_CATEGORY,
        created_at=created_at or utc_now_iso(),
        source=source or DEFAULT_SOURCE,
    )


def identity_key(phrase: Phrase) -> str:
    """Stable identity of a phrase; english is compared case-insensitively."""
    return KEY_SEPARATOR.join((
        phrase.arabic.strip(),
        phrase.english.strip().lower(),
        phrase.category.strip(),
    ))


def merge_phrases(
    existing: Iterable[PhraseLike],
    incoming: Iterable[PhraseLike],
) -> list[Phrase]:
    """
    Merge a stored phrase list with an incoming one.

    Incoming phrases replace stored phrases with the same identity key as a
    whole record. The result is sorted by ``createdAt`` descending; the sort
    is stable, so ties keep first-insertion order.
    """
    by_key: dict[str, Phrase] = {}

    for raw in existing:
        phrase = normalize_phrase(raw)
        by_key[identity_key(phrase)] = phrase

    for raw in incoming:
        phrase = normalize_phrase(raw)
        by_key[identity_key(phrase)] = phrase

    return sorted(by_key.values(), key=lambda p: p.created_at, reverse=True)
