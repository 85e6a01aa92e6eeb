"""
Unit tests for phrase normalization, identity keys and the merge routine
"""
import re

from phrasebook_api.schemas.phrase import Phrase
from phrasebook_api.services.phrase_merge import (
    identity_key,
    merge_phrases,
    normalize_phrase,
)

ISO_MILLIS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def keys(phrases):
    return [identity_key(p) for p in phrases]


def test_normalize_trims_and_fills_defaults():
    phrase = normalize_phrase({"arabic": "  مرحبا ", "english": " Hello  "})

    assert phrase.arabic == "مرحبا"
    assert phrase.english == "Hello"
    assert phrase.transliteration == ""
    assert phrase.category == "Saved"
    assert phrase.source == "unknown"
    assert ISO_MILLIS.match(phrase.created_at)


def test_normalize_blank_category_falls_back_to_saved():
    assert normalize_phrase({"category": "   "}).category == "Saved"
    assert normalize_phrase({"category": " Food "}).category == "Food"


def test_normalize_keeps_existing_timestamp_and_source_untouched():
    phrase = normalize_phrase({
        "english": "Hi",
        "createdAt": "2024-01-01T00:00:00Z",
        "source": "openai",
    })
    assert phrase.created_at == "2024-01-01T00:00:00Z"
    assert phrase.source == "openai"


def test_normalize_coerces_wrong_types_without_raising():
    phrase = normalize_phrase({
        "arabic": None,
        "english": 42,
        "transliteration": ["x"],
        "category": {"name": "Food"},
        "createdAt": "",
        "source": True,
    })
    assert phrase.arabic == ""
    assert phrase.english == "42"
    assert phrase.transliteration == ""
    assert phrase.category == "Saved"
    assert ISO_MILLIS.match(phrase.created_at)
    assert phrase.source == "unknown"


def test_normalize_non_mapping_degrades_to_empty_record():
    phrase = normalize_phrase("not a phrase")
    assert (phrase.arabic, phrase.english, phrase.category) == ("", "", "Saved")


def test_normalize_accepts_phrase_instance():
    original = Phrase(arabic="شكرا", english="Thanks", created_at="2024-01-01T00:00:00Z")
    assert normalize_phrase(original) == original


def test_phrase_serializes_created_at_by_alias():
    record = normalize_phrase({"english": "Hi", "createdAt": "2024-01-01T00:00:00Z"}).to_record()
    assert record["createdAt"] == "2024-01-01T00:00:00Z"
    assert "created_at" not in record


def test_identity_key_is_case_insensitive_for_english_only():
    a = normalize_phrase({"arabic": "شكرا", "english": "Thanks", "category": "Saved"})
    b = normalize_phrase({"arabic": "شكرا", "english": "THANKS ", "category": "Saved"})
    c = normalize_phrase({"arabic": "شكرا", "english": "Thanks", "category": "saved"})

    assert identity_key(a) == "شكرا||thanks||Saved"
    assert identity_key(a) == identity_key(b)
    assert identity_key(a) != identity_key(c)


def test_identity_ignores_transliteration_timestamp_and_source():
    a = normalize_phrase({"english": "Hi", "transliteration": "a", "createdAt": "1", "source": "x"})
    b = normalize_phrase({"english": "Hi", "transliteration": "b", "createdAt": "2", "source": "y"})
    assert identity_key(a) == identity_key(b)


def test_merge_of_two_empty_lists_is_empty():
    assert merge_phrases([], []) == []


def test_merge_output_has_unique_identities_and_keeps_every_identity():
    existing = [
        {"arabic": "نعم", "english": "Yes", "createdAt": "2024-01-03T00:00:00Z"},
        {"arabic": "لا", "english": "No", "createdAt": "2024-01-02T00:00:00Z"},
        {"arabic": "لا", "english": "no", "createdAt": "2024-01-04T00:00:00Z"},
    ]
    incoming = [
        {"arabic": "نعم", "english": "YES", "createdAt": "2024-01-05T00:00:00Z"},
        {"arabic": "ماء", "english": "Water", "createdAt": "2024-01-01T00:00:00Z"},
    ]

    merged = merge_phrases(existing, incoming)
    merged_keys = keys(merged)

    assert len(merged_keys) == len(set(merged_keys))
    expected = {identity_key(normalize_phrase(p)) for p in existing + incoming}
    assert set(merged_keys) == expected


def test_merge_size_is_bounded_by_input_identities():
    existing = [{"english": "a", "createdAt": "1"}, {"english": "b", "createdAt": "2"}]
    incoming = [{"english": "B", "createdAt": "3"}, {"english": "c", "createdAt": "4"}, {"english": "d", "createdAt": "5"}]

    merged = merge_phrases(existing, incoming)

    assert max(2, 3) <= len(merged) <= 2 + 3
    assert len(merged) == 4


def test_incoming_wins_entirely_on_identity_collision():
    existing = [{
        "arabic": "شكرا",
        "english": "Thanks",
        "category": "Saved",
        "createdAt": "2024-01-01T00:00:00Z",
    }]
    incoming = [{
        "arabic": "شكرا",
        "english": "thanks",
        "category": "Saved",
        "transliteration": "shukran",
        "createdAt": "2024-02-01T00:00:00Z",
    }]

    merged = merge_phrases(existing, incoming)

    assert len(merged) == 1
    assert merged[0].transliteration == "shukran"
    assert merged[0].created_at == "2024-02-01T00:00:00Z"
    assert merged[0].english == "thanks"


def test_incoming_replaces_whole_record_not_fields():
    existing = [{"english": "Hi", "transliteration": "old", "source": "openai", "createdAt": "2024-01-01"}]
    incoming = [{"english": "Hi", "createdAt": "2023-01-01"}]

    merged = merge_phrases(existing, incoming)

    assert len(merged) == 1
    assert merged[0].transliteration == ""
    assert merged[0].source == "unknown"
    assert merged[0].created_at == "2023-01-01"


def test_later_duplicate_in_existing_wins():
    existing = [
        {"english": "Hi", "transliteration": "first", "createdAt": "2024-01-01"},
        {"english": "hi", "transliteration": "second", "createdAt": "2024-01-01"},
    ]
    merged = merge_phrases(existing, [])
    assert len(merged) == 1
    assert merged[0].transliteration == "second"


def test_merge_sorts_newest_first():
    existing = [{"english": "Old", "createdAt": "2024-01-01T00:00:00Z"}]
    incoming = [{"english": "New", "createdAt": "2024-06-01T00:00:00Z"}]

    merged = merge_phrases(existing, incoming)

    assert [p.english for p in merged] == ["New", "Old"]


def test_equal_timestamps_keep_insertion_order():
    existing = [
        {"english": "first", "createdAt": "2024-01-01T00:00:00Z"},
        {"english": "second", "createdAt": "2024-01-01T00:00:00Z"},
    ]
    incoming = [{"english": "third", "createdAt": "2024-01-01T00:00:00Z"}]

    merged = merge_phrases(existing, incoming)

    assert [p.english for p in merged] == ["first", "second", "third"]


def test_new_phrase_without_metadata_gets_defaults():
    merged = merge_phrases([], [{"arabic": "مرحبا", "english": "Hello"}])

    assert len(merged) == 1
    assert merged[0].category == "Saved"
    assert merged[0].source == "unknown"
    assert ISO_MILLIS.match(merged[0].created_at)


def test_empty_incoming_only_resorts_existing():
    existing = [
        {"arabic": "أ", "english": "A", "createdAt": "2024-01-01T00:00:00Z", "source": "openai"},
        {"arabic": "ب", "english": "B", "createdAt": "2024-03-01T00:00:00Z", "source": "openai"},
    ]

    merged = merge_phrases(existing, [])

    assert [p.english for p in merged] == ["B", "A"]
    assert {p.source for p in merged} == {"openai"}


def test_repushing_same_list_is_idempotent():
    existing = [
        {"arabic": "نعم", "english": "Yes", "createdAt": "2024-01-03T00:00:00Z"},
        {"arabic": "لا", "english": "No", "createdAt": "2024-01-02T00:00:00Z"},
    ]
    incoming = [
        {"arabic": "نعم", "english": "yes", "transliteration": "naʿam", "createdAt": "2024-02-01T00:00:00Z"},
        {"arabic": "ماء", "english": "Water", "category": "Food", "createdAt": "2024-01-15T00:00:00Z"},
    ]

    once = merge_phrases(existing, incoming)
    twice = merge_phrases(once, incoming)

    assert twice == once


def test_merge_does_not_mutate_inputs():
    existing = [{"english": " Hi ", "createdAt": "2024-01-01"}]
    incoming = [{"english": "Bye"}]

    merge_phrases(existing, incoming)

    assert existing == [{"english": " Hi ", "createdAt": "2024-01-01"}]
    assert incoming == [{"english": "Bye"}]


def test_integral_floats_read_like_integers():
    phrase = normalize_phrase({"english": 1.0, "arabic": 2.5, "transliteration": 3})
    assert phrase.english == "1"
    assert phrase.arabic == "2.5"
    assert phrase.transliteration == "3"
