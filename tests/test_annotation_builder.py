from __future__ import annotations

import pytest

from core.annotations.builder import build_index, build_index_from_patterns, find_occurrences
from core.utils.errors import ConfigurationError


def test_single_char_pattern_tracks_every_occurrence() -> None:
    index = build_index("aaa", "a", "n1")

    assert index.entries == {"n1": (0, 1, 2)}


def test_overlapping_matches_are_all_found() -> None:
    index = build_index("aaa", "aa", "n1")

    assert find_occurrences("aaa", "aa") == [0, 1]
    assert index.entries["n1"] == (0, 1, 2)


def test_scan_advances_one_unit_past_each_match() -> None:
    assert find_occurrences("aaaa", "aa") == [0, 1, 2]
    assert find_occurrences("abababa", "aba") == [0, 2, 4]


def test_separate_occurrences_are_unioned() -> None:
    index = build_index("abcabc", "bc", "n1")

    assert index.entries["n1"] == (1, 2, 4, 5)
    assert index.anchor_text("n1") == "bcbc"


def test_no_match_yields_empty_entry() -> None:
    index = build_index("hello", "xyz", "n1")

    assert "n1" in index
    assert index.entries["n1"] == ()


def test_empty_pattern_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Pattern must not be empty") as exc_info:
        build_index("hello", "", "n1")

    assert exc_info.value.field == "pattern"


def test_empty_annotation_id_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Annotation id must not be empty"):
        build_index("hello", "l", "")


def test_build_index_from_patterns_tracks_several_ids() -> None:
    index = build_index_from_patterns("hello world", {"vowel": "o", "word": "world"})

    assert index.text == "hello world"
    assert index.entries == {"vowel": (4, 7), "word": (6, 7, 8, 9, 10)}


def test_multibyte_text_positions_are_code_points() -> None:
    index = build_index("मेंद्रण", "द", "n1")

    assert index.entries["n1"] == (3,)
    assert index.anchor_text("n1") == "द"
