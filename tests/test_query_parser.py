"""Unit tests for query phrase extraction and term classification."""

from __future__ import annotations

import pytest

from transcripts.services.query_parser import (
    TERM_BREAK_CHARACTERS,
    classify_terms,
    extract_phrases,
    parse_query,
)


def test_extract_phrases_pulls_quoted_segments() -> None:
    """Quoted phrases should be removed from the residual and returned trimmed."""

    residual, phrases = extract_phrases('football "  Buffalo Bills " scores')

    assert residual == "football  scores"
    assert phrases == ["Buffalo Bills"]


@pytest.mark.parametrize(
    "query, expected_residual",
    [
        ('-"buffalo bills" game', " game"),
        ('game -"buffalo bills"', "game "),
        ('game\t-"buffalo bills"', "game\t"),
        ('game (-"buffalo bills")', "game ()"),
        ('game|-"buffalo bills"', "game|"),
    ],
)
def test_negated_phrases_leave_no_trace(query: str, expected_residual: str) -> None:
    """A -" after a term break or at the start drops the whole phrase."""

    residual, phrases = extract_phrases(query)

    assert phrases == []
    assert residual == expected_residual
    assert "buffalo" not in residual


def test_dash_inside_a_word_does_not_negate() -> None:
    """A hyphen glued to a preceding word is not a negation marker."""

    residual, phrases = extract_phrases('well-"known fact"')

    assert phrases == ["known fact"]
    assert residual == "well-"


def test_empty_quotes_are_consumed() -> None:
    """Empty and blank phrases produce nothing but are still removed."""

    residual, phrases = extract_phrases('alpha "" beta "   "')

    assert phrases == []
    assert residual == "alpha  beta "
    assert '"' not in residual


def test_unpaired_quote_truncates_residual() -> None:
    """Everything from an orphan quote onwards is discarded."""

    assert extract_phrases('buffalo "bills') == ("buffalo ", [])
    assert extract_phrases('"real union" hall "bills game') == (" hall ", ["real union"])


def test_extract_phrases_handles_missing_query() -> None:
    """None and empty strings yield no residual and no phrases."""

    assert extract_phrases(None) == ("", [])
    assert extract_phrases("") == ("", [])


def test_classify_terms_buckets_terms() -> None:
    """Negated terms vanish, wildcards become prefixes, the rest are exact."""

    exact, prefixes = classify_terms("buffalo -soldier buff* (union|hall)+real\r\nmarch*")

    assert exact == "buffalo union hall real"
    assert prefixes == ["buff", "march"]


def test_classify_terms_strips_a_single_wildcard() -> None:
    """Only the trailing wildcard character is stripped from prefix terms."""

    assert classify_terms("buff** *") == ("", ["buff*", ""])


def test_parse_query_fast_path_keeps_query_verbatim() -> None:
    """Queries without special characters skip extraction entirely."""

    parsed = parse_query("buffalo  (bills)")

    assert parsed.exact_terms == "buffalo  (bills)"
    assert parsed.prefix_terms == []
    assert parsed.phrases == []
    assert parsed.needs_analysis


def test_parse_query_mixed_syntax() -> None:
    """All supported operators can be combined in one query."""

    parsed = parse_query('"real union hall" -"soldier song" buff* -march city')

    assert parsed.phrases == ["real union hall"]
    assert parsed.prefix_terms == ["buff"]
    assert parsed.exact_terms == "city"


def test_phrase_only_query_needs_no_analysis() -> None:
    """A query made only of phrases and negations does not tokenize anything."""

    parsed = parse_query('"real union hall" -soldier')

    assert parsed.phrases == ["real union hall"]
    assert not parsed.needs_analysis


def test_parse_query_handles_empty_input() -> None:
    """Empty queries parse to nothing."""

    parsed = parse_query("")

    assert parsed.exact_terms == ""
    assert not parsed.needs_analysis


@pytest.mark.parametrize("separator", sorted(TERM_BREAK_CHARACTERS))
def test_every_term_break_character_splits_terms(separator: str) -> None:
    """Each term-break character separates terms on its own."""

    assert classify_terms(f"buffalo{separator}bills") == ("buffalo bills", [])
