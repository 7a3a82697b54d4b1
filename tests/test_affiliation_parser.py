import pytest

from coauthor_map.data_processing.affiliation_parser import (
    AffiliationParser,
    build_name_table,
    is_misaligned,
)


@pytest.fixture
def parser():
    return AffiliationParser("Japan")


def test_empty_affiliation_makes_everyone_subject(parser):
    assert parser.parse("", ("Smith J", "Tanaka K")) == {"Smith J", "Tanaka K"}
    assert parser.parse("   ", ("Smith J",)) == {"Smith J"}


def test_unbracketed_text_with_marker(parser):
    assert parser.parse("Tokyo University, Japan", ("Smith J",)) == {"Smith J"}


def test_unbracketed_text_without_marker(parser):
    assert parser.parse("Seoul University, South Korea", ("Smith J",)) == frozenset()


def test_marker_is_case_sensitive(parser):
    assert parser.parse("Tokyo University, JAPAN", ("Smith J",)) == frozenset()


def test_bracketed_groups_only_marker_groups_qualify(parser):
    text = "[Smith, J; Tanaka, K] Tokyo Univ, Japan; [Lee, S] Seoul Univ, South Korea"
    authors = ("Smith J", "Tanaka K", "Lee S")
    full_names = ("Smith, J", "Tanaka, K", "Lee, S")

    assert parser.parse(text, authors, full_names) == {"Smith J", "Tanaka K"}


def test_full_name_lookup_is_case_insensitive(parser):
    text = "[SMITH, JOHN] Kyoto Univ, Kyoto, Japan"
    assert parser.parse(text, ("Smith J",), ("Smith, John",)) == {"Smith J"}


def test_unmapped_names_are_dropped(parser):
    text = "[Smith, John; Unknown, Person] Kyoto Univ, Japan"
    assert parser.parse(text, ("Smith J",), ("Smith, John",)) == {"Smith J"}


def test_malformed_group_contributes_nothing(parser):
    text = "[Smith, John Kyoto Univ, Japan"
    assert parser.parse(text, ("Smith J",), ("Smith, John",)) == frozenset()


def test_author_in_several_groups_counted_once(parser):
    text = "[Smith, John] Kyoto Univ, Japan; [Smith, John] RIKEN, Wako, Japan"
    assert parser.parse(text, ("Smith J",), ("Smith, John",)) == {"Smith J"}


def test_parse_groups_splits_names_and_addresses(parser):
    groups = parser.parse_groups("[A, X; B, Y] Addr 1, Japan; [C, Z] Addr 2, France")
    assert groups == [(["A, X", "B, Y"], "Addr 1, Japan"), (["C, Z"], "Addr 2, France")]


def test_custom_marker():
    parser = AffiliationParser("South Korea")
    text = "[Smith, J] Tokyo Univ, Japan; [Lee, S] Seoul Univ, South Korea"
    assert parser.parse(text, ("Smith J", "Lee S"), ("Smith, J", "Lee, S")) == {"Lee S"}


def test_empty_marker_rejected():
    with pytest.raises(ValueError):
        AffiliationParser("")


def test_name_table_pairs_up_to_shorter_list():
    table = build_name_table(("A X", "B Y", "C Z"), ("Alpha, X", "Beta, Y"))
    assert table == {"alpha, x": "A X", "beta, y": "B Y"}


def test_truncated_full_name_list_is_flagged(parser):
    text = "[Alpha, X; Beta, Y; Gamma, Z] Kyoto, Japan"
    result = parser.parse(text, ("A X", "B Y", "C Z"), ("Alpha, X", "Beta, Y"))

    assert result == {"A X", "B Y"}
    assert is_misaligned(("A X", "B Y", "C Z"), ("Alpha, X", "Beta, Y"))


def test_missing_middle_entry_misaligns_positions(parser):
    # Beta 누락 → Gamma가 두 번째 약칭에 매핑됨 (데이터 기인 위험, 보정하지 않음)
    text = "[Gamma, Z] Kyoto, Japan"
    result = parser.parse(text, ("A X", "B Y", "C Z"), ("Alpha, X", "Gamma, Z"))

    assert result == {"B Y"}
    assert is_misaligned(("A X", "B Y", "C Z"), ("Alpha, X", "Gamma, Z"))
