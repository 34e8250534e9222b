from __future__ import annotations

import pytest

from rewrap_engine.pairs import default_table
from rewrap_engine.units import (
    Span,
    find_adjacent_unit,
    find_enclosing_pair,
    resolve_adjacent_unit,
    resolve_enclosing,
    scan_pairs,
)


def split_cursor(marked: str) -> tuple[str, int]:
    cursor = marked.index("|")
    return marked.replace("|", "", 1), cursor


def test_scan_pairs_tracks_nesting_and_strings() -> None:
    table = default_table()

    pairs = scan_pairs('(a [b] "c)")', table)

    assert [pair.span for pair in pairs] == [Span(0, 12), Span(3, 6), Span(7, 11)]
    assert pairs[2].open == '"'


def test_scan_pairs_honors_escapes_inside_strings() -> None:
    pairs = scan_pairs('"a\\"b"', default_table())

    assert [pair.span for pair in pairs] == [Span(0, 6)]


def test_scan_pairs_ignores_stray_closers() -> None:
    pairs = scan_pairs("a) (b)", default_table())

    assert [pair.span for pair in pairs] == [Span(3, 6)]


def test_scan_pairs_skips_apostrophes_inside_words() -> None:
    pairs = scan_pairs("(don't)", default_table())

    assert [pair.span for pair in pairs] == [Span(0, 7)]


def test_scan_pairs_opens_double_quotes_after_word_characters() -> None:
    pairs = scan_pairs('(print f"foo" b"x"y)', default_table())

    assert [pair.span for pair in pairs] == [Span(0, 20), Span(8, 13), Span(15, 18)]


def test_scan_pairs_drops_unterminated_regions() -> None:
    assert scan_pairs('("abc', default_table()) == ()


def test_lisp_mode_treats_quote_prefix_as_plain_text() -> None:
    table = default_table()
    text = "(list 'a b)"

    assert scan_pairs(text, table, table.mode("fundamental")) == ()
    assert [p.span for p in scan_pairs(text, table, table.mode("lisp"))] == [
        Span(0, 11)
    ]


def test_lisp_mode_pairs_backtick_with_apostrophe() -> None:
    table = default_table()

    pairs = scan_pairs("(message `foo')", table, table.mode("lisp"))

    assert [(p.start, p.end, p.open, p.close) for p in pairs] == [
        (0, 15, "(", ")"),
        (9, 14, "`", "'"),
    ]


@pytest.mark.parametrize(
    ("marked", "expected"),
    [
        ("(foo-|bar)", Span(0, 9)),
        ("(|)", Span(0, 2)),
        ("(ab|)", Span(0, 4)),
        ('(cons "fo|o-bar" baz)', Span(6, 15)),
        ("[a (b |c) d]", Span(3, 8)),
        ("[a (b c)| d]", Span(0, 11)),
    ],
)
def test_resolve_enclosing_returns_innermost_pair(marked: str, expected: Span) -> None:
    text, cursor = split_cursor(marked)

    assert resolve_enclosing(text, cursor, default_table()) == expected


@pytest.mark.parametrize("marked", ["foo |bar", "|(a)", "(a)|", "", "a) |b"])
def test_resolve_enclosing_reports_not_found(marked: str) -> None:
    text, cursor = split_cursor(marked + "|" if "|" not in marked else marked)

    assert resolve_enclosing(text, cursor, default_table()) is None


def test_find_enclosing_pair_exposes_delimiter_spans() -> None:
    pair = find_enclosing_pair("x [ab] y", 4, default_table())

    assert pair is not None
    assert pair.open_span == Span(2, 3)
    assert pair.close_span == Span(5, 6)
    assert pair.content == Span(3, 5)


@pytest.mark.parametrize(
    ("marked", "expected", "rule"),
    [
        ("foo-|bar", Span(4, 7), "word_forward"),
        ("|foo-bar", Span(0, 3), "word_forward"),
        ("|(test-123)", Span(0, 10), "balanced_forward"),
        ("fo|o-bar", Span(0, 3), "word_inside"),
        ("foo|-bar", Span(0, 3), "word_backward"),
        ("foo-bar|", Span(4, 7), "word_backward"),
        ("(a b)|", Span(0, 5), "balanced_backward"),
        ('say |"hi there"', Span(4, 14), "balanced_forward"),
        ("x |+= y", Span(2, 4), "punct_forward"),
        ("foo  |", Span(0, 3), "word_backward"),
        ("|  foo", Span(2, 5), "word_forward"),
        ("(|)", Span(1, 1), "none"),
    ],
)
def test_find_adjacent_unit(marked: str, expected: Span, rule: str) -> None:
    text, cursor = split_cursor(marked)

    match = find_adjacent_unit(text, cursor, default_table())

    assert match.span == expected
    assert match.rule == rule


def test_adjacent_unit_on_empty_buffer_is_zero_length() -> None:
    assert resolve_adjacent_unit("", 0, default_table()) == Span(0, 0)
    assert resolve_adjacent_unit("", 7, default_table()) == Span(0, 0)


def test_adjacent_unit_clamps_cursor_to_buffer() -> None:
    table = default_table()

    assert resolve_adjacent_unit("foo", 99, table) == Span(0, 3)
    assert resolve_adjacent_unit("foo", -4, table) == Span(0, 3)


def test_balanced_expression_inside_a_string_is_not_a_unit() -> None:
    text, cursor = split_cursor('"a |(b) c"')

    match = find_adjacent_unit(text, cursor, default_table())

    assert match.rule == "word_backward"
    assert match.span == Span(1, 2)


def test_span_validation() -> None:
    with pytest.raises(ValueError):
        Span(3, 1)
    with pytest.raises(ValueError):
        Span(-1, 2)
    assert Span(2, 5).length == 3
