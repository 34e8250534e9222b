from __future__ import annotations

import pytest

from rewrap_engine.pairs import (
    DEFAULT_MODE,
    DelimiterPair,
    ModeContext,
    PairTable,
    PairTableConflictError,
    default_table,
    load_default_pairs,
)


def make_table() -> PairTable:
    return default_table()


@pytest.mark.parametrize(
    ("char", "expected"),
    [
        ("(", DelimiterPair("(", ")")),
        (")", DelimiterPair("(", ")")),
        ("[", DelimiterPair("[", "]")),
        ("}", DelimiterPair("{", "}")),
        ("<", DelimiterPair("<", ">")),
        ('"', DelimiterPair('"', '"')),
        ("'", DelimiterPair("'", "'")),
    ],
)
def test_pair_for_canonical_characters(char: str, expected: DelimiterPair) -> None:
    table = make_table()

    assert table.pair_for(char, DEFAULT_MODE) == expected


def test_pair_for_unknown_character_pairs_with_itself() -> None:
    table = make_table()

    assert table.pair_for("a") == DelimiterPair("a", "a")
    assert table.pair_for("*", DEFAULT_MODE) == DelimiterPair("*", "*")


def test_lookups_return_none_for_unknown_characters() -> None:
    table = make_table()

    assert table.closing_for("a") is None
    assert table.opening_for("a") is None


def test_lookups_resolve_either_role() -> None:
    table = make_table()

    assert table.closing_for("(") == ")"
    assert table.closing_for(")") == ")"
    assert table.opening_for(")") == "("
    assert table.opening_for("(") == "("


@pytest.mark.parametrize("mode_name", ["fundamental", "lisp", "markdown"])
@pytest.mark.parametrize("char", list("()[]{}<>\"'`a-"))
def test_pair_lookup_is_idempotent(mode_name: str, char: str) -> None:
    table = make_table()
    mode = table.mode(mode_name)

    first = table.pair_for(char, mode)

    assert table.pair_for(first.open[0], mode) == first


def test_backtick_depends_on_mode() -> None:
    table = make_table()

    assert table.closing_for("`", table.mode("fundamental")) is None
    assert table.closing_for("`", table.mode("lisp")) == "'"
    assert table.closing_for("`", table.mode("markdown")) == "`"
    assert table.pair_for("`", table.mode("lisp")) == DelimiterPair("`", "'")
    assert table.pair_for("`", table.mode("markdown")) == DelimiterPair("`", "`")


def test_apostrophe_stays_symmetric_in_lisp_mode() -> None:
    table = make_table()
    lisp = table.mode("lisp")

    assert table.opening_for("'", lisp) == "'"
    assert table.pair_for("'", lisp) == DelimiterPair("'", "'")


def test_override_takes_precedence_over_canonical_table() -> None:
    table = make_table()
    odd = ModeContext(name="odd", overrides=(("(", "]"),))

    assert table.closing_for("(", odd) == "]"
    assert table.pair_for("(", odd) == DelimiterPair("(", "]")
    assert table.closing_for("(") == ")"


def test_lookups_do_not_mutate_the_table() -> None:
    table = make_table()
    revision = table.revision()

    table.pair_for("(", table.mode("lisp"))
    table.pair_for("z")
    table.mode("never-registered")

    assert table.revision() == revision
    assert "never-registered" not in table.modes()


def test_unregistered_mode_has_no_overrides() -> None:
    table = make_table()

    mode = table.mode("python")

    assert mode.name == "python"
    assert mode.overrides == ()


def test_duplicate_pair_registration_conflicts() -> None:
    table = make_table()

    with pytest.raises(PairTableConflictError) as excinfo:
        table.register_pair(DelimiterPair("(", "]"))

    assert excinfo.value.key == "("
    table.register_pair(DelimiterPair("(", "]"), replace=True)
    assert table.closing_for("(") == "]"


def test_duplicate_mode_registration_conflicts() -> None:
    table = make_table()

    with pytest.raises(PairTableConflictError):
        table.register_mode(ModeContext(name="lisp"))


def test_load_default_pairs_seeds_an_empty_table() -> None:
    table = PairTable()
    assert table.pair_for("(") == DelimiterPair("(", "(")

    load_default_pairs(table)

    assert table.modes() == ("emacs-lisp", "fundamental", "lisp", "markdown")
    assert table.revision() == 10
    assert table.pair_for("(") == DelimiterPair("(", ")")


def test_delimiter_pair_rejects_empty_strings() -> None:
    with pytest.raises(ValueError):
        DelimiterPair("", ")")
    with pytest.raises(ValueError):
        DelimiterPair("(", "")


def test_mode_context_from_mapping() -> None:
    mode = ModeContext.from_mapping("rst", {"`": "`"})

    assert mode.overrides == (("`", "`"),)
    assert mode.override_close("`") == "`"
    assert mode.override_open("`") == "`"
