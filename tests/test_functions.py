from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from stratkit.functions import boundary, fixed, random_ties, rank, regex, str_detect, str_trim
from stratkit.strategies.errors import InvalidParameters, InvalidSignature, InvalidTag, UnsupportedStrategy


@pytest.fixture()
def padded() -> pd.Series:
    return pd.Series(["  a  ", "b  ", "  c"])


@pytest.mark.parametrize(
    "side,expected",
    [
        ("both", ["a", "b", "c"]),
        ("left", ["a  ", "b  ", "c"]),
        ("right", ["  a", "b", "  c"]),
    ],
)
def test_str_trim_sides(padded: pd.Series, side: str, expected: list[str]) -> None:
    assert str_trim(padded, side).tolist() == expected


def test_str_trim_defaults_to_both(padded: pd.Series) -> None:
    assert str_trim(padded).tolist() == ["a", "b", "c"]


def test_str_trim_rejects_center(padded: pd.Series) -> None:
    with pytest.raises(InvalidTag) as exc:
        str_trim(padded, "center")
    assert exc.value.arg == "side"
    assert set(exc.value.choices) == {"left", "right", "both"}


def test_str_trim_custom_callable(padded: pd.Series) -> None:
    out = str_trim(padded, lambda x: x.str.replace(" ", "", regex=False))
    assert out.tolist() == ["a", "b", "c"]


def test_str_trim_custom_callable_wrong_signature(padded: pd.Series) -> None:
    with pytest.raises(InvalidSignature):
        str_trim(padded, lambda s: s)


def test_str_detect_regex_default() -> None:
    x = pd.Series(["apple", "banana", "cherry"])
    assert str_detect(x, "an+").tolist() == [False, True, False]


def test_str_detect_regex_ignore_case() -> None:
    x = pd.Series(["Apple", "apple", "pear"])
    assert str_detect(x, "^a", engine=regex(ignore_case=True)).tolist() == [True, True, False]


def test_str_detect_fixed_treats_pattern_literally() -> None:
    x = pd.Series(["a.c", "abc"])
    assert str_detect(x, "a.c", engine="fixed").tolist() == [True, False]
    assert str_detect(x, "a.c").tolist() == [True, True]


def test_str_detect_fixed_ignore_case() -> None:
    x = pd.Series(["A.C", "abc"])
    assert str_detect(x, "a.c", engine=fixed(ignore_case=True)).tolist() == [True, False]


def test_str_detect_missing_values_are_false() -> None:
    x = pd.Series(["cat", None])
    assert str_detect(x, "cat").tolist() == [True, False]


@pytest.mark.parametrize(
    "type_,pattern,expected",
    [
        ("word", "cat", [True, False, True]),
        ("line", "cat", [False, False, True]),
        ("character", "c", [True, True, True]),
    ],
)
def test_str_detect_boundary(type_: str, pattern: str, expected: list[bool]) -> None:
    x = pd.Series(["the cat sat", "concatenate", "dog\ncat"])
    assert str_detect(x, pattern, engine=boundary(type_)).tolist() == expected


def test_str_detect_sentence_boundary() -> None:
    x = pd.Series(["Hi there. Go home.", "Go home now."])
    assert str_detect(x, "Go home.", engine=boundary("sentence")).tolist() == [True, False]


def test_str_detect_character_boundary_needs_one_character() -> None:
    with pytest.raises(ValueError, match="single character"):
        str_detect(pd.Series(["abc"]), "ab", engine=boundary("character"))


def test_str_detect_boundary_type_validated() -> None:
    with pytest.raises(InvalidParameters) as exc:
        str_detect(pd.Series(["abc"]), "a", engine=boundary("paragraph"))
    assert exc.value.field == "type"
    assert exc.value.value == "paragraph"


def test_str_detect_rejects_rank_config() -> None:
    with pytest.raises(UnsupportedStrategy):
        str_detect(pd.Series(["abc"]), "a", engine=random_ties(1))


def test_str_detect_custom_callable() -> None:
    calls = []

    def starts(x, pattern):  # noqa: ANN001
        calls.append(pattern)
        return x.str.startswith(pattern)

    out = str_detect(pd.Series(["ab", "ba"]), "a", engine=starts)
    assert out.tolist() == [True, False]
    assert calls == ["a"]


def test_str_detect_legacy_fixed_flag() -> None:
    x = pd.Series(["a.c", "abc"])
    assert str_detect(x, "a.c", fixed=True).tolist() == [True, False]


def test_str_detect_legacy_fixed_beats_perl() -> None:
    x = pd.Series(["a.c", "abc"])
    assert str_detect(x, "a.c", fixed=True, perl=True).tolist() == [True, False]


@pytest.mark.parametrize(
    "ties,expected",
    [
        ("average", [1.0, 2.5, 2.5, 4.0]),
        ("min", [1.0, 2.0, 2.0, 4.0]),
        ("max", [1.0, 3.0, 3.0, 4.0]),
        ("first", [1.0, 2.0, 3.0, 4.0]),
        ("dense", [1.0, 2.0, 2.0, 3.0]),
    ],
)
def test_rank_ties(ties: str, expected: list[float]) -> None:
    x = pd.Series([1, 5, 5, 9])
    assert rank(x, ties).tolist() == expected


def test_rank_random_breaks_ties_reproducibly() -> None:
    x = pd.Series([3, 1, 3, 3, 2], index=list("abcde"), name="score")
    out = rank(x, random_ties(seed=42))
    again = rank(x, random_ties(seed=42))

    pd.testing.assert_series_equal(out, again)
    assert list(out.index) == list("abcde")
    assert out.name == "score"
    assert out["b"] == 1.0
    assert out["e"] == 2.0
    assert sorted(out[["a", "c", "d"]].tolist()) == [3.0, 4.0, 5.0]


def test_rank_random_keeps_missing() -> None:
    out = rank(pd.Series([2.0, np.nan, 1.0]), "random")
    assert np.isnan(out.iloc[1])
    assert out.iloc[0] == 2.0
    assert out.iloc[2] == 1.0


def test_rank_random_seed_must_be_non_negative() -> None:
    with pytest.raises(InvalidParameters) as exc:
        rank(pd.Series([1, 2]), random_ties(seed=-1))
    assert exc.value.field == "seed"
    assert exc.value.value == -1


@pytest.mark.parametrize("func", [lambda *x: x, lambda **x: x, lambda x, /: x])
def test_str_trim_custom_callable_must_take_keyword_x(padded: pd.Series, func) -> None:  # noqa: ANN001
    with pytest.raises(InvalidSignature):
        str_trim(padded, func)
