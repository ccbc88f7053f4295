"""Public functions whose algorithm is chosen with a strategy descriptor.

Each function accepts a tag name, a configuration built by one of the
constructors below, or a custom callable:

    >>> str_trim(pd.Series(["  a  "]), side="left").tolist()
    ['a  ']
    >>> str_detect(pd.Series(["Apple"]), "apple", engine=fixed(ignore_case=True)).tolist()
    [True]
"""
from __future__ import annotations

from typing import Any

import pandas as pd

from stratkit.strategies.builtin import DEFAULT_REGISTRY, DETECT, RANK, TRIM
from stratkit.strategies.legacy import resolve_flags
from stratkit.strategies.registry_models import StrategyConfig


def regex(ignore_case: bool = False, multiline: bool = False, dotall: bool = False) -> StrategyConfig:
    return StrategyConfig(
        "regex", {"ignore_case": ignore_case, "multiline": multiline, "dotall": dotall}
    )


def fixed(ignore_case: bool = False) -> StrategyConfig:
    return StrategyConfig("fixed", {"ignore_case": ignore_case})


def boundary(type: str = "word") -> StrategyConfig:
    return StrategyConfig("boundary", {"type": type})


def random_ties(seed: int | None = None) -> StrategyConfig:
    return StrategyConfig("random", {"seed": seed})


def str_trim(x: pd.Series, side: Any = "both") -> pd.Series:
    """Remove whitespace from the ends of each string.

    `side` is "both", "left" or "right", or a function of `x`.
    """
    return DEFAULT_REGISTRY.run(TRIM, side, x=x)


def str_detect(
    x: pd.Series,
    pattern: str,
    engine: Any = None,
    *,
    fixed: bool = False,
    perl: bool = False,
) -> pd.Series:
    """Return a boolean Series flagging the strings that contain `pattern`.

    `engine` defaults to "regex". The `fixed` and `perl` flags are kept for
    older callers; `fixed` takes precedence when both are set.
    """
    engine = resolve_flags(DETECT, {"fixed": fixed, "perl": perl}, engine)
    return DEFAULT_REGISTRY.run(DETECT, engine, x=x, pattern=pattern)


def rank(x: pd.Series, ties: Any = "average") -> pd.Series:
    """Rank `x`, breaking ties with the chosen method."""
    return DEFAULT_REGISTRY.run(RANK, ties, x=x)
