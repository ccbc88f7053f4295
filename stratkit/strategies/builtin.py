"""Built-in strategies and the call sites of the bundled functions."""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Literal

import numpy as np
import pandas as pd
from pydantic import Field

from .registry import StrategyRegistry
from .registry_models import CallSite, NoParams, StrategyParams, StrategyRegistration

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


# --- Parameter validators ---


class RegexParams(StrategyParams):
    ignore_case: bool = False
    multiline: bool = False
    dotall: bool = False


class FixedParams(StrategyParams):
    ignore_case: bool = False


class BoundaryParams(StrategyParams):
    type: Literal["character", "word", "line", "sentence"] = "word"


class RandomTiesParams(StrategyParams):
    seed: int | None = Field(default=None, ge=0)


# --- Trim ---


def _trim_both(context: Mapping[str, Any], params: NoParams) -> pd.Series:
    return context["x"].str.strip()


def _trim_left(context: Mapping[str, Any], params: NoParams) -> pd.Series:
    return context["x"].str.lstrip()


def _trim_right(context: Mapping[str, Any], params: NoParams) -> pd.Series:
    return context["x"].str.rstrip()


# --- Detect ---


def _detect_regex(context: Mapping[str, Any], params: RegexParams) -> pd.Series:
    flags = 0
    if params.ignore_case:
        flags |= re.IGNORECASE
    if params.multiline:
        flags |= re.MULTILINE
    if params.dotall:
        flags |= re.DOTALL
    return context["x"].str.contains(context["pattern"], regex=True, flags=flags, na=False)


def _detect_fixed(context: Mapping[str, Any], params: FixedParams) -> pd.Series:
    return context["x"].str.contains(
        context["pattern"], regex=False, case=not params.ignore_case, na=False
    )


def _detect_boundary(context: Mapping[str, Any], params: BoundaryParams) -> pd.Series:
    """Match `pattern` only as a complete character, word, line or sentence."""
    x: pd.Series = context["x"]
    pattern: str = context["pattern"]
    escaped = re.escape(pattern)

    if params.type == "character":
        if len(pattern) != 1:
            raise ValueError(f"Character boundary needs a single character, not {pattern!r}")
        return x.str.contains(escaped, regex=True, na=False)
    if params.type == "word":
        return x.str.contains(rf"(?<!\w){escaped}(?!\w)", regex=True, na=False)
    if params.type == "line":
        return x.str.contains(rf"^{escaped}$", regex=True, flags=re.MULTILINE, na=False)

    def _has_sentence(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return any(s.strip() == pattern for s in _SENTENCE_SPLIT.split(value))

    return x.map(_has_sentence).astype(bool)


# --- Rank ---


def _rank_with(method: str):
    def _rank(context: Mapping[str, Any], params: NoParams) -> pd.Series:
        return context["x"].rank(method=method)

    _rank.__name__ = f"_rank_{method}"
    _rank.__doc__ = f"Rank values; ties get the {method} rank."
    return _rank


def _rank_random(context: Mapping[str, Any], params: RandomTiesParams) -> pd.Series:
    """Rank values; ties are broken in random order."""
    x: pd.Series = context["x"]
    rng = np.random.default_rng(params.seed)
    order = rng.permutation(len(x))
    shuffled = x.iloc[order].reset_index(drop=True)
    ranked = shuffled.rank(method="first").to_numpy(dtype=float)
    out = np.empty(len(x), dtype=float)
    out[order] = ranked
    return pd.Series(out, index=x.index, name=x.name)


REGISTRATIONS: tuple[StrategyRegistration, ...] = (
    StrategyRegistration("both", _trim_both, description="Remove whitespace from both ends."),
    StrategyRegistration("left", _trim_left, description="Remove leading whitespace."),
    StrategyRegistration("right", _trim_right, description="Remove trailing whitespace."),
    StrategyRegistration("regex", _detect_regex, RegexParams, "Regular expression match."),
    StrategyRegistration("fixed", _detect_fixed, FixedParams, "Literal substring match."),
    StrategyRegistration(
        "boundary", _detect_boundary, BoundaryParams, "Match a whole character, word, line or sentence."
    ),
    *(
        StrategyRegistration(m, _rank_with(m), description=f"Ties get the {m} rank.")
        for m in ("average", "min", "max", "first", "dense")
    ),
    StrategyRegistration(
        "random", _rank_random, RandomTiesParams, "Ties broken in random order."
    ),
)

DEFAULT_REGISTRY = StrategyRegistry(REGISTRATIONS)

TRIM = CallSite(
    name="str_trim",
    arg="side",
    allowed_tags=("both", "left", "right"),
    signature=("x",),
)

DETECT = CallSite(
    name="str_detect",
    arg="engine",
    allowed_tags=("regex", "fixed", "boundary"),
    signature=("x", "pattern"),
    legacy_flags=(("fixed", "fixed"), ("perl", "regex")),
)

RANK = CallSite(
    name="rank",
    arg="ties",
    allowed_tags=("average", "min", "max", "first", "dense", "random"),
    signature=("x",),
)

CALL_SITES: dict[str, CallSite] = {site.name: site for site in (TRIM, DETECT, RANK)}

for _site in CALL_SITES.values():
    DEFAULT_REGISTRY.check_call_site(_site)
