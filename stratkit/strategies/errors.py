"""Errors raised while resolving a strategy descriptor.

Every error carries the offending input so callers can render their own
message; ``str(err)`` is already suitable for end users.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def _choices(values: Iterable[str]) -> str:
    return ", ".join(f'"{v}"' for v in values)


class StrategyError(ValueError):
    """Base class for descriptor resolution failures."""

    kind = "strategy_error"


class InvalidTag(StrategyError):
    """A plain name (or a non-descriptor value) matched no allowed tag."""

    kind = "invalid_tag"

    def __init__(self, value: Any, choices: Iterable[str], arg: str | None = None) -> None:
        self.value = value
        self.choices = tuple(dict.fromkeys(choices))
        self.arg = arg
        label = f"`{arg}`" if arg else "Strategy"
        super().__init__(
            f"{label} must be one of {_choices(self.choices)}, not {value!r}."
        )


class UnsupportedStrategy(StrategyError):
    """A tagged configuration names a strategy this call site does not allow."""

    kind = "unsupported_strategy"

    def __init__(self, tag: str, choices: Iterable[str], arg: str | None = None) -> None:
        self.tag = tag
        self.choices = tuple(dict.fromkeys(choices))
        self.arg = arg
        label = f"`{arg}`" if arg else "this function"
        super().__init__(
            f"Strategy {tag!r} is not supported by {label}; "
            f"use one of {_choices(self.choices)}."
        )


class InvalidParameters(StrategyError):
    """Strategy-specific parameters failed validation."""

    kind = "invalid_parameters"

    def __init__(
        self,
        tag: str | None,
        field: str,
        value: Any,
        reason: str,
        *,
        call_site: str | None = None,
    ) -> None:
        self.tag = tag
        self.field = field
        self.value = value
        self.reason = reason
        self.call_site = call_site
        target = f"{call_site}()" if call_site else f"strategy {tag!r}"
        super().__init__(f"Invalid `{field}` for {target}: {reason} (got {value!r}).")


class InvalidSignature(StrategyError):
    """A custom callable does not declare the required parameters."""

    kind = "invalid_signature"

    def __init__(self, func: Any, expected: Iterable[str], actual: Iterable[str]) -> None:
        self.func = func
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        name = getattr(func, "__name__", type(func).__name__)
        super().__init__(
            f"Custom strategy {name}() must take arguments ({', '.join(self.expected)}), "
            f"not ({', '.join(self.actual)})."
        )
