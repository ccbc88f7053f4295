from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

Executor = Callable[[Mapping[str, Any], "StrategyParams"], Any]


class StrategyParams(BaseModel):
    """Base for strategy parameter validators.

    Subclasses declare the fields a strategy accepts; unknown fields are
    rejected.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class NoParams(StrategyParams):
    pass


@dataclass(frozen=True)
class StrategyConfig:
    """Tagged descriptor built by a strategy constructor such as ``regex()``.

    ``params`` stay unvalidated until the descriptor is resolved.
    """

    tag: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StrategyRegistration:
    tag: str
    executor: Executor
    validator: type[StrategyParams] = NoParams
    description: str = ""


@dataclass(frozen=True)
class ResolvedStrategy:
    """An executor paired with validated parameters, ready to run.

    ``tag`` is None when the executor is a caller-supplied callable.
    """

    tag: str | None
    executor: Callable[..., Any]
    params: StrategyParams | None = None

    @property
    def is_custom(self) -> bool:
        return self.tag is None


@dataclass(frozen=True)
class CallSite:
    name: str
    arg: str
    allowed_tags: tuple[str, ...]
    signature: tuple[str, ...]
    default: str | None = None
    legacy_flags: tuple[tuple[str, str], ...] = ()

    @property
    def default_tag(self) -> str:
        return self.default if self.default is not None else self.allowed_tags[0]


# --- JSON config models ---


class CallSiteSchema(BaseModel):
    name: str
    arg: str
    allowed_tags: list[str] = Field(min_length=1)
    signature: list[str] = Field(default_factory=list)
    default: str | None = None
    legacy_flags: list[tuple[str, str]] = Field(default_factory=list)

    def to_call_site(self) -> CallSite:
        return CallSite(
            name=self.name,
            arg=self.arg,
            allowed_tags=tuple(self.allowed_tags),
            signature=tuple(self.signature),
            default=self.default,
            legacy_flags=tuple(self.legacy_flags),
        )


class CallSiteFile(BaseModel):
    version: int
    call_sites: list[CallSiteSchema] = Field(default_factory=list)
