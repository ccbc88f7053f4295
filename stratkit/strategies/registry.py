from __future__ import annotations

import inspect
import json
import uuid
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from .errors import InvalidParameters, InvalidSignature, InvalidTag, StrategyError, UnsupportedStrategy
from .logging_utils import get_json_logger
from .registry_models import (
    CallSite,
    CallSiteFile,
    ResolvedStrategy,
    StrategyConfig,
    StrategyParams,
    StrategyRegistration,
)

logger = get_json_logger("registry")


_KEYWORD_KINDS = {inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY}


def _declared_parameters(func: Any) -> tuple[str, ...] | None:
    """Parameter names of `func`, marked when they cannot be passed by keyword."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    names: list[str] = []
    for p in sig.parameters.values():
        if p.kind in _KEYWORD_KINDS:
            names.append(p.name)
        elif p.kind is inspect.Parameter.VAR_POSITIONAL:
            names.append(f"*{p.name}")
        elif p.kind is inspect.Parameter.VAR_KEYWORD:
            names.append(f"**{p.name}")
        else:
            names.append(f"{p.name}/")
    return tuple(names)


def _validation_to_error(tag: str, exc: ValidationError) -> InvalidParameters:
    err = exc.errors()[0]
    loc = err.get("loc") or ("<params>",)
    return InvalidParameters(tag, str(loc[0]), err.get("input"), err.get("msg", "invalid value"))


class StrategyRegistry:
    """Resolves strategy descriptors against a fixed set of registrations.

    The registry is built once and never mutated, so one instance can be
    shared by every public function of a library.
    """

    def __init__(self, registrations: Iterable[StrategyRegistration]) -> None:
        entries: dict[str, StrategyRegistration] = {}
        for reg in registrations:
            if reg.tag in entries:
                raise ValueError(f"Duplicate strategy tag: {reg.tag!r}")
            entries[reg.tag] = reg
        self._registrations = MappingProxyType(entries)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(sorted(self._registrations))

    def __contains__(self, tag: object) -> bool:
        return tag in self._registrations

    def __getitem__(self, tag: str) -> StrategyRegistration:
        return self._registrations[tag]

    def __iter__(self):
        return iter(self._registrations[t] for t in self.tags)

    def __len__(self) -> int:
        return len(self._registrations)

    def check_call_site(self, call_site: CallSite) -> None:
        """Raise ValueError if `call_site` refers to tags this registry lacks."""
        self._check_allowed(call_site.allowed_tags)
        if call_site.default_tag not in call_site.allowed_tags:
            raise ValueError(
                f"Default {call_site.default_tag!r} of {call_site.name}() is not an allowed tag"
            )
        for flag, tag in call_site.legacy_flags:
            if tag not in call_site.allowed_tags:
                raise ValueError(f"Legacy flag {flag!r} of {call_site.name}() maps to unallowed tag {tag!r}")

    def _check_allowed(self, allowed_tags: Sequence[str]) -> None:
        unknown = [t for t in allowed_tags if t not in self._registrations]
        if unknown:
            raise ValueError(f"Unregistered strategy tags: {', '.join(unknown)}")

    def resolve(
        self,
        descriptor: Any,
        allowed_tags: Sequence[str],
        signature: Sequence[str] | None = None,
        *,
        arg: str | None = None,
    ) -> ResolvedStrategy:
        """Turn `descriptor` into a ResolvedStrategy without running it.

        `descriptor` may be a tag name, a StrategyConfig, or a callable
        whose parameter names equal `signature`. Raises InvalidTag,
        UnsupportedStrategy, InvalidParameters or InvalidSignature.
        """
        self._check_allowed(allowed_tags)
        try:
            resolved = self._resolve(descriptor, tuple(allowed_tags), signature, arg)
        except StrategyError as exc:
            logger.info("resolve_failed", extra={"error_kind": exc.kind, "arg": arg, "error": str(exc)})
            raise
        logger.debug("resolved", extra={"tag": resolved.tag, "arg": arg})
        return resolved

    def _resolve(
        self,
        descriptor: Any,
        allowed: tuple[str, ...],
        signature: Sequence[str] | None,
        arg: str | None,
    ) -> ResolvedStrategy:
        if isinstance(descriptor, str):
            if allowed.count(descriptor) != 1:
                raise InvalidTag(descriptor, allowed, arg)
            return self._validated(descriptor, {})

        if isinstance(descriptor, StrategyConfig):
            if descriptor.tag not in allowed:
                raise UnsupportedStrategy(descriptor.tag, allowed, arg)
            return self._validated(descriptor.tag, descriptor.params)

        if callable(descriptor) and signature is not None:
            expected = tuple(signature)
            declared = _declared_parameters(descriptor)
            if declared != expected:
                raise InvalidSignature(descriptor, expected, declared or ())
            return ResolvedStrategy(tag=None, executor=descriptor)

        raise InvalidTag(descriptor, allowed, arg)

    def _validated(self, tag: str, params: Any) -> ResolvedStrategy:
        reg = self._registrations[tag]
        if not isinstance(params, Mapping):
            raise InvalidParameters(tag, "params", params, "must be a mapping")
        try:
            validated: StrategyParams = reg.validator.model_validate(dict(params))
        except ValidationError as exc:
            raise _validation_to_error(tag, exc) from exc
        return ResolvedStrategy(tag=tag, executor=reg.executor, params=validated)

    def execute(self, resolved: ResolvedStrategy, context: Mapping[str, Any]) -> Any:
        """Run a resolved strategy on `context`; executor errors propagate as-is."""
        if not isinstance(resolved, ResolvedStrategy):
            raise TypeError(f"execute() needs a ResolvedStrategy, not {type(resolved).__name__}")
        if resolved.is_custom:
            return resolved.executor(**context)
        return resolved.executor(context, resolved.params)

    def select(self, call_site: CallSite, descriptor: Any = None) -> ResolvedStrategy:
        if descriptor is None:
            descriptor = call_site.default_tag
        # an empty signature means the call site takes no custom callables
        return self.resolve(
            descriptor, call_site.allowed_tags, call_site.signature or None, arg=call_site.arg
        )

    def run(self, call_site: CallSite, descriptor: Any = None, **context: Any) -> Any:
        return self.execute(self.select(call_site, descriptor), context)


def load_call_sites(path: Path, registry: StrategyRegistry) -> dict[str, CallSite]:
    """Load call-site definitions from JSON with Pydantic validation.

    Raises FileNotFoundError if missing, JSONDecodeError on invalid JSON,
    ValidationError on a malformed structure and ValueError when a call
    site does not fit `registry`.
    """
    cid = uuid.uuid4().hex
    log = get_json_logger(
        "registry", static_fields={"correlation_id": cid, "op": "load_call_sites"}
    )
    log.info("start", extra={"path": str(path)})

    data = json.loads(path.read_text(encoding="utf-8"))
    parsed = CallSiteFile(**data)

    sites: dict[str, CallSite] = {}
    for schema in parsed.call_sites:
        site = schema.to_call_site()
        if site.name in sites:
            raise ValueError(f"Duplicate call site: {site.name!r}")
        registry.check_call_site(site)
        sites[site.name] = site

    log.info("done", extra={"call_sites": len(sites)})
    return sites
