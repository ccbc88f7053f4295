"""Map legacy boolean flags onto strategy names.

Older signatures selected an algorithm with several booleans (``fixed=True``,
``perl=True``). A call site lists its flags in precedence order; the first
truthy flag wins and the rest are reported as ignored.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import InvalidParameters
from .logging_utils import get_json_logger
from .registry_models import CallSite

logger = get_json_logger("legacy")


def resolve_flags(
    call_site: CallSite,
    flags: Mapping[str, Any],
    descriptor: Any = None,
) -> Any:
    """Return the descriptor to resolve once legacy `flags` are applied.

    With no truthy flag, `descriptor` is returned unchanged (None selects the
    call-site default). A truthy flag alongside an explicit descriptor is an
    error, since the two would select competing strategies.
    """
    known = dict(call_site.legacy_flags)
    for name in flags:
        if name not in known:
            raise InvalidParameters(None, name, flags[name], "unknown flag", call_site=call_site.name)

    active = [(flag, tag) for flag, tag in call_site.legacy_flags if flags.get(flag)]
    if not active:
        return descriptor

    winner_flag, winner_tag = active[0]
    if descriptor is not None:
        raise InvalidParameters(
            None,
            winner_flag,
            flags[winner_flag],
            f"cannot be combined with `{call_site.arg}`",
            call_site=call_site.name,
        )

    for flag, _tag in active[1:]:
        logger.warning(
            "legacy_flag_ignored",
            extra={"call_site": call_site.name, "flag": flag, "overridden_by": winner_flag},
        )
    return winner_tag
