from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .logging_utils import get_json_logger
from .registry import StrategyRegistry
from .registry_models import CallSite, StrategyRegistration


def _csv(values: Any, dash: str = "-") -> str:
    if not values:
        return dash
    return ", ".join(str(v) for v in values)


def _first_line(text: str | None, dash: str = "-") -> str:
    if not text:
        return dash
    return text.strip().splitlines()[0]


def _params(reg: StrategyRegistration) -> str:
    fields = reg.validator.model_fields
    if not fields:
        return "-"
    return ", ".join(f"{name}={info.default!r}" for name, info in fields.items())


def generate_markdown(registry: StrategyRegistry, call_sites: Mapping[str, CallSite]) -> str:
    """Build a Markdown reference of registered strategies and call sites."""
    cid = uuid.uuid4().hex
    logger = get_json_logger("reporting", static_fields={"correlation_id": cid, "op": "generate_markdown"})
    logger.info("start", extra={"strategy_count": len(registry), "call_site_count": len(call_sites)})
    updated = datetime.now(tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    lines: list[str] = []
    lines.append("# Strategy reference")
    lines.append("")
    lines.append(f"Generated (UTC): {updated}")
    lines.append("")

    lines.append("## Strategies")
    lines.append("")
    lines.append("| Tag | Parameters | Description |")
    lines.append("|---|---|---|")
    for reg in registry:
        description = reg.description or _first_line(reg.executor.__doc__)
        lines.append("| " + " | ".join([f"`{reg.tag}`", _params(reg), description]) + " |")
    lines.append("")

    lines.append("## Functions")
    for name in sorted(call_sites):
        site = call_sites[name]
        lines.append("")
        lines.append(f"### `{site.name}()`")
        lines.append("")
        lines.append("| Argument | Choices | Default | Custom callable | Legacy flags |")
        lines.append("|---|---|---|---|---|")
        custom = f"`({', '.join(site.signature)})`" if site.signature else "-"
        legacy = _csv([f"{flag} → {tag}" for flag, tag in site.legacy_flags])
        lines.append(
            "| "
            + " | ".join(
                [
                    f"`{site.arg}`",
                    _csv([f"`{t}`" for t in site.allowed_tags]),
                    f"`{site.default_tag}`",
                    custom,
                    legacy,
                ]
            )
            + " |"
        )
    lines.append("")

    out = "\n".join(lines) + "\n"
    logger.info("done", extra={"lines_generated": len(lines), "output_bytes": len(out)})
    return out


def write_markdown(registry: StrategyRegistry, call_sites: Mapping[str, CallSite], out_path: Path) -> None:
    md = generate_markdown(registry, call_sites)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(md, encoding="utf-8")
