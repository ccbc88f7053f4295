from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from stratkit.strategies.builtin import CALL_SITES, DEFAULT_REGISTRY
from stratkit.strategies.errors import StrategyError
from stratkit.strategies.registry import load_call_sites
from stratkit.strategies.registry_models import StrategyConfig
from stratkit.strategies.reporting import write_markdown


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Strategy registry CLI – docs and resolution checks")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_docs = sub.add_parser("docs", help="Generate a Markdown strategy reference")
    p_docs.add_argument("--out", default="docs/STRATEGIES.md")
    p_docs.add_argument(
        "--call-sites",
        default=None,
        help="JSON file with extra call sites to document",
    )

    p_res = sub.add_parser("resolve", help="Resolve a strategy name for a function")
    p_res.add_argument("call_site", help="Function name, e.g. str_trim")
    p_res.add_argument("name", help="Strategy tag")
    p_res.add_argument("--params", default=None, help="JSON object of strategy parameters")

    p_chk = sub.add_parser("check-config", help="Validate a call-site JSON file")
    p_chk.add_argument("path")

    args = ap.parse_args(argv)

    if args.cmd == "docs":
        sites = dict(CALL_SITES)
        if args.call_sites:
            sites.update(load_call_sites(Path(args.call_sites), DEFAULT_REGISTRY))
        write_markdown(DEFAULT_REGISTRY, sites, Path(args.out))
        print(f"Wrote {args.out}")
        return 0

    if args.cmd == "resolve":
        site = CALL_SITES.get(args.call_site)
        if site is None:
            print(f"Unknown function {args.call_site!r}; use one of {', '.join(sorted(CALL_SITES))}", file=sys.stderr)
            return 2
        descriptor = args.name
        if args.params is not None:
            try:
                descriptor = StrategyConfig(args.name, json.loads(args.params))
            except json.JSONDecodeError as e:
                print(f"--params is not valid JSON: {e}", file=sys.stderr)
                return 2
        try:
            resolved = DEFAULT_REGISTRY.select(site, descriptor)
        except StrategyError as e:
            print(str(e), file=sys.stderr)
            return 2
        payload = {
            "call_site": site.name,
            "tag": resolved.tag,
            "params": resolved.params.model_dump() if resolved.params is not None else None,
        }
        print(json.dumps(payload, ensure_ascii=False))
        return 0

    if args.cmd == "check-config":
        sites = load_call_sites(Path(args.path), DEFAULT_REGISTRY)
        print(f"OK: {len(sites)} call sites")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
