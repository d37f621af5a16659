"""
run_visibility_report.py: end-to-end visibility report against real APIs

Runs the whole pipeline in one go:
  1. Check which secrets are usable (Google CSE, Gemini, other LLMs)
  2. Discover and validate competitors
  3. Score citations and AI traffic share on every configured model
  4. Print a summary table and dump the JSON report

Usage:
    python run_visibility_report.py "Semrush" "SEO software" [--full] [--comprehensive] [--out report.json]
"""

import argparse
import asyncio
import json
import logging
import sys

from visibility.core.config import settings
from visibility.core.errors import ConfigurationError
from visibility.core.logging import setup_logging
from visibility.core.sentry import init_sentry
from visibility.discovery.pipeline import COMPREHENSIVE, ENHANCED
from visibility.services.visibility_report import build_visibility_report

logger = logging.getLogger("visibility_report")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build an AI visibility report for a company")
    parser.add_argument("company")
    parser.add_argument("industry", nargs="?", default="")
    parser.add_argument("--full", action="store_true", help="12 queries per model instead of 6")
    parser.add_argument("--comprehensive", action="store_true", help="sequential, fail-closed discovery")
    parser.add_argument("--out", default="", help="write the JSON report to this file")
    return parser.parse_args(argv)


async def main(argv: list[str]) -> int:
    args = _parse_args(argv)
    setup_logging(settings)
    init_sentry(settings)

    # ── Step 1: Secrets ──────────────────────────────────────
    print("\n" + "=" * 60)
    print("  Step 1: Secrets")
    print("=" * 60)
    backends = settings.configured_backends()
    print(f"  Google CSE: {'✓ configured' if settings.search_configured else '✗ NOT CONFIGURED'}")
    print(f"  LLMs:       {', '.join(backends) or 'none'}")

    # ── Step 2-3: Report ─────────────────────────────────────
    print("\n" + "=" * 60)
    print(f"  Step 2: Report for {args.company!r} ({args.industry or 'no industry'})")
    print("=" * 60)
    try:
        report = await build_visibility_report(
            args.company,
            args.industry,
            fast_mode=not args.full,
            profile=COMPREHENSIVE if args.comprehensive else ENHANCED,
            settings=settings,
        )
    except ConfigurationError as e:
        print(f"\n  ❌ {e} (setting: {e.setting})")
        return 1

    # ── Step 4: Summary ──────────────────────────────────────
    print("\n" + "=" * 60)
    print("  Step 3: Summary")
    print("=" * 60)
    print(f"  {'Name':<30} {'Relevance':>9} {'Citation':>9} {'Equal':>7} {'Traffic':>8}")
    for row in report.competitors:
        g = row.citations.global_ if row.citations else None
        relevance = "target" if row.is_target else ("-" if row.relevance_score is None else str(row.relevance_score))
        print(
            f"  {row.name[:30]:<30} {relevance:>9} "
            f"{(g.citation_score * 100 if g else 0):>8.1f}% "
            f"{(g.equal_weighted_global * 100 if g else 0):>6.1f}% "
            f"{(row.traffic_share.global_share if row.traffic_share else 0):>7.1f}%"
        )

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
        print(f"\n  ✓ Report written to {args.out}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
