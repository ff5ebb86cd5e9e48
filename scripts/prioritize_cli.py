#!/usr/bin/env python3
# scripts/prioritize_cli.py
"""
Build a tiered watch list for one user from a JSON file of event bundles.

Each bundle is a RawEventBundle: event metadata plus raw emotional signals.
Preferences and community tags come from the configured stores
(PRIORITIZER_STORE=memory|supabase).

Usage:
  python -m scripts.prioritize_cli events.json --user-id u-123
  python -m scripts.prioritize_cli events.json --user-id u-123 --sport basketball --max-duration 150
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional

from prioritizer import config
from prioritizer.db.preferences_store import get_preferences_store
from prioritizer.db.tag_store import get_tag_store
from prioritizer.models import PriorityFilters
from prioritizer.pipeline import load_bundles, prioritize_bundles
from prioritizer.preferences import PreferencesService
from prioritizer.scoring.listing import summarize_priorities
from prioritizer.scoring.tiers import TIER_ORDER
from prioritizer.tagging.service import TagService


def build_filters(args: argparse.Namespace) -> Optional[PriorityFilters]:
    filters = PriorityFilters(
        sports=args.sport or None,
        leagues=args.league or None,
        tags=args.tag or None,
        followed_only=args.followed_only,
        max_duration=args.max_duration,
    )
    if filters == PriorityFilters():
        return None
    return filters


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Prioritize finished events for one user.")
    parser.add_argument("bundles", help="Path to a JSON list of event bundles.")
    parser.add_argument("--user-id", required=True, help="User whose preferences drive the ranking.")
    parser.add_argument("--sport", action="append", help="Keep only this sport (repeatable).")
    parser.add_argument("--league", action="append", help="Keep only this league (repeatable).")
    parser.add_argument("--tag", action="append", help="Keep events carrying this tag (repeatable).")
    parser.add_argument("--followed-only", action="store_true", help="Only events involving a follow.")
    parser.add_argument("--max-duration", type=int, default=None, help="Maximum duration in minutes.")
    parser.add_argument("--watched", action="append", default=[], help="Event id already watched (repeatable).")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    bundles = load_bundles(args.bundles)
    preferences = PreferencesService(get_preferences_store())
    tag_service = TagService(get_tag_store())

    result = prioritize_bundles(
        args.user_id,
        bundles,
        preferences,
        tag_service,
        filters=build_filters(args),
        already_watched=args.watched,
    )
    prioritized = result.prioritized

    print(f"\n=== watch list for {prioritized.user_id} ===")
    print(f"week: {prioritized.time_range.start:%Y-%m-%d} → {prioritized.time_range.end:%Y-%m-%d}")
    for tier in TIER_ORDER:
        events = getattr(prioritized.tiers, tier)
        if not events:
            continue
        print(f"\n[{tier}] ({len(events)})")
        for p in events:
            tags = ", ".join(t.tag for t in p.tags[:3])
            print(f"  {p.priority_score:>3}  {p.event_id}  {p.spoiler_free_summary}")
            if tags:
                print(f"       tags: {tags}")

    summary = summarize_priorities(prioritized, result.inputs)
    print(
        f"\n[prioritize][summary]"
        f" bundles={len(bundles)}"
        f" total={summary.total_events}"
        + "".join(f" {tier}={summary.tier_counts[tier]}" for tier in TIER_ORDER)
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
