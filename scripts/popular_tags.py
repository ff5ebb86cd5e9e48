#!/usr/bin/env python3
# scripts/popular_tags.py
"""
Print the most-submitted community tags from the configured tag store.

Usage:
  python -m scripts.popular_tags
  python -m scripts.popular_tags --limit 50
  python -m scripts.popular_tags --tag nail-biter     # events carrying a tag
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional

from prioritizer import config
from prioritizer.db.tag_store import get_tag_store
from prioritizer.tagging.service import DEFAULT_POPULAR_LIMIT, TagService
from prioritizer.tagging.vocab import infer_category


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Show popular community tags.")
    parser.add_argument("--limit", type=int, default=DEFAULT_POPULAR_LIMIT, help="Number of tags to show.")
    parser.add_argument("--tag", default=None, help="List events that carry this tag instead.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL)
    service = TagService(get_tag_store())

    if args.tag:
        event_ids = service.find_events_by_tag(args.tag)
        print(f"[popular_tags] tag={args.tag!r} events={len(event_ids)}")
        for event_id in event_ids:
            print(f"  {event_id}")
        return 0

    tags = service.popular_tags(limit=args.limit)
    print(f"[popular_tags] backend={config.STORE_BACKEND} shown={len(tags)}")
    for rank, t in enumerate(tags, start=1):
        print(f"  {rank:>3}. {t.tag:<28} {t.count:>6}  ({infer_category(t.tag)})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
