# prioritizer/scoring/listing.py
"""
List-level prioritization: filter → score → sort → partition into tiers.

Invariants:
  - filters are a conjunction; an absent filter excludes nothing
  - sort is by priority_score descending and stable (ties keep input order)
  - tiers partition the sorted list without re-sorting, so each bucket stays
    score-descending and every surviving event lands in exactly one bucket
  - an empty input yields an empty, well-formed list
"""
from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from .. import config
from ..models import (
    PROFILE_DIMENSIONS,
    FactorAverage,
    PrioritizedEventList,
    PriorityCalculationInput,
    PriorityFilters,
    PriorityListSummary,
    PriorityTiers,
    SportBreakdown,
    TagCount,
    TimeRange,
    UserPreferences,
)
from .priority import PriorityCalculator
from .tiers import TIER_ORDER

TOP_TAGS_LIMIT = 10


def passes_filters(
    calc_input: PriorityCalculationInput,
    filters: PriorityFilters,
    prefs: UserPreferences,
) -> bool:
    if filters.sports and calc_input.sport not in filters.sports:
        return False

    if filters.leagues and calc_input.league not in filters.leagues:
        return False

    if filters.followed_only:
        followed = any(
            f.id in calc_input.participants or f.id == calc_input.league
            for f in prefs.follows
        )
        if not followed:
            return False

    if filters.tags:
        event_tags = {t.tag.lower() for t in calc_input.tags}
        if not any(t.lower() in event_tags for t in filters.tags):
            return False

    # Unknown duration never excludes
    if (
        filters.max_duration is not None
        and calc_input.duration is not None
        and calc_input.duration > filters.max_duration
    ):
        return False

    return True


def apply_filters(
    inputs: Sequence[PriorityCalculationInput],
    filters: Optional[PriorityFilters],
    prefs: UserPreferences,
) -> list[PriorityCalculationInput]:
    if filters is None:
        return list(inputs)
    return [i for i in inputs if passes_filters(i, filters, prefs)]


def current_week_range(now: Optional[datetime] = None, tz_name: Optional[str] = None) -> TimeRange:
    """
    Sunday 00:00 through Saturday 23:59:59.999999 of the current week in the
    configured timezone. Independent of the events being ranked.
    """
    tz = ZoneInfo(tz_name or config.TIMEZONE)
    local_now = (now or datetime.now(tz)).astimezone(tz)

    days_since_sunday = (local_now.weekday() + 1) % 7
    start_day = local_now.date() - timedelta(days=days_since_sunday)
    start = datetime.combine(start_day, time.min, tzinfo=tz)
    end = datetime.combine(start_day + timedelta(days=6), time.max, tzinfo=tz)
    return TimeRange(start=start, end=end)


def calculate_priorities(
    inputs: Sequence[PriorityCalculationInput],
    prefs: UserPreferences,
    filters: Optional[PriorityFilters] = None,
    calculator: Optional[PriorityCalculator] = None,
    now: Optional[datetime] = None,
) -> PrioritizedEventList:
    calculator = calculator or PriorityCalculator()
    events = apply_filters(inputs, filters, prefs)

    priorities = [calculator.calculate_priority(e, prefs) for e in events]
    priorities.sort(key=lambda p: -p.priority_score)

    buckets: dict[str, list] = {tier: [] for tier in TIER_ORDER}
    for p in priorities:
        buckets[p.priority_tier].append(p)

    generated_at = now or datetime.now(timezone.utc)
    return PrioritizedEventList(
        user_id=prefs.user_id,
        tiers=PriorityTiers(**buckets),
        total_events=len(priorities),
        generated_at=generated_at,
        time_range=current_week_range(generated_at),
    )


def flatten_tiers(result: PrioritizedEventList) -> list:
    """Tier order, score-descending within each tier."""
    return [p for tier in TIER_ORDER for p in getattr(result.tiers, tier)]


def summarize_priorities(
    result: PrioritizedEventList,
    inputs: Sequence[PriorityCalculationInput],
) -> PriorityListSummary:
    sports_by_event = {i.event_id: i.sport for i in inputs}
    all_priorities = flatten_tiers(result)

    tag_counts: dict[str, int] = {}
    sport_stats: dict[str, list[int]] = {}
    for p in all_priorities:
        for t in p.tags:
            tag_counts[t.tag] = tag_counts.get(t.tag, 0) + 1
        sport = sports_by_event.get(p.event_id)
        if sport is not None:
            sport_stats.setdefault(sport, []).append(p.priority_score)

    top_tags = sorted(tag_counts.items(), key=lambda kv: -kv[1])[:TOP_TAGS_LIMIT]

    sport_breakdown = sorted(
        (
            SportBreakdown(sport=sport, count=len(scores), avg_priority=sum(scores) / len(scores))
            for sport, scores in sport_stats.items()
        ),
        key=lambda s: -s.avg_priority,
    )

    must_watch = result.tiers.must_watch
    factors: list[FactorAverage] = []
    if must_watch:
        factors = sorted(
            (
                FactorAverage(
                    factor=dim,
                    avg_score=sum(getattr(p.emotional_profile, dim) for p in must_watch) / len(must_watch),
                )
                for dim in PROFILE_DIMENSIONS
            ),
            key=lambda f: -f.avg_score,
        )

    return PriorityListSummary(
        total_events=result.total_events,
        tier_counts={tier: len(getattr(result.tiers, tier)) for tier in TIER_ORDER},
        top_emotional_factors=factors,
        top_tags=[TagCount(tag=tag, count=count) for tag, count in top_tags],
        sport_breakdown=sport_breakdown,
    )
