# prioritizer/scoring/tiers.py
"""
Priority tiers from a final score. Fixed constants, never derived from data.

  score >= 80  must_watch
  score >= 60  worth_time
  score >= 40  highlights
  otherwise    skip
"""
from __future__ import annotations

from ..models import PriorityTier

PRIORITY_TIER_THRESHOLDS: tuple[tuple[int, PriorityTier], ...] = (
    (80, "must_watch"),
    (60, "worth_time"),
    (40, "highlights"),
)

FALLBACK_TIER: PriorityTier = "skip"

# Display / partition order
TIER_ORDER: tuple[PriorityTier, ...] = ("must_watch", "worth_time", "highlights", "skip")


def get_priority_tier(score: int) -> PriorityTier:
    for threshold, tier in PRIORITY_TIER_THRESHOLDS:
        if score >= threshold:
            return tier
    return FALLBACK_TIER
