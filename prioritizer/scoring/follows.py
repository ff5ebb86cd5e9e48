# prioritizer/scoring/follows.py
"""
How the user's follows and sport familiarity relate to one event.

Follow relevance (per follow, first matching rule only, total capped at 100):
  team/player follow whose id is a participant    strength × 20
  league/competition follow whose id is the league strength × 10
  any follow whose sport is the event sport        strength × 2

Comprehension multiplier by familiarity level:
  expert 1.0 | informed 0.95 | casual 0.90 | novice / unknown 0.8
"""
from __future__ import annotations

from typing import Callable, Sequence

from ..models import ComprehensionLevel, SportFamiliarity, UserFollow

FollowRelevanceFn = Callable[[Sequence[UserFollow], Sequence[str], str, str], int]

PARTICIPANT_FOLLOW_TYPES: frozenset[str] = frozenset({"team", "player"})
LEAGUE_FOLLOW_TYPES: frozenset[str] = frozenset({"league", "competition"})

COMPREHENSION_MULTIPLIERS: dict[str, float] = {
    "expert": 1.0,
    "informed": 0.95,
    "casual": 0.90,
    "novice": 0.8,
}
UNKNOWN_COMPREHENSION_MULTIPLIER = 0.8


def calculate_follow_relevance(
    follows: Sequence[UserFollow],
    participants: Sequence[str],
    league: str,
    sport: str,
) -> int:
    relevance = 0
    for follow in follows:
        if follow.type in PARTICIPANT_FOLLOW_TYPES and follow.id in participants:
            relevance += follow.follow_strength * 20
        elif follow.type in LEAGUE_FOLLOW_TYPES and follow.id == league:
            relevance += follow.follow_strength * 10
        elif follow.sport is not None and follow.sport == sport:
            relevance += follow.follow_strength * 2
    return min(100, relevance)


def matched_follows(
    follows: Sequence[UserFollow],
    participants: Sequence[str],
    league: str,
) -> list[UserFollow]:
    """Follows that point directly at a participant or at the league."""
    return [
        f for f in follows
        if (f.type in PARTICIPANT_FOLLOW_TYPES and f.id in participants)
        or (f.type in LEAGUE_FOLLOW_TYPES and f.id == league)
    ]


def get_sport_comprehension(
    familiarity: Sequence[SportFamiliarity],
    sport: str,
) -> ComprehensionLevel:
    for fam in familiarity:
        if fam.sport == sport:
            return fam.level
    return "novice"


def comprehension_multiplier(level: str) -> float:
    return COMPREHENSION_MULTIPLIERS.get(level, UNKNOWN_COMPREHENSION_MULTIPLIER)
