# prioritizer/scoring/priority.py
"""
Personalized priority for one event and one user.

Pure: profile, tags and preferences are supplied, never recomputed here,
and nothing is persisted.

Formula (v1):
  emotional_base    = round(.30 suspense + .25 stakes + .20 volatility
                            + .15 underdog + .10 transcendence)
  follow_bonus      = follow relevance (0–100, injectable)
  preference_bonus  = slider match over triggered conditions, 50 if none
  trending_bonus    = community_engagement (already 0–100)
  raw               = .50 base + .25 follow + .15 preference + .10 trending
  final             = clamp(round(raw × comprehension_multiplier), 0, 100)

All rounding is half-up.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..clamping import clamp_score, round_half_up
from ..models import (
    DEFAULT_EMOTIONAL_PREFERENCES,
    EmotionalPreferences,
    EmotionalProfile,
    EventPriority,
    PriorityCalculationInput,
    PriorityReason,
    PriorityScoreBreakdown,
    UserPreferences,
)
from .follows import (
    PARTICIPANT_FOLLOW_TYPES,
    FollowRelevanceFn,
    calculate_follow_relevance,
    comprehension_multiplier,
    get_sport_comprehension,
    matched_follows,
)
from .tiers import get_priority_tier

# Preference matching
PREFERENCE_TRIGGER = 70
DOMINANCE_MAX_VOLATILITY = 40
SLIDER_POINTS = 4          # slider 0–5 → 0–20 points
SLIDER_MAX_POINTS = 20
NO_TRIGGER_PREFERENCE_BONUS = 50

QUICK_FOLLOW_BONUS = 30

SUMMARY_SEPARATOR = " • "
SUMMARY_FALLBACK = "Worth checking out."
SUMMARY_MAX_FRAGMENTS = 2


@dataclass(frozen=True)
class PriorityWeights:
    emotional_base: float = 0.50
    follow_bonus: float = 0.25
    preference_match: float = 0.15
    trending_bonus: float = 0.10


DEFAULT_PRIORITY_WEIGHTS = PriorityWeights()


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

def calculate_emotional_base(profile: EmotionalProfile) -> int:
    return round_half_up(
        profile.suspense * 0.30
        + profile.stakes * 0.25
        + profile.volatility * 0.20
        + profile.underdog * 0.15
        + profile.transcendence * 0.10
    )


def calculate_preference_bonus(
    profile: EmotionalProfile,
    prefs: Optional[EmotionalPreferences] = None,
) -> int:
    """
    Each triggered condition adds slider × 4 (max 20) against 20 possible:
      suspense ≥ 70                                     nail_biters
      underdog ≥ 70                                     upsets
      transcendence ≥ 70                                historic_moments
      volatility ≥ 70                                   drama
      volatility < 40 and mean(suspense, stakes,
                               transcendence) ≥ 70      dominance
    Nothing triggered → 50.
    """
    prefs = prefs or DEFAULT_EMOTIONAL_PREFERENCES
    match_score = 0
    max_possible = 0

    triggers = [
        (profile.suspense >= PREFERENCE_TRIGGER, prefs.nail_biters),
        (profile.underdog >= PREFERENCE_TRIGGER, prefs.upsets),
        (profile.transcendence >= PREFERENCE_TRIGGER, prefs.historic_moments),
        (profile.volatility >= PREFERENCE_TRIGGER, prefs.drama),
    ]
    avg = (profile.suspense + profile.stakes + profile.transcendence) / 3
    triggers.append(
        (profile.volatility < DOMINANCE_MAX_VOLATILITY and avg >= PREFERENCE_TRIGGER, prefs.dominance)
    )

    for triggered, slider in triggers:
        if triggered:
            match_score += slider * SLIDER_POINTS
            max_possible += SLIDER_MAX_POINTS

    if max_possible == 0:
        return NO_TRIGGER_PREFERENCE_BONUS
    return round_half_up(match_score / max_possible * 100)


def combine_components(
    emotional_base: int,
    follow_bonus: int,
    preference_bonus: int,
    trending_bonus: int,
    multiplier: float,
    weights: PriorityWeights = DEFAULT_PRIORITY_WEIGHTS,
) -> tuple[float, int]:
    """Returns (raw weighted score, final clamped score)."""
    raw = (
        emotional_base * weights.emotional_base
        + follow_bonus * weights.follow_bonus
        + preference_bonus * weights.preference_match
        + trending_bonus * weights.trending_bonus
    )
    return raw, clamp_score(raw * multiplier)


# ---------------------------------------------------------------------------
# Reasons + summary
# ---------------------------------------------------------------------------

def _follow_reason(
    calc_input: PriorityCalculationInput,
    prefs: UserPreferences,
    follow_bonus: int,
) -> Optional[PriorityReason]:
    matches = matched_follows(prefs.follows, calc_input.participants, calc_input.league)
    if not matches:
        return None

    direct = [f.name for f in matches if f.type in PARTICIPANT_FOLLOW_TYPES]
    if direct:
        label = "Your teams" if len(direct) > 1 else "Your team"
        text = f"{label}: {', '.join(direct)}"
    else:
        text = f"Your league: {', '.join(f.name for f in matches)}"
    return PriorityReason(reason=text, type="follow", contribution=follow_bonus)


def generate_reasons(
    calc_input: PriorityCalculationInput,
    prefs: UserPreferences,
    breakdown: PriorityScoreBreakdown,
) -> list[PriorityReason]:
    """Independent checks, fixed order; several may apply at once."""
    reasons: list[PriorityReason] = []
    profile = calc_input.emotional_profile
    sliders = prefs.emotional_preferences

    if breakdown.follow_bonus >= 50:
        follow = _follow_reason(calc_input, prefs, breakdown.follow_bonus)
        if follow is not None:
            reasons.append(follow)

    if profile.suspense >= 75 and sliders.nail_biters >= 3:
        reasons.append(PriorityReason(
            reason="Nail-biter you'll love", type="preference_match", contribution=15,
        ))

    if profile.underdog >= 75 and sliders.upsets >= 3:
        reasons.append(PriorityReason(
            reason="Underdog story", type="preference_match", contribution=15,
        ))

    if profile.transcendence >= 70:
        reasons.append(PriorityReason(
            reason="Potential instant classic", type="historic", contribution=20,
        ))

    if breakdown.emotional_base >= 80:
        reasons.append(PriorityReason(
            reason="Exceptional event quality", type="universal",
            contribution=breakdown.emotional_base,
        ))

    if breakdown.trending_bonus >= 70:
        reasons.append(PriorityReason(
            reason="Everyone's talking about it", type="trending",
            contribution=breakdown.trending_bonus,
        ))

    if profile.stakes >= 80:
        reasons.append(PriorityReason(
            reason="High-stakes matchup", type="universal", contribution=20,
        ))

    if any("rivalry" in t.tag.lower() for t in calc_input.tags):
        reasons.append(PriorityReason(
            reason="Rivalry game", type="rivalry", contribution=15,
        ))

    return reasons


def _lead_phrase(profile: EmotionalProfile) -> Optional[str]:
    if profile.suspense >= 80:
        return "Edge-of-your-seat finish"
    if profile.stakes >= 80:
        return "Everything on the line"
    if profile.transcendence >= 70:
        return "One for the history books"
    if profile.underdog >= 75:
        return "David vs Goliath matchup"
    if profile.volatility >= 75:
        return "Wild ride from start to finish"
    return None


def generate_spoiler_free_summary(
    profile: EmotionalProfile,
    reasons: list[PriorityReason],
) -> str:
    """
    At most two fragments: one lead phrase (if any qualifies), then the
    preference-match reason, then the follow reason, each only while fewer
    than two fragments are collected. Never mentions the result.
    """
    parts: list[str] = []

    lead = _lead_phrase(profile)
    if lead:
        parts.append(lead)

    for reason_type in ("preference_match", "follow"):
        if len(parts) >= SUMMARY_MAX_FRAGMENTS:
            break
        match = next((r for r in reasons if r.type == reason_type), None)
        if match is not None:
            parts.append(match.reason)

    return SUMMARY_SEPARATOR.join(parts) if parts else SUMMARY_FALLBACK


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

class PriorityCalculator:
    """
    Immutably-configured, stateless. Follow relevance is delegated to an
    injectable function so callers can plug in richer entity matching.
    """

    def __init__(
        self,
        weights: PriorityWeights = DEFAULT_PRIORITY_WEIGHTS,
        follow_relevance: FollowRelevanceFn = calculate_follow_relevance,
    ) -> None:
        self._weights = weights
        self._follow_relevance = follow_relevance

    def calculate_score_breakdown(
        self,
        calc_input: PriorityCalculationInput,
        prefs: UserPreferences,
    ) -> PriorityScoreBreakdown:
        profile = calc_input.emotional_profile

        emotional_base = calculate_emotional_base(profile)
        follow_bonus = max(0, min(100, int(self._follow_relevance(
            prefs.follows, calc_input.participants, calc_input.league, calc_input.sport,
        ))))
        preference_bonus = calculate_preference_bonus(profile, prefs.emotional_preferences)
        trending_bonus = calc_input.community_engagement

        level = get_sport_comprehension(prefs.sport_familiarity, calc_input.sport)
        multiplier = comprehension_multiplier(level)

        raw, final = combine_components(
            emotional_base, follow_bonus, preference_bonus, trending_bonus,
            multiplier, self._weights,
        )
        return PriorityScoreBreakdown(
            emotional_base=emotional_base,
            follow_bonus=follow_bonus,
            preference_bonus=preference_bonus,
            trending_bonus=trending_bonus,
            comprehension_penalty=round_half_up((1 - multiplier) * 100),
            raw_score=raw,
            final_score=final,
        )

    def calculate_priority(
        self,
        calc_input: PriorityCalculationInput,
        prefs: UserPreferences,
    ) -> EventPriority:
        breakdown = self.calculate_score_breakdown(calc_input, prefs)
        reasons = generate_reasons(calc_input, prefs, breakdown)

        return EventPriority(
            event_id=calc_input.event_id,
            priority_score=breakdown.final_score,
            priority_tier=get_priority_tier(breakdown.final_score),
            priority_reasons=reasons,
            emotional_profile=calc_input.emotional_profile,
            tags=list(calc_input.tags),
            spoiler_level="safe",
            spoiler_free_summary=generate_spoiler_free_summary(calc_input.emotional_profile, reasons),
        )


_DEFAULT_CALCULATOR = PriorityCalculator()


def calculate_priority(
    calc_input: PriorityCalculationInput,
    prefs: UserPreferences,
) -> EventPriority:
    return _DEFAULT_CALCULATOR.calculate_priority(calc_input, prefs)


def quick_priority(
    event_id: str,
    profile: EmotionalProfile,
    is_followed_team: bool = False,
) -> EventPriority:
    """Priority without user preferences: emotional base, +30 for a followed team."""
    score = min(100, calculate_emotional_base(profile) + (QUICK_FOLLOW_BONUS if is_followed_team else 0))
    return EventPriority(
        event_id=event_id,
        priority_score=score,
        priority_tier=get_priority_tier(score),
        emotional_profile=profile,
    )


def create_default_priority(event_id: str, profile: EmotionalProfile) -> EventPriority:
    """Minimal-data priority: plain mean of the five dimensions."""
    score = clamp_score(
        (profile.suspense + profile.stakes + profile.volatility
         + profile.underdog + profile.transcendence) / 5
    )
    return EventPriority(
        event_id=event_id,
        priority_score=score,
        priority_tier=get_priority_tier(score),
        emotional_profile=profile,
    )
