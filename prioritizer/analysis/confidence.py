# prioritizer/analysis/confidence.py
"""
Data-completeness confidence for an emotional analysis (v1).

A deterministic score that reflects how many of the expected raw signal
fields were supplied.  Range: 0–100.

This is NOT:
  - the per-tag confidence (prioritizer/tagging/algorithm.py)
  - a gate (NEVER short-circuits profile computation)

Expected fields (23 total):
  suspense       5   score_margin, lead_changes, late_drama,
                     went_to_overtime, uncertainty_duration
  stakes         5   playoff_implications, rivalry_level, records_at_stake,
                     season_context, tournament_stage
  volatility     4   momentum_swings, critical_moments, event_frequency,
                     intensity_peaks
  underdog       4   ranking_differential, historical_imbalance,
                     underdog_performance, odds_differential
  transcendence  5   historic_moment, community_buzz, media_recognition,
                     records_broken, standout_performances

A field counts when it is present (not None). An empty list counts.
"""
from __future__ import annotations

from ..clamping import clamp_score
from ..models import EmotionalAnalysisInput

EXPECTED_FIELDS: dict[str, tuple[str, ...]] = {
    "suspense": (
        "score_margin", "lead_changes", "late_drama",
        "went_to_overtime", "uncertainty_duration",
    ),
    "stakes": (
        "playoff_implications", "rivalry_level", "records_at_stake",
        "season_context", "tournament_stage",
    ),
    "volatility": (
        "momentum_swings", "critical_moments", "event_frequency",
        "intensity_peaks",
    ),
    "underdog": (
        "ranking_differential", "historical_imbalance",
        "underdog_performance", "odds_differential",
    ),
    "transcendence": (
        "historic_moment", "community_buzz", "media_recognition",
        "records_broken", "standout_performances",
    ),
}

TOTAL_EXPECTED_FIELDS: int = sum(len(v) for v in EXPECTED_FIELDS.values())


def count_defined_fields(signals: EmotionalAnalysisInput) -> int:
    defined = 0
    for group, fields in EXPECTED_FIELDS.items():
        factors = getattr(signals, group)
        for name in fields:
            if getattr(factors, name) is not None:
                defined += 1
    return defined


def compute_analysis_confidence(signals: EmotionalAnalysisInput) -> int:
    """defined fields / 23 × 100, rounded half-up."""
    return clamp_score(count_defined_fields(signals) / TOTAL_EXPECTED_FIELDS * 100)


def identify_data_sources(signals: EmotionalAnalysisInput) -> list[str]:
    """Provenance labels, in fixed order, gated on specific fields."""
    sources: list[str] = []

    if signals.suspense.score_margin is not None:
        sources.append("game_score")
    if signals.suspense.lead_changes is not None:
        sources.append("play_by_play")
    if signals.stakes.playoff_implications not in (None, "none"):
        sources.append("standings")
    if signals.transcendence.community_buzz not in (None, "low"):
        sources.append("social_media")
    if signals.transcendence.media_recognition not in (None, "none"):
        sources.append("media_coverage")
    if signals.underdog.odds_differential is not None:
        sources.append("betting_odds")

    return sources
