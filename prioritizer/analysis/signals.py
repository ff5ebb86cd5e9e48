# prioritizer/analysis/signals.py
"""
Emotional signal analyzer.

Pure functions without DB access or shared mutable state. Safe to call from
any number of threads.

Turns raw per-factor signals into a 5-dimension EmotionalProfile:

  suspense       close score, lead changes, late drama, overtime, uncertainty
  stakes         playoff implications, rivalry, records at stake, stage, season
  volatility     (swings + critical moments + intensity peaks) × frequency
  underdog       ranking/odds/history context (30%) + performance (70%)
  transcendence  weighted signals × corroboration multiplier

Every dimension is computed independently from its own factor group, then
rounded half-up and clamped to [0, 100].
"""
from __future__ import annotations

from typing import Optional

from ..clamping import clamp_score
from ..models import (
    PROFILE_DIMENSIONS,
    EmotionalAnalysisInput,
    EmotionalAnalysisResult,
    EmotionalProfile,
    StakesFactors,
    SuspenseFactors,
    TranscendenceFactors,
    UnderdogFactors,
    VolatilityFactors,
)
from .confidence import compute_analysis_confidence, identify_data_sources
from .moments import identify_key_moments
from .weights import (
    DEFAULT_WEIGHTS,
    AnalysisWeights,
    StakesWeights,
    SuspenseWeights,
    TranscendenceWeights,
    UnderdogWeights,
    VolatilityWeights,
)

# Intensity bands (inclusive lower bounds)
INTENSITY_EXTREME = 90
INTENSITY_HIGH = 75
INTENSITY_MODERATE = 50


def _num(value: Optional[float], default: float = 0.0) -> float:
    return default if value is None else float(value)


def _count(items: Optional[list[str]]) -> int:
    return len(items) if items else 0


def _lookup(table, key: Optional[str]) -> int:
    if key is None:
        return 0
    return table.get(key, 0)


# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------

def compute_suspense(
    factors: SuspenseFactors,
    w: SuspenseWeights = DEFAULT_WEIGHTS.suspense,
) -> int:
    margin_score = 0.0 if factors.score_margin is None else max(0.0, 100 - factors.score_margin * 12)
    lead_change_score = min(100.0, _num(factors.lead_changes) * 15)
    late_drama_score = 100 if factors.late_drama else 0
    overtime_score = 100 if factors.went_to_overtime else 0
    uncertainty_score = _num(factors.uncertainty_duration)

    total = (
        margin_score * w.score_margin
        + lead_change_score * w.lead_changes
        + late_drama_score * w.late_drama
        + overtime_score * w.overtime
        + uncertainty_score * w.uncertainty_duration
    )
    return clamp_score(total)


def compute_stakes(
    factors: StakesFactors,
    w: StakesWeights = DEFAULT_WEIGHTS.stakes,
) -> int:
    playoff_score = _lookup(w.playoff_implications, factors.playoff_implications)
    rivalry_score = _lookup(w.rivalry_level, factors.rivalry_level)
    records_score = min(w.records_cap, _count(factors.records_at_stake) * w.per_record_at_stake)
    stage_score = _lookup(w.tournament_stage, factors.tournament_stage)
    season_score = _lookup(w.season_context, factors.season_context)

    total = (
        playoff_score * w.playoff_share
        + rivalry_score * w.rivalry_share
        + records_score * w.records_share
        + stage_score * w.stage_share
        + season_score * w.season_share
    )
    return clamp_score(total)


def compute_volatility(
    factors: VolatilityFactors,
    w: VolatilityWeights = DEFAULT_WEIGHTS.volatility,
) -> int:
    swings_score = min(w.momentum_cap, _num(factors.momentum_swings) * w.per_momentum_swing)
    moments_score = min(w.critical_cap, _num(factors.critical_moments) * w.per_critical_moment)
    peaks_score = min(w.peaks_cap, _num(factors.intensity_peaks) * w.per_intensity_peak)

    # Absent frequency is neutral (multiplier 1.0)
    frequency = _num(factors.event_frequency, default=1.0)
    frequency_multiplier = 1 + (frequency - 1) * w.event_frequency

    return clamp_score((swings_score + moments_score + peaks_score) * frequency_multiplier)


def compute_underdog(
    factors: UnderdogFactors,
    w: UnderdogWeights = DEFAULT_WEIGHTS.underdog,
) -> int:
    ranking_differential = _num(factors.ranking_differential)
    if ranking_differential < w.min_ranking_differential:
        return w.even_matchup_baseline

    ranking_score = min(w.ranking_cap, ranking_differential * w.per_ranking_position)
    if factors.odds_differential is None:
        odds_score = w.odds_default
    else:
        odds_score = min(w.odds_cap, factors.odds_differential * w.odds_multiplier)
    history_score = min(w.imbalance_cap, _num(factors.historical_imbalance) * w.imbalance_multiplier)
    performance_score = _lookup(w.performance, factors.underdog_performance)

    total = (
        (ranking_score + odds_score + history_score) * w.context_share
        + performance_score * w.performance_share
    )
    return clamp_score(total)


def signal_multiplier(signals: int) -> float:
    """Transcendence needs corroboration: ≥3 signals 1.2, ≥2 1.0, else 0.7."""
    if signals >= 3:
        return 1.2
    if signals >= 2:
        return 1.0
    return 0.7


def compute_transcendence(
    factors: TranscendenceFactors,
    w: TranscendenceWeights = DEFAULT_WEIGHTS.transcendence,
) -> int:
    historic_score = w.historic_moment if factors.historic_moment else 0
    buzz_score = _lookup(w.community_buzz, factors.community_buzz)
    media_score = _lookup(w.media_recognition, factors.media_recognition)
    records_score = min(w.records_cap, _count(factors.records_broken) * w.per_record_broken)
    performance_score = min(
        w.performances_cap,
        _count(factors.standout_performances) * w.per_standout_performance,
    )

    signals = sum([
        historic_score > 0,
        buzz_score >= w.buzz_signal,
        media_score >= w.media_signal,
        records_score > 0,
        performance_score > 0,
    ])

    base = (
        historic_score * w.historic_share
        + buzz_score * w.buzz_share
        + media_score * w.media_share
        + records_score * w.records_share
        + performance_score * w.performances_share
    )
    return clamp_score(base * signal_multiplier(signals))


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------

class EmotionalAnalyzer:
    """
    Immutably-configured analyzer. Build once at startup and share it;
    module-level `analyze()` uses the default weights.
    """

    def __init__(self, weights: AnalysisWeights = DEFAULT_WEIGHTS) -> None:
        self._weights = weights

    @property
    def weights(self) -> AnalysisWeights:
        return self._weights

    def profile(self, signals: EmotionalAnalysisInput) -> EmotionalProfile:
        w = self._weights
        return EmotionalProfile(
            suspense=compute_suspense(signals.suspense, w.suspense),
            stakes=compute_stakes(signals.stakes, w.stakes),
            volatility=compute_volatility(signals.volatility, w.volatility),
            underdog=compute_underdog(signals.underdog, w.underdog),
            transcendence=compute_transcendence(signals.transcendence, w.transcendence),
        )

    def analyze(self, signals: EmotionalAnalysisInput) -> EmotionalAnalysisResult:
        # Low confidence is informational only; it never short-circuits scoring.
        return EmotionalAnalysisResult(
            profile=self.profile(signals),
            confidence=compute_analysis_confidence(signals),
            key_moments=identify_key_moments(signals),
            data_sources=identify_data_sources(signals),
        )


_DEFAULT_ANALYZER = EmotionalAnalyzer()


def analyze(signals: EmotionalAnalysisInput) -> EmotionalAnalysisResult:
    return _DEFAULT_ANALYZER.analyze(signals)


def quick_analyze(
    score_margin: float,
    overtime: bool,
    is_playoff: bool,
    is_rivalry: bool,
) -> EmotionalProfile:
    """Rough profile from four essentials, for events without full signal data."""
    suspense = max(0.0, 100 - score_margin * 15) + (25 if overtime else 0)
    stakes = (70 if is_playoff else 30) + (20 if is_rivalry else 0)
    volatility = 60 if overtime else 40
    underdog = 50
    transcendence = 60 if (is_playoff and overtime) else 30

    return EmotionalProfile(
        suspense=clamp_score(suspense),
        stakes=clamp_score(stakes),
        volatility=clamp_score(volatility),
        underdog=clamp_score(underdog),
        transcendence=clamp_score(transcendence),
    )


def get_emotional_intensity(score: int) -> str:
    if score >= INTENSITY_EXTREME:
        return "extreme"
    if score >= INTENSITY_HIGH:
        return "high"
    if score >= INTENSITY_MODERATE:
        return "moderate"
    return "low"


def get_dominant_factor(profile: EmotionalProfile) -> str:
    """Highest dimension; ties go to the earlier dimension."""
    best = PROFILE_DIMENSIONS[0]
    for dim in PROFILE_DIMENSIONS[1:]:
        if getattr(profile, dim) > getattr(profile, best):
            best = dim
    return best
