# prioritizer/analysis/weights.py
"""
Weight and lookup tables for the emotional signal analyzer.

Categorical lookups are plain dicts: an unknown or missing value scores 0
(map-miss), it never raises.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


def _frozen(d: dict[str, int]) -> Mapping[str, int]:
    return MappingProxyType(dict(d))


# ---------------------------------------------------------------------------
# Suspense
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SuspenseWeights:
    score_margin: float = 0.35
    lead_changes: float = 0.20
    late_drama: float = 0.20
    overtime: float = 0.15
    uncertainty_duration: float = 0.10


# ---------------------------------------------------------------------------
# Stakes
# ---------------------------------------------------------------------------

PLAYOFF_IMPLICATIONS: Mapping[str, int] = _frozen({
    "none": 0,
    "clinch": 60,
    "elimination": 85,
    "championship": 100,
})

RIVALRY_LEVEL: Mapping[str, int] = _frozen({
    "none": 0,
    "division": 30,
    "historic": 60,
    "intense": 90,
})

TOURNAMENT_STAGE: Mapping[str, int] = _frozen({
    "group": 20,
    "knockout": 50,
    "semifinal": 75,
    "final": 100,
})

SEASON_CONTEXT: Mapping[str, int] = _frozen({
    "early": 10,
    "mid": 30,
    "late": 60,
    "postseason": 90,
})


@dataclass(frozen=True)
class StakesWeights:
    playoff_implications: Mapping[str, int] = field(default_factory=lambda: PLAYOFF_IMPLICATIONS)
    rivalry_level: Mapping[str, int] = field(default_factory=lambda: RIVALRY_LEVEL)
    tournament_stage: Mapping[str, int] = field(default_factory=lambda: TOURNAMENT_STAGE)
    season_context: Mapping[str, int] = field(default_factory=lambda: SEASON_CONTEXT)
    per_record_at_stake: int = 15
    records_cap: int = 50
    # Blend: playoff implications dominate
    playoff_share: float = 0.35
    rivalry_share: float = 0.20
    records_share: float = 0.15
    stage_share: float = 0.15
    season_share: float = 0.15


# ---------------------------------------------------------------------------
# Volatility
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VolatilityWeights:
    per_momentum_swing: int = 15
    per_critical_moment: int = 12
    per_intensity_peak: int = 10
    momentum_cap: int = 40
    critical_cap: int = 35
    peaks_cap: int = 25
    event_frequency: float = 0.5     # multiplier slope around frequency 1


# ---------------------------------------------------------------------------
# Underdog
# ---------------------------------------------------------------------------

UNDERDOG_PERFORMANCE: Mapping[str, int] = _frozen({
    "lost_badly": 0,
    "competitive": 40,
    "upset": 85,
    "dominant_upset": 100,
})


@dataclass(frozen=True)
class UnderdogWeights:
    min_ranking_differential: float = 3
    even_matchup_baseline: int = 20
    per_ranking_position: float = 3
    ranking_cap: int = 50
    odds_multiplier: float = 0.8
    odds_cap: int = 30
    odds_default: int = 15
    imbalance_multiplier: float = 2
    imbalance_cap: int = 20
    performance: Mapping[str, int] = field(default_factory=lambda: UNDERDOG_PERFORMANCE)
    context_share: float = 0.3
    performance_share: float = 0.7


# ---------------------------------------------------------------------------
# Transcendence
# ---------------------------------------------------------------------------

COMMUNITY_BUZZ: Mapping[str, int] = _frozen({
    "low": 10,
    "moderate": 30,
    "high": 60,
    "viral": 90,
})

MEDIA_RECOGNITION: Mapping[str, int] = _frozen({
    "none": 0,
    "notable": 25,
    "significant": 50,
    "historic": 90,
})


@dataclass(frozen=True)
class TranscendenceWeights:
    historic_moment: int = 50
    community_buzz: Mapping[str, int] = field(default_factory=lambda: COMMUNITY_BUZZ)
    media_recognition: Mapping[str, int] = field(default_factory=lambda: MEDIA_RECOGNITION)
    per_record_broken: int = 20
    records_cap: int = 40
    per_standout_performance: int = 15
    performances_cap: int = 30
    historic_share: float = 0.25
    buzz_share: float = 0.25
    media_share: float = 0.20
    records_share: float = 0.15
    performances_share: float = 0.15
    # Corroborating-signal thresholds
    buzz_signal: int = 60
    media_signal: int = 50


@dataclass(frozen=True)
class AnalysisWeights:
    suspense: SuspenseWeights = field(default_factory=SuspenseWeights)
    stakes: StakesWeights = field(default_factory=StakesWeights)
    volatility: VolatilityWeights = field(default_factory=VolatilityWeights)
    underdog: UnderdogWeights = field(default_factory=UnderdogWeights)
    transcendence: TranscendenceWeights = field(default_factory=TranscendenceWeights)


DEFAULT_WEIGHTS = AnalysisWeights()
