# tests/test_signal_analyzer.py
"""
Emotional signal analyzer tests:

  Part 1: Per-dimension formulas (suspense, stakes, volatility, underdog,
          transcendence) incl. caps, map misses and absent fields
  Part 2: Full analyze() on a rich and an empty input
  Part 3: quick_analyze / intensity / dominant factor helpers
  Part 4: Configurable weights
"""
from __future__ import annotations

from prioritizer.models import (
    EmotionalAnalysisInput,
    EmotionalProfile,
    StakesFactors,
    SuspenseFactors,
    TranscendenceFactors,
    UnderdogFactors,
    VolatilityFactors,
)


def _rich_input() -> EmotionalAnalysisInput:
    return EmotionalAnalysisInput(
        suspense=SuspenseFactors(
            score_margin=2,
            lead_changes=8,
            late_drama=True,
            went_to_overtime=True,
            uncertainty_duration=90,
        ),
        stakes=StakesFactors(
            playoff_implications="elimination",
            rivalry_level="intense",
            records_at_stake=["most points", "longest streak"],
            tournament_stage="final",
            season_context="postseason",
        ),
        volatility=VolatilityFactors(
            momentum_swings=3,
            critical_moments=2,
            event_frequency=1.2,
            intensity_peaks=1,
        ),
        underdog=UnderdogFactors(
            ranking_differential=10,
            odds_differential=20,
            historical_imbalance=5,
            underdog_performance="upset",
        ),
        transcendence=TranscendenceFactors(
            historic_moment=True,
            community_buzz="viral",
            media_recognition="significant",
            records_broken=["fastest hat-trick"],
            standout_performances=["keeper", "striker"],
        ),
    )


# ---------------------------------------------------------------------------
# Part 1: dimensions
# ---------------------------------------------------------------------------

class TestSuspense:

    def test_rich_signals(self):
        from prioritizer.analysis.signals import compute_suspense
        # 76*.35 + 100*.20 + 100*.20 + 100*.15 + 90*.10 = 90.6
        assert compute_suspense(_rich_input().suspense) == 91

    def test_large_margin_floors_at_zero(self):
        from prioritizer.analysis.signals import compute_suspense
        assert compute_suspense(SuspenseFactors(score_margin=10)) == 0

    def test_lead_changes_capped(self):
        from prioritizer.analysis.signals import compute_suspense
        capped = compute_suspense(SuspenseFactors(score_margin=10, lead_changes=7))
        more = compute_suspense(SuspenseFactors(score_margin=10, lead_changes=20))
        assert capped == more == 20

    def test_absent_margin_scores_nothing(self):
        from prioritizer.analysis.signals import compute_suspense
        assert compute_suspense(SuspenseFactors()) == 0

    def test_present_zero_margin_scores_full(self):
        from prioritizer.analysis.signals import compute_suspense
        # 100*.35
        assert compute_suspense(SuspenseFactors(score_margin=0)) == 35

    def test_non_finite_margin_rejected(self):
        import pytest
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            SuspenseFactors(score_margin=float("nan"))
        with pytest.raises(ValidationError):
            SuspenseFactors(score_margin=float("inf"))


class TestStakes:

    def test_rich_signals(self):
        from prioritizer.analysis.signals import compute_stakes
        # 85*.35 + 90*.20 + 30*.15 + 100*.15 + 90*.15 = 80.75
        assert compute_stakes(_rich_input().stakes) == 81

    def test_map_miss_scores_zero(self):
        from prioritizer.analysis.signals import compute_stakes
        assert compute_stakes(StakesFactors(tournament_stage="quarterfinal", season_context="preseason")) == 0

    def test_records_at_stake_capped(self):
        from prioritizer.analysis.signals import compute_stakes
        # min(50, 4*15) * .15 = 7.5 → 8
        assert compute_stakes(StakesFactors(records_at_stake=["a", "b", "c", "d"])) == 8

    def test_all_absent(self):
        from prioritizer.analysis.signals import compute_stakes
        assert compute_stakes(StakesFactors()) == 0


class TestVolatility:

    def test_rich_signals(self):
        from prioritizer.analysis.signals import compute_volatility
        # (40 + 24 + 10) * 1.1 = 81.4
        assert compute_volatility(_rich_input().volatility) == 81

    def test_absent_frequency_is_neutral(self):
        from prioritizer.analysis.signals import compute_volatility
        assert compute_volatility(VolatilityFactors(momentum_swings=1)) == 15

    def test_frequency_scales(self):
        from prioritizer.analysis.signals import compute_volatility
        assert compute_volatility(VolatilityFactors(momentum_swings=1, event_frequency=3)) == 30
        assert compute_volatility(VolatilityFactors(momentum_swings=1, event_frequency=0)) == 8

    def test_clamped_to_100(self):
        from prioritizer.analysis.signals import compute_volatility
        score = compute_volatility(VolatilityFactors(
            momentum_swings=10, critical_moments=10, intensity_peaks=10, event_frequency=5,
        ))
        assert score == 100


class TestUnderdog:

    def test_rich_signals(self):
        from prioritizer.analysis.signals import compute_underdog
        # (30 + 16 + 10) * .3 + 85 * .7 = 76.3
        assert compute_underdog(_rich_input().underdog) == 76

    def test_even_matchup_returns_baseline(self):
        from prioritizer.analysis.signals import compute_underdog
        assert compute_underdog(UnderdogFactors(ranking_differential=2, underdog_performance="dominant_upset")) == 20
        assert compute_underdog(UnderdogFactors()) == 20

    def test_absent_odds_default_to_15(self):
        from prioritizer.analysis.signals import compute_underdog
        # (9 + 15 + 0) * .3 = 7.2
        assert compute_underdog(UnderdogFactors(ranking_differential=3)) == 7

    def test_present_zero_odds_score_zero(self):
        from prioritizer.analysis.signals import compute_underdog
        # 9 * .3 = 2.7
        assert compute_underdog(UnderdogFactors(ranking_differential=3, odds_differential=0)) == 3


class TestTranscendence:

    def test_rich_signals(self):
        from prioritizer.analysis.signals import compute_transcendence
        # (12.5 + 22.5 + 10 + 3 + 4.5) * 1.2 = 63
        assert compute_transcendence(_rich_input().transcendence) == 63

    def test_single_signal_is_dampened(self):
        from prioritizer.analysis.signals import compute_transcendence
        # 50 * .25 * .7 = 8.75
        assert compute_transcendence(TranscendenceFactors(historic_moment=True)) == 9

    def test_two_signals_are_neutral(self):
        from prioritizer.analysis.signals import compute_transcendence
        # (12.5 + 15) * 1.0 = 27.5
        score = compute_transcendence(TranscendenceFactors(historic_moment=True, community_buzz="high"))
        assert score == 28

    def test_weak_buzz_is_not_a_signal(self):
        from prioritizer.analysis.signals import compute_transcendence
        # moderate buzz (30) is below the signal threshold: 1 signal → 0.7
        # (12.5 + 7.5) * .7 = 14
        score = compute_transcendence(TranscendenceFactors(historic_moment=True, community_buzz="moderate"))
        assert score == 14

    def test_signal_multiplier(self):
        from prioritizer.analysis.signals import signal_multiplier
        assert signal_multiplier(0) == 0.7
        assert signal_multiplier(1) == 0.7
        assert signal_multiplier(2) == 1.0
        assert signal_multiplier(5) == 1.2


# ---------------------------------------------------------------------------
# Part 2: analyze()
# ---------------------------------------------------------------------------

class TestAnalyze:

    def test_rich_input_profile(self):
        from prioritizer.analysis.signals import analyze
        result = analyze(_rich_input())
        assert result.profile == EmotionalProfile(
            suspense=91, stakes=81, volatility=81, underdog=76, transcendence=63,
        )

    def test_rich_input_confidence_and_sources(self):
        from prioritizer.analysis.signals import analyze
        result = analyze(_rich_input())
        assert result.confidence == 100
        assert result.data_sources == [
            "game_score", "play_by_play", "standings",
            "social_media", "media_coverage", "betting_odds",
        ]

    def test_empty_input_never_raises(self):
        from prioritizer.analysis.signals import analyze
        result = analyze(EmotionalAnalysisInput())
        assert result.profile == EmotionalProfile(
            suspense=0, stakes=0, volatility=0, underdog=20, transcendence=0,
        )
        assert result.confidence == 0
        assert result.key_moments == []
        assert result.data_sources == []

    def test_deterministic(self):
        from prioritizer.analysis.signals import analyze
        assert analyze(_rich_input()) == analyze(_rich_input())


# ---------------------------------------------------------------------------
# Part 3: helpers
# ---------------------------------------------------------------------------

class TestHelpers:

    def test_quick_analyze_close_playoff_overtime_rivalry(self):
        from prioritizer.analysis.signals import quick_analyze
        profile = quick_analyze(2, overtime=True, is_playoff=True, is_rivalry=True)
        assert profile == EmotionalProfile(
            suspense=95, stakes=90, volatility=60, underdog=50, transcendence=60,
        )

    def test_quick_analyze_blowout(self):
        from prioritizer.analysis.signals import quick_analyze
        profile = quick_analyze(10, overtime=False, is_playoff=False, is_rivalry=False)
        assert profile == EmotionalProfile(
            suspense=0, stakes=30, volatility=40, underdog=50, transcendence=30,
        )

    def test_quick_analyze_clamps(self):
        from prioritizer.analysis.signals import quick_analyze
        assert quick_analyze(0, overtime=True, is_playoff=False, is_rivalry=False).suspense == 100

    def test_intensity_bands(self):
        from prioritizer.analysis.signals import get_emotional_intensity
        assert get_emotional_intensity(90) == "extreme"
        assert get_emotional_intensity(89) == "high"
        assert get_emotional_intensity(75) == "high"
        assert get_emotional_intensity(74) == "moderate"
        assert get_emotional_intensity(50) == "moderate"
        assert get_emotional_intensity(49) == "low"

    def test_dominant_factor(self):
        from prioritizer.analysis.signals import get_dominant_factor
        profile = EmotionalProfile(suspense=10, stakes=20, volatility=30, underdog=95, transcendence=40)
        assert get_dominant_factor(profile) == "underdog"

    def test_dominant_factor_tie_keeps_earlier_dimension(self):
        from prioritizer.analysis.signals import get_dominant_factor
        flat = EmotionalProfile(suspense=50, stakes=50, volatility=50, underdog=50, transcendence=50)
        assert get_dominant_factor(flat) == "suspense"
        tied = EmotionalProfile(suspense=10, stakes=90, volatility=90, underdog=0, transcendence=0)
        assert get_dominant_factor(tied) == "stakes"


# ---------------------------------------------------------------------------
# Part 4: weights
# ---------------------------------------------------------------------------

class TestConfigurableWeights:

    def test_custom_suspense_weights(self):
        from prioritizer.analysis.signals import EmotionalAnalyzer
        from prioritizer.analysis.weights import AnalysisWeights, SuspenseWeights

        only_overtime = AnalysisWeights(suspense=SuspenseWeights(
            score_margin=0, lead_changes=0, late_drama=0, overtime=1.0, uncertainty_duration=0,
        ))
        analyzer = EmotionalAnalyzer(only_overtime)
        signals = EmotionalAnalysisInput(suspense=SuspenseFactors(went_to_overtime=True, score_margin=0))
        assert analyzer.profile(signals).suspense == 100

    def test_default_analyzer_matches_module_function(self):
        from prioritizer.analysis.signals import EmotionalAnalyzer, analyze
        assert EmotionalAnalyzer().analyze(_rich_input()) == analyze(_rich_input())

    def test_lookup_tables_are_read_only(self):
        import pytest
        from prioritizer.analysis.weights import PLAYOFF_IMPLICATIONS

        with pytest.raises(TypeError):
            PLAYOFF_IMPLICATIONS["clinch"] = 0  # type: ignore[index]

    def test_weight_tables_default_per_instance(self):
        from prioritizer.analysis.weights import (
            AnalysisWeights,
            StakesWeights,
            TranscendenceWeights,
            UnderdogWeights,
        )

        weights = AnalysisWeights()
        assert weights.stakes.playoff_implications["championship"] == 100
        assert weights.stakes.tournament_stage["final"] == 100
        assert weights.underdog.performance["dominant_upset"] == 100
        assert weights.transcendence.community_buzz["viral"] == 90
        assert StakesWeights() == StakesWeights()
        assert UnderdogWeights().performance is UnderdogWeights().performance
        assert TranscendenceWeights(community_buzz={"viral": 10}).community_buzz["viral"] == 10
