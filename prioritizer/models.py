from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TagCategory = Literal["emotional", "context", "outcome", "quality", "moment"]
TagSource = Literal["algorithm", "user", "curator"]
PriorityTier = Literal["must_watch", "worth_time", "highlights", "skip"]
PriorityReasonType = Literal[
    "follow", "preference_match", "universal", "trending", "historic", "rivalry",
]
SpoilerLevel = Literal["safe", "mild", "full"]
ComprehensionLevel = Literal["novice", "casual", "informed", "expert"]
FollowType = Literal["team", "player", "league", "competition"]
EmotionalMomentType = Literal[
    "lead_change", "comeback", "clutch_play", "controversy", "record_broken",
    "upset_brewing", "dominant_stretch", "momentum_shift", "dramatic_finish",
    "historic_achievement",
]

PROFILE_DIMENSIONS: tuple[str, ...] = (
    "suspense", "stakes", "volatility", "underdog", "transcendence",
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Emotional profile
# ---------------------------------------------------------------------------

class EmotionalProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    suspense: int = Field(ge=0, le=100)
    stakes: int = Field(ge=0, le=100)
    volatility: int = Field(ge=0, le=100)
    underdog: int = Field(ge=0, le=100)
    transcendence: int = Field(ge=0, le=100)


class EmotionalMoment(BaseModel):
    timestamp: str                     # late | overtime | result | event
    type: EmotionalMomentType
    description: str
    impact: Dict[str, int] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Raw signal inputs (assembled by sport adapters, all fields optional)
# ---------------------------------------------------------------------------

class SuspenseFactors(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    score_margin: Optional[float] = None
    lead_changes: Optional[int] = None
    late_drama: Optional[bool] = None
    went_to_overtime: Optional[bool] = None
    uncertainty_duration: Optional[float] = None   # percent of event, 0–100


class StakesFactors(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    playoff_implications: Optional[str] = None     # none | clinch | elimination | championship
    rivalry_level: Optional[str] = None            # none | division | historic | intense
    records_at_stake: Optional[List[str]] = None
    tournament_stage: Optional[str] = None         # group | knockout | semifinal | final
    season_context: Optional[str] = None           # early | mid | late | postseason


class VolatilityFactors(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    momentum_swings: Optional[int] = None
    critical_moments: Optional[int] = None
    event_frequency: Optional[float] = None
    intensity_peaks: Optional[int] = None


class UnderdogFactors(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    ranking_differential: Optional[float] = None
    odds_differential: Optional[float] = None
    historical_imbalance: Optional[float] = None
    underdog_performance: Optional[str] = None     # lost_badly | competitive | upset | dominant_upset


class TranscendenceFactors(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    historic_moment: Optional[bool] = None
    community_buzz: Optional[str] = None           # low | moderate | high | viral
    media_recognition: Optional[str] = None        # none | notable | significant | historic
    records_broken: Optional[List[str]] = None
    standout_performances: Optional[List[str]] = None


class EmotionalAnalysisInput(BaseModel):
    suspense: SuspenseFactors = Field(default_factory=SuspenseFactors)
    stakes: StakesFactors = Field(default_factory=StakesFactors)
    volatility: VolatilityFactors = Field(default_factory=VolatilityFactors)
    underdog: UnderdogFactors = Field(default_factory=UnderdogFactors)
    transcendence: TranscendenceFactors = Field(default_factory=TranscendenceFactors)


class EmotionalAnalysisResult(BaseModel):
    profile: EmotionalProfile
    confidence: int = Field(ge=0, le=100)
    key_moments: List[EmotionalMoment] = Field(default_factory=list)
    data_sources: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

class EventTag(BaseModel):
    tag: str
    category: TagCategory
    source: TagSource
    confidence: Optional[int] = Field(default=None, ge=0, le=100)
    user_count: Optional[int] = Field(default=None, ge=0)
    curator_verified: Optional[bool] = None


class AggregatedTags(BaseModel):
    event_id: str
    tags: List[EventTag] = Field(default_factory=list)
    total_user_tags: int = 0
    curator_verified_count: int = 0


class TagCount(BaseModel):
    tag: str
    count: int


# ---------------------------------------------------------------------------
# User preferences
# ---------------------------------------------------------------------------

class UserFollow(BaseModel):
    id: str
    type: FollowType
    name: str
    sport: Optional[str] = None
    league: Optional[str] = None
    follow_strength: int = Field(default=3, ge=1, le=5)


class SportFamiliarity(BaseModel):
    sport: str
    level: ComprehensionLevel = "novice"
    preferred_leagues: List[str] = Field(default_factory=list)


class EmotionalPreferences(BaseModel):
    nail_biters: int = Field(default=3, ge=0, le=5)
    dominance: int = Field(default=2, ge=0, le=5)
    upsets: int = Field(default=3, ge=0, le=5)
    historic_moments: int = Field(default=4, ge=0, le=5)
    skill_display: int = Field(default=3, ge=0, le=5)
    intensity: int = Field(default=2, ge=0, le=5)
    drama: int = Field(default=3, ge=0, le=5)


DEFAULT_EMOTIONAL_PREFERENCES = EmotionalPreferences()


class UserPreferences(BaseModel):
    user_id: str
    follows: List[UserFollow] = Field(default_factory=list)
    sport_familiarity: List[SportFamiliarity] = Field(default_factory=list)
    emotional_preferences: EmotionalPreferences = Field(default_factory=EmotionalPreferences)
    last_updated: datetime = Field(default_factory=_utc_now)


# ---------------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------------

class PriorityCalculationInput(BaseModel):
    event_id: str
    emotional_profile: EmotionalProfile
    participants: List[str] = Field(default_factory=list)
    sport: str
    league: str
    tags: List[EventTag] = Field(default_factory=list)
    community_engagement: int = Field(default=0, ge=0, le=100)
    duration: Optional[int] = None       # minutes


class PriorityReason(BaseModel):
    reason: str
    type: PriorityReasonType
    contribution: int


class PriorityScoreBreakdown(BaseModel):
    emotional_base: int
    follow_bonus: int
    preference_bonus: int
    trending_bonus: int
    comprehension_penalty: int           # percent removed: 0, 5, 10, 20
    raw_score: float                     # weighted sum before the comprehension multiplier
    final_score: int = Field(ge=0, le=100)


class EventPriority(BaseModel):
    event_id: str
    priority_score: int = Field(ge=0, le=100)
    priority_tier: PriorityTier
    priority_reasons: List[PriorityReason] = Field(default_factory=list)
    emotional_profile: EmotionalProfile
    tags: List[EventTag] = Field(default_factory=list)
    spoiler_level: SpoilerLevel = "safe"
    spoiler_free_summary: Optional[str] = None


class PriorityTiers(BaseModel):
    must_watch: List[EventPriority] = Field(default_factory=list)
    worth_time: List[EventPriority] = Field(default_factory=list)
    highlights: List[EventPriority] = Field(default_factory=list)
    skip: List[EventPriority] = Field(default_factory=list)


class TimeRange(BaseModel):
    start: datetime
    end: datetime


class PrioritizedEventList(BaseModel):
    user_id: str
    tiers: PriorityTiers = Field(default_factory=PriorityTiers)
    total_events: int = 0
    generated_at: datetime = Field(default_factory=_utc_now)
    time_range: TimeRange


class PriorityFilters(BaseModel):
    sports: Optional[List[str]] = None
    leagues: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    followed_only: bool = False
    max_duration: Optional[int] = None


class FactorAverage(BaseModel):
    factor: str
    avg_score: float


class SportBreakdown(BaseModel):
    sport: str
    count: int
    avg_priority: float


class PriorityListSummary(BaseModel):
    total_events: int
    tier_counts: Dict[str, int]
    top_emotional_factors: List[FactorAverage] = Field(default_factory=list)
    top_tags: List[TagCount] = Field(default_factory=list)
    sport_breakdown: List[SportBreakdown] = Field(default_factory=list)
