from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from .analysis.signals import EmotionalAnalyzer
from .db.preferences_store import get_preferences_store
from .db.tag_store import get_tag_store
from .models import (
    EmotionalAnalysisInput,
    EmotionalAnalysisResult,
    PrioritizedEventList,
    PriorityCalculationInput,
    PriorityFilters,
)
from .preferences import PreferencesService
from .scoring.listing import summarize_priorities
from .tagging.algorithm import TagContext
from .tagging.service import TagService

logger = logging.getLogger(__name__)

UPSET_OUTCOMES = frozenset({"upset", "dominant_upset"})


class RawEventBundle(BaseModel):
    """One finished event as delivered by a sport adapter."""
    event_id: str
    sport: str
    league: str
    participants: List[str] = Field(default_factory=list)
    community_engagement: int = Field(default=0, ge=0, le=100)
    duration: Optional[int] = None
    signals: EmotionalAnalysisInput = Field(default_factory=EmotionalAnalysisInput)


@dataclass
class PipelineResult:
    prioritized: PrioritizedEventList
    inputs: list[PriorityCalculationInput] = field(default_factory=list)
    analyses: dict[str, EmotionalAnalysisResult] = field(default_factory=dict)


def tag_context_for(signals: EmotionalAnalysisInput) -> TagContext:
    return TagContext(
        overtime=bool(signals.suspense.went_to_overtime),
        upset=signals.underdog.underdog_performance in UPSET_OUTCOMES,
    )


def build_calculation_input(
    bundle: RawEventBundle,
    analysis: EmotionalAnalysisResult,
    tag_service: TagService,
) -> PriorityCalculationInput:
    aggregated = tag_service.get_event_tags(
        bundle.event_id, analysis.profile, tag_context_for(bundle.signals),
    )
    return PriorityCalculationInput(
        event_id=bundle.event_id,
        emotional_profile=analysis.profile,
        participants=list(bundle.participants),
        sport=bundle.sport,
        league=bundle.league,
        tags=aggregated.tags,
        community_engagement=bundle.community_engagement,
        duration=bundle.duration,
    )


def prioritize_bundles(
    user_id: str,
    bundles: Sequence[RawEventBundle],
    preferences: PreferencesService,
    tag_service: TagService,
    filters: Optional[PriorityFilters] = None,
    analyzer: Optional[EmotionalAnalyzer] = None,
    already_watched: Optional[Sequence[str]] = None,
) -> PipelineResult:
    """signals → profile → tags → per-user prioritized list."""
    analyzer = analyzer or EmotionalAnalyzer()

    analyses: dict[str, EmotionalAnalysisResult] = {}
    inputs: list[PriorityCalculationInput] = []
    for b in bundles:
        analysis = analyzer.analyze(b.signals)
        analyses[b.event_id] = analysis
        inputs.append(build_calculation_input(b, analysis, tag_service))

        logger.debug(
            "[pipeline] analyzed | event_id=%s confidence=%d moments=%d",
            b.event_id, analysis.confidence, len(analysis.key_moments),
        )

    prioritized = preferences.prioritized_events(
        user_id, inputs, filters=filters, already_watched=already_watched,
    )
    return PipelineResult(prioritized=prioritized, inputs=inputs, analyses=analyses)


def load_bundles(path: str) -> list[RawEventBundle]:
    """JSON file holding a list of bundles (or {"events": [...]})."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("events") or []
    return [RawEventBundle.model_validate(row) for row in data]


def main(argv: Optional[list[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        print("usage: python -m prioritizer.pipeline <bundles.json> [user_id]")
        return 2

    path = argv[0]
    user_id = argv[1] if len(argv) > 1 else "anonymous"

    bundles = load_bundles(path)
    preferences = PreferencesService(get_preferences_store())
    tag_service = TagService(get_tag_store())
    result = prioritize_bundles(user_id, bundles, preferences, tag_service)
    summary = summarize_priorities(result.prioritized, result.inputs)

    low_confidence = sum(1 for a in result.analyses.values() if a.confidence < 50)

    # grep '[pipeline][summary]' /tmp/pipeline.log
    print(
        f"[pipeline][summary]"
        f" user_id={user_id}"
        f" bundles={len(bundles)}"
        f" prioritized={summary.total_events}"
        f" must_watch={summary.tier_counts['must_watch']}"
        f" worth_time={summary.tier_counts['worth_time']}"
        f" highlights={summary.tier_counts['highlights']}"
        f" skip={summary.tier_counts['skip']}"
        f" low_confidence={low_confidence}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
