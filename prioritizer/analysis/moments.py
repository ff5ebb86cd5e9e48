# prioritizer/analysis/moments.py
"""
Key emotional moments derived from raw signals.

Informational only: moments are never fed back into any score.
Each rule is checked independently; output order is rule order, not
significance order.
"""
from __future__ import annotations

from ..models import EmotionalAnalysisInput, EmotionalMoment

UPSET_OUTCOMES: frozenset[str] = frozenset({"upset", "dominant_upset"})
COMEBACK_MIN_LEAD_CHANGES = 3


def identify_key_moments(signals: EmotionalAnalysisInput) -> list[EmotionalMoment]:
    moments: list[EmotionalMoment] = []

    if signals.suspense.late_drama:
        moments.append(EmotionalMoment(
            timestamp="late",
            type="dramatic_finish",
            description="Event was decided in the final moments",
            impact={"suspense": 30},
        ))

    if signals.suspense.went_to_overtime:
        moments.append(EmotionalMoment(
            timestamp="overtime",
            type="dramatic_finish",
            description="Event went to overtime/extra time",
            impact={"suspense": 25, "volatility": 15},
        ))

    if signals.underdog.underdog_performance in UPSET_OUTCOMES:
        moments.append(EmotionalMoment(
            timestamp="result",
            type="upset_brewing",
            description="Underdog achieved the upset",
            impact={"underdog": 40, "transcendence": 20},
        ))

    if signals.transcendence.historic_moment:
        moments.append(EmotionalMoment(
            timestamp="event",
            type="historic_achievement",
            description="Historic moment occurred",
            impact={"transcendence": 50},
        ))

    for record in signals.transcendence.records_broken or []:
        moments.append(EmotionalMoment(
            timestamp="event",
            type="record_broken",
            description=record,
            impact={"transcendence": 20},
        ))

    lead_changes = signals.suspense.lead_changes or 0
    if lead_changes >= COMEBACK_MIN_LEAD_CHANGES:
        moments.append(EmotionalMoment(
            timestamp="event",
            type="comeback",
            description=f"Multiple lead changes ({lead_changes})",
            impact={"suspense": 20, "volatility": 25},
        ))

    return moments
