# prioritizer/tagging/algorithm.py
"""
Algorithmic tags derived from an EmotionalProfile.

Pure utility: deterministic, no store access.

A rule qualifies only when EVERY condition it declares holds (conjunction).
Undeclared conditions are vacuously satisfied.

Confidence for a qualifying rule:
  avg_excess = mean(max(0, actual - threshold)) over the rule's declared
               MINIMUM thresholds only (maximums and context flags do not
               contribute)
  confidence = min(100, round(70 + avg_excess))
  no minimum thresholds declared → 70

Output is sorted by confidence, highest first (ties keep rule order).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..clamping import round_half_up
from ..models import EmotionalProfile, EventTag, TagCategory

BASE_CONFIDENCE = 70


@dataclass(frozen=True)
class TagRule:
    tag: str
    category: TagCategory
    min_suspense: Optional[int] = None
    min_stakes: Optional[int] = None
    min_volatility: Optional[int] = None
    min_underdog: Optional[int] = None
    min_transcendence: Optional[int] = None
    max_suspense: Optional[int] = None
    max_volatility: Optional[int] = None
    requires_overtime: bool = False
    requires_upset: bool = False

    def minimums(self) -> list[tuple[str, int]]:
        pairs = [
            ("suspense", self.min_suspense),
            ("stakes", self.min_stakes),
            ("volatility", self.min_volatility),
            ("underdog", self.min_underdog),
            ("transcendence", self.min_transcendence),
        ]
        return [(dim, t) for dim, t in pairs if t is not None]

    def maximums(self) -> list[tuple[str, int]]:
        pairs = [
            ("suspense", self.max_suspense),
            ("volatility", self.max_volatility),
        ]
        return [(dim, t) for dim, t in pairs if t is not None]


@dataclass(frozen=True)
class TagContext:
    overtime: bool = False
    upset: bool = False


# ---------------------------------------------------------------------------
# Rule table (order matters for tie-breaks)
# ---------------------------------------------------------------------------

ALGO_TAG_RULES: tuple[TagRule, ...] = (
    # Suspense
    TagRule("nail-biter", "emotional", min_suspense=80),
    TagRule("close-finish", "emotional", min_suspense=65),
    TagRule("thriller", "emotional", min_suspense=75, min_volatility=60),
    # Stakes
    TagRule("high-stakes", "context", min_stakes=80),
    TagRule("playoff-atmosphere", "context", min_stakes=70),
    TagRule("must-win", "context", min_stakes=85),
    # Volatility
    TagRule("rollercoaster", "emotional", min_volatility=80),
    TagRule("momentum-swings", "emotional", min_volatility=65),
    TagRule("wild-game", "emotional", min_volatility=75, min_suspense=60),
    # Underdog
    TagRule("upset", "outcome", min_underdog=80),
    TagRule("cinderella-story", "outcome", min_underdog=85, min_stakes=70),
    TagRule("david-vs-goliath", "context", min_underdog=60),
    # Transcendence
    TagRule("instant-classic", "quality", min_transcendence=85),
    TagRule("historic", "moment", min_transcendence=80),
    TagRule("legendary", "quality", min_transcendence=90, min_suspense=70),
    TagRule("all-timer", "quality", min_transcendence=95),
    # Combined
    TagRule("comeback", "outcome", min_volatility=70, min_suspense=65),
    TagRule("dominant-performance", "quality", max_volatility=30, min_stakes=50),
    TagRule("masterclass", "quality", max_volatility=25, min_transcendence=60),
    TagRule("heart-stopper", "emotional", min_suspense=85, min_stakes=70),
    TagRule("barnburner", "emotional", min_volatility=75, min_suspense=70),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def matches_rule(
    profile: EmotionalProfile,
    rule: TagRule,
    context: Optional[TagContext] = None,
) -> bool:
    for dim, threshold in rule.minimums():
        if getattr(profile, dim) < threshold:
            return False
    for dim, threshold in rule.maximums():
        if getattr(profile, dim) > threshold:
            return False
    if rule.requires_overtime and not (context and context.overtime):
        return False
    if rule.requires_upset and not (context and context.upset):
        return False
    return True


def tag_confidence(profile: EmotionalProfile, rule: TagRule) -> int:
    minimums = rule.minimums()
    if not minimums:
        return BASE_CONFIDENCE

    total_excess = sum(max(0, getattr(profile, dim) - t) for dim, t in minimums)
    avg_excess = total_excess / len(minimums)
    return min(100, round_half_up(BASE_CONFIDENCE + avg_excess))


def generate_algorithm_tags(
    profile: EmotionalProfile,
    context: Optional[TagContext] = None,
    rules: tuple[TagRule, ...] = ALGO_TAG_RULES,
) -> list[EventTag]:
    tags = [
        EventTag(
            tag=rule.tag,
            category=rule.category,
            source="algorithm",
            confidence=tag_confidence(profile, rule),
        )
        for rule in rules
        if matches_rule(profile, rule, context)
    ]
    # sorted() is stable → equal confidence keeps rule order
    return sorted(tags, key=lambda t: -(t.confidence or 0))
