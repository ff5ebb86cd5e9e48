# prioritizer/tagging/vocab.py
"""
Tag normalization and keyword category inference.

Pure utility: deterministic and side-effect free.

Normalization (idempotent):
  1. lowercase
  2. trim
  3. collapse each whitespace run to a single hyphen
  4. drop every character outside [a-z0-9-]

  "  Nail Biter!! " → "nail-biter"
  "Über Game"       → "ber-game"

Category inference uses substring matching over the normalized tag, scanning
categories in fixed order (emotional, outcome, context, quality, moment).
First hit wins; no hit → "emotional".
"""
from __future__ import annotations

import re
from typing import Optional

from ..models import TagCategory

_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9-]")


class EmptyTagError(ValueError):
    """Raised when a tag normalizes to the empty string."""


# ---------------------------------------------------------------------------
# Vocabulary (ordered: scan order is part of the contract)
# ---------------------------------------------------------------------------

CATEGORY_KEYWORDS: tuple[tuple[TagCategory, tuple[str, ...]], ...] = (
    ("emotional", (
        "nail-biter", "thriller", "heart", "rollercoaster", "wild", "intense",
        "dramatic", "exciting", "tense", "edge-of-seat",
    )),
    ("outcome", (
        "upset", "comeback", "blowout", "sweep", "shutout", "overtime", "winner",
    )),
    ("context", (
        "rivalry", "playoff", "final", "championship", "derby", "classic-matchup",
        "rematch", "david", "stakes",
    )),
    ("quality", (
        "masterclass", "dominant", "legendary", "instant-classic", "all-timer",
        "sloppy", "boring", "forgettable",
    )),
    ("moment", (
        "buzzer", "walk-off", "photo-finish", "hole-in-one", "hat-trick",
        "record", "milestone",
    )),
)

DEFAULT_CATEGORY: TagCategory = "emotional"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_tag(raw: Optional[str]) -> str:
    if not raw:
        return ""
    s = raw.lower().strip()
    s = _WHITESPACE_RE.sub("-", s)
    s = _DISALLOWED_RE.sub("", s)
    return s


def require_tag(raw: Optional[str]) -> str:
    """Normalize, rejecting tags that normalize to nothing."""
    tag = normalize_tag(raw)
    if not tag:
        raise EmptyTagError(f"tag {raw!r} is empty after normalization")
    return tag


def infer_category(tag: str) -> TagCategory:
    text = tag.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        for kw in keywords:
            if kw in text:
                return category
    return DEFAULT_CATEGORY
