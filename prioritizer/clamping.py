# prioritizer/clamping.py
"""
Single source of truth for score rounding and clamping.

Imported by:
  - analysis/signals.py   (dimension scores)
  - analysis/confidence.py
  - tagging/algorithm.py  (tag confidence)
  - scoring/priority.py   (emotional base, preference bonus, final score)

Rounding is half-up (2.5 → 3, 58.5 → 59), NOT Python's banker's rounding.
Every published score is an int in [0, 100].
"""
from __future__ import annotations

import math

SCORE_MIN = 0
SCORE_MAX = 100


def round_half_up(value: float) -> int:
    """Round to the nearest int, ties away from zero on the positive side."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round half-up, then clamp to [0, 100]."""
    return max(SCORE_MIN, min(SCORE_MAX, round_half_up(value)))
