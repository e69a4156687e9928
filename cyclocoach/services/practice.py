# path: cyclocoach/services/practice.py

from __future__ import annotations

from typing import Tuple
import re

# (keywords, km/h); first match wins. "route" and "velo taf" are the French
# spellings riders type for road and commuting.
SPEED_TABLE: Tuple[Tuple[re.Pattern, float], ...] = (
    (re.compile(r"road|route|endurance|training", re.IGNORECASE), 28.0),
    (re.compile(r"gravel|bikepacking", re.IGNORECASE), 22.0),
    (re.compile(r"mtb|vtt|trail|all-mountain", re.IGNORECASE), 16.0),
    (re.compile(r"commute|city|urban|velo taf", re.IGNORECASE), 18.0),
)
DEFAULT_SPEED_KMH = 20.0

# Scales the per-point radius jitter of the synthetic loop.
ROUGHNESS_TABLE: Tuple[Tuple[re.Pattern, float], ...] = (
    (re.compile(r"mtb|vtt|trail|all-mountain", re.IGNORECASE), 1.3),
    (re.compile(r"gravel|bikepacking", re.IGNORECASE), 1.1),
)
DEFAULT_ROUGHNESS = 0.8


def _lookup(table, practice_type: str, default: float) -> float:
    for pattern, value in table:
        if pattern.search(practice_type):
            return value
    return default


def estimate_average_speed(practice_type: str) -> float:
    return _lookup(SPEED_TABLE, practice_type, DEFAULT_SPEED_KMH)


def practice_roughness(practice_type: str) -> float:
    return _lookup(ROUGHNESS_TABLE, practice_type, DEFAULT_ROUGHNESS)


def practice_label(practice_type: str) -> str:
    """Collapse whitespace runs: "  Mountain \t Bike " -> "Mountain Bike"."""
    return re.sub(r"\s+", " ", practice_type).strip()
