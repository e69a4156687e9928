# path: cyclocoach/services/request_parser.py

"""
Turn a chat message into a RideRequest.

Accepts command-style messages ("/gpx address: ...; distance: 60 km; ...")
as well as looser text ("gpx from Annecy, 80 km, 1200 m, gravel"). Every
fragment goes through two ordered rule tables: LABEL_RULES when the fragment
carries a "label: value" prefix, FALLBACK_RULES otherwise. The first rule
that commits wins. A request is only returned once all four fields are
known; anything less is a no-match (None).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
import logging
import math
import re

from cyclocoach.models.ride_models import MAX_DISTANCE_KM, MAX_ELEVATION_GAIN_M, RideRequest

logger = logging.getLogger(__name__)

# "gpx" anywhere in the message marks a route request. "/route" is accepted
# as an alias only as a leading command, since "route" is also a French
# discipline and a common street prefix ("Route de Lyon").
ROUTE_MARKER = "gpx"

ADDRESS = "address"
PRACTICE = "practice_type"
DISTANCE = "distance_km"
ELEVATION = "elevation_gain_m"
REQUIRED_FIELDS = (ADDRESS, DISTANCE, ELEVATION, PRACTICE)

_COMMAND_PREFIX_RE = re.compile(r"^\s*/(?:gpx|route)\b", re.IGNORECASE)
_MARKER_RE = re.compile(ROUTE_MARKER + r"\s*:?", re.IGNORECASE)
_SEGMENT_SPLIT_RE = re.compile(r"[\n;]+")
_LABEL_SPLIT_RE = re.compile(r"[:=]")

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)")
_DISTANCE_RE = re.compile(
    r"\s*([-+]?[\d,.]+)\s*(km|kilometres?|kilometers?)?", re.IGNORECASE
)
_ELEVATION_RE = re.compile(
    r"\s*([-+]?[\d,.]+)\s*(m|meters?|metres?)?\s*(d\+)?", re.IGNORECASE
)

# Prose fallbacks, run against the untouched message.
_PROSE_ADDRESS_RE = re.compile(
    r"(?:from|starting at|departing from|depuis|adresse)\s+([^,\n]+?)"
    r"(?=(?:\s+for|\s+distance|\s+d\+|\s+elevation|\Z))",
    re.IGNORECASE,
)
_PROSE_PRACTICE_RE = re.compile(
    r"(?:practice|type|pratique|discipline)\s*[:=]?\s*((?:[^\W\d_]|\s)+)",
    re.IGNORECASE,
)


def _leading_number(text: str) -> Optional[float]:
    # "1,5" -> 1.5; anything after the first valid literal is ignored.
    m = _NUMBER_RE.match(text.replace(",", "."))
    if not m:
        return None
    return float(m.group(0))


def parse_distance(value: str) -> Optional[float]:
    """Kilometres from "60", "60 km", "45,5 kilometres"; None unless in (0, MAX_DISTANCE_KM]."""
    m = _DISTANCE_RE.match(value)
    if not m:
        return None
    number = _leading_number(m.group(1))
    if number is None or not math.isfinite(number) or number <= 0 or number > MAX_DISTANCE_KM:
        return None
    return number


def parse_elevation(value: str) -> Optional[float]:
    """Metres from "800", "800 m", "800m D+"; zero is allowed, negatives are not."""
    m = _ELEVATION_RE.match(value)
    if not m:
        return None
    number = _leading_number(m.group(1))
    if number is None or not math.isfinite(number) or number < 0 or number > MAX_ELEVATION_GAIN_M:
        return None
    return number


def _as_text(value: str) -> Optional[str]:
    return value or None


@dataclass(frozen=True)
class FieldRule:
    field: str
    parse: Callable[[str], Optional[object]]
    label: Optional[re.Pattern] = None

    def matches_label(self, label: str) -> bool:
        return self.label is not None and bool(self.label.search(label))


# Checked in order; a labelled fragment stops at the first label that matches,
# even when its value then fails to parse.
LABEL_RULES: Tuple[FieldRule, ...] = (
    FieldRule(ADDRESS, _as_text, re.compile(r"address|adresse|from|depuis", re.IGNORECASE)),
    FieldRule(PRACTICE, _as_text, re.compile(r"practice|pratique|type|discipline", re.IGNORECASE)),
    FieldRule(DISTANCE, parse_distance, re.compile(r"distance|km", re.IGNORECASE)),
    FieldRule(ELEVATION, parse_elevation, re.compile(r"d\+|elevation|gain|denivel|climb", re.IGNORECASE)),
)

# Unlabelled fragments fill the first still-empty field whose parser accepts them.
FALLBACK_RULES: Tuple[FieldRule, ...] = (
    FieldRule(DISTANCE, parse_distance),
    FieldRule(ELEVATION, parse_elevation),
    FieldRule(ADDRESS, _as_text),
    FieldRule(PRACTICE, _as_text),
)


def split_fragments(text: str) -> List[str]:
    """Strip the command marker, split on newlines/semicolons then commas."""
    cleaned = _COMMAND_PREFIX_RE.sub("", text, count=1)
    cleaned = _MARKER_RE.sub("", cleaned).strip()

    fragments = []
    for segment in _SEGMENT_SPLIT_RE.split(cleaned):
        for piece in segment.split(","):
            piece = piece.strip()
            if piece:
                fragments.append(piece)
    return fragments


def split_label(fragment: str) -> Tuple[str, str]:
    """Returns (lowercased label, value); label is "" when there is none."""
    parts = _LABEL_SPLIT_RE.split(fragment, maxsplit=1)
    if len(parts) == 1:
        return "", parts[0].strip()
    label, value = parts[0].strip(), parts[1].strip()
    if not value:
        return "", value
    return label.lower(), value


def classify_fragment(label: str, value: str, found: Dict[str, object]) -> Optional[Tuple[str, object]]:
    """
    Pick the (field, parsed value) a fragment should fill, or None to drop it.
    Pure: `found` is only read.
    """
    if label:
        for rule in LABEL_RULES:
            if rule.matches_label(label):
                parsed = rule.parse(value)
                return (rule.field, parsed) if parsed is not None else None

    for rule in FALLBACK_RULES:
        if rule.field in found:
            continue
        parsed = rule.parse(value)
        if parsed is not None:
            return rule.field, parsed
    return None


def _scan_prose(pattern: re.Pattern, text: str) -> Optional[str]:
    m = pattern.search(text)
    if not m:
        return None
    return m.group(1).strip() or None


def has_route_marker(text: str) -> bool:
    return ROUTE_MARKER in text.lower() or bool(_COMMAND_PREFIX_RE.match(text))


def parse_ride_request(text: str) -> Optional[RideRequest]:
    if not text or not has_route_marker(text):
        return None

    found: Dict[str, object] = {}
    for fragment in split_fragments(text):
        label, value = split_label(fragment)
        if not value:
            continue
        hit = classify_fragment(label, value, found)
        if hit is None:
            logger.debug("Dropped fragment %r", fragment)
            continue
        field, parsed = hit
        found[field] = parsed

    if ADDRESS not in found:
        address = _scan_prose(_PROSE_ADDRESS_RE, text)
        if address:
            found[ADDRESS] = address
    if PRACTICE not in found:
        practice = _scan_prose(_PROSE_PRACTICE_RE, text)
        if practice:
            found[PRACTICE] = practice

    missing = [f for f in REQUIRED_FIELDS if f not in found]
    if missing:
        logger.debug("Route request incomplete, missing %s", ", ".join(missing))
        return None

    return RideRequest(**found)
