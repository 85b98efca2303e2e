from __future__ import annotations

import math
import re
from numbers import Real
from typing import Optional, Tuple

from survey_analytics.core.models import RawValue

# ---------------------------------------------------------------------------
# Token tables
# ---------------------------------------------------------------------------

# Korean satisfaction phrases, compound phrases first: "매우만족" and "불만족"
# both contain "만족", so the longer phrases must be tried before it.
LIKERT_PHRASES: Tuple[Tuple[str, int], ...] = (
    ("매우불만족", 1),
    ("매우만족", 5),
    ("불만족", 2),
    ("보통", 3),
    ("만족", 4),
)

YES_TOKENS: Tuple[str, ...] = ("O", "YES", "TRUE")
NO_TOKENS: Tuple[str, ...] = ("X", "NO", "FALSE")
YES_WORD = "예"
NO_WORD = "아니오"

# Whole-token match: the token must be bounded by the string edges or by a
# character that is not an ASCII letter, digit or underscore.
_YES_RE = re.compile(r"(?:^|[^A-Za-z0-9_])(?:%s)(?:[^A-Za-z0-9_]|$)" % "|".join(YES_TOKENS))
_NO_RE = re.compile(r"(?:^|[^A-Za-z0-9_])(?:%s)(?:[^A-Za-z0-9_]|$)" % "|".join(NO_TOKENS))

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_TOKEN_RE = re.compile(r"-?\d+(?:\.\d+)?")


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _parse_number(text: str) -> Optional[float]:
    # float() accepts digit separators ("1_000"); answers do not use them
    if "_" in text:
        return None
    try:
        return _finite(float(text))
    except ValueError:
        return None


def match_likert(text: str) -> Optional[int]:
    """Score a Korean satisfaction phrase on the 1-5 scale, ignoring whitespace."""
    normalized = _WHITESPACE_RE.sub("", text).lower()
    for phrase, score in LIKERT_PHRASES:
        if phrase in normalized:
            return score
    return None


def match_yes_no(text: str) -> Optional[int]:
    """Return 1 for a yes token, 0 for a no token, None otherwise."""
    normalized = _WHITESPACE_RE.sub("", text).lower()
    upper = text.upper()
    if _YES_RE.search(upper) or normalized == YES_WORD:
        return 1
    if _NO_RE.search(upper) or normalized == NO_WORD:
        return 0
    return None


def coerce_numeric(value: RawValue) -> Optional[float]:
    """
    Normalize a raw survey answer into a numeric scalar.

    Rules, in order:
      - finite number -> itself
      - bool -> 1.0 / 0.0
      - string -> Likert phrase, yes/no token, whole-string number, then the
        first numeric substring (e.g. "가격 10000원" -> 10000.0)

    Returns None when nothing numeric can be recovered. That is not an error:
    callers exclude the answer from numeric aggregates and keep the raw value
    for frequency and text analysis.
    """
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return 1.0 if value else 0.0

    if isinstance(value, Real):
        return _finite(float(value))

    if not isinstance(value, str):
        return None

    trimmed = value.strip()
    if not trimmed:
        return None

    likert = match_likert(trimmed)
    if likert is not None:
        return float(likert)

    yes_no = match_yes_no(trimmed)
    if yes_no is not None:
        return float(yes_no)

    direct = _parse_number(trimmed)
    if direct is not None:
        return direct

    match = _NUMBER_TOKEN_RE.search(trimmed)
    if match:
        return _parse_number(match.group(0))
    return None


def is_numeric(value: RawValue) -> bool:
    return coerce_numeric(value) is not None
