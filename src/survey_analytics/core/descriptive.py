from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from survey_analytics.core.models import AnalysisDataset, RawValue, ResponseType
from survey_analytics.core.question_index import (
    dominant_response_type,
    extract_numeric_values,
    group_by_question,
)

logger = logging.getLogger(__name__)


@dataclass
class BasicStats:
    count: int = 0
    mean: float = 0.0
    median: float = 0.0
    mode: Optional[float] = None
    min: float = 0.0
    max: float = 0.0
    variance: float = 0.0
    std_dev: float = 0.0
    sum: float = 0.0


@dataclass
class FrequencyBucket:
    value: RawValue
    count: int
    percentage: float


@dataclass
class QuestionStats:
    question_id: str
    question_label: str
    category: Optional[str]
    response_type: ResponseType
    response_count: int
    stats: BasicStats
    distribution: List[FrequencyBucket] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Basic statistics
# ---------------------------------------------------------------------------

def calculate_basic_stats(values: Sequence[float]) -> BasicStats:
    """
    Descriptive statistics over already-coerced numeric values.

    Variance and standard deviation use the sample (n-1) denominator and are
    0 for a single value. When several values share the highest frequency,
    the smallest of them is reported as the mode.
    """
    if len(values) == 0:
        return BasicStats()

    s = pd.Series(list(values), dtype="float64")
    n = len(s)

    return BasicStats(
        count=n,
        mean=float(s.mean()),
        median=float(s.median()),
        mode=float(s.mode().iloc[0]),
        min=float(s.min()),
        max=float(s.max()),
        variance=float(s.var(ddof=1)) if n > 1 else 0.0,
        std_dev=float(s.std(ddof=1)) if n > 1 else 0.0,
        sum=float(s.sum()),
    )


# ---------------------------------------------------------------------------
# Frequency distribution
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _bucket_key(value: RawValue) -> Tuple[str, Any]:
    # Keep True apart from 1 while still merging 4 with 4.0.
    if isinstance(value, bool):
        return ("bool", value)
    if _is_number(value):
        return ("num", float(value))
    return ("str", str(value))


def _display(value: RawValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value) and float(value).is_integer():
        return str(int(value))
    return str(value)


def _compare_buckets(a: FrequencyBucket, b: FrequencyBucket) -> int:
    if _is_number(a.value) and _is_number(b.value):
        return (a.value > b.value) - (a.value < b.value)
    sa, sb = _display(a.value), _display(b.value)
    return (sa > sb) - (sa < sb)


def calculate_frequency_distribution(values: Sequence[RawValue]) -> List[FrequencyBucket]:
    """
    Count raw, uncoerced answers.

    Buckets are sorted ascending: numerically when both values are numbers,
    otherwise by their string form.
    """
    if not values:
        return []

    counts: Dict[Tuple[str, Any], int] = {}
    first_seen: Dict[Tuple[str, Any], RawValue] = {}
    for v in values:
        key = _bucket_key(v)
        if key not in counts:
            first_seen[key] = v
            counts[key] = 0
        counts[key] += 1

    total = len(values)
    buckets = [
        FrequencyBucket(value=first_seen[key], count=count, percentage=count / total * 100)
        for key, count in counts.items()
    ]
    return sorted(buckets, key=functools.cmp_to_key(_compare_buckets))


# ---------------------------------------------------------------------------
# Per-question analysis
# ---------------------------------------------------------------------------

def analyze_questions(dataset: AnalysisDataset) -> List[QuestionStats]:
    """Basic statistics and raw-value distribution for every question."""
    results: List[QuestionStats] = []

    for question_id, responses in group_by_question(dataset).items():
        first = responses[0]
        numeric_values = extract_numeric_values(responses, question_id)
        if len(numeric_values) < len(responses):
            logger.debug(
                "Question %s: %d of %d responses excluded from numeric statistics",
                question_id, len(responses) - len(numeric_values), len(responses),
            )

        results.append(
            QuestionStats(
                question_id=question_id,
                question_label=first.question_label or question_id,
                category=first.category,
                response_type=dominant_response_type(responses),
                response_count=len(responses),
                stats=calculate_basic_stats(numeric_values),
                distribution=calculate_frequency_distribution([r.value for r in responses]),
            )
        )

    return results
