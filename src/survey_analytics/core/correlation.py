from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import pandas as pd

from survey_analytics.config import (
    MIN_CORRELATION_PAIRS,
    MODERATE_CORRELATION,
    STRONG_CORRELATION,
    WEAK_CORRELATION,
)
from survey_analytics.core.models import AnalysisDataset
from survey_analytics.core.question_index import (
    align_by_respondent,
    build_question_index,
    numeric_question_ids,
    question_label,
)

logger = logging.getLogger(__name__)

# |r| this close to 1 is floating-point noise around a perfect linear fit
PERFECT_CORRELATION_TOLERANCE = 1e-12


@dataclass
class CorrelationResult:
    variable1: str
    variable2: str
    correlation: float
    strength: str  # 'strong', 'moderate', 'weak', 'none'


@dataclass
class CorrelationMatrix:
    variables: List[str] = field(default_factory=list)
    matrix: List[List[float]] = field(default_factory=list)


def safe_correlation(values1: Sequence[float], values2: Sequence[float]) -> float:
    """
    Pearson's r, or 0.0 whenever it cannot be computed.

    Too few pairs, mismatched lengths, a constant series and any numerical
    failure all map to 0.0 instead of raising.
    """
    if len(values1) != len(values2) or len(values1) < MIN_CORRELATION_PAIRS:
        return 0.0
    # A constant series has no defined r.
    if min(values1) == max(values1) or min(values2) == max(values2):
        return 0.0
    # Exact (anti)identity is reported as exactly +/-1.
    if list(values1) == list(values2):
        return 1.0
    if all(a == -b for a, b in zip(values1, values2)):
        return -1.0
    try:
        r = pd.Series(list(values1), dtype="float64").corr(pd.Series(list(values2), dtype="float64"))
    except (ValueError, TypeError, ZeroDivisionError, FloatingPointError) as exc:
        logger.debug("Correlation failed, treating as 0: %s", exc)
        return 0.0
    if r is None or not math.isfinite(r):
        return 0.0
    r = float(r)
    if abs(abs(r) - 1.0) < PERFECT_CORRELATION_TOLERANCE:
        return math.copysign(1.0, r)
    return max(-1.0, min(1.0, r))


def classify_strength(r: float) -> str:
    abs_r = abs(r)
    if abs_r >= STRONG_CORRELATION:
        return "strong"
    if abs_r >= MODERATE_CORRELATION:
        return "moderate"
    if abs_r >= WEAK_CORRELATION:
        return "weak"
    return "none"


def correlate(
    values1: Sequence[float],
    values2: Sequence[float],
    variable1: str = "",
    variable2: str = "",
) -> CorrelationResult:
    r = safe_correlation(values1, values2)
    return CorrelationResult(
        variable1=variable1,
        variable2=variable2,
        correlation=r,
        strength=classify_strength(r),
    )


def build_correlation_matrix(
    dataset: AnalysisDataset,
    question_ids: Optional[List[str]] = None,
) -> CorrelationMatrix:
    """
    Symmetric Pearson correlation matrix across numeric questions.

    Without explicit ids, every question with at least two coercible numeric
    answers is used. Each pair is aligned by respondent; pairs with fewer than
    MIN_CORRELATION_PAIRS shared respondents get r = 0. The diagonal is 1.
    """
    ids = list(question_ids) if question_ids else numeric_question_ids(dataset, 2)
    if not ids:
        return CorrelationMatrix()

    index = build_question_index(dataset)
    variables = [question_label(index, qid) for qid in ids]
    n = len(ids)
    matrix = [[1.0 if i == j else 0.0 for j in range(n)] for i in range(n)]

    logger.info("Building %dx%d correlation matrix for project %s", n, n, dataset.project_id)

    for i in range(n):
        for j in range(i + 1, n):
            values_i, values_j = align_by_respondent(dataset.responses, ids[i], ids[j])
            if len(values_i) < MIN_CORRELATION_PAIRS:
                continue
            r = safe_correlation(values_i, values_j)
            matrix[i][j] = r
            matrix[j][i] = r

    return CorrelationMatrix(variables=variables, matrix=matrix)
