from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from survey_analytics.config import MIN_TTEST_PAIRS, SATURATED_T_STATISTIC, SIGNIFICANCE_LEVEL
from survey_analytics.core.labels import detect_timepoint, pair_by_key, timepoint_key
from survey_analytics.core.models import AnalysisDataset
from survey_analytics.core.question_index import (
    QuestionMeta,
    align_by_respondent,
    build_question_index,
    question_label,
)
from survey_analytics.core.tdist import two_tailed_p_value

logger = logging.getLogger(__name__)


@dataclass
class TTestResult:
    """
    Paired t-test between a pre question (A) and a post question (B).

    mean_diff is mean(B - A). When every difference is identical and non-zero
    the statistic is saturated at +/-SATURATED_T_STATISTIC with p = 0.
    """
    question_a_id: str
    question_b_id: str
    question_a_label: str
    question_b_label: str
    n: int
    mean_a: float
    mean_b: float
    mean_diff: float
    t_statistic: float
    p_value: float
    significant: bool


def find_prepost_pairs(index: Dict[str, QuestionMeta]) -> List[Tuple[str, str]]:
    """(pre_id, post_id) pairs detected from question labels."""
    tagged = []
    for question_id, meta in index.items():
        if meta.dominant_type == "text":
            continue
        timepoint = detect_timepoint(meta.label)
        if timepoint is None:
            continue
        tagged.append((question_id, timepoint, timepoint_key(meta.label)))
    return pair_by_key(tagged, "pre", "post")


def perform_paired_ttest(
    dataset: AnalysisDataset,
    question_a_id: str,
    question_b_id: str,
    index: Optional[Dict[str, QuestionMeta]] = None,
) -> Optional[TTestResult]:
    """
    Paired t-test on respondents who answered both questions numerically.

    Returns None when fewer than MIN_TTEST_PAIRS respondents can be aligned.
    """
    index = index if index is not None else build_question_index(dataset)

    values_a, values_b = align_by_respondent(dataset.responses, question_a_id, question_b_id)
    n = len(values_a)
    if n < MIN_TTEST_PAIRS:
        logger.info(
            "Skipping t-test %s vs %s: only %d aligned respondents",
            question_a_id, question_b_id, n,
        )
        return None

    diffs = [b - a for a, b in zip(values_a, values_b)]
    mean_a = sum(values_a) / n
    mean_b = sum(values_b) / n
    mean_diff = sum(diffs) / n

    variance_diff = sum((d - mean_diff) ** 2 for d in diffs) / (n - 1)
    std_diff = math.sqrt(max(variance_diff, 0.0))

    t_statistic = 0.0
    p_value = 1.0
    if std_diff == 0:
        if mean_diff != 0:
            t_statistic = SATURATED_T_STATISTIC if mean_diff > 0 else -SATURATED_T_STATISTIC
            p_value = 0.0
    else:
        t_statistic = mean_diff / (std_diff / math.sqrt(n))
        p_value = two_tailed_p_value(abs(t_statistic), n - 1)

    return TTestResult(
        question_a_id=question_a_id,
        question_b_id=question_b_id,
        question_a_label=question_label(index, question_a_id),
        question_b_label=question_label(index, question_b_id),
        n=n,
        mean_a=mean_a,
        mean_b=mean_b,
        mean_diff=mean_diff,
        t_statistic=t_statistic,
        p_value=p_value,
        significant=p_value < SIGNIFICANCE_LEVEL,
    )


def generate_paired_ttests(dataset: AnalysisDataset) -> List[TTestResult]:
    """Detect pre/post question pairs from labels and test each one."""
    index = build_question_index(dataset)
    pairs = find_prepost_pairs(index)
    logger.info("Detected %d pre/post pairs in project %s", len(pairs), dataset.project_id)

    results: List[TTestResult] = []
    for pre_id, post_id in pairs:
        result = perform_paired_ttest(dataset, pre_id, post_id, index)
        if result is not None:
            results.append(result)
    return results
