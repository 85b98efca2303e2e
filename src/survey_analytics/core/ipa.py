from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from survey_analytics.config import DEFAULT_DERIVED_IMPORTANCE, MIN_DERIVED_IMPORTANCE_PAIRS
from survey_analytics.core.coercion import coerce_numeric
from survey_analytics.core.correlation import safe_correlation
from survey_analytics.core.labels import detect_ipa_type, ipa_key, pair_by_key
from survey_analytics.core.models import AnalysisDataset
from survey_analytics.core.question_index import (
    QuestionMeta,
    build_question_index,
    extract_numeric_values,
    numeric_question_ids,
    question_label,
)

logger = logging.getLogger(__name__)

QUADRANT_NAMES: Dict[int, str] = {
    1: "keep up",
    2: "concentrate here",
    3: "low priority",
    4: "possible overkill",
}


class IPAAnalysisError(Exception):
    """Raised when stated IPA is called with mismatched importance/performance ids."""


@dataclass
class IPAItem:
    question_id: str
    label: str
    importance: float
    performance: float
    quadrant: int = 1


@dataclass
class IPAResult:
    items: List[IPAItem] = field(default_factory=list)
    importance_mean: float = 0.0
    performance_mean: float = 0.0
    method: str = "stated"  # 'stated' or 'derived'


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def assign_quadrant(
    importance: float,
    performance: float,
    importance_mean: float,
    performance_mean: float,
) -> int:
    """Quadrant 1-4; values equal to a mean count as high."""
    if importance >= importance_mean and performance >= performance_mean:
        return 1
    if importance >= importance_mean and performance < performance_mean:
        return 2
    if importance < importance_mean and performance < performance_mean:
        return 3
    return 4


def _finalize(items: List[IPAItem], method: str) -> IPAResult:
    if not items:
        return IPAResult(method=method)

    importance_mean = _mean([item.importance for item in items])
    performance_mean = _mean([item.performance for item in items])
    for item in items:
        item.quadrant = assign_quadrant(item.importance, item.performance, importance_mean, performance_mean)

    return IPAResult(
        items=items,
        importance_mean=importance_mean,
        performance_mean=performance_mean,
        method=method,
    )


# ---------------------------------------------------------------------------
# Stated importance
# ---------------------------------------------------------------------------

def find_ipa_pairs(index: Dict[str, QuestionMeta]) -> List[Tuple[str, str]]:
    """(importance_id, performance_id) pairs detected from question labels."""
    tagged = []
    for question_id, meta in index.items():
        if meta.dominant_type == "text":
            continue
        label_type = detect_ipa_type(meta.label)
        if label_type is None:
            continue
        tagged.append((question_id, label_type, ipa_key(meta.label)))
    return pair_by_key(tagged, "importance", "performance")


def perform_stated_ipa(
    dataset: AnalysisDataset,
    importance_ids: Sequence[str],
    performance_ids: Sequence[str],
) -> IPAResult:
    """
    IPA from explicit importance and performance questions, paired by position.

    Each side's score is the mean of every numeric answer to that question;
    answers are not aligned by respondent.
    """
    if len(importance_ids) != len(performance_ids):
        raise IPAAnalysisError(
            "Importance and performance question counts must match "
            f"({len(importance_ids)} != {len(performance_ids)})."
        )

    index = build_question_index(dataset)
    items: List[IPAItem] = []
    for importance_id, performance_id in zip(importance_ids, performance_ids):
        items.append(
            IPAItem(
                question_id=performance_id,
                label=question_label(index, performance_id),
                importance=_mean(extract_numeric_values(dataset.responses, importance_id)),
                performance=_mean(extract_numeric_values(dataset.responses, performance_id)),
            )
        )
    return _finalize(items, "stated")


# ---------------------------------------------------------------------------
# Derived importance
# ---------------------------------------------------------------------------

def perform_derived_ipa(dataset: AnalysisDataset) -> IPAResult:
    """
    IPA without importance questions.

    Performance is the question mean. Importance is 1 + 4 * |r|, where r
    correlates each answer with the mean of the same respondent's other
    numeric answers (respondents need at least two other answers). Questions
    with fewer than MIN_DERIVED_IMPORTANCE_PAIRS usable respondents get the
    default importance.
    """
    question_ids = numeric_question_ids(dataset, 1)
    if not question_ids:
        return IPAResult(method="derived")

    index = build_question_index(dataset)

    # Per-respondent running totals and per-question answers, text excluded.
    respondent_totals: Dict[str, Tuple[float, int]] = {}
    question_answers: Dict[str, List[Tuple[str, float]]] = {}
    for r in dataset.responses:
        if r.type == "text":
            continue
        value = coerce_numeric(r.value)
        if value is None:
            continue
        total, count = respondent_totals.get(r.respondent_id, (0.0, 0))
        respondent_totals[r.respondent_id] = (total + value, count + 1)
        question_answers.setdefault(r.question_id, []).append((r.respondent_id, value))

    items: List[IPAItem] = []
    for question_id in question_ids:
        answers = question_answers.get(question_id, [])
        if not answers:
            continue

        own_values: List[float] = []
        other_means: List[float] = []
        for respondent_id, value in answers:
            total, count = respondent_totals[respondent_id]
            if count < 3:
                # fewer than two other answers
                continue
            own_values.append(value)
            other_means.append((total - value) / (count - 1))

        importance = DEFAULT_DERIVED_IMPORTANCE
        if len(own_values) >= MIN_DERIVED_IMPORTANCE_PAIRS:
            r = safe_correlation(own_values, other_means)
            importance = 1 + 4 * min(1.0, max(0.0, abs(r)))

        items.append(
            IPAItem(
                question_id=question_id,
                label=question_label(index, question_id),
                importance=importance,
                performance=_mean([value for _, value in answers]),
            )
        )

    return _finalize(items, "derived")


def generate_ipa(dataset: AnalysisDataset) -> IPAResult:
    """Stated IPA when importance/performance pairs exist, derived IPA otherwise."""
    index = build_question_index(dataset)
    pairs = find_ipa_pairs(index)

    if pairs:
        logger.info("Running stated IPA on %d pairs for project %s", len(pairs), dataset.project_id)
        return perform_stated_ipa(
            dataset,
            [importance_id for importance_id, _ in pairs],
            [performance_id for _, performance_id in pairs],
        )

    logger.info("No importance/performance pairs in project %s; deriving importance", dataset.project_id)
    return perform_derived_ipa(dataset)
