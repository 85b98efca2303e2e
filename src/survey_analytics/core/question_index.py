from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from survey_analytics.core.coercion import coerce_numeric
from survey_analytics.core.models import AnalysisDataset, ResponseType, SurveyResponse


@dataclass(frozen=True)
class QuestionMeta:
    label: str
    category: Optional[str]
    dominant_type: ResponseType


def dominant_response_type(responses: Iterable[SurveyResponse]) -> ResponseType:
    """
    Majority vote over the declared types of a question's responses.

    Ties keep the earliest-seen type. An empty question counts as text.
    """
    counts: Dict[str, int] = {}
    first: Optional[ResponseType] = None
    for r in responses:
        if first is None:
            first = r.type
        counts[r.type] = counts.get(r.type, 0) + 1

    if first is None:
        return "text"

    dominant: ResponseType = first
    max_count = 0
    # dict preserves first-seen order, so only a strictly higher count wins
    for rtype, count in counts.items():
        if count > max_count:
            max_count = count
            dominant = rtype  # type: ignore[assignment]
    return dominant


def group_by_question(dataset: AnalysisDataset) -> Dict[str, List[SurveyResponse]]:
    grouped: Dict[str, List[SurveyResponse]] = {}
    for r in dataset.responses:
        grouped.setdefault(r.question_id, []).append(r)
    return grouped


def build_question_index(dataset: AnalysisDataset) -> Dict[str, QuestionMeta]:
    """
    Map each question id to its display label, category and dominant type.

    Label and category come from the first response seen for the id; later
    responses carrying a different label are ignored. The label falls back
    to the question id when it is blank.
    """
    index: Dict[str, QuestionMeta] = {}
    for question_id, responses in group_by_question(dataset).items():
        first = responses[0]
        index[question_id] = QuestionMeta(
            label=first.question_label or question_id,
            category=first.category,
            dominant_type=dominant_response_type(responses),
        )
    return index


def question_label(index: Dict[str, QuestionMeta], question_id: str) -> str:
    meta = index.get(question_id)
    return meta.label if meta is not None else question_id


# ---------------------------------------------------------------------------
# Numeric accessors
# ---------------------------------------------------------------------------

def _accepts(r: SurveyResponse, include_boolean: bool, include_text: bool) -> bool:
    if not include_text and r.type == "text":
        return False
    if not include_boolean and r.type == "boolean":
        return False
    return True


def extract_numeric_values(
    responses: Iterable[SurveyResponse],
    question_id: str,
    *,
    include_boolean: bool = True,
    include_text: bool = False,
) -> List[float]:
    """
    Coercible numeric answers to one question, in response order.

    Responses declared as text are skipped unless include_text is set.
    """
    values: List[float] = []
    for r in responses:
        if r.question_id != question_id or not _accepts(r, include_boolean, include_text):
            continue
        numeric = coerce_numeric(r.value)
        if numeric is not None:
            values.append(numeric)
    return values


def numeric_question_ids(
    dataset: AnalysisDataset,
    min_count: int = 1,
    *,
    include_boolean: bool = True,
    include_text: bool = False,
) -> List[str]:
    """Question ids with at least `min_count` coercible numeric answers."""
    counts: Dict[str, int] = {}
    for r in dataset.responses:
        if not _accepts(r, include_boolean, include_text):
            continue
        if coerce_numeric(r.value) is None:
            continue
        counts[r.question_id] = counts.get(r.question_id, 0) + 1
    return [qid for qid, count in counts.items() if count >= min_count]


def align_by_respondent(
    responses: Iterable[SurveyResponse],
    question_id_a: str,
    question_id_b: str,
    *,
    include_boolean: bool = True,
    include_text: bool = False,
) -> Tuple[List[float], List[float]]:
    """
    Pair the numeric answers of two questions by respondent.

    Only respondents with a coercible answer to both questions are kept. If a
    respondent answered a question more than once, the last answer wins.
    Output order follows the first appearance of each respondent in A.
    """
    by_respondent_a: Dict[str, float] = {}
    by_respondent_b: Dict[str, float] = {}

    for r in responses:
        if not _accepts(r, include_boolean, include_text):
            continue
        if r.question_id == question_id_a:
            numeric = coerce_numeric(r.value)
            if numeric is not None:
                by_respondent_a[r.respondent_id] = numeric
        if r.question_id == question_id_b:
            numeric = coerce_numeric(r.value)
            if numeric is not None:
                by_respondent_b[r.respondent_id] = numeric

    values_a: List[float] = []
    values_b: List[float] = []
    for respondent_id, value_a in by_respondent_a.items():
        value_b = by_respondent_b.get(respondent_id)
        if value_b is not None:
            values_a.append(value_a)
            values_b.append(value_b)
    return values_a, values_b
