from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union

# Declared response kinds. A hint per response, not a guarantee per question.
ResponseType = Literal["likert", "numeric", "text", "boolean"]
RESPONSE_TYPES = ("likert", "numeric", "text", "boolean")

DatasetSource = Literal["ocr", "excel", "mixed"]

# Raw answer as captured: a number, a checkbox state, or whatever text was read.
RawValue = Union[int, float, str, bool]


@dataclass(frozen=True)
class SurveyResponse:
    """
    One respondent's answer to one question.

    The value is kept exactly as captured. Numeric meaning is recovered on
    demand by survey_analytics.core.coercion.coerce_numeric.
    """
    id: str
    respondent_id: str
    question_id: str
    question_label: str
    value: RawValue
    type: ResponseType
    category: Optional[str] = None


@dataclass(frozen=True)
class DatasetMetadata:
    total_respondents: int
    collected_at: str
    source: DatasetSource


@dataclass(frozen=True)
class AnalysisDataset:
    """
    Immutable input to every analysis in survey_analytics.core.

    Response order matters: question and respondent ordering in every result
    follows first appearance in `responses`.
    """
    project_id: str
    project_name: str
    responses: List[SurveyResponse] = field(default_factory=list)
    metadata: DatasetMetadata = field(
        default_factory=lambda: DatasetMetadata(total_respondents=0, collected_at="", source="excel")
    )
