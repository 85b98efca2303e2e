from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from survey_analytics.core.coercion import coerce_numeric
from survey_analytics.core.descriptive import QuestionStats, analyze_questions
from survey_analytics.core.models import AnalysisDataset
from survey_analytics.core.question_index import group_by_question
from survey_analytics.core.text_summary import TextQuestionSummary, summarize_text_responses

logger = logging.getLogger(__name__)


@dataclass
class AnalysisSummary:
    """
    Dataset-level overview handed to report builders.

    overall_mean is the mean of every coercible answer to a non-text response.
    """
    project_name: str
    total_responses: int
    total_questions: int
    data_source: str
    collected_at: str
    question_stats: List[QuestionStats] = field(default_factory=list)
    text_questions: List[TextQuestionSummary] = field(default_factory=list)
    overall_mean: float = 0.0


def generate_analysis_summary(dataset: AnalysisDataset) -> AnalysisSummary:
    logger.info(
        "Summarizing project %s (%d responses)", dataset.project_id, len(dataset.responses)
    )

    question_stats = analyze_questions(dataset)
    grouped = group_by_question(dataset)

    text_questions = [
        summarize_text_responses(grouped[stat.question_id])
        for stat in question_stats
        if stat.response_type == "text"
    ]
    text_questions.sort(key=lambda s: s.response_count, reverse=True)

    numeric = [
        value
        for value in (coerce_numeric(r.value) for r in dataset.responses if r.type != "text")
        if value is not None
    ]

    return AnalysisSummary(
        project_name=dataset.project_name,
        total_responses=dataset.metadata.total_respondents,
        total_questions=len(question_stats),
        data_source=dataset.metadata.source,
        collected_at=dataset.metadata.collected_at,
        question_stats=question_stats,
        text_questions=text_questions,
        overall_mean=sum(numeric) / len(numeric) if numeric else 0.0,
    )
