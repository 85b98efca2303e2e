"""
Pytest configuration and fixtures for survey_analytics tests.
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from survey_analytics.core.models import AnalysisDataset, DatasetMetadata, SurveyResponse  # noqa: E402


def build_dataset(
    rows: List[Tuple[str, str, str, object, str]],
    project_id: str = "test-project",
) -> AnalysisDataset:
    """rows: (respondent_id, question_id, label, value, type)."""
    responses = [
        SurveyResponse(
            id=f"{respondent_id}-{question_id}",
            respondent_id=respondent_id,
            question_id=question_id,
            question_label=label,
            value=value,
            type=rtype,
        )
        for respondent_id, question_id, label, value, rtype in rows
    ]
    respondents = {r.respondent_id for r in responses}
    return AnalysisDataset(
        project_id=project_id,
        project_name="Test Project",
        responses=responses,
        metadata=DatasetMetadata(
            total_respondents=len(respondents),
            collected_at="2026-01-01T00:00:00+00:00",
            source="excel",
        ),
    )


def wide_rows(questions: Dict[str, Tuple[str, List[object]]], rtype: str = "numeric") -> List[Tuple]:
    """{question_id: (label, [value per respondent R1..Rn])} -> long rows."""
    rows = []
    for question_id, (label, values) in questions.items():
        for i, value in enumerate(values, start=1):
            if value is None:
                continue
            rows.append((f"R{i}", question_id, label, value, rtype))
    return rows


@pytest.fixture
def make_dataset() -> Callable[..., AnalysisDataset]:
    return build_dataset


@pytest.fixture
def prepost_dataset() -> AnalysisDataset:
    """Satisfaction before/after for three respondents."""
    return build_dataset(
        wide_rows({
            "Q1": ("만족도(사전)", [3, 4, 5]),
            "Q2": ("만족도(사후)", [4, 5, 5]),
        }, rtype="likert")
    )


@pytest.fixture
def stated_ipa_dataset() -> AnalysisDataset:
    return build_dataset(
        wide_rows({
            "Q1": ("서비스 중요도", [5]),
            "Q2": ("서비스 만족도", [2]),
            "Q3": ("가격 중요도", [2]),
            "Q4": ("가격 만족도", [5]),
        })
    )


@pytest.fixture
def unlabeled_numeric_dataset() -> AnalysisDataset:
    """Three numeric questions, four respondents, no importance/performance wording."""
    return build_dataset(
        wide_rows({
            "Q1": ("직원 응대", [5, 4, 2, 1]),
            "Q2": ("시설 청결", [4, 4, 3, 2]),
            "Q3": ("대기 시간", [3, 5, 1, 2]),
        })
    )


@pytest.fixture
def mixed_dataset() -> AnalysisDataset:
    """Likert words, yes/no marks and free text side by side."""
    return build_dataset([
        ("R1", "Q1", "전반적 평가", "매우만족", "likert"),
        ("R2", "Q1", "전반적 평가", "보통", "likert"),
        ("R3", "Q1", "전반적 평가", 4, "numeric"),
        ("R1", "Q2", "재방문 의향", "O", "boolean"),
        ("R2", "Q2", "재방문 의향", "X", "boolean"),
        ("R3", "Q2", "재방문 의향", True, "boolean"),
        ("R1", "Q3", "기타 의견", "service was great", "text"),
        ("R2", "Q3", "기타 의견", "great staff, slow service", "text"),
        ("R3", "Q3", "기타 의견", "   ", "text"),
    ])
