from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from survey_analytics.config import DEFAULT_TOP_KEYWORDS
from survey_analytics.core.models import SurveyResponse

# Runs of ASCII letters/digits and Hangul syllables.
TOKEN_RE = re.compile(r"[A-Za-z0-9가-힣]+")
_DIGITS_RE = re.compile(r"^\d+$")

# English only; Korean particles are not filtered.
KEYWORD_STOPWORDS = frozenset({
    "the", "and", "for", "with", "this", "that", "have", "from", "your", "you",
    "are", "was", "were", "what", "when", "where", "which", "into", "onto",
    "our", "their", "they", "them", "then", "than", "but", "not", "yes", "no",
    "ok", "okay", "very", "much", "more", "less",
})


@dataclass
class TextQuestionSummary:
    question_id: str
    question_label: str
    response_count: int = 0
    average_length: float = 0.0
    top_keywords: List[str] = field(default_factory=list)


def extract_top_keywords(values: Iterable[str], limit: int = DEFAULT_TOP_KEYWORDS) -> List[str]:
    """Most frequent tokens across the answers; ties keep first-seen order."""
    frequency: Dict[str, int] = {}
    for value in values:
        for token in TOKEN_RE.findall(value.lower()):
            cleaned = token.replace("_", "").strip()
            if len(cleaned) < 2 or _DIGITS_RE.match(cleaned):
                continue
            if cleaned in KEYWORD_STOPWORDS:
                continue
            frequency[cleaned] = frequency.get(cleaned, 0) + 1

    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    return [token for token, _ in ranked[:limit]]


def summarize_text_responses(
    responses: Iterable[SurveyResponse],
    limit: int = DEFAULT_TOP_KEYWORDS,
) -> TextQuestionSummary:
    """
    Count, average length and top keywords of one question's free-text answers.

    Non-string and blank answers are dropped. The question id and label are
    taken from the first response.
    """
    responses = list(responses)
    question_id = responses[0].question_id if responses else ""
    label = (responses[0].question_label or question_id) if responses else ""

    texts = [r.value.strip() for r in responses if isinstance(r.value, str) and r.value.strip()]
    if not texts:
        return TextQuestionSummary(question_id=question_id, question_label=label)

    return TextQuestionSummary(
        question_id=question_id,
        question_label=label,
        response_count=len(texts),
        average_length=sum(len(t) for t in texts) / len(texts),
        top_keywords=extract_top_keywords(texts, limit),
    )
