from __future__ import annotations

import logging
import math
import re
import time
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from survey_analytics.core.models import (
    AnalysisDataset,
    DatasetMetadata,
    RawValue,
    ResponseType,
    SurveyResponse,
)

logger = logging.getLogger(__name__)

SPREADSHEET_SUFFIXES = (".csv", ".xlsx", ".xls")


class DatasetAdapterError(Exception):
    """Raised when a response table cannot be turned into an AnalysisDataset."""


# ---------------------------------------------------------------------------
# Cell parsing
# ---------------------------------------------------------------------------

# Exact cell texts recognised as Likert answers.
LIKERT_CELLS: Dict[str, int] = {
    "매우 불만족": 1, "매우불만족": 1, "1점": 1, "1": 1,
    "불만족": 2, "2점": 2, "2": 2,
    "보통": 3, "3점": 3, "3": 3,
    "만족": 4, "4점": 4, "4": 4,
    "매우 만족": 5, "매우만족": 5, "5점": 5, "5": 5,
}

CHECKBOX_TRUE = ("예", "O", "Y", "YES", "TRUE")
CHECKBOX_FALSE = ("아니오", "X", "N", "NO", "FALSE")

# Category keyword table, checked in order.
CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "서비스 품질": ("서비스", "품질", "service"),
    "가격 만족도": ("가격", "비용", "요금", "price"),
    "직원 친절": ("직원", "친절", "응대", "staff"),
    "시설 환경": ("시설", "환경", "청결", "인테리어"),
}

# Leading number of a cell such as "10000원" or "4.5 points"
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_CATEGORY_RE = re.compile(r"\[([^\]]+)\]")


def _unwrap(raw: Any) -> Any:
    # numpy scalars (np.int64, np.bool_, ...) -> plain Python values
    if hasattr(raw, "item") and not isinstance(raw, (str, bytes)):
        try:
            return raw.item()
        except (ValueError, TypeError):
            return raw
    return raw


def is_blank_cell(raw: Any) -> bool:
    if raw is None:
        return True
    try:
        if pd.isna(raw):
            return True
    except (TypeError, ValueError):
        pass
    return isinstance(raw, str) and raw.strip() == ""


def parse_raw_value(raw: Any) -> Tuple[RawValue, ResponseType]:
    """Turn one spreadsheet cell into a (value, declared type) pair."""
    raw = _unwrap(raw)

    if isinstance(raw, bool):
        return raw, "boolean"
    if isinstance(raw, (int, float)):
        return raw, "numeric"

    text = str(raw).strip()

    if text in LIKERT_CELLS:
        return LIKERT_CELLS[text], "likert"

    match = _LEADING_NUMBER_RE.match(text)
    if match:
        number = float(match.group(0))
        if math.isfinite(number):
            return number, "numeric"

    upper = text.upper()
    if upper in CHECKBOX_TRUE:
        return True, "boolean"
    if upper in CHECKBOX_FALSE:
        return False, "boolean"

    return text, "text"


def extract_category_from_label(label: str) -> Optional[str]:
    """First [bracketed] segment of a label, else a keyword-based category."""
    match = _CATEGORY_RE.search(label)
    if match:
        return match.group(1)

    lower = label.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(kw.lower() in lower for kw in keywords):
            return category
    return None


def _cell_text(raw: Any) -> str:
    raw = _unwrap(raw)
    if is_blank_cell(raw):
        return ""
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw).strip()


def _header_label(header: Any) -> str:
    text = _cell_text(header)
    # pandas names blank header cells "Unnamed: <n>"
    return "" if text.startswith("Unnamed:") else text


# ---------------------------------------------------------------------------
# Table -> dataset
# ---------------------------------------------------------------------------

def dataset_from_frame(
    df: pd.DataFrame,
    project_name: str,
    *,
    project_id: Optional[str] = None,
    collected_at: Optional[str] = None,
) -> AnalysisDataset:
    """
    Convert a wide response table into an AnalysisDataset.

    Expected layout:
      | respondent id | Q1 label | Q2 label | ... |
      | R001          | 5        | 만족      | ... |

    Question ids are Q1..Qn by column position and labels come from the
    header. Blank cells produce no response. A blank respondent id becomes
    R<row number>.
    """
    if df is None or df.empty or len(df.columns) < 2:
        raise DatasetAdapterError("Response table needs a respondent column, at least one question column and one row.")

    headers = [_header_label(c) for c in df.columns[1:]]
    categories = [extract_category_from_label(h) for h in headers]

    responses: List[SurveyResponse] = []
    for row_index, row in enumerate(df.itertuples(index=False, name=None)):
        respondent_id = _cell_text(row[0]) or f"R{row_index + 1}"

        for col_index, raw in enumerate(row[1:]):
            if is_blank_cell(raw):
                continue
            question_id = f"Q{col_index + 1}"
            value, rtype = parse_raw_value(raw)
            responses.append(
                SurveyResponse(
                    id=f"{respondent_id}-{question_id}",
                    respondent_id=respondent_id,
                    question_id=question_id,
                    question_label=headers[col_index],
                    value=value,
                    type=rtype,
                    category=categories[col_index],
                )
            )

    logger.info(
        "Built dataset '%s': %d rows, %d questions, %d responses",
        project_name, len(df), len(headers), len(responses),
    )

    return AnalysisDataset(
        project_id=project_id or f"excel-{int(time.time() * 1000)}",
        project_name=project_name,
        responses=responses,
        metadata=DatasetMetadata(
            total_respondents=len(df),
            collected_at=collected_at or datetime.now(timezone.utc).isoformat(),
            source="excel",
        ),
    )


def read_response_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read the first sheet of an .xlsx/.xls workbook, or a .csv file."""
    path = Path(path)
    if not path.exists():
        raise DatasetAdapterError(f"Response file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SPREADSHEET_SUFFIXES:
        raise DatasetAdapterError(
            f"Unsupported response file type '{suffix}'. Expected one of {SPREADSHEET_SUFFIXES}."
        )

    try:
        if suffix == ".csv":
            return pd.read_csv(path)
        xls = pd.ExcelFile(path)
        logger.info("Loading response workbook %s (sheets: %s)", path, xls.sheet_names)
        return xls.parse(xls.sheet_names[0])
    except Exception as exc:
        raise DatasetAdapterError(f"Could not read response file {path}: {exc}") from exc


def load_spreadsheet(path: Union[str, Path], project_name: Optional[str] = None) -> AnalysisDataset:
    path = Path(path)
    df = read_response_table(path)
    return dataset_from_frame(df, project_name or path.stem)


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------

def merge_datasets(datasets: Sequence[AnalysisDataset]) -> AnalysisDataset:
    """
    Combine several datasets into one.

    Response and respondent ids are prefixed with DS<index>- so respondents
    from different sources never collide. A single dataset is returned as is.
    """
    if not datasets:
        raise DatasetAdapterError("No datasets to merge.")
    if len(datasets) == 1:
        return datasets[0]

    responses: List[SurveyResponse] = []
    total_respondents = 0
    for ds_index, ds in enumerate(datasets):
        prefix = f"DS{ds_index}-"
        for r in ds.responses:
            responses.append(replace(r, id=prefix + r.id, respondent_id=prefix + r.respondent_id))
        total_respondents += ds.metadata.total_respondents

    return AnalysisDataset(
        project_id=f"merged-{int(time.time() * 1000)}",
        project_name=" + ".join(ds.project_name for ds in datasets),
        responses=responses,
        metadata=DatasetMetadata(
            total_respondents=total_respondents,
            collected_at=datetime.now(timezone.utc).isoformat(),
            source="mixed",
        ),
    )
