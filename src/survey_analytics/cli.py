from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from survey_analytics.adapters.spreadsheet import DatasetAdapterError, load_spreadsheet
from survey_analytics.config import APP_NAME, APP_VERSION, LOG_FORMAT, LOG_LEVEL
from survey_analytics.core.correlation import build_correlation_matrix
from survey_analytics.core.ipa import generate_ipa
from survey_analytics.core.models import AnalysisDataset
from survey_analytics.core.summary import generate_analysis_summary
from survey_analytics.core.ttest import generate_paired_ttests

logger = logging.getLogger(__name__)

ANALYSES = ("summary", "correlation", "ttest", "ipa")


def run_analyses(dataset: AnalysisDataset, analyses: List[str]) -> Dict[str, Any]:
    """Run the requested analyses and return plain dicts keyed by analysis name."""
    out: Dict[str, Any] = {}
    if "summary" in analyses:
        out["summary"] = asdict(generate_analysis_summary(dataset))
    if "correlation" in analyses:
        out["correlation"] = asdict(build_correlation_matrix(dataset))
    if "ttest" in analyses:
        out["ttest"] = [asdict(r) for r in generate_paired_ttests(dataset)]
    if "ipa" in analyses:
        out["ipa"] = asdict(generate_ipa(dataset))
    return out


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="survey-analytics",
        description=f"{APP_NAME} {APP_VERSION}: statistics for a survey response table.",
    )
    parser.add_argument("path", help="Response table (.csv, .xlsx or .xls); first column is the respondent id")
    parser.add_argument("--project-name", default=None, help="Name stored on the dataset (defaults to the file name)")
    parser.add_argument(
        "--analysis",
        choices=ANALYSES + ("all",),
        default="all",
        help="Which analysis to run",
    )
    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    try:
        dataset = load_spreadsheet(args.path, args.project_name)
    except DatasetAdapterError as exc:
        logger.error("%s", exc)
        return 1

    analyses = list(ANALYSES) if args.analysis == "all" else [args.analysis]
    results = run_analyses(dataset, analyses)
    json.dump(results, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


def main() -> None:
    sys.exit(run_cli())
