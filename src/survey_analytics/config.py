from __future__ import annotations

import logging
import os
from typing import Optional

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Survey Analytics Engine"
APP_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
#
# Only the command-line runner configures handlers; library modules just
# create their own named loggers.
# ---------------------------------------------------------------------------


def resolve_log_level(name: Optional[str], default: str = "INFO") -> str:
    """Upper-cased level name, or `default` when logging does not know it."""
    level = (name or "").strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else default


LOG_LEVEL = resolve_log_level(os.getenv("SURVEY_ANALYTICS_LOG_LEVEL"))
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# ---------------------------------------------------------------------------
# Analysis thresholds
# ---------------------------------------------------------------------------

# Two-tailed p-value below which a paired t-test is reported as significant
SIGNIFICANCE_LEVEL = 0.05

# Minimum respondent-aligned pairs before a Pearson r is computed (else r = 0)
MIN_CORRELATION_PAIRS = 3

# Minimum respondent-aligned pairs for a paired t-test (else the pair is skipped)
MIN_TTEST_PAIRS = 2

# Minimum (value, other-mean) pairs before derived importance uses a correlation
MIN_DERIVED_IMPORTANCE_PAIRS = 3

# Importance assigned in derived mode when there is not enough data to correlate
DEFAULT_DERIVED_IMPORTANCE = 1.0

# Reported |t| when every paired difference is identical and non-zero
SATURATED_T_STATISTIC = 999.0

# Number of keywords returned for a free-text question
DEFAULT_TOP_KEYWORDS = 5

# |r| cut-offs for the correlation strength labels
STRONG_CORRELATION = 0.7
MODERATE_CORRELATION = 0.4
WEAK_CORRELATION = 0.2
