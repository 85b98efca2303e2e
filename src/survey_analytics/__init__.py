"""
Statistical analysis engine for survey response datasets.

Subpackages:
- core: coercion, question index, descriptive statistics, correlation,
  paired t-tests, importance-performance analysis, text summaries
- adapters: build AnalysisDataset objects from response tables
"""

from survey_analytics.config import APP_VERSION as __version__
