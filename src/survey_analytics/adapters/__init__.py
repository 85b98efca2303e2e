"""
Input adapters.

- spreadsheet: wide response tables (CSV / Excel via pandas) -> AnalysisDataset,
  plus merging datasets from several sources
"""
