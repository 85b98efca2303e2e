"""
Core analysis layer.

Every function here is a pure transformation over an AnalysisDataset:
- models: SurveyResponse, AnalysisDataset and related input types
- coercion: raw answer -> numeric scalar (or None)
- question_index: labels, dominant types, numeric extraction and alignment
- descriptive: basic statistics and frequency distributions per question
- correlation: Pearson r and the respondent-aligned correlation matrix
- labels: pre/post and importance/performance label detection and pairing
- tdist: Student-t CDF built on log-gamma and the incomplete beta function
- ttest: automatic paired t-tests
- ipa: importance-performance analysis (stated and derived importance)
- text_summary: keyword and length summaries of free-text answers
- summary: one-call dataset overview
"""
