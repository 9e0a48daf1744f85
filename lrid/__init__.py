"""
LRID — questionnaire scoring and consistency engine.

Turns one respondent's answers to the LRID instrument into dimension scores,
aggregate indices, consistency-rule hits and a confidence level, then gates
the result behind expert approval before it is handed to report rendering.
"""

__version__ = "1.0.0"
