"""AI Testing Maturity Assessment service.

Self-service maturity diagnostic for software testing organisations.
Scores a fixed questionnaire into dimension, area and overall results,
captures the respondent as a lead, and serves the report behind an
unguessable token link.
"""

__version__ = "0.1.0"
