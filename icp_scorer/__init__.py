"""
ICP Lead Scorer
===============
Ideal-Customer-Profile scoring for local businesses:
  Stage 1: Website Analysis (homepage signals)
  Stage 2: Category Classification (delivery / booking buckets)
  Stage 3: Weighted Scoring (0-10 fit score with per-factor breakdown)
"""

__version__ = "1.0.0"
__author__ = "ICP Scoring Team"
