"""Sentiment aggregation and rule-based portfolio recommendations."""

__version__ = "0.3.0"
