"""Recruiting eligibility and body composition screening."""

__version__ = "0.1.0"
