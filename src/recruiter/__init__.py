"""Applicant tracking: role profiles, candidate scoring and pipeline stages."""

__version__ = "0.1.0"
