"""Minimum hourly rate calculator for freelancers."""

__version__ = "0.1.0"
