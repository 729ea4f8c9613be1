"""Teamtrack - identity, authorization and task workflow core."""

__version__ = "0.1.0"
