"""GitHub issue triage helper."""

__version__ = "0.1.0"
