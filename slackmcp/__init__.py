"""Slack channel listing and conversation history as CSV, with a lazily authenticated Slack client."""

__version__ = "1.0.0"