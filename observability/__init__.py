"""Observability utilities for the interview session engine."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
