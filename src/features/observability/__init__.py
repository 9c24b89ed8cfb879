"""Observability module for logging and metrics."""

from src.features.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from src.features.observability.metrics import TranslationMetrics


__all__ = [
    "TranslationMetrics",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
]
