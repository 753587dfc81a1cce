"""Observability: structured logging.

Provides standardized logging primitives using structlog.
"""

from rollcall.observability.logging import PIIRedactor, get_logger, setup_logging

__all__ = ["PIIRedactor", "get_logger", "setup_logging"]
