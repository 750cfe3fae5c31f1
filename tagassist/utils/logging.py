"""
Logging utilities for the TagAssist backend.

Provides standardized logger configuration following the privacy rules below.

CRITICAL PRIVACY RULES:
- NEVER log the full body of a submitted work (it is the author's unpublished text)
- NEVER log the Google API key or any other secret
- Raw model responses are logged at DEBUG level only, truncated

Acceptable logging:
- High-level events (e.g., "Submission received", "Gemini response received")
- Non-sensitive metadata (e.g., "work_id=...", "title='My Fic'", tag counts)
- Validation outcomes (violation descriptions are model output, not author text)
"""

import logging
from typing import Optional


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to INFO)

    Returns:
        Configured logger instance

    Usage:
        >>> from tagassist.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def truncate_for_log(text: str, limit: int = 500) -> str:
    """Shorten model output before it goes into a log line."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [{len(text) - limit} more chars]"
