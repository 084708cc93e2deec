"""Negative log-scale "sentiment" scalars derived from file statistics.

Larger or more frequently changed files get more negative values, which biases
downstream ranking toward small, quiet files.
"""

from __future__ import annotations

import math


def negative_log_sentiment(value: int) -> float:
    """Return ``-floor(log10(value))``, or 0.0 for non-positive values."""
    if value <= 0:
        return 0.0
    # Integer digit count keeps the floor exact for large values.
    return float(-(len(str(value)) - 1))


def negative_log_sentiment_float(value: float) -> float:
    """Return ``-log10(value)``, or 0.0 for non-positive values."""
    if value <= 0:
        return 0.0
    return 0.0 - math.log10(value)


__all__ = ["negative_log_sentiment", "negative_log_sentiment_float"]
