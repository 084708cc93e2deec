"""Tests for sentiment derivation."""

from __future__ import annotations

import math

import pytest

from repostats.features.sentiment import negative_log_sentiment, negative_log_sentiment_float


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, 0.0), (1, 0.0), (9, 0.0), (10, -1.0), (999, -2.0), (1000, -3.0), (10**18, -18.0)],
)
def test_integer_sentiment_uses_floor_of_log10(value: int, expected: float) -> None:
    assert negative_log_sentiment(value) == expected


def test_integer_sentiment_never_negative_zero() -> None:
    assert math.copysign(1.0, negative_log_sentiment(5)) == 1.0


def test_float_sentiment_is_continuous() -> None:
    assert negative_log_sentiment_float(0.0) == 0.0
    assert negative_log_sentiment_float(100.0) == pytest.approx(-2.0)
    assert negative_log_sentiment_float(50.0) == pytest.approx(-math.log10(50.0))
    assert math.copysign(1.0, negative_log_sentiment_float(1.0)) == 1.0
