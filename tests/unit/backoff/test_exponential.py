from __future__ import annotations

from unittest.mock import patch

import pytest

from accountclient.backoff import BaseBackoffStrategy, ExponentialBackoff, calculate_delay

#####################################
#     Tests for calculate_delay     #
#####################################


@pytest.mark.parametrize(
    ("attempt", "expected"),
    [(0, 0.25), (1, 0.5), (2, 1.0), (3, 2.0), (4, 4.0)],
)
def test_calculate_delay_without_jitter(attempt: int, expected: float) -> None:
    """Test that the delay doubles with each attempt."""
    assert calculate_delay(attempt, base_interval_ms=250, max_jitter_ms=0) == expected


@pytest.mark.parametrize("attempt", [0, 1, 2, 5])
def test_calculate_delay_within_bounds(attempt: int) -> None:
    """Test that the delay lies in [base * 2^attempt, base * 2^attempt +
    jitter)."""
    lower = 2250 * 2**attempt / 1000
    upper = (2250 * 2**attempt + 150) / 1000
    for _ in range(200):
        delay = calculate_delay(attempt, base_interval_ms=2250, max_jitter_ms=150)
        assert lower <= delay < upper


def test_calculate_delay_jitter_upper_bound_exclusive() -> None:
    """Test that the jitter is drawn below its upper bound."""
    with patch("random.randrange", return_value=149) as mock:
        assert calculate_delay(0, base_interval_ms=2250, max_jitter_ms=150) == 2.399
    mock.assert_called_once_with(150)


def test_calculate_delay_jitter_of_one_is_zero() -> None:
    """Test that a jitter bound of 1 ms never adds any jitter."""
    assert calculate_delay(1, base_interval_ms=100, max_jitter_ms=1) == 0.2


@pytest.mark.parametrize(
    ("attempt", "base_interval_ms", "max_jitter_ms", "match"),
    [
        (-1, 100, 10, r"attempt must be >= 0, got -1"),
        (0, 0, 10, r"base_interval_ms must be > 0, got 0"),
        (0, -5, 10, r"base_interval_ms must be > 0, got -5"),
        (0, 100, -1, r"max_jitter_ms must be >= 0, got -1"),
    ],
)
def test_calculate_delay_invalid_arguments(
    attempt: int, base_interval_ms: int, max_jitter_ms: int, match: str
) -> None:
    with pytest.raises(ValueError, match=match):
        calculate_delay(attempt, base_interval_ms=base_interval_ms, max_jitter_ms=max_jitter_ms)


########################################
#     Tests for ExponentialBackoff     #
########################################


def test_exponential_backoff_is_strategy() -> None:
    assert isinstance(ExponentialBackoff(base_interval_ms=100), BaseBackoffStrategy)


def test_exponential_backoff_calculate() -> None:
    """Test the delays of successive retries without jitter."""
    backoff = ExponentialBackoff(base_interval_ms=100)
    assert [backoff.calculate(attempt) for attempt in range(4)] == [0.1, 0.2, 0.4, 0.8]


def test_exponential_backoff_calculate_with_jitter() -> None:
    backoff = ExponentialBackoff(base_interval_ms=2250, max_jitter_ms=150)
    assert 4.5 <= backoff.calculate(1) < 4.65


def test_exponential_backoff_repr() -> None:
    assert (
        repr(ExponentialBackoff(base_interval_ms=2250, max_jitter_ms=150))
        == "ExponentialBackoff(base_interval_ms=2250, max_jitter_ms=150)"
    )


@pytest.mark.parametrize(
    ("base_interval_ms", "max_jitter_ms", "match"),
    [
        (0, 0, r"base_interval_ms must be > 0, got 0"),
        (-1, 0, r"base_interval_ms must be > 0, got -1"),
        (100, -1, r"max_jitter_ms must be >= 0, got -1"),
    ],
)
def test_exponential_backoff_invalid_parameters(
    base_interval_ms: int, max_jitter_ms: int, match: str
) -> None:
    """Test that invalid parameters are rejected on construction."""
    with pytest.raises(ValueError, match=match):
        ExponentialBackoff(base_interval_ms=base_interval_ms, max_jitter_ms=max_jitter_ms)


def test_base_backoff_strategy_is_abstract() -> None:
    with pytest.raises(TypeError, match=r"abstract"):
        BaseBackoffStrategy()  # type: ignore[abstract]
