"""Shared helpers for NaN-padded indicator series."""

import math
from typing import Sequence

import numpy as np

NAN = float("nan")


def validate_period(period: int, name: str = "period") -> None:
    """Raise ValueError unless period is a positive integer."""
    if isinstance(period, bool) or not isinstance(period, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {period!r}")
    if period < 1:
        raise ValueError(f"{name} must be >= 1, got {period}")


def to_array(values: Sequence[float]) -> np.ndarray:
    """Copy values into a fresh float64 array (input is never aliased)."""
    return np.array(values, dtype=np.float64, copy=True).reshape(-1)


def nan_series(length: int) -> list[float]:
    """All-undefined series of the given length."""
    return [NAN] * length


def is_undefined(value: float | None) -> bool:
    """Check if a series entry is the undefined sentinel."""
    if value is None:
        return True
    return math.isnan(value)


def compact_defined(values: Sequence[float]) -> list[tuple[int, float]]:
    """Return (original_index, value) pairs for every defined entry."""
    return [(i, float(v)) for i, v in enumerate(values) if not is_undefined(v)]


def expand_defined(
    pairs: Sequence[tuple[int, float]],
    values: Sequence[float],
    length: int,
) -> list[float]:
    """Scatter values back onto the original indices carried by pairs.

    pairs and values are matched one-to-one; every index not covered
    stays undefined.
    """
    if len(pairs) != len(values):
        raise ValueError(
            f"pairs and values must have equal length ({len(pairs)} != {len(values)})"
        )
    result = nan_series(length)
    for (index, _), value in zip(pairs, values):
        result[index] = float(value)
    return result
