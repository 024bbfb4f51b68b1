"""Metric series coercion and the shared statistics helpers.

Every analytics module funnels its input through :func:`as_array` so that
absent or non-numeric samples are treated identically everywhere:
  - ``None``, unparsable strings and NaN become 0.0
  - numeric strings and booleans are converted like any other number
  - integers too large for a float become +/-inf

Rounding goes through :func:`round_fixed`, which rounds the exact binary
value half-away-from-zero.  Python's built-in ``round`` rounds ties to even
and would disagree with the reporting front end on values such as 0.125.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Enough significant digits to quantize any finite double without overflow
_DECIMAL_PREC = 400


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def coerce_value(value: Any) -> float:
    """Convert one sample to float, mapping missing/non-numeric to 0.0."""
    if value is None:
        return 0.0
    try:
        result = float(value)
    except OverflowError:
        # integers beyond the float range saturate
        return math.inf if value > 0 else -math.inf
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result):
        return 0.0
    return result


def coerce_series(series: Sequence[Any] | None) -> list[float]:
    """Coerce a whole series; ``None`` is treated as an empty series."""
    if series is None:
        return []
    values = [coerce_value(v) for v in series]
    if logger.isEnabledFor(logging.DEBUG):
        replaced = sum(
            1 for raw, v in zip(series, values)
            if v == 0.0 and not (isinstance(raw, (int, float)) and raw == 0)
        )
        if replaced:
            logger.debug("coerced %d missing/non-numeric sample(s) to 0", replaced)
    return values


def as_array(series: Sequence[Any] | None) -> np.ndarray:
    """Coerced float64 array view of *series*."""
    return np.asarray(coerce_series(series), dtype=np.float64)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def mean(series: Sequence[Any] | None) -> float:
    """Arithmetic mean; 0.0 for an empty series."""
    arr = as_array(series)
    if len(arr) == 0:
        return 0.0
    return float(np.mean(arr))


def population_std(series: Sequence[Any] | None) -> float:
    """Standard deviation with denominator n; 0.0 for an empty series."""
    arr = as_array(series)
    if len(arr) == 0:
        return 0.0
    return float(np.std(arr, ddof=0))


def z_score(value: float, mu: float, std: float) -> float:
    """Distance from *mu* in units of *std*; defined as 0 when std is 0."""
    if std == 0:
        return 0.0
    return (value - mu) / std


def clamp01(x: float) -> float:
    return min(1.0, max(0.0, x))


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------


def round_fixed(value: float, digits: int) -> float:
    """Round to *digits* decimals, ties away from zero on the exact value.

    >>> round_fixed(0.125, 2)
    0.13
    >>> round(0.125, 2)
    0.12
    """
    if not math.isfinite(value):
        return value
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PREC
        quantum = Decimal(1).scaleb(-digits)
        return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
