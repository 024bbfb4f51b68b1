"""Tunable parameters for the analytics engine.

The engine itself takes every parameter as an explicit keyword argument;
:class:`AnalyticsConfig` just bundles them so a caller (or the CLI) can load
one set of values from a file and pass it through :func:`build_report`.

Recognized option names in files/dicts:
    threshold          -- global z-score threshold (alias of global_threshold)
    window             -- rolling detection window (alias of rolling_window)
    alpha              -- exponential smoothing factor
    rolling_threshold  -- rolling z-score threshold
    ma_window          -- moving-average window used by forecasts
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, PositiveInt

# Defaults mirror the per-function defaults in the analytics modules
DEFAULT_GLOBAL_THRESHOLD = 2.5
DEFAULT_ROLLING_WINDOW = 7
DEFAULT_ROLLING_THRESHOLD = 2.0
DEFAULT_MA_WINDOW = 3
DEFAULT_ALPHA = 0.3


class AnalyticsConfig(BaseModel):
    """Thresholds, window sizes and smoothing factor for one analysis run."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    global_threshold: NonNegativeFloat = Field(
        DEFAULT_GLOBAL_THRESHOLD, alias="threshold",
        description="Flag when |z| against the whole series exceeds this",
    )
    rolling_window: PositiveInt = Field(
        DEFAULT_ROLLING_WINDOW, alias="window",
        description="Number of preceding samples in the rolling baseline",
    )
    rolling_threshold: NonNegativeFloat = DEFAULT_ROLLING_THRESHOLD
    ma_window: PositiveInt = Field(DEFAULT_MA_WINDOW, description="Moving-average window for forecasts")
    alpha: float = Field(DEFAULT_ALPHA, ge=0, le=1, description="Exponential smoothing factor (0..1)")

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> AnalyticsConfig:
        """Build a config from a mapping of option names (or aliases) to values.

        Raises:
            pydantic.ValidationError: on unknown option names or out-of-range values.
        """
        return cls.model_validate(options)

    @classmethod
    def from_file(cls, path: str | Path) -> AnalyticsConfig:
        """Load a config from a JSON object file."""
        return cls.model_validate_json(Path(path).read_text())

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
