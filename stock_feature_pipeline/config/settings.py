"""
RUN CONFIGURATION

Design Principles:
1. The train/test cutoff and the economic series table are configuration,
   supplied at run start and immutable for the run
2. Malformed configuration fails at startup, never per row
3. Every value can be overridden from a JSON file without touching join logic
"""

import json
import re
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union

import pandas as pd

from ..exceptions import ConfigurationError
from .data_sources import KEY_COLUMNS, TARGET_COLUMN, STOCK_COLUMNS, SENTIMENT_SOURCES
from .economic_series import ECONOMIC_SERIES
from .financial_metrics import FINANCIAL_COLUMNS, PROVENANCE_COLUMNS


# === EXPORTED DEFAULTS ===

DEFAULT_TRAIN_CUTOFF_DATE = "2025-10-24"  # On/before -> train, after -> test
DEFAULT_FEATURE_LAG_DAYS = 1              # Features are what was known the day before

FEATURE_SET_VERSION = "1.0.0"

_COLUMN_NAME = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

# Output and provenance names an economic series column must not shadow
RESERVED_COLUMNS = frozenset(
    KEY_COLUMNS + [TARGET_COLUMN, 'feature_date', 'split']
    + list(STOCK_COLUMNS.values()) + FINANCIAL_COLUMNS + PROVENANCE_COLUMNS
    + [c for source in SENTIMENT_SOURCES for c in source.output_columns]
)
RESERVED_SUFFIXES = ('_knowledge_date', '_release_date')


@dataclass(frozen=True)
class FeatureSetConfig:
    """
    Process-wide configuration for one feature set build.

    Frozen: once a run starts its cutoff date and series table cannot change.
    """
    train_cutoff_date: str = DEFAULT_TRAIN_CUTOFF_DATE
    feature_lag_days: int = DEFAULT_FEATURE_LAG_DAYS
    economic_series: Dict[str, str] = field(default_factory=lambda: dict(ECONOMIC_SERIES))
    include_split_files: bool = False
    show_progress: bool = True

    def __post_init__(self):
        self._validate_cutoff()
        self._validate_lag()
        self._validate_series()

    def _validate_cutoff(self):
        try:
            datetime.strptime(str(self.train_cutoff_date), "%Y-%m-%d")
        except ValueError as e:
            raise ConfigurationError(
                f"train_cutoff_date must be YYYY-MM-DD, got {self.train_cutoff_date!r}"
            ) from e

    def _validate_lag(self):
        if isinstance(self.feature_lag_days, bool) or not isinstance(self.feature_lag_days, int):
            raise ConfigurationError(
                f"feature_lag_days must be an integer, got {self.feature_lag_days!r}"
            )
        if self.feature_lag_days < 1:
            raise ConfigurationError(
                f"feature_lag_days must be >= 1 to avoid same-day leakage, "
                f"got {self.feature_lag_days}"
            )

    def _validate_series(self):
        series = self.economic_series
        if not isinstance(series, dict) or not series:
            raise ConfigurationError("economic_series must be a non-empty mapping")

        for series_id, column in series.items():
            if not isinstance(series_id, str) or not series_id.strip():
                raise ConfigurationError(f"Invalid economic series id: {series_id!r}")
            if not isinstance(column, str) or not _COLUMN_NAME.match(column):
                raise ConfigurationError(
                    f"Invalid column name {column!r} for series {series_id}"
                )
            if column in RESERVED_COLUMNS or column.endswith(RESERVED_SUFFIXES):
                raise ConfigurationError(
                    f"Column name {column!r} for series {series_id} clashes with a "
                    f"reserved output or provenance column"
                )

        columns = list(series.values())
        duplicates = sorted({c for c in columns if columns.count(c) > 1})
        if duplicates:
            raise ConfigurationError(
                f"economic_series maps several series to the same column: {duplicates}"
            )

        # Private copy so the caller's dict cannot change mid-run
        object.__setattr__(self, 'economic_series', dict(series))

    @property
    def cutoff(self) -> pd.Timestamp:
        return pd.Timestamp(self.train_cutoff_date)

    @property
    def feature_lag(self) -> pd.Timedelta:
        return pd.Timedelta(days=self.feature_lag_days)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FeatureSetConfig':
        """Create from dictionary. Unknown keys are a configuration error."""
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")
        return cls(**d)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'FeatureSetConfig':
        """Load configuration from a JSON file."""
        path = Path(path)
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Config file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must hold a JSON object")
        return cls.from_dict(data)

    def replace(self, **overrides) -> 'FeatureSetConfig':
        """Return a copy with some values overridden (re-validated)."""
        d = self.to_dict()
        d.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_dict(d)
