"""Alignment module for point-in-time correct joins."""

from .point_in_time import VintageIndex, normalize_dates
from .fiscal_release import FiscalReleaseResolver
from .validation import validate_no_lookahead, FeatureSetValidator

__all__ = [
    'VintageIndex',
    'normalize_dates',
    'FiscalReleaseResolver',
    'validate_no_lookahead',
    'FeatureSetValidator',
]
