"""
Stock Feature Pipeline

A point-in-time correct feature set builder for daily stock movement models.

Key Features:
- Vintage index with deterministic as-of lookups (no look-ahead bias)
- Financial statements dated by their earnings release, not period end
- Revisable economic series pivoted to one column per indicator
- Daily news sentiment from two classifiers, null when there is no news
- Fixed-date train/test split label

Usage:
    from stock_feature_pipeline import PipelineOrchestrator, FeatureSetConfig

    pipeline = PipelineOrchestrator(
        input_dir="data/snapshot",
        output_dir="data/feature_set",
        config=FeatureSetConfig(train_cutoff_date="2025-10-24"),
    )
    df = pipeline.run()
"""

from .exceptions import ConfigurationError, SchemaError
from .config import (
    FeatureSetConfig,
    DEFAULT_TRAIN_CUTOFF_DATE,
    FEATURE_SET_VERSION,
    ECONOMIC_SERIES,
)
from .alignment import VintageIndex, FiscalReleaseResolver, FeatureSetValidator
from .features import FinancialFeatures, EconomicPivot, DailySentimentAggregator
from .pipeline import FeatureAssembler, CutoffSplitter, PipelineOrchestrator
from .storage import SnapshotLoader

__version__ = FEATURE_SET_VERSION

__all__ = [
    'ConfigurationError',
    'SchemaError',
    'FeatureSetConfig',
    'DEFAULT_TRAIN_CUTOFF_DATE',
    'FEATURE_SET_VERSION',
    'ECONOMIC_SERIES',
    'VintageIndex',
    'FiscalReleaseResolver',
    'FeatureSetValidator',
    'FinancialFeatures',
    'EconomicPivot',
    'DailySentimentAggregator',
    'FeatureAssembler',
    'CutoffSplitter',
    'PipelineOrchestrator',
    'SnapshotLoader',
]
