"""Configuration module for the stock feature pipeline."""

from .settings import (
    FeatureSetConfig,
    DEFAULT_TRAIN_CUTOFF_DATE,
    DEFAULT_FEATURE_LAG_DAYS,
    FEATURE_SET_VERSION,
)
from .data_sources import (
    SourceTable,
    SentimentSource,
    STOCK_DATA,
    INCOME_STATEMENT,
    BALANCE_SHEET,
    CASHFLOW,
    EARNINGS_DATES,
    ALFRED_ECONOMIC_DATA,
    FINGPT_SENTIMENT,
    FINBERT_SENTIMENT,
    SENTIMENT_SOURCES,
    ALL_SOURCES,
)
from .economic_series import ECONOMIC_SERIES
from .financial_metrics import (
    INCOME_METRICS,
    BALANCE_METRICS,
    CASHFLOW_METRICS,
    STATEMENT_METRICS,
    EARNINGS_METRICS,
    RATIOS,
    FINANCIAL_COLUMNS,
)

__all__ = [
    'FeatureSetConfig',
    'DEFAULT_TRAIN_CUTOFF_DATE',
    'DEFAULT_FEATURE_LAG_DAYS',
    'FEATURE_SET_VERSION',
    'SourceTable',
    'SentimentSource',
    'STOCK_DATA',
    'INCOME_STATEMENT',
    'BALANCE_SHEET',
    'CASHFLOW',
    'EARNINGS_DATES',
    'ALFRED_ECONOMIC_DATA',
    'FINGPT_SENTIMENT',
    'FINBERT_SENTIMENT',
    'SENTIMENT_SOURCES',
    'ALL_SOURCES',
    'ECONOMIC_SERIES',
    'INCOME_METRICS',
    'BALANCE_METRICS',
    'CASHFLOW_METRICS',
    'STATEMENT_METRICS',
    'EARNINGS_METRICS',
    'RATIOS',
    'FINANCIAL_COLUMNS',
]
