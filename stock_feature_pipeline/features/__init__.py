"""Feature sources: financial statements, economic series, news sentiment."""

from .financials import FinancialFeatures, combine_statements, prepare_earnings
from .economic import EconomicPivot
from .sentiment import DailySentimentAggregator, SENTIMENT_LABELS

__all__ = [
    'FinancialFeatures',
    'combine_statements',
    'prepare_earnings',
    'EconomicPivot',
    'DailySentimentAggregator',
    'SENTIMENT_LABELS',
]
