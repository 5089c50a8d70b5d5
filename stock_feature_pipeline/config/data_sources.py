"""
Source table configuration.

Defines, for each input table, the columns that identify a row, the value
columns it carries and the metric columns it may carry. Also fixes the
column names of the base observations in the output.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .financial_metrics import (
    INCOME_METRICS,
    BALANCE_METRICS,
    CASHFLOW_METRICS,
    EARNINGS_METRICS,
)

# Output key, target and price columns
KEY_COLUMNS = ['symbol', 'prediction_date']
TARGET_COLUMN = 'percent_daily_price_change'

STOCK_COLUMNS: Dict[str, str] = {
    'open': 'sd_open',
    'high': 'sd_high',
    'low': 'sd_low',
    'close': 'sd_close',
    'volume': 'sd_volume',
    'vwap': 'sd_vwap',
    'trade_count': 'sd_trade_count',
}


@dataclass(frozen=True)
class SourceTable:
    """Configuration for one input table of the snapshot."""
    name: str
    key_columns: List[str]              # Rows with a null here are rejected
    date_column: str                    # Column normalised to a calendar date
    value_columns: List[str] = field(default_factory=list)     # Filled with nulls if absent
    optional_columns: List[str] = field(default_factory=list)  # Reported if absent

    @property
    def required_columns(self) -> List[str]:
        required = list(self.key_columns)
        if self.date_column not in required:
            required.append(self.date_column)
        return required


@dataclass(frozen=True)
class SentimentSource:
    """One news-sentiment classifier output and how to aggregate it."""
    name: str
    prefix: str                         # Output column prefix
    label_column: str = 'sentiment'
    confidence_column: str = 'confidence'
    symbol_column: str = 'symbol'
    date_column: str = 'news_date'

    @property
    def output_columns(self) -> List[str]:
        p = self.prefix
        return [
            f'{p}_positive_count',
            f'{p}_neutral_count',
            f'{p}_negative_count',
            f'{p}_total_articles',
            f'{p}_avg_confidence',
        ]

    def table(self) -> SourceTable:
        return SourceTable(
            name=self.name,
            key_columns=[self.symbol_column, self.date_column],
            date_column=self.date_column,
            value_columns=[self.label_column, self.confidence_column],
        )


STOCK_DATA = SourceTable(
    name='stock_data',
    key_columns=['symbol', 'timestamp'],
    date_column='timestamp',
    value_columns=['open', 'high', 'low', 'close', 'volume', 'vwap', 'trade_count'],
)

INCOME_STATEMENT = SourceTable(
    name='income_statement',
    key_columns=['symbol', 'fiscal_period_end'],
    date_column='fiscal_period_end',
    optional_columns=list(INCOME_METRICS),
)

BALANCE_SHEET = SourceTable(
    name='balance_sheet',
    key_columns=['symbol', 'fiscal_period_end'],
    date_column='fiscal_period_end',
    optional_columns=list(BALANCE_METRICS),
)

CASHFLOW = SourceTable(
    name='cashflow',
    key_columns=['symbol', 'fiscal_period_end'],
    date_column='fiscal_period_end',
    optional_columns=list(CASHFLOW_METRICS),
)

EARNINGS_DATES = SourceTable(
    name='earnings_dates',
    key_columns=['symbol', 'release_date'],
    date_column='release_date',
    optional_columns=list(EARNINGS_METRICS),
)

ALFRED_ECONOMIC_DATA = SourceTable(
    name='alfred_economic_data',
    key_columns=['series_id', 'realtime_start'],
    date_column='realtime_start',
    value_columns=['value'],
    optional_columns=['date'],
)

FINGPT_SENTIMENT = SentimentSource(
    name='fingpt_sentiment',
    prefix='fingpt',
    confidence_column='sentiment_confidence',
)

FINBERT_SENTIMENT = SentimentSource(
    name='finbert_sentiment',
    prefix='finbert',
    confidence_column='confidence',
)

SENTIMENT_SOURCES: List[SentimentSource] = [FINGPT_SENTIMENT, FINBERT_SENTIMENT]


# All tables as a dict for easy access
ALL_SOURCES: Dict[str, SourceTable] = {
    'stock_data': STOCK_DATA,
    'income_statement': INCOME_STATEMENT,
    'balance_sheet': BALANCE_SHEET,
    'cashflow': CASHFLOW,
    'earnings_dates': EARNINGS_DATES,
    'alfred_economic_data': ALFRED_ECONOMIC_DATA,
    FINGPT_SENTIMENT.name: FINGPT_SENTIMENT.table(),
    FINBERT_SENTIMENT.name: FINBERT_SENTIMENT.table(),
}
