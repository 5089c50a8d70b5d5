"""
Shared fixtures: a small, hand-checked snapshot of every source table.

Timeline for AAA:
- Q1 (period end 2024-03-31) released 2024-04-20, Q2 released 2024-07-19
- Q3 (period end 2024-09-30) has no release yet
- news on 2024-04-19 (3 FinGPT articles, 1 FinBERT) and 2024-04-20
"""

import sys
from pathlib import Path

import pandas as pd
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from stock_feature_pipeline.config.settings import FeatureSetConfig


@pytest.fixture
def prices():
    return pd.DataFrame({
        'symbol': ['AAA', 'AAA', 'AAA', 'AAA', 'BBB', 'BBB'],
        'timestamp': pd.to_datetime([
            '2024-04-19 04:00:00', '2024-04-20 04:00:00', '2024-04-21 04:00:00',
            '2024-04-22 04:00:00', '2024-04-25 04:00:00', '2024-04-26 04:00:00',
        ]),
        'open': [100.0, 102.0, 104.0, 0.0, 50.0, 51.0],
        'high': [103.0, 105.0, 106.0, 101.0, 52.0, 53.0],
        'low': [99.0, 101.0, 103.0, 99.0, 49.0, 50.0],
        'close': [102.0, 104.0, 103.0, 100.0, 51.0, 50.0],
        'volume': [1000, 1100, 1200, 1300, 500, 600],
        'vwap': [101.0, 103.0, 104.5, 100.0, 50.5, 50.5],
        'trade_count': [10, 11, 12, 13, 5, 6],
    })


@pytest.fixture
def earnings():
    return pd.DataFrame({
        'symbol': ['AAA', 'AAA', 'BBB', 'BBB'],
        'release_date': pd.to_datetime(['2024-04-20', '2024-07-19', '2024-04-25', None]),
        'EPS Estimate': [1.0, 1.2, 0.5, 0.6],
        'Reported EPS': [1.1, 1.3, 0.4, None],
        'Surprise(%)': [10.0, 8.3, -20.0, None],
    })


@pytest.fixture
def income():
    return pd.DataFrame({
        'symbol': ['AAA', 'AAA', 'AAA', 'BBB', 'BBB'],
        'fiscal_period_end': pd.to_datetime([
            '2024-03-31', '2024-06-30', '2024-09-30', '2023-12-31', '2024-03-31',
        ]),
        'Total Revenue': [100.0, 120.0, 130.0, 80.0, 90.0],
        'Gross Profit': [40.0, 50.0, 55.0, 20.0, 27.0],
        'Operating Income': [20.0, 25.0, 28.0, 10.0, 9.0],
        'Net Income': [10.0, 12.0, 14.0, 5.0, 4.5],
    })


@pytest.fixture
def balance():
    return pd.DataFrame({
        'symbol': ['AAA'],
        'fiscal_period_end': pd.to_datetime(['2024-03-31']),
        'Current Assets': [50.0],
        'Current Liabilities': [25.0],
        'Total Debt': [30.0],
        'Stockholders Equity': [60.0],
    })


@pytest.fixture
def cashflow():
    return pd.DataFrame({
        'symbol': ['AAA'],
        'fiscal_period_end': pd.to_datetime(['2024-03-31']),
        'Operating Cash Flow': [15.0],
        'Free Cash Flow': [11.0],
    })


@pytest.fixture
def economic_points():
    return pd.DataFrame({
        'series_id': ['FEDFUNDS', 'FEDFUNDS', 'UNRATE', 'XYZ_UNKNOWN'],
        'realtime_start': pd.to_datetime(['2024-01-01', '2024-02-01', '2024-04-19', '2024-01-01']),
        'date': pd.to_datetime(['2023-12-01', '2024-01-01', '2024-03-01', '2023-12-01']),
        'value': [5.25, 5.50, 3.9, 42.0],
    })


@pytest.fixture
def fingpt():
    return pd.DataFrame({
        'symbol': ['AAA', 'AAA', 'AAA', 'AAA'],
        'news_date': pd.to_datetime([
            '2024-04-19 09:30:00', '2024-04-19 13:00:00', '2024-04-19 20:15:00', '2024-04-20 10:00:00',
        ]),
        'sentiment': ['positive', 'Negative', 'positive', 'neutral'],
        'sentiment_confidence': [0.9, 0.7, 0.8, 0.6],
    })


@pytest.fixture
def finbert():
    return pd.DataFrame({
        'symbol': ['AAA'],
        'news_date': pd.to_datetime(['2024-04-19']),
        'sentiment': ['positive'],
        'confidence': [0.95],
    })


@pytest.fixture
def tables(prices, earnings, income, balance, cashflow, economic_points, fingpt, finbert):
    return {
        'stock_data': prices,
        'earnings_dates': earnings,
        'income_statement': income,
        'balance_sheet': balance,
        'cashflow': cashflow,
        'alfred_economic_data': economic_points,
        'fingpt_sentiment': fingpt,
        'finbert_sentiment': finbert,
    }


@pytest.fixture
def config():
    return FeatureSetConfig(train_cutoff_date='2024-04-21', show_progress=False)
