"""
Tests for daily sentiment aggregation.

The important property: a day without news is NULL, not a day of zeros.
"""

import pandas as pd
import pytest

from stock_feature_pipeline.config.data_sources import FINBERT_SENTIMENT, FINGPT_SENTIMENT
from stock_feature_pipeline.features.sentiment import DailySentimentAggregator


@pytest.fixture
def fingpt_daily(fingpt):
    aggregator = DailySentimentAggregator(FINGPT_SENTIMENT)
    aggregator.aggregate(fingpt)
    return aggregator


class TestAggregate:

    def test_counts_per_day(self, fingpt_daily):
        summary = fingpt_daily.aggregate_one('AAA', '2024-04-19')

        assert summary['fingpt_positive_count'] == 2
        assert summary['fingpt_negative_count'] == 1, "Labels are case-insensitive"
        assert summary['fingpt_neutral_count'] == 0
        assert summary['fingpt_total_articles'] == 3
        assert summary['fingpt_avg_confidence'] == pytest.approx(0.8)

    def test_time_of_day_collapsed(self, fingpt_daily):
        daily = fingpt_daily.daily
        assert len(daily) == 2, "Articles of one calendar day form one row"

    def test_no_news_is_absent_not_zero(self, fingpt_daily):
        assert fingpt_daily.aggregate_one('AAA', '2024-04-21') is None
        assert fingpt_daily.aggregate_one('ZZZ', '2024-04-19') is None

    def test_unknown_label_counts_toward_total_only(self):
        records = pd.DataFrame({
            'symbol': ['AAA', 'AAA'],
            'news_date': pd.to_datetime(['2024-04-19', '2024-04-19']),
            'sentiment': ['mixed', None],
            'confidence': [0.5, None],
        })
        aggregator = DailySentimentAggregator(FINBERT_SENTIMENT)
        aggregator.aggregate(records)
        summary = aggregator.aggregate_one('AAA', '2024-04-19')

        assert summary['finbert_total_articles'] == 2
        assert summary['finbert_positive_count'] + summary['finbert_neutral_count'] \
            + summary['finbert_negative_count'] == 0
        assert summary['finbert_avg_confidence'] == pytest.approx(0.5), \
            "Null confidences are ignored by the average"

    def test_daily_before_aggregate_raises(self):
        with pytest.raises(RuntimeError):
            DailySentimentAggregator(FINGPT_SENTIMENT).daily

    def test_empty_input(self):
        records = pd.DataFrame(columns=['symbol', 'news_date', 'sentiment', 'confidence'])
        aggregator = DailySentimentAggregator(FINBERT_SENTIMENT)
        daily = aggregator.aggregate(records)

        assert len(daily) == 0
        assert aggregator.aggregate_one('AAA', '2024-04-19') is None


class TestJoin:

    def test_left_join_keeps_no_news_rows_null(self, fingpt_daily):
        base = pd.DataFrame({
            'symbol': ['AAA', 'AAA', 'AAA'],
            'feature_date': pd.to_datetime(['2024-04-18', '2024-04-19', '2024-04-20']),
        })
        joined = fingpt_daily.join(base)

        assert len(joined) == len(base)
        assert pd.isna(joined['fingpt_total_articles'].iloc[0])
        assert joined['fingpt_total_articles'].iloc[1] == 3
        assert joined['fingpt_neutral_count'].iloc[2] == 1

    def test_sources_are_independent(self, fingpt, finbert):
        """Each source aggregates only its own records and prefix."""
        gpt = DailySentimentAggregator(FINGPT_SENTIMENT)
        gpt.aggregate(fingpt)
        bert = DailySentimentAggregator(FINBERT_SENTIMENT)
        bert.aggregate(finbert)

        base = pd.DataFrame({'symbol': ['AAA'], 'feature_date': pd.to_datetime(['2024-04-19'])})
        joined = bert.join(gpt.join(base))

        assert joined['fingpt_total_articles'].iloc[0] == 3
        assert joined['finbert_total_articles'].iloc[0] == 1
        assert joined['finbert_avg_confidence'].iloc[0] == pytest.approx(0.95)
        assert not any(c.startswith('finbert') for c in gpt.columns)
