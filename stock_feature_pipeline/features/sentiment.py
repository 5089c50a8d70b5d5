"""
Daily news sentiment aggregation.

Collapses per-article classifier output into one summary per
(symbol, news_date). A day without news produces no row at all, so it
joins as null, never as a day of zero (neutral looking) counts.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd

from ..alignment.point_in_time import normalize_dates
from ..config.data_sources import SentimentSource

logger = logging.getLogger(__name__)

SENTIMENT_LABELS = ['positive', 'neutral', 'negative']


class DailySentimentAggregator:
    """
    Per (symbol, date) sentiment counts for one classifier.

    Output columns (``prefix`` = source prefix):
        {prefix}_positive_count, {prefix}_neutral_count,
        {prefix}_negative_count, {prefix}_total_articles,
        {prefix}_avg_confidence
    """

    def __init__(self, source: SentimentSource):
        self.source = source
        self.prefix = source.prefix
        self._daily: Optional[pd.DataFrame] = None
        self._groups: Optional[Dict[str, pd.DataFrame]] = None

    @property
    def columns(self) -> List[str]:
        return self.source.output_columns

    def aggregate(self, records: pd.DataFrame) -> pd.DataFrame:
        """
        Aggregate article level records.

        Labels are compared case-insensitively; unknown labels count toward
        the total only. The average confidence ignores null confidences.

        Args:
            records: Classifier output for this source only

        Returns:
            DataFrame with ``symbol``, ``news_date`` and the summary columns,
            one row per (symbol, news_date) that had at least one article
        """
        src = self.source
        df = pd.DataFrame({
            'symbol': records[src.symbol_column].to_numpy(),
            'news_date': normalize_dates(records[src.date_column]).to_numpy(),
            'label': records[src.label_column].fillna('').astype(str).str.strip().str.lower().to_numpy(),
            'confidence': pd.to_numeric(records[src.confidence_column], errors='coerce').to_numpy(),
        }).dropna(subset=['symbol', 'news_date'])

        for label in SENTIMENT_LABELS:
            df[label] = (df['label'] == label).astype(int)

        grouped = df.groupby(['symbol', 'news_date'], sort=True)
        daily = grouped[SENTIMENT_LABELS].sum()
        daily['total_articles'] = grouped.size()
        daily['avg_confidence'] = grouped['confidence'].mean()

        daily = daily.rename(columns={
            'positive': f'{self.prefix}_positive_count',
            'neutral': f'{self.prefix}_neutral_count',
            'negative': f'{self.prefix}_negative_count',
            'total_articles': f'{self.prefix}_total_articles',
            'avg_confidence': f'{self.prefix}_avg_confidence',
        }).reset_index()
        # An empty groupby loses the datetime dtype, which breaks the join
        daily['news_date'] = daily['news_date'].astype('datetime64[ns]')

        self._daily = daily
        self._groups = None
        logger.info(f"{src.name}: {len(df)} articles -> {len(daily)} symbol-days")
        return daily

    @property
    def daily(self) -> pd.DataFrame:
        if self._daily is None:
            raise RuntimeError(f"{self.source.name}: call aggregate() first")
        return self._daily

    def daily_for(self, symbol) -> pd.DataFrame:
        """Daily summaries of one symbol (empty frame when it had no news)."""
        if self._groups is None:
            self._groups = {s: g for s, g in self.daily.groupby('symbol', sort=False)}
        return self._groups.get(symbol, self.daily.iloc[0:0])

    def aggregate_one(self, symbol, date) -> Optional[Dict[str, float]]:
        """
        Summary for one (symbol, date), or None when there was no news.
        """
        day = pd.Timestamp(date).normalize()
        daily = self.daily_for(symbol)
        match = daily[daily['news_date'] == day]
        if len(match) == 0:
            return None
        row = match.iloc[0]
        return {c: row[c] for c in self.columns}

    def join(self, base: pd.DataFrame, date_column: str = 'feature_date') -> pd.DataFrame:
        """
        Left join the daily summaries onto ``base`` by symbol and exact date.

        Rows of ``base`` without news keep null summary columns.
        """
        symbols = base['symbol'].unique()
        daily = self.daily_for(symbols[0]) if len(symbols) == 1 else self.daily
        daily = daily.rename(columns={'news_date': date_column})
        return base.merge(daily, on=['symbol', date_column], how='left')
