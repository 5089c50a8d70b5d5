"""
News text preparation for the sentiment classifiers.

Builds the classifier inputs from raw news articles and pairs each with the
NEXT day's price move, the target the classifiers are tuned against:

- article level: one row per (article, symbol)
- daily level: all of a symbol's articles of one day, numbered in
  publication order and concatenated into one text
"""

import logging

import pandas as pd

from ..alignment.point_in_time import normalize_dates
from ..pipeline.assembler import prepare_base, TARGET_COLUMN

logger = logging.getLogger(__name__)

# Separator between numbered articles in a daily text
ARTICLE_SEPARATOR = '    /n/n/n/n/n     '

NEWS_COLUMNS = ['id', 'created_at', 'symbols', 'headline', 'summary']


def explode_news(news: pd.DataFrame, include_symbols: bool = False) -> pd.DataFrame:
    """
    One row per (article, referenced symbol).

    Args:
        news: Raw articles with a comma separated ``symbols`` column
        include_symbols: Append the full symbol list to the article text

    Returns:
        DataFrame with news_article_id, news_date, created_at, symbol,
        article_text (distinct rows)
    """
    missing = [c for c in NEWS_COLUMNS if c not in news.columns and c != 'summary']
    if missing:
        raise ValueError(f"News table missing columns {missing}")

    summary = news['summary'] if 'summary' in news.columns else pd.Series('', index=news.index)
    text = ('Headline: ' + news['headline'].fillna('').astype(str)
            + ' Summary: ' + summary.fillna('').astype(str))
    if include_symbols:
        text = text + ' All Symbols Referenced in Article: ' + news['symbols'].fillna('').astype(str)

    df = pd.DataFrame({
        'news_article_id': news['id'].to_numpy(),
        'news_date': normalize_dates(news['created_at']).to_numpy(),
        'created_at': pd.to_datetime(news['created_at'], utc=True).to_numpy(dtype='datetime64[ns]'),
        'symbol': news['symbols'].fillna('').astype(str).str.split(',').to_numpy(),
        'article_text': text.to_numpy(),
    })

    df = df.explode('symbol')
    df['symbol'] = df['symbol'].str.strip()
    df = df[df['symbol'] != '']
    return df.drop_duplicates().reset_index(drop=True)


def _next_day_targets(prices: pd.DataFrame) -> pd.DataFrame:
    """Price move keyed by the day BEFORE it happened."""
    base = prepare_base(prices, pd.Timedelta(days=1))
    return base[['symbol', 'feature_date', TARGET_COLUMN]].rename(
        columns={'feature_date': 'news_date'}
    )


def build_article_frame(news: pd.DataFrame, prices: pd.DataFrame) -> pd.DataFrame:
    """
    Article level classifier input with the next day's price move.

    Articles with no price bar on the following calendar day are dropped.
    """
    articles = explode_news(news)
    out = articles.merge(_next_day_targets(prices), on=['symbol', 'news_date'], how='inner')
    return out[['news_article_id', 'symbol', 'news_date', 'article_text', TARGET_COLUMN]]


def build_daily_news_text(news: pd.DataFrame, prices: pd.DataFrame) -> pd.DataFrame:
    """
    Daily classifier input: one concatenated text per (symbol, news_date).

    Articles are numbered by publication time ("Article Number 1: ...") and
    joined with ARTICLE_SEPARATOR.
    """
    articles = explode_news(news, include_symbols=True)
    articles = articles.sort_values(
        ['news_date', 'symbol', 'created_at', 'news_article_id'], kind='mergesort'
    )
    rank = articles.groupby(['news_date', 'symbol']).cumcount() + 1
    articles['ranked_article_text'] = ('Article Number ' + rank.astype(str) + ': '
                                       + articles['article_text'])

    daily = (
        articles.groupby(['symbol', 'news_date'], sort=True)['ranked_article_text']
        .agg(ARTICLE_SEPARATOR.join)
        .rename('daily_news_text')
        .reset_index()
    )

    out = daily.merge(_next_day_targets(prices), on=['symbol', 'news_date'], how='inner')
    logger.info(f"Daily news text: {len(daily)} symbol-days, {len(out)} with a next-day move")
    return out[['symbol', 'news_date', 'daily_news_text', TARGET_COLUMN]]
