#!/usr/bin/env python3
"""
Prepare news text for the sentiment classifiers.

Usage:
    # Daily concatenated text per symbol (default)
    python prepare_news_text.py --news data/snapshot/news.parquet \
        --prices data/snapshot/stock_data.parquet --output data/news_daily.parquet

    # One row per article
    python prepare_news_text.py --news ... --prices ... --output ... --articles
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from stock_feature_pipeline.news import build_article_frame, build_daily_news_text


def _read(path: str) -> pd.DataFrame:
    if path.endswith('.parquet'):
        return pd.read_parquet(path)
    return pd.read_csv(path)


def main():
    parser = argparse.ArgumentParser(
        description="Pair news text with the next day's price move"
    )
    parser.add_argument('--news', type=str, required=True, help="News table (Parquet or CSV)")
    parser.add_argument('--prices', type=str, required=True, help="stock_data table (Parquet or CSV)")
    parser.add_argument('--output', type=str, required=True, help="Output Parquet file")
    parser.add_argument(
        '--articles',
        action='store_true',
        help="One row per article instead of one text per symbol and day"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    news = _read(args.news)
    prices = _read(args.prices)

    if args.articles:
        out = build_article_frame(news, prices)
    else:
        out = build_daily_news_text(news, prices)

    Path(args.output).parent.mkdir(parents=True, exist_ok=True)
    out.to_parquet(args.output, index=False)
    logger.info(f"Saved {len(out)} rows -> {args.output}")


if __name__ == '__main__':
    main()
