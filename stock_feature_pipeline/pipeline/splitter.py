"""
Fixed-date train/test split.
CRITICAL: Chronological, NO shuffling! The cutoff is configuration.
"""

import logging
from typing import Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

TRAIN = 'train'
TEST = 'test'


class CutoffSplitter:
    """
    Labels rows by a fixed cutoff date.

    prediction_date <= cutoff -> 'train', prediction_date > cutoff -> 'test'.
    """

    def __init__(self, cutoff_date: str, date_column: str = 'prediction_date'):
        """
        Initialize CutoffSplitter.

        Args:
            cutoff_date: Last prediction date (inclusive) of the train split
            date_column: Column holding the prediction date
        """
        self.cutoff = pd.Timestamp(cutoff_date).normalize()
        self.date_column = date_column

    def label(self, dates) -> pd.Series:
        """Split label for each date."""
        dates = pd.to_datetime(pd.Series(dates))
        labels = np.where(dates <= self.cutoff, TRAIN, TEST)
        return pd.Series(labels, index=dates.index, name='split')

    def assign(self, df: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of ``df`` with a ``split`` column."""
        df = df.copy()
        df['split'] = self.label(df[self.date_column]).to_numpy()
        return df

    def split(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Split a labelled (or unlabelled) feature set.

        Returns:
            Tuple of (train_df, test_df)
        """
        if 'split' not in df.columns:
            df = self.assign(df)

        train_df = df[df['split'] == TRAIN].copy()
        test_df = df[df['split'] == TEST].copy()

        self._log_summary(df, train_df, test_df)
        self._validate_split(train_df, test_df)

        return train_df, test_df

    def _log_summary(self, full_df: pd.DataFrame, train_df: pd.DataFrame, test_df: pd.DataFrame):
        n = len(full_df)

        logger.info("=" * 60)
        logger.info(f"DATA SPLIT SUMMARY (cutoff {self.cutoff.date()})")
        logger.info("=" * 60)
        logger.info(f"Total samples: {n}")

        for name, split_df in [('Train', train_df), ('Test', test_df)]:
            pct = len(split_df) / n * 100 if n else 0.0
            logger.info(f"{name}: {len(split_df):>8} samples ({pct:>5.1f}%)")
            if len(split_df) > 0:
                ts = split_df[self.date_column]
                logger.info(f"      Date range: {ts.min()} -> {ts.max()}")

    def _validate_split(self, train_df: pd.DataFrame, test_df: pd.DataFrame):
        """Validate that splits don't overlap."""
        if len(train_df) == 0 or len(test_df) == 0:
            return

        train_max = train_df[self.date_column].max()
        test_min = test_df[self.date_column].min()
        if train_max >= test_min:
            raise ValueError(
                f"Train/Test overlap detected! "
                f"Train ends at {train_max}, Test starts at {test_min}"
            )
