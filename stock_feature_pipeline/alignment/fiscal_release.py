"""
Fiscal release resolution.

A financial statement describes its fiscal period end, but nobody outside
the company knows it until the earnings release that follows. This module
turns that silent period end into a public knowledge date.
"""

import logging
from typing import Dict, Hashable, Optional, Tuple

import numpy as np
import pandas as pd

from .point_in_time import normalize_dates

logger = logging.getLogger(__name__)


class FiscalReleaseResolver:
    """
    Maps (symbol, fiscal_period_end) to the first earnings release strictly
    after the period end.

    Resolution does not depend on any query date, so each statement is
    resolved once and cached for the rest of the run.
    """

    def __init__(
        self,
        earnings: pd.DataFrame,
        symbol_column: str = 'symbol',
        release_column: str = 'release_date',
    ):
        """
        Initialize FiscalReleaseResolver.

        Args:
            earnings: Earnings release events (symbol + release date)
            symbol_column: Name of the symbol column
            release_column: Name of the release date column
        """
        events = pd.DataFrame({
            'symbol': earnings[symbol_column].to_numpy(),
            'release_date': normalize_dates(earnings[release_column]).to_numpy(),
        }).dropna()

        self._releases: Dict[Hashable, np.ndarray] = {
            symbol: np.unique(group['release_date'].to_numpy(dtype='datetime64[ns]'))
            for symbol, group in events.groupby('symbol', sort=False)
        }
        self._cache: Dict[Tuple[Hashable, np.datetime64], Optional[pd.Timestamp]] = {}

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def resolve(self, symbol: Hashable, fiscal_period_end) -> Optional[pd.Timestamp]:
        """
        Release date of a statement.

        Args:
            symbol: Company symbol
            fiscal_period_end: Period the statement describes

        Returns:
            Earliest release date > fiscal_period_end, or None if the
            statement has not been released yet
        """
        if fiscal_period_end is None or pd.isna(fiscal_period_end):
            return None
        period_end = normalize_dates(pd.Series([fiscal_period_end])).to_numpy(dtype='datetime64[ns]')[0]

        cache_key = (symbol, period_end)
        if cache_key in self._cache:
            return self._cache[cache_key]

        release = None
        releases = self._releases.get(symbol)
        if releases is not None:
            i = np.searchsorted(releases, period_end, side='right')
            if i < len(releases):
                release = pd.Timestamp(releases[i])

        self._cache[cache_key] = release
        return release

    def resolve_frame(
        self,
        statements: pd.DataFrame,
        symbol_column: str = 'symbol',
        period_column: str = 'fiscal_period_end',
        release_column: str = 'release_date',
        name: str = 'statements',
    ) -> pd.DataFrame:
        """
        Attach release dates to a statement table.

        Unresolvable statements (no later release) are dropped from the
        result; the count is logged in aggregate.

        Returns:
            Copy of ``statements`` with ``release_column`` added
        """
        df = statements.copy()
        df[period_column] = normalize_dates(df[period_column])

        pairs = df[[symbol_column, period_column]].drop_duplicates()
        resolved = {
            (symbol, period_end): self.resolve(symbol, period_end)
            for symbol, period_end in pairs.itertuples(index=False, name=None)
        }

        df[release_column] = pd.to_datetime(pd.Series(
            [resolved.get((s, p)) for s, p in zip(df[symbol_column], df[period_column])],
            index=df.index,
            dtype=object,
        ))

        unresolved = df[release_column].isna()
        if unresolved.any():
            logger.info(f"{name}: {int(unresolved.sum())} of {len(df)} rows have no "
                        f"earnings release after their period end; excluded")
        return df[~unresolved].reset_index(drop=True)
