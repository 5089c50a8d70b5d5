"""
CRITICAL: Vintage index for point-in-time (as-of) lookups.

Key principle: For any as-of date D, we can only use facts whose
KNOWLEDGE date is <= D, not facts that DESCRIBE a date <= D.

Example:
- Q1 income statement has fiscal_period_end 2024-03-31
- It was released with earnings on 2024-04-20
- For an as-of date of 2024-04-10 the Q1 statement is NOT knowable
- For 2024-04-20 itself it is (knowledge_date <= as_of, inclusive)
"""

import logging
from typing import Hashable, Iterable, Optional, Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# Column holding the original row position; the last tie-break
_INPUT_ORDER = '_input_order'


def normalize_dates(values) -> pd.Series:
    """
    Convert timestamps or date strings to naive calendar dates.

    Timezone-aware values (mixed UTC offsets included) are converted to UTC
    first; naive values are taken as UTC. Time of day is dropped, matching
    a SQL DATE() cast.
    """
    series = pd.Series(values) if not isinstance(values, pd.Series) else values
    dates = pd.to_datetime(series, utc=True).dt.tz_localize(None)
    return dates.dt.normalize().astype('datetime64[ns]')


class VintageIndex:
    """
    Per-entity sorted timeline of (knowledge date, payload) facts.

    Each entity's stream is sorted once at construction; every query is a
    binary search inside that entity's slice, so n queries against m facts
    cost O((n + m) log m) instead of the O(n * m) of a naive scan.

    Tie-break: when several facts share the selected knowledge date, the one
    with the greatest ``tiebreak_columns`` values wins (compared in order),
    then the one that came last in the input. Results are therefore fully
    deterministic for a given input.
    """

    def __init__(
        self,
        facts: pd.DataFrame,
        key_column: str,
        knowledge_column: str,
        tiebreak_columns: Sequence[str] = (),
        name: Optional[str] = None,
    ):
        """
        Build the index.

        Args:
            facts: One row per fact; payload columns are returned verbatim
            key_column: Entity identifier (symbol or series id)
            knowledge_column: Date the fact became publicly known
            tiebreak_columns: Secondary order among equal knowledge dates
            name: Label used in log messages
        """
        missing = [c for c in [key_column, knowledge_column, *tiebreak_columns]
                   if c not in facts.columns]
        if missing:
            raise ValueError(f"VintageIndex {name or ''}: missing columns {missing}")

        self.name = name or knowledge_column
        self.key_column = key_column
        self.knowledge_column = knowledge_column
        self.tiebreak_columns = list(tiebreak_columns)

        df = facts.copy()
        df[knowledge_column] = normalize_dates(df[knowledge_column])

        # Facts with no knowledge date were never public
        unknown = df[knowledge_column].isna() | df[key_column].isna()
        if unknown.any():
            logger.info(f"{self.name}: {int(unknown.sum())} facts without key or "
                        f"knowledge date excluded from the index")
            df = df[~unknown]

        df[_INPUT_ORDER] = np.arange(len(df))
        order = [key_column, knowledge_column, *self.tiebreak_columns, _INPUT_ORDER]
        df = df.sort_values(order, kind='mergesort', na_position='first')
        self._facts = df.drop(columns=_INPUT_ORDER).reset_index(drop=True)

        self._knowledge = self._facts[knowledge_column].to_numpy(dtype='datetime64[ns]')
        self._slices = {
            key: (int(positions[0]), int(positions[-1]) + 1)
            for key, positions in self._facts.groupby(key_column, sort=False).indices.items()
        }

    def __len__(self) -> int:
        return len(self._facts)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._slices

    def _position(self, key: Hashable, as_of: np.datetime64) -> int:
        """Row position of the selected fact, or -1 when absent."""
        if key not in self._slices or np.isnat(as_of):
            return -1
        start, stop = self._slices[key]
        i = np.searchsorted(self._knowledge[start:stop], as_of, side='right') - 1
        return start + int(i) if i >= 0 else -1

    def as_of(self, key: Hashable, as_of_date) -> Optional[pd.Series]:
        """
        Get the most recent fact known at ``as_of_date``.

        THIS IS THE KEY FUNCTION FOR PREVENTING LOOK-AHEAD BIAS.

        Args:
            key: Entity identifier
            as_of_date: Date the query is evaluated at (inclusive)

        Returns:
            The selected fact row, or None if nothing was known yet
        """
        if as_of_date is None or pd.isna(as_of_date):
            return None
        as_of = normalize_dates(pd.Series([as_of_date])).to_numpy(dtype='datetime64[ns]')[0]
        pos = self._position(key, as_of)
        if pos < 0:
            return None
        return self._facts.iloc[pos]

    def as_of_many(self, keys: Iterable[Hashable], as_of_dates) -> pd.DataFrame:
        """
        Vectorised as-of lookup.

        Args:
            keys: Entity identifier per query
            as_of_dates: As-of date per query (same length as keys)

        Returns:
            DataFrame with one row per query (RangeIndex, query order) and
            the fact columns; all-null rows where nothing was known
        """
        keys = pd.Series(list(keys), dtype=object)
        dates = normalize_dates(pd.Series(list(as_of_dates))).to_numpy(dtype='datetime64[ns]')
        if len(keys) != len(dates):
            raise ValueError(f"{len(keys)} keys but {len(dates)} as-of dates")

        positions = np.full(len(keys), -1, dtype=np.int64)
        valid_dates = ~np.isnat(dates)

        for key, query_rows in keys.groupby(keys, sort=False).indices.items():
            if key not in self._slices:
                continue
            start, stop = self._slices[key]
            query_dates = dates[query_rows]
            idx = np.searchsorted(self._knowledge[start:stop], query_dates, side='right') - 1
            found = (idx >= 0) & valid_dates[query_rows]
            positions[query_rows] = np.where(found, idx + start, -1)

        # Label -1 is not in the RangeIndex, so reindex yields an all-null row
        return self._facts.reindex(positions).reset_index(drop=True)

    def get_coverage_report(self) -> dict:
        """Coverage statistics for the indexed stream."""
        if len(self._facts) == 0:
            return {'name': self.name, 'entities': 0, 'facts': 0, 'start': None, 'end': None}
        return {
            'name': self.name,
            'entities': len(self._slices),
            'facts': len(self._facts),
            'start': str(self._facts[self.knowledge_column].min().date()),
            'end': str(self._facts[self.knowledge_column].max().date()),
        }
