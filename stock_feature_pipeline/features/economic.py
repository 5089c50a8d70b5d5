"""
Economic indicator pivot.

Projects an enumerated set of revisable economic series into one column per
series, using for each the latest vintage known by the as-of date.
Indicators are symbol independent: the pivot is computed once per distinct
date and shared by every symbol.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from ..alignment.point_in_time import VintageIndex, normalize_dates
from ..config.economic_series import ECONOMIC_SERIES

logger = logging.getLogger(__name__)


class EconomicPivot:
    """
    Wide pivot of economic series as of a date.

    Vintage selection per series: latest ``realtime_start`` <= as-of date.
    Several points sharing that realtime_start (a release that revises many
    periods at once) resolve to the latest observation ``date``.
    """

    def __init__(
        self,
        points: pd.DataFrame,
        series_map: Optional[Mapping[str, str]] = None,
        series_column: str = 'series_id',
        knowledge_column: str = 'realtime_start',
        observation_column: str = 'date',
        value_column: str = 'value',
    ):
        """
        Initialize EconomicPivot.

        Args:
            points: ALFRED style vintage points
            series_map: series_id -> output column (default: ECONOMIC_SERIES)
            series_column: Series identifier column
            knowledge_column: Date the vintage became available
            observation_column: Period the vintage describes (optional column)
            value_column: Observed value
        """
        self.series_map: Dict[str, str] = dict(series_map or ECONOMIC_SERIES)
        self.value_column = value_column

        tiebreak: List[str] = []
        columns = [series_column, knowledge_column, value_column]
        if observation_column in points.columns:
            columns.append(observation_column)
            tiebreak.append(observation_column)

        df = points[columns].copy()
        if observation_column in tiebreak:
            df[observation_column] = normalize_dates(df[observation_column])
        df[value_column] = pd.to_numeric(df[value_column], errors='coerce')

        # Series outside the enumeration are ignored
        known = df[series_column].isin(list(self.series_map))
        ignored = sorted(df.loc[~known, series_column].dropna().astype(str).unique())
        if ignored:
            logger.info(f"Ignoring {len(ignored)} economic series not in the enumeration: "
                        f"{ignored[:10]}")
        df = df[known]

        missing = sorted(set(self.series_map) - set(df[series_column].unique()))
        if missing:
            logger.warning(f"{len(missing)} enumerated economic series have no data "
                           f"and will be null: {missing}")

        self.index = VintageIndex(
            df,
            key_column=series_column,
            knowledge_column=knowledge_column,
            tiebreak_columns=tiebreak,
            name='economic series',
        )
        self.knowledge_column = knowledge_column
        self._cache: Dict[pd.Timestamp, Dict[str, float]] = {}

    @property
    def columns(self) -> List[str]:
        return list(self.series_map.values())

    def pivot(self, as_of_date) -> Dict[str, float]:
        """
        Economic features known at ``as_of_date``.

        Returns:
            Mapping output column -> value (NaN where nothing was known,
            all NaN for a null date)
        """
        if as_of_date is None or pd.isna(as_of_date):
            return {c: float('nan') for c in self.columns}
        day = pd.Timestamp(as_of_date).normalize()
        if day not in self._cache:
            row = self.pivot_many([day]).iloc[0]
            self._cache[day] = {c: row[c] for c in self.columns}
        return dict(self._cache[day])

    def pivot_many(self, dates: Iterable, keep_provenance: bool = False) -> pd.DataFrame:
        """
        Pivot every distinct date in ``dates``.

        Args:
            dates: As-of dates (duplicates are computed once)
            keep_provenance: Also return ``<column>_knowledge_date`` columns

        Returns:
            DataFrame with one row per distinct date: ``feature_date`` plus
            one column per enumerated series
        """
        unique_dates = pd.Series(
            normalize_dates(pd.Series(list(dates))).dropna().unique()
        ).sort_values(ignore_index=True)
        out = pd.DataFrame({'feature_date': unique_dates.astype('datetime64[ns]')})

        n = len(out)
        for series_id, column in self.series_map.items():
            picked = self.index.as_of_many([series_id] * n, out['feature_date'])
            out[column] = picked[self.value_column].astype(float).to_numpy()
            if keep_provenance:
                out[f"{column}_knowledge_date"] = picked[self.knowledge_column].to_numpy()

        return out
