"""
Tests for the economic indicator pivot.
"""

import pandas as pd
import pytest

from stock_feature_pipeline.config.economic_series import ECONOMIC_SERIES
from stock_feature_pipeline.features.economic import EconomicPivot

SERIES = {'FEDFUNDS': 'econ_fedfunds', 'UNRATE': 'econ_unrate', 'CPIAUCSL': 'econ_cpi'}


@pytest.fixture
def pivot(economic_points):
    return EconomicPivot(economic_points, series_map=SERIES)


class TestPivot:

    def test_latest_vintage_per_series(self, pivot):
        assert pivot.pivot('2024-01-15')['econ_fedfunds'] == 5.25
        assert pivot.pivot('2024-02-15')['econ_fedfunds'] == 5.50

    def test_one_column_per_enumerated_series(self, pivot):
        row = pivot.pivot('2024-02-15')
        assert set(row) == set(SERIES.values())

    def test_series_without_data_is_null(self, pivot):
        row = pivot.pivot('2024-12-31')
        assert pd.isna(row['econ_cpi'])

    def test_series_not_yet_known_is_null(self, pivot):
        row = pivot.pivot('2024-04-18')
        assert pd.isna(row['econ_unrate'])
        assert pivot.pivot('2024-04-19')['econ_unrate'] == 3.9

    @pytest.mark.parametrize('date', [None, pd.NaT])
    def test_null_date_is_all_null(self, pivot, date):
        row = pivot.pivot(date)
        assert set(row) == set(SERIES.values())
        assert all(pd.isna(v) for v in row.values())

    def test_unknown_series_ignored(self, pivot):
        assert 'XYZ_UNKNOWN' not in pivot.index
        assert 42.0 not in pivot.pivot('2024-12-31').values()

    def test_default_series_table(self, economic_points):
        pivot = EconomicPivot(economic_points)
        assert pivot.columns == list(ECONOMIC_SERIES.values())
        assert pivot.pivot('2024-04-19')['econ_fedfunds'] == 5.50

    def test_same_vintage_resolves_to_latest_observation(self):
        """One release revising several periods: the newest period wins."""
        points = pd.DataFrame({
            'series_id': ['UNRATE', 'UNRATE', 'UNRATE'],
            'realtime_start': pd.to_datetime(['2024-05-03'] * 3),
            'date': pd.to_datetime(['2024-04-01', '2024-02-01', '2024-03-01']),
            'value': [3.9, 3.7, 3.8],
        })
        pivot = EconomicPivot(points, series_map={'UNRATE': 'econ_unrate'})
        assert pivot.pivot('2024-05-03')['econ_unrate'] == 3.9


class TestPivotMany:

    def test_one_row_per_distinct_date(self, pivot):
        dates = pd.to_datetime(['2024-02-15', '2024-01-15', '2024-02-15', None])
        out = pivot.pivot_many(dates)

        assert list(out['feature_date']) == [pd.Timestamp('2024-01-15'), pd.Timestamp('2024-02-15')]
        assert list(out['econ_fedfunds']) == [5.25, 5.50]

    def test_provenance_columns(self, pivot):
        out = pivot.pivot_many(pd.to_datetime(['2024-02-15']), keep_provenance=True)

        assert out['econ_fedfunds_knowledge_date'].iloc[0] == pd.Timestamp('2024-02-01')
        assert pd.isna(out['econ_cpi_knowledge_date'].iloc[0])
        assert (out['econ_fedfunds_knowledge_date'] <= out['feature_date']).all()

    def test_empty_dates(self, pivot):
        out = pivot.pivot_many([])
        assert len(out) == 0
        assert list(out.columns) == ['feature_date'] + list(SERIES.values())
