"""
Tests for the feature set validator.
"""

import numpy as np
import pandas as pd
import pytest

from stock_feature_pipeline.alignment.validation import FeatureSetValidator


@pytest.fixture
def feature_df():
    return pd.DataFrame({
        'symbol': ['AAA', 'AAA', 'BBB'],
        'prediction_date': pd.to_datetime(['2024-04-20', '2024-04-21', '2024-04-20']),
        'feature_date': pd.to_datetime(['2024-04-19', '2024-04-20', '2024-04-19']),
        'percent_daily_price_change': [0.01, -0.02, 0.03],
        'fin_days_since_release': [np.nan, 0, 5],
        'split': ['train', 'test', 'train'],
    })


class TestFeatureSetValidator:

    def test_clean_frame_passes(self, feature_df):
        validator = FeatureSetValidator(feature_df, cutoff_date='2024-04-20')
        assert validator.validate_all()['all_passed']
        assert validator.print_report() is True

    def test_duplicate_keys(self, feature_df):
        dup = pd.concat([feature_df, feature_df.iloc[[2]]], ignore_index=True)
        result = FeatureSetValidator(dup).check_uniqueness()
        assert not result['passed']

    def test_missing_key_column(self, feature_df):
        result = FeatureSetValidator(feature_df.drop(columns='symbol')).check_uniqueness()
        assert not result['passed']

    def test_unsorted_rows(self, feature_df):
        shuffled = feature_df.iloc[[2, 0, 1]].reset_index(drop=True)
        assert not FeatureSetValidator(shuffled).check_ordering()['passed']

    def test_split_against_cutoff(self, feature_df):
        validator = FeatureSetValidator(feature_df, cutoff_date='2024-04-21')
        assert not validator.check_split()['passed'], \
            "2024-04-21 is on the cutoff and must be labelled train"

    def test_invalid_split_label(self, feature_df):
        feature_df.loc[0, 'split'] = 'validation'
        assert not FeatureSetValidator(feature_df).check_split()['passed']

    def test_failed_report(self, feature_df):
        feature_df.loc[1, 'fin_days_since_release'] = -1
        assert FeatureSetValidator(feature_df).print_report() is False

    def test_completeness_reports_nulls(self, feature_df):
        result = FeatureSetValidator(feature_df).check_completeness()
        assert result['columns']['fin_days_since_release']['missing_pct'] == pytest.approx(33.33)
        assert result['columns']['fin_days_since_release']['status'] == 'HIGH_MISSING'

    def test_infinite_values_warned(self, feature_df):
        feature_df.loc[0, 'percent_daily_price_change'] = np.inf
        checks = FeatureSetValidator(feature_df).check_data_quality()['checks']
        assert any(c['check'] == 'no_infinites' for c in checks)
