"""
Tests for statement / earnings preparation and the financial lookup.
"""

import pandas as pd
import pytest

from stock_feature_pipeline.config.financial_metrics import FINANCIAL_COLUMNS
from stock_feature_pipeline.features.financials import (
    FinancialFeatures,
    combine_statements,
    prepare_earnings,
    prepare_statement,
)


@pytest.fixture
def financials(income, balance, cashflow, earnings):
    return FinancialFeatures(income, balance, cashflow, earnings)


class TestPreparation:

    def test_missing_metrics_become_null_columns(self, balance):
        prepared = prepare_statement(balance, 'balance')
        assert 'bs_total_assets' in prepared.columns
        assert prepared['bs_total_assets'].isna().all()
        assert prepared['bs_current_assets'].iloc[0] == 50.0

    def test_duplicate_periods_keep_last(self, cashflow):
        dup = pd.concat([cashflow, cashflow.assign(**{'Operating Cash Flow': 99.0})])
        prepared = prepare_statement(dup, 'cashflow')

        assert len(prepared) == 1
        assert prepared['cf_operating_cash_flow'].iloc[0] == 99.0

    def test_outer_combination(self, income, balance, cashflow):
        """A period present in any statement is kept."""
        combined = combine_statements(income, balance, cashflow)

        assert len(combined) == len(income)
        q1 = combined[(combined['symbol'] == 'AAA')
                      & (combined['fiscal_period_end'] == pd.Timestamp('2024-03-31'))].iloc[0]
        assert q1['is_gross_margin'] == pytest.approx(0.4)
        assert q1['bs_current_ratio'] == pytest.approx(2.0)
        assert q1['bs_debt_to_equity'] == pytest.approx(0.5)
        assert q1['cf_operating_cash_flow'] == 15.0

    def test_ratio_null_for_non_positive_denominator(self, income, balance, cashflow):
        income = income.copy()
        income.loc[0, 'Total Revenue'] = 0.0
        combined = combine_statements(income, balance, cashflow)
        assert pd.isna(combined['is_net_margin'].iloc[0])

    def test_earnings_duplicates_collapse(self, earnings):
        dup = pd.concat([earnings, earnings.iloc[[0]].assign(**{'EPS Estimate': 9.9})])
        prepared = prepare_earnings(dup)

        aaa = prepared[prepared['release_date'] == pd.Timestamp('2024-04-20')]
        assert len(aaa) == 1
        assert aaa['ed_eps_estimate'].iloc[0] == 9.9

    def test_earnings_without_release_date_discarded(self, earnings):
        prepared = prepare_earnings(earnings)
        assert len(prepared) == 3


class TestLookup:

    def test_statement_invisible_before_release(self, financials):
        out = financials.lookup(['AAA'], pd.to_datetime(['2024-04-19']))
        assert out[FINANCIAL_COLUMNS].isna().all(axis=None), \
            "Q1 statement released 2024-04-20 leaked into 2024-04-19"

    def test_statement_visible_on_release_date(self, financials):
        out = financials.lookup(['AAA', 'AAA'], pd.to_datetime(['2024-04-20', '2024-04-22']))

        assert list(out['is_total_revenue']) == [100.0, 100.0]
        assert list(out['fin_days_since_release']) == [0, 2]
        assert list(out['ed_eps_estimate']) == [1.0, 1.0]

    def test_restatement_tie_goes_to_latest_period(self, financials):
        """BBB reported two periods with the same release date."""
        out = financials.lookup(['BBB'], pd.to_datetime(['2024-04-25']))
        assert out['is_total_revenue'].iloc[0] == 90.0

    def test_output_columns(self, financials):
        out = financials.lookup(['AAA'], pd.to_datetime(['2024-05-01']))
        assert list(out.columns) == FINANCIAL_COLUMNS

        out = financials.lookup(['AAA'], pd.to_datetime(['2024-05-01']), keep_provenance=True)
        assert out['fin_release_date'].iloc[0] == pd.Timestamp('2024-04-20')
        assert out['fin_fiscal_period_end'].iloc[0] == pd.Timestamp('2024-03-31')
        assert out['ed_release_date'].iloc[0] == pd.Timestamp('2024-04-20')

    def test_unreleased_statement_never_selected(self, financials):
        out = financials.lookup(['AAA'], pd.to_datetime(['2025-12-31']), keep_provenance=True)
        assert out['fin_fiscal_period_end'].iloc[0] == pd.Timestamp('2024-06-30'), \
            "Q3 has no release and must never become visible"

    def test_coverage_report(self, financials):
        report = financials.get_coverage_report()
        assert report['statements']['facts'] == 4
        assert report['earnings']['entities'] == 2
