"""
Financial statement and earnings features.

Statements become facts at their earnings release date (not their fiscal
period end). Each (symbol, feature_date) then receives the latest released
statement set and the latest earnings event known by that date.
"""

import logging
from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd

from ..alignment.point_in_time import VintageIndex, normalize_dates
from ..alignment.fiscal_release import FiscalReleaseResolver
from ..config.financial_metrics import (
    STATEMENT_METRICS,
    EARNINGS_METRICS,
    RATIOS,
    FINANCIAL_COLUMNS,
    statement_columns,
)

logger = logging.getLogger(__name__)

STATEMENT_KEYS = ['symbol', 'fiscal_period_end']


def prepare_statement(df: pd.DataFrame, statement_type: str) -> pd.DataFrame:
    """
    Select and rename one statement table's metrics.

    Metrics missing from the table become null columns; values are coerced
    to numbers. Duplicate (symbol, fiscal_period_end) rows keep the last one.
    """
    metrics = STATEMENT_METRICS[statement_type]

    out = pd.DataFrame({
        'symbol': df['symbol'].to_numpy(),
        'fiscal_period_end': normalize_dates(df['fiscal_period_end']).to_numpy(),
    })
    for raw, column in metrics.items():
        if raw in df.columns:
            out[column] = pd.to_numeric(df[raw], errors='coerce').to_numpy()
        else:
            out[column] = np.nan

    out = out.dropna(subset=STATEMENT_KEYS)
    dup_count = int(out.duplicated(STATEMENT_KEYS, keep='last').sum())
    if dup_count > 0:
        logger.warning(f"{statement_type}: {dup_count} duplicate (symbol, fiscal_period_end) "
                       f"rows, keeping the last of each")
        out = out.drop_duplicates(STATEMENT_KEYS, keep='last')

    return out.reset_index(drop=True)


def add_ratios(df: pd.DataFrame) -> pd.DataFrame:
    """Add margin and balance ratios; null unless the denominator is > 0."""
    df = df.copy()
    for name, numerator, denominator in RATIOS:
        den = df[denominator]
        df[name] = df[numerator] / den.where(den > 0)
    return df


def combine_statements(
    income: pd.DataFrame,
    balance: pd.DataFrame,
    cashflow: pd.DataFrame,
) -> pd.DataFrame:
    """
    Combine the three statement types into one row per fiscal period.

    Outer merge: a period reported in any statement is kept, the others
    contribute nulls.
    """
    combined = prepare_statement(income, 'income')
    for statement_type, df in [('balance', balance), ('cashflow', cashflow)]:
        combined = combined.merge(
            prepare_statement(df, statement_type),
            on=STATEMENT_KEYS,
            how='outer',
        )
    return add_ratios(combined)


def prepare_earnings(earnings: pd.DataFrame) -> pd.DataFrame:
    """
    Earnings release events as facts known on their release date.

    Rows without a release date are discarded. Several rows for the same
    (symbol, release_date) collapse to the last one so the stream never
    fans out.
    """
    out = pd.DataFrame({
        'symbol': earnings['symbol'].to_numpy(),
        'release_date': normalize_dates(earnings['release_date']).to_numpy(),
    })
    for raw, column in EARNINGS_METRICS.items():
        if raw in earnings.columns:
            out[column] = pd.to_numeric(earnings[raw], errors='coerce').to_numpy()
        else:
            out[column] = np.nan

    out = out.dropna(subset=['symbol', 'release_date'])
    dup_count = int(out.duplicated(['symbol', 'release_date'], keep='last').sum())
    if dup_count > 0:
        logger.warning(f"earnings_dates: {dup_count} duplicate (symbol, release_date) rows, "
                       f"keeping the last of each")
        out = out.drop_duplicates(['symbol', 'release_date'], keep='last')

    return out.reset_index(drop=True)


class FinancialFeatures:
    """
    Point-in-time financial features per (symbol, feature_date).

    Two fact streams:
    - statements, known at their resolved release date; ties on the same
      release date (restatements) go to the latest fiscal_period_end
    - earnings events, known at their own release date
    """

    def __init__(
        self,
        income: pd.DataFrame,
        balance: pd.DataFrame,
        cashflow: pd.DataFrame,
        earnings: pd.DataFrame,
        resolver: Optional[FiscalReleaseResolver] = None,
    ):
        """
        Initialize FinancialFeatures.

        Args:
            income: income_statement table
            balance: balance_sheet table
            cashflow: cashflow table
            earnings: earnings_dates table
            resolver: Shared resolver; built from ``earnings`` if omitted
        """
        self.earnings_facts = prepare_earnings(earnings)
        self.resolver = resolver or FiscalReleaseResolver(self.earnings_facts)

        combined = combine_statements(income, balance, cashflow)
        self.statement_facts = self.resolver.resolve_frame(combined, name='financial statements')

        self.statement_index = VintageIndex(
            self.statement_facts,
            key_column='symbol',
            knowledge_column='release_date',
            tiebreak_columns=['fiscal_period_end'],
            name='financial statements',
        )
        self.earnings_index = VintageIndex(
            self.earnings_facts,
            key_column='symbol',
            knowledge_column='release_date',
            name='earnings releases',
        )

        logger.info(f"Financial facts: {len(self.statement_index)} released statement periods, "
                    f"{len(self.earnings_index)} earnings events")

    def lookup(
        self,
        symbols: Iterable,
        feature_dates: Iterable,
        keep_provenance: bool = False,
    ) -> pd.DataFrame:
        """
        Financial features as of each feature date.

        Args:
            symbols: Symbol per query
            feature_dates: As-of date per query
            keep_provenance: Also return the release / period dates used

        Returns:
            DataFrame (RangeIndex, query order) with FINANCIAL_COLUMNS
        """
        symbols = list(symbols)
        dates = normalize_dates(pd.Series(list(feature_dates)))

        statements = self.statement_index.as_of_many(symbols, dates)
        earnings = self.earnings_index.as_of_many(symbols, dates)

        out = pd.DataFrame(index=pd.RangeIndex(len(symbols)))
        out['fin_days_since_release'] = (
            dates.reset_index(drop=True) - statements['release_date']
        ).dt.days

        for column in EARNINGS_METRICS.values():
            out[column] = earnings[column].to_numpy()
        for statement_type in STATEMENT_METRICS:
            for column in statement_columns(statement_type):
                out[column] = statements[column].to_numpy()

        out = out[FINANCIAL_COLUMNS]
        if keep_provenance:
            out['fin_fiscal_period_end'] = statements['fiscal_period_end'].to_numpy()
            out['fin_release_date'] = statements['release_date'].to_numpy()
            out['ed_release_date'] = earnings['release_date'].to_numpy()
        return out

    def get_coverage_report(self) -> Dict[str, dict]:
        return {
            'statements': self.statement_index.get_coverage_report(),
            'earnings': self.earnings_index.get_coverage_report(),
        }
