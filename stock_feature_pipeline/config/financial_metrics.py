"""
Financial statement metric tables.

Each table maps a raw statement column (as published upstream) to the
feature column it becomes. Ratios are derived after the statements of one
fiscal period have been combined.
"""

from typing import Dict, List, Tuple


INCOME_METRICS: Dict[str, str] = {
    'Total Revenue': 'is_total_revenue',
    'Gross Profit': 'is_gross_profit',
    'Operating Income': 'is_operating_income',
    'Net Income': 'is_net_income',
    'EBITDA': 'is_ebitda',
    'EBIT': 'is_ebit',
    'Diluted EPS': 'is_diluted_eps',
    'Basic EPS': 'is_basic_eps',
    'Cost Of Revenue': 'is_cost_of_revenue',
    'Operating Expense': 'is_operating_expense',
    'Interest Expense': 'is_interest_expense',
    'Tax Provision': 'is_tax_provision',
    'Research And Development': 'is_research_and_development',
    'Selling General And Administration': 'is_selling_general_admin',
}

BALANCE_METRICS: Dict[str, str] = {
    'Total Assets': 'bs_total_assets',
    'Total Liabilities Net Minority Interest': 'bs_total_liabilities',
    'Stockholders Equity': 'bs_stockholders_equity',
    'Total Debt': 'bs_total_debt',
    'Net Debt': 'bs_net_debt',
    'Cash Cash Equivalents And Short Term Investments': 'bs_cash_and_equivalents',
    'Current Assets': 'bs_current_assets',
    'Current Liabilities': 'bs_current_liabilities',
    'Working Capital': 'bs_working_capital',
    'Goodwill And Other Intangible Assets': 'bs_goodwill_intangibles',
    'Net PPE': 'bs_net_ppe',
    'Inventory': 'bs_inventory',
    'Accounts Receivable': 'bs_accounts_receivable',
    'Accounts Payable': 'bs_accounts_payable',
    'Retained Earnings': 'bs_retained_earnings',
}

CASHFLOW_METRICS: Dict[str, str] = {
    'Operating Cash Flow': 'cf_operating_cash_flow',
    'Investing Cash Flow': 'cf_investing_cash_flow',
    'Financing Cash Flow': 'cf_financing_cash_flow',
    'Free Cash Flow': 'cf_free_cash_flow',
    'Capital Expenditure': 'cf_capital_expenditure',
    'Depreciation And Amortization': 'cf_depreciation_amortization',
    'Stock Based Compensation': 'cf_stock_based_compensation',
    'Change In Working Capital': 'cf_change_in_working_capital',
    'Cash Dividends Paid': 'cf_dividends_paid',
    'Repurchase Of Capital Stock': 'cf_stock_repurchase',
    'Net Issuance Payments Of Debt': 'cf_net_debt_issuance',
    'End Cash Position': 'cf_end_cash_position',
}

STATEMENT_METRICS: Dict[str, Dict[str, str]] = {
    'income': INCOME_METRICS,
    'balance': BALANCE_METRICS,
    'cashflow': CASHFLOW_METRICS,
}

EARNINGS_METRICS: Dict[str, str] = {
    'EPS Estimate': 'ed_eps_estimate',
    'Reported EPS': 'ed_reported_eps',
    'Surprise(%)': 'ed_surprise_pct',
}

# (output column, numerator, denominator); null unless denominator > 0
RATIOS: List[Tuple[str, str, str]] = [
    ('is_gross_margin', 'is_gross_profit', 'is_total_revenue'),
    ('is_operating_margin', 'is_operating_income', 'is_total_revenue'),
    ('is_net_margin', 'is_net_income', 'is_total_revenue'),
    ('bs_current_ratio', 'bs_current_assets', 'bs_current_liabilities'),
    ('bs_debt_to_equity', 'bs_total_debt', 'bs_stockholders_equity'),
]


def statement_columns(statement_type: str) -> List[str]:
    """Feature columns produced by one statement type, ratios included."""
    columns = list(STATEMENT_METRICS[statement_type].values())
    for name, numerator, _ in RATIOS:
        if numerator in columns:
            columns.append(name)
    return columns


FINANCIAL_COLUMNS: List[str] = (
    ['fin_days_since_release']
    + list(EARNINGS_METRICS.values())
    + statement_columns('income')
    + statement_columns('balance')
    + statement_columns('cashflow')
)

# Dates of the facts behind the financial features, kept for validation
PROVENANCE_COLUMNS: List[str] = ['fin_fiscal_period_end', 'fin_release_date', 'ed_release_date']
