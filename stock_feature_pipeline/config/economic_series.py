"""
Enumerated economic indicator series.

Maps an ALFRED/FRED series id to the output column it is pivoted into.
New indicators are added here; the pivot logic never changes.
"""

from typing import Dict


ECONOMIC_SERIES: Dict[str, str] = {
    # Rates
    'FEDFUNDS': 'econ_fedfunds',
    'DFF': 'econ_dff',
    'DGS10': 'econ_dgs10',
    'DGS2': 'econ_dgs2',
    'T10Y2Y': 'econ_t10y2y',
    'T10Y3M': 'econ_t10y3m',

    # Inflation
    'CPIAUCSL': 'econ_cpi',
    'CPILFESL': 'econ_core_cpi',
    'PCEPI': 'econ_pce',
    'PCEPILFE': 'econ_core_pce',

    # Labor
    'UNRATE': 'econ_unemployment',
    'PAYEMS': 'econ_nonfarm_payrolls',
    'ICSA': 'econ_initial_claims',
    'CCSA': 'econ_continued_claims',

    # Output
    'GDP': 'econ_gdp',
    'GDPC1': 'econ_real_gdp',
    'INDPRO': 'econ_industrial_prod',
    'RSAFS': 'econ_retail_sales',

    # Money
    'M2SL': 'econ_m2_money_supply',
    'BOGMBASE': 'econ_monetary_base',

    # Housing
    'HOUST': 'econ_housing_starts',
    'PERMIT': 'econ_building_permits',
    'CSUSHPINSA': 'econ_home_price_index',

    # Sentiment / activity
    'UMCSENT': 'econ_consumer_sentiment',
    'MANEMP': 'econ_manufacturing_emp',
    'DGORDER': 'econ_durable_goods',
    'BOPGSTB': 'econ_trade_balance',

    # Risk
    'BAMLH0A0HYM2': 'econ_high_yield_spread',
    'VIXCLS': 'econ_vix',
}
