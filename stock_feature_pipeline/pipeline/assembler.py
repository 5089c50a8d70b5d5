"""
Feature assembler.

Turns base price observations into leakage-free feature rows:

    price row -> feature_date -> financial facts -> economic pivot
              -> sentiment (both sources) -> split label -> FeatureRow

Every lookup is evaluated at feature_date = prediction_date - lag, so no
feature can use anything first known on the prediction date itself.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd
from tqdm import tqdm

from ..alignment.point_in_time import normalize_dates
from ..config.settings import FeatureSetConfig
from ..config.data_sources import SENTIMENT_SOURCES, KEY_COLUMNS, TARGET_COLUMN, STOCK_COLUMNS
from ..config.financial_metrics import FINANCIAL_COLUMNS, PROVENANCE_COLUMNS
from ..features.financials import FinancialFeatures
from ..features.economic import EconomicPivot
from ..features.sentiment import DailySentimentAggregator
from .splitter import CutoffSplitter

logger = logging.getLogger(__name__)


def prepare_base(prices: pd.DataFrame, feature_lag: pd.Timedelta) -> pd.DataFrame:
    """
    Base observations: one row per (symbol, prediction_date).

    Target = (close - open) / open, null when open is 0. Several bars on the
    same calendar day collapse to the latest one.
    """
    df = pd.DataFrame({
        'symbol': prices['symbol'].to_numpy(),
        '_timestamp': pd.to_datetime(prices['timestamp'], utc=True).to_numpy(dtype='datetime64[ns]'),
        'prediction_date': normalize_dates(prices['timestamp']).to_numpy(),
    })
    for raw, column in STOCK_COLUMNS.items():
        if raw in prices.columns:
            df[column] = pd.to_numeric(prices[raw], errors='coerce').to_numpy()
        else:
            df[column] = float('nan')

    df = df.dropna(subset=KEY_COLUMNS)
    df = df.sort_values(['symbol', '_timestamp'], kind='mergesort')

    dup_count = int(df.duplicated(KEY_COLUMNS, keep='last').sum())
    if dup_count > 0:
        logger.warning(f"stock_data: {dup_count} extra bars share a (symbol, prediction_date); "
                       f"keeping the latest bar of each day")
        df = df.drop_duplicates(KEY_COLUMNS, keep='last')

    opens = df['sd_open']
    df[TARGET_COLUMN] = (df['sd_close'] - opens) / opens.where(opens != 0)
    df['feature_date'] = df['prediction_date'] - feature_lag

    return df.drop(columns='_timestamp').reset_index(drop=True)


class FeatureAssembler:
    """
    Orchestrates the point-in-time lookups for every base observation.

    Work is partitioned by symbol. The economic pivot does not depend on the
    symbol, so it is computed once per distinct feature_date up front and
    shared read-only by every partition.
    """

    def __init__(
        self,
        config: FeatureSetConfig,
        financials: FinancialFeatures,
        economic: EconomicPivot,
        sentiment: List[DailySentimentAggregator],
    ):
        """
        Initialize FeatureAssembler.

        Args:
            config: Run configuration (lag, cutoff)
            financials: Statement and earnings fact streams
            economic: Economic series pivot
            sentiment: One aggregator per sentiment source, already aggregated
        """
        self.config = config
        self.financials = financials
        self.economic = economic
        self.sentiment = sentiment
        self.splitter = CutoffSplitter(config.train_cutoff_date)

    @classmethod
    def from_tables(
        cls,
        tables: Dict[str, pd.DataFrame],
        config: Optional[FeatureSetConfig] = None,
    ) -> 'FeatureAssembler':
        """
        Build every component from a snapshot of source tables.

        Args:
            tables: Source name -> DataFrame (see config.data_sources)
            config: Run configuration (defaults if omitted)
        """
        config = config or FeatureSetConfig()

        financials = FinancialFeatures(
            income=tables['income_statement'],
            balance=tables['balance_sheet'],
            cashflow=tables['cashflow'],
            earnings=tables['earnings_dates'],
        )
        economic = EconomicPivot(
            tables['alfred_economic_data'],
            series_map=config.economic_series,
        )

        sentiment = []
        for source in SENTIMENT_SOURCES:
            aggregator = DailySentimentAggregator(source)
            aggregator.aggregate(tables[source.name])
            sentiment.append(aggregator)

        return cls(config, financials, economic, sentiment)

    @property
    def output_columns(self) -> List[str]:
        columns = KEY_COLUMNS + [TARGET_COLUMN] + list(STOCK_COLUMNS.values())
        columns += FINANCIAL_COLUMNS
        columns += self.economic.columns
        for aggregator in self.sentiment:
            columns += aggregator.columns
        return columns + ['split']

    def provenance_columns(self) -> List[str]:
        return (['feature_date'] + PROVENANCE_COLUMNS
                + [f"{c}_knowledge_date" for c in self.economic.columns])

    def assemble(self, prices: pd.DataFrame, keep_provenance: bool = False) -> pd.DataFrame:
        """
        Build the feature set.

        Args:
            prices: stock_data table
            keep_provenance: Also emit feature_date and the knowledge dates
                of the facts used (for lookahead validation)

        Returns:
            One row per (symbol, prediction_date), sorted by that key
        """
        base = prepare_base(prices, self.config.feature_lag)
        logger.info(f"Base observations: {len(base)} rows, "
                    f"{base['symbol'].nunique()} symbols, "
                    f"{base['feature_date'].nunique()} distinct feature dates")

        econ = self.economic.pivot_many(base['feature_date'], keep_provenance=keep_provenance)

        partitions = []
        groups = base.groupby('symbol', sort=True)
        for _, part in tqdm(groups, total=groups.ngroups, desc="Assembling",
                            disable=not self.config.show_progress):
            partitions.append(self._assemble_symbol(part, econ, keep_provenance))

        columns = self.output_columns
        if keep_provenance:
            columns = columns + self.provenance_columns()

        if not partitions:
            return pd.DataFrame(columns=columns)

        features = pd.concat(partitions, ignore_index=True)
        features = self.splitter.assign(features)

        # Safety net: lookups are one-to-one, so this should never fire
        dup_count = int(features.duplicated(KEY_COLUMNS, keep='last').sum())
        if dup_count > 0:
            logger.warning(f"Collapsed {dup_count} duplicate feature rows")
            features = features.drop_duplicates(KEY_COLUMNS, keep='last')

        features = features.sort_values(KEY_COLUMNS, kind='mergesort').reset_index(drop=True)
        logger.info(f"Assembled {len(features)} feature rows x {len(columns)} columns")
        return features[columns]

    def _assemble_symbol(
        self,
        part: pd.DataFrame,
        econ: pd.DataFrame,
        keep_provenance: bool,
    ) -> pd.DataFrame:
        """All lookups for one symbol's observations."""
        rows = part.reset_index(drop=True)

        financial = self.financials.lookup(
            rows['symbol'], rows['feature_date'], keep_provenance=keep_provenance
        )
        rows = pd.concat([rows, financial], axis=1)

        rows = rows.merge(econ, on='feature_date', how='left')

        for aggregator in self.sentiment:
            rows = aggregator.join(rows, date_column='feature_date')

        return rows
