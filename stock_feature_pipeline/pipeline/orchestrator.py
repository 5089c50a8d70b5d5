"""
Main pipeline orchestrator.

Coordinates all feature set components:
1. Snapshot loading
2. Fact stream indexing (statements, earnings, economic, sentiment)
3. Point-in-time feature assembly
4. Validation
5. Export to Parquet
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from ..config.settings import FeatureSetConfig, FEATURE_SET_VERSION
from ..alignment import FeatureSetValidator
from ..storage import SnapshotLoader
from .assembler import FeatureAssembler
from .splitter import CutoffSplitter

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """
    Main pipeline orchestrator.

    Runs the complete build from an input snapshot to the exported feature set.
    """

    def __init__(
        self,
        input_dir: str,
        output_dir: str = "data/feature_set",
        config: Optional[FeatureSetConfig] = None,
    ):
        """
        Initialize PipelineOrchestrator.

        Args:
            input_dir: Directory holding the source table snapshot
            output_dir: Directory for output files
            config: Run configuration (validated on construction)
        """
        self.config = config or FeatureSetConfig()
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.loader = SnapshotLoader(str(self.input_dir))

        # Metadata to track
        self.metadata: Dict[str, Any] = {
            'created_at': datetime.now(timezone.utc).isoformat(),
            'feature_set_version': FEATURE_SET_VERSION,
            'input_dir': str(self.input_dir),
            'config': self.config.to_dict(),
            'sources': {},
        }

    def run(self) -> pd.DataFrame:
        """
        Run the complete pipeline.

        Returns:
            Final feature set (one row per symbol and prediction date)
        """
        logger.info("=" * 70)
        logger.info("STOCK FEATURE SET PIPELINE")
        logger.info("=" * 70)
        logger.info(f"Input: {self.input_dir}")
        logger.info(f"Train/test cutoff: {self.config.train_cutoff_date}")
        logger.info(f"Feature lag: {self.config.feature_lag_days} day(s)")
        logger.info("=" * 70)

        # Step 1: Load snapshot
        tables = self._load_snapshot()

        # Step 2: Index fact streams
        assembler = self._build_assembler(tables)

        # Step 3: Assemble features (provenance kept for validation)
        features = self._assemble(assembler, tables['stock_data'])

        # Step 4: Validate
        self._validate(features)

        # Step 5: Export
        final = features[assembler.output_columns]
        self._export(final, assembler.splitter)

        logger.info("=" * 70)
        logger.info("PIPELINE COMPLETE")
        logger.info("=" * 70)

        return final

    def _load_snapshot(self) -> Dict[str, pd.DataFrame]:
        logger.info("--- STEP 1: LOADING SNAPSHOT ---")
        tables = self.loader.load_all()
        self.metadata['sources'] = self.loader.get_stats()
        return tables

    def _build_assembler(self, tables: Dict[str, pd.DataFrame]) -> FeatureAssembler:
        logger.info("--- STEP 2: INDEXING FACT STREAMS ---")
        assembler = FeatureAssembler.from_tables(tables, self.config)
        self.metadata['coverage'] = {
            **assembler.financials.get_coverage_report(),
            'economic': assembler.economic.index.get_coverage_report(),
        }
        return assembler

    def _assemble(self, assembler: FeatureAssembler, prices: pd.DataFrame) -> pd.DataFrame:
        logger.info("--- STEP 3: ASSEMBLING FEATURES ---")
        return assembler.assemble(prices, keep_provenance=True)

    def _validate(self, features: pd.DataFrame):
        """Validate the feature set; refuse to export a failing one."""
        logger.info("--- STEP 4: VALIDATING FEATURE SET ---")

        validator = FeatureSetValidator(features, cutoff_date=self.config.train_cutoff_date)
        passed = validator.print_report()

        if not passed:
            raise ValueError("Feature set validation FAILED. Fix issues before proceeding.")

    def _export(self, features: pd.DataFrame, splitter: CutoffSplitter):
        """Export the feature set, optional split files and metadata."""
        logger.info("--- STEP 5: EXPORTING ---")
        train_df, test_df = splitter.split(features)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        path = self.output_dir / 'feature_set.parquet'
        features.to_parquet(path, index=False)
        logger.info(f"Exported feature set: {len(features)} rows -> {path}")

        splits = {}
        for label, split_df in [('train', train_df), ('test', test_df)]:
            dates = split_df['prediction_date']
            splits[label] = {
                'rows': len(split_df),
                'start': str(dates.min()) if len(split_df) else None,
                'end': str(dates.max()) if len(split_df) else None,
            }
            if self.config.include_split_files:
                split_path = self.output_dir / f'{label}.parquet'
                split_df.to_parquet(split_path, index=False)
                logger.info(f"Exported {label}: {len(split_df)} rows -> {split_path}")

        self.metadata['rows'] = len(features)
        self.metadata['symbols'] = int(features['symbol'].nunique())
        self.metadata['columns'] = list(features.columns)
        self.metadata['splits'] = splits

        metadata_path = self.output_dir / 'metadata.json'
        with open(metadata_path, 'w') as f:
            json.dump(self.metadata, f, indent=2, default=str)
        logger.info(f"Saved metadata: {metadata_path}")
