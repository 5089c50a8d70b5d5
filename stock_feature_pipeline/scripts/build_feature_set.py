#!/usr/bin/env python3
"""
CLI entry point for the stock feature pipeline.

Usage:
    # Default configuration
    python build_feature_set.py --input-dir data/snapshot

    # Override the train/test cutoff
    python build_feature_set.py --input-dir data/snapshot --cutoff 2025-06-30

    # Full configuration from JSON (economic series table, lag, ...)
    python build_feature_set.py --input-dir data/snapshot --config run.json

    # Also write train.parquet / test.parquet
    python build_feature_set.py --input-dir data/snapshot --split-files
"""

import argparse
import logging
import sys
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from stock_feature_pipeline.config.settings import FeatureSetConfig
from stock_feature_pipeline.exceptions import ConfigurationError, SchemaError
from stock_feature_pipeline.pipeline.orchestrator import PipelineOrchestrator


def main():
    parser = argparse.ArgumentParser(
        description="Stock Feature Pipeline - Build a point-in-time correct feature set"
    )

    parser.add_argument(
        '--input-dir',
        type=str,
        required=True,
        help="Directory holding the source table snapshot (Parquet or CSV)"
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        default="data/feature_set",
        help="Output directory. Default: data/feature_set"
    )

    # Configuration
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help="JSON file with FeatureSetConfig values"
    )
    parser.add_argument(
        '--cutoff',
        type=str,
        default=None,
        help="Train/test cutoff date (YYYY-MM-DD), overrides --config"
    )
    parser.add_argument(
        '--lag-days',
        type=int,
        default=None,
        help="Days between feature date and prediction date, overrides --config"
    )
    parser.add_argument(
        '--split-files',
        action='store_true',
        help="Also export train.parquet and test.parquet"
    )
    parser.add_argument(
        '--no-progress',
        action='store_true',
        help="Disable the progress bar"
    )

    # Verbosity
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help="Verbose output"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    # Configuration errors are fatal before any data is read
    try:
        config = FeatureSetConfig.from_json(args.config) if args.config else FeatureSetConfig()
        config = config.replace(
            train_cutoff_date=args.cutoff,
            feature_lag_days=args.lag_days,
            include_split_files=True if args.split_files else None,
            show_progress=False if args.no_progress else None,
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    # Run pipeline
    try:
        orchestrator = PipelineOrchestrator(
            input_dir=args.input_dir,
            output_dir=args.output_dir,
            config=config,
        )

        df = orchestrator.run()

        logger.info("Pipeline completed successfully!")
        logger.info(f"Final dataset: {len(df)} rows, {len(df.columns)} columns")
        logger.info(f"Output files in: {args.output_dir}/")

    except KeyboardInterrupt:
        logger.error("Pipeline interrupted by user")
        sys.exit(1)
    except (SchemaError, FileNotFoundError, ValueError) as e:
        logger.error(f"Pipeline failed: {e}")
        if args.verbose:
            logger.exception("Traceback")
        sys.exit(1)


if __name__ == '__main__':
    main()
