"""
Input snapshot loading.

Reads the source tables of one run from a directory of Parquet (preferred)
or CSV files. This is the ingestion boundary: missing required columns are
a schema error, and rows with a null key are rejected here so the join
logic never sees them.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from ..config.data_sources import ALL_SOURCES, SourceTable
from ..exceptions import SchemaError

logger = logging.getLogger(__name__)

# Tables a run cannot do without; the rest degrade to null features
REQUIRED_TABLES = ['stock_data']

SUPPORTED_SUFFIXES = ['.parquet', '.csv']


class SnapshotLoader:
    """
    Loader for an immutable snapshot of source tables.

    Features:
    - One file per table, named after the table (``stock_data.parquet``)
    - Parquet read through pyarrow, CSV as a fallback
    - Schema checks and null-key rejection at load time
    """

    def __init__(
        self,
        snapshot_dir: str,
        sources: Optional[Dict[str, SourceTable]] = None,
    ):
        """
        Initialize SnapshotLoader.

        Args:
            snapshot_dir: Directory holding the table files
            sources: Table configurations (default: ALL_SOURCES)
        """
        self.snapshot_dir = Path(snapshot_dir)
        self.sources = sources or ALL_SOURCES
        self.stats: Dict[str, Dict] = {}

    def path_for(self, name: str) -> Optional[Path]:
        """File holding table ``name``, or None if there is none."""
        for suffix in SUPPORTED_SUFFIXES:
            path = self.snapshot_dir / f"{name}{suffix}"
            if path.exists():
                return path
        return None

    def _read(self, path: Path) -> pd.DataFrame:
        if path.suffix == '.parquet':
            return pd.read_parquet(path)
        return pd.read_csv(path)

    def load(self, name: str) -> pd.DataFrame:
        """
        Load and check one table.

        Args:
            name: Table name (key of ``sources``)

        Returns:
            DataFrame with null-key rows removed; an empty frame with the
            required columns if an optional table has no file
        """
        if name not in self.sources:
            raise ValueError(f"Unknown source: {name}. Available: {list(self.sources)}")
        table = self.sources[name]

        path = self.path_for(name)
        if path is None:
            if name in REQUIRED_TABLES:
                raise FileNotFoundError(
                    f"Required table {name} not found in {self.snapshot_dir} "
                    f"(tried {', '.join(name + s for s in SUPPORTED_SUFFIXES)})"
                )
            logger.warning(f"Table {name} not found in {self.snapshot_dir}; "
                           f"its features will be null")
            self.stats[name] = {'file': None, 'rows': 0, 'rejected': 0,
                               'missing_optional': list(table.optional_columns)}
            return pd.DataFrame(columns=table.required_columns + table.value_columns)

        df = self._read(path)
        df = self.check_schema(df, table)

        missing_optional = [c for c in table.optional_columns if c not in df.columns]
        if missing_optional:
            logger.info(f"{name}: {len(missing_optional)} optional columns absent: {missing_optional}")

        rejected = int(df[table.key_columns].isna().any(axis=1).sum())
        if rejected > 0:
            logger.warning(f"{name}: rejected {rejected} rows with a null "
                           f"{'/'.join(table.key_columns)}")
            df = df.dropna(subset=table.key_columns).reset_index(drop=True)

        self.stats[name] = {'file': str(path), 'rows': len(df), 'rejected': rejected,
                            'missing_optional': missing_optional}
        logger.info(f"Loaded {name}: {len(df)} rows from {path.name}")
        return df

    @staticmethod
    def check_schema(df: pd.DataFrame, table: SourceTable) -> pd.DataFrame:
        """
        Raise SchemaError if a required column is missing.

        Value columns that are absent are added as nulls (with a warning),
        since a missing metric only degrades that feature.
        """
        missing = [c for c in table.required_columns if c not in df.columns]
        if missing:
            raise SchemaError(
                f"Table {table.name} is missing required columns {missing}. "
                f"Available columns: {list(df.columns)}"
            )

        absent: List[str] = [c for c in table.value_columns if c not in df.columns]
        if absent:
            logger.warning(f"{table.name}: value columns {absent} missing, filled with nulls")
            df = df.copy()
            for col in absent:
                df[col] = float('nan')
        return df

    def load_all(self) -> Dict[str, pd.DataFrame]:
        """Load every configured table."""
        return {name: self.load(name) for name in self.sources}

    def get_stats(self) -> Dict[str, Dict]:
        """Rows loaded, rows rejected and optional columns absent, per table."""
        return dict(self.stats)
