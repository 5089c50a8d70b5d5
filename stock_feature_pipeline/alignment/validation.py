"""
Feature set validation utilities.

CRITICAL: These validations must pass before the feature set is exported.
"""

import logging
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

KEY_COLUMNS = ['symbol', 'prediction_date']
SPLIT_LABELS = {'train', 'test'}


def _provenance_columns(df: pd.DataFrame) -> List[str]:
    """Columns recording when the fact behind a feature became known."""
    return [c for c in df.columns
            if c.endswith('_release_date') or c.endswith('_knowledge_date')]


def validate_no_lookahead(df: pd.DataFrame) -> Dict[str, Any]:
    """
    Validate that no look-ahead bias exists in the feature set.

    Checks:
    - every ``*_days_since_release`` age is >= 0
    - every provenance date (``*_release_date`` / ``*_knowledge_date``) is
      <= the row's feature_date
    - feature_date is strictly before prediction_date

    Args:
        df: Feature set to validate

    Returns:
        Dict with validation results
    """
    results = {
        'passed': True,
        'checks': [],
        'issues': [],
    }

    # Check 1: All age columns should be >= 0
    age_cols = [c for c in df.columns if c.endswith('_days_since_release')]
    for col in age_cols:
        min_age = df[col].min()
        if pd.notna(min_age) and min_age < 0:
            results['passed'] = False
            results['issues'].append({
                'check': 'negative_age',
                'column': col,
                'min_age': min_age,
                'description': f"Column {col} has negative age ({min_age:.0f} days) indicating future data"
            })
        else:
            results['checks'].append({
                'check': 'age_positive',
                'column': col,
                'status': 'PASS',
                'min_age': min_age if pd.notna(min_age) else None
            })

    # Check 2: Provenance dates must be known by the feature date
    if 'feature_date' in df.columns:
        feature_date = pd.to_datetime(df['feature_date'])
        for col in _provenance_columns(df):
            known = pd.to_datetime(df[col])
            late = (known > feature_date) & known.notna()
            if late.any():
                results['passed'] = False
                results['issues'].append({
                    'check': 'future_fact',
                    'column': col,
                    'rows': int(late.sum()),
                    'description': f"Column {col} is after feature_date in {int(late.sum())} rows"
                })
            else:
                results['checks'].append({
                    'check': 'fact_known_by_feature_date',
                    'column': col,
                    'status': 'PASS'
                })

        # Check 3: Features must be lagged behind the prediction
        if 'prediction_date' in df.columns:
            not_lagged = feature_date >= pd.to_datetime(df['prediction_date'])
            if not_lagged.any():
                results['passed'] = False
                results['issues'].append({
                    'check': 'feature_date_lag',
                    'rows': int(not_lagged.sum()),
                    'description': 'feature_date is not strictly before prediction_date'
                })
            else:
                results['checks'].append({
                    'check': 'feature_date_lag',
                    'status': 'PASS'
                })

    return results


class FeatureSetValidator:
    """
    Comprehensive validator for assembled feature sets.
    """

    def __init__(self, feature_df: pd.DataFrame, cutoff_date: Optional[str] = None):
        """
        Initialize validator.

        Args:
            feature_df: Assembled feature set to validate
            cutoff_date: Train/test cutoff, enables split consistency checks
        """
        self.df = feature_df
        self.cutoff_date = cutoff_date

    def validate_all(self) -> Dict[str, Any]:
        """
        Run all validation checks.

        Returns:
            Dict with all validation results
        """
        results = {
            'lookahead': self.check_lookahead(),
            'uniqueness': self.check_uniqueness(),
            'ordering': self.check_ordering(),
            'split': self.check_split(),
            'completeness': self.check_completeness(),
            'data_quality': self.check_data_quality(),
        }

        results['all_passed'] = all(
            r.get('passed', True) for r in results.values()
        )

        return results

    def check_lookahead(self) -> Dict[str, Any]:
        """Check for look-ahead bias."""
        return validate_no_lookahead(self.df)

    def check_uniqueness(self) -> Dict[str, Any]:
        """Exactly one row per (symbol, prediction_date)."""
        missing = [c for c in KEY_COLUMNS if c not in self.df.columns]
        if missing:
            return {
                'passed': False,
                'checks': [{'check': 'key_columns', 'status': 'FAIL',
                            'description': f"Missing key columns {missing}"}],
            }

        dup_count = int(self.df.duplicated(KEY_COLUMNS).sum())
        null_keys = int(self.df[KEY_COLUMNS].isna().any(axis=1).sum())
        return {
            'passed': dup_count == 0 and null_keys == 0,
            'checks': [
                {'check': 'unique_keys', 'status': 'PASS' if dup_count == 0 else 'FAIL',
                 'duplicates': dup_count,
                 'description': f"{dup_count} duplicate (symbol, prediction_date) rows"},
                {'check': 'no_null_keys', 'status': 'PASS' if null_keys == 0 else 'FAIL',
                 'null_keys': null_keys,
                 'description': f"{null_keys} rows with a null key"},
            ],
        }

    def check_ordering(self) -> Dict[str, Any]:
        """Rows sorted by (symbol, prediction_date)."""
        if any(c not in self.df.columns for c in KEY_COLUMNS):
            return {'passed': True, 'checks': []}

        expected = self.df.sort_values(KEY_COLUMNS, kind='mergesort').index
        ordered = bool((expected == self.df.index).all())
        return {
            'passed': ordered,
            'checks': [{'check': 'sorted_keys', 'status': 'PASS' if ordered else 'FAIL',
                        'description': 'Rows are not sorted by (symbol, prediction_date)'}],
        }

    def check_split(self) -> Dict[str, Any]:
        """Split labels are valid and agree with the cutoff."""
        result = {'passed': True, 'checks': []}
        if 'split' not in self.df.columns:
            return result

        labels = set(self.df['split'].dropna().unique())
        invalid = labels - SPLIT_LABELS
        if invalid or self.df['split'].isna().any():
            result['passed'] = False
            result['checks'].append({
                'check': 'valid_labels',
                'status': 'FAIL',
                'description': f"Invalid split labels: {sorted(map(str, invalid))}"
            })
        else:
            result['checks'].append({'check': 'valid_labels', 'status': 'PASS'})

        if self.cutoff_date is not None and 'prediction_date' in self.df.columns:
            cutoff = pd.Timestamp(self.cutoff_date)
            dates = pd.to_datetime(self.df['prediction_date'])
            expected = np.where(dates <= cutoff, 'train', 'test')
            mismatched = int((self.df['split'].to_numpy() != expected).sum())
            result['checks'].append({
                'check': 'cutoff_consistent',
                'status': 'PASS' if mismatched == 0 else 'FAIL',
                'description': f"{mismatched} rows labelled against the cutoff {self.cutoff_date}"
            })
            if mismatched:
                result['passed'] = False

        return result

    def check_completeness(self) -> Dict[str, Any]:
        """Check data completeness."""
        result = {
            'passed': True,
            'columns': {},
        }

        for col in self.df.columns:
            if col in KEY_COLUMNS:
                continue

            missing_pct = self.df[col].isna().mean() * 100 if len(self.df) else 0.0
            result['columns'][col] = {
                'missing_pct': round(missing_pct, 2),
                'status': 'OK' if missing_pct < 5 else 'WARN' if missing_pct < 20 else 'HIGH_MISSING'
            }

        return result

    def check_data_quality(self) -> Dict[str, Any]:
        """Check for data quality issues."""
        result = {
            'passed': True,
            'checks': [],
        }

        # Infinite ratios usually mean a zero denominator slipped through
        numeric_cols = self.df.select_dtypes(include=[np.number]).columns
        for col in numeric_cols:
            inf_count = int(np.isinf(self.df[col]).sum())
            if inf_count > 0:
                result['checks'].append({
                    'check': 'no_infinites',
                    'column': col,
                    'status': 'WARN',
                    'inf_count': inf_count
                })

        if 'percent_daily_price_change' in self.df.columns:
            extreme = int((self.df['percent_daily_price_change'].abs() > 0.5).sum())
            if extreme > 0:
                result['checks'].append({
                    'check': 'no_extreme_moves',
                    'column': 'percent_daily_price_change',
                    'status': 'WARN',
                    'extreme_count': extreme
                })

        return result

    def print_report(self) -> bool:
        """Log a human-readable validation report; returns overall pass/fail."""
        results = self.validate_all()

        logger.info("=" * 60)
        logger.info("FEATURE SET VALIDATION REPORT")
        logger.info("=" * 60)

        for check_name, check_result in results.items():
            if check_name == 'all_passed':
                continue

            status = "PASS" if check_result.get('passed', True) else "FAIL"
            logger.info(f"{check_name.upper()}: {status}")

            for check in check_result.get('checks', []):
                check_status = check.get('status', 'UNKNOWN')
                logger.info(f"  - {check.get('check', 'unknown')}: {check_status}")
                if check_status == 'FAIL':
                    logger.error(f"    {check.get('description', '')}")

            for issue in check_result.get('issues', []):
                logger.error(f"  ISSUE: {issue.get('description', 'Unknown issue')}")

            if check_name == 'completeness':
                high = [c for c, v in check_result['columns'].items()
                        if v['status'] == 'HIGH_MISSING']
                if high:
                    logger.info(f"  {len(high)} columns more than 20% null")

        final_status = "ALL CHECKS PASSED" if results['all_passed'] else "SOME CHECKS FAILED"
        logger.info(f"FINAL STATUS: {final_status}")
        logger.info("=" * 60)

        return results['all_passed']
