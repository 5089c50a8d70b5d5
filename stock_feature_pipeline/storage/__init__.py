"""Snapshot storage module."""

from .snapshot import SnapshotLoader, REQUIRED_TABLES

__all__ = ['SnapshotLoader', 'REQUIRED_TABLES']
