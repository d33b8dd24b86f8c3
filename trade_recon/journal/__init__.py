"""
Journal Module

Per-account trade journal stores, the idempotent merge engine and
journal statistics and notes.
"""

from .duckdb_store import DuckDBJournalStore
from .merge import JournalMerger, merge_trades, merge_trades_by_account
from .notes import JournalNote
from .stats import JournalStats, compute_journal_stats
from .store import InMemoryJournalStore, JournalStore

__all__ = [
    'JournalStore',
    'InMemoryJournalStore',
    'DuckDBJournalStore',
    'JournalMerger',
    'merge_trades',
    'merge_trades_by_account',
    'JournalNote',
    'JournalStats',
    'compute_journal_stats',
]
