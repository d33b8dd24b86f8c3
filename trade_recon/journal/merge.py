"""
Journal Merge Engine

Appends imported trades to a journal store, skipping any trade that
already exists for the account. Two trades are the same when their
(date, symbol, entry time, gross P&L, contracts) tuples are equal.
Skipped duplicates are an expected outcome and are not reported.
"""

import logging
from typing import Dict, Iterable, List

from ..importer.models import Trade
from .store import JournalStore

logger = logging.getLogger(__name__)


class JournalMerger:
    """Idempotent merge of imported trades into a JournalStore"""

    def __init__(self, store: JournalStore):
        self.store = store

    def merge(self, trades: Iterable[Trade], account: str) -> int:
        """
        Append trades not already present in the account's journal

        The duplicate check and the appends run under the account lock, so
        concurrent merges into one account cannot interleave. A trade that
        repeats an earlier trade of the same batch is also skipped.

        Args:
            trades: Trades to merge
            account: Target account

        Returns:
            Number of trades appended
        """
        if not account:
            logger.warning("Merge skipped: no target account")
            return 0

        with self.store.account_lock(account):
            seen = {trade.dedup_key for trade in self.store.get_trades(account)}
            appended = 0

            for trade in trades:
                key = trade.dedup_key
                if key in seen:
                    logger.debug(f"Skipping duplicate trade {trade.symbol} {trade.date} {trade.entry_time}")
                    continue
                self.store.append_trade(account, trade)
                seen.add(key)
                appended += 1

        logger.info(f"Merged {appended} new trades into {account}")
        return appended

    def merge_by_account(self, trades: Iterable[Trade]) -> Dict[str, int]:
        """
        Merge a mixed batch, routing each trade to its own account

        Trades with a blank account are left out.

        Returns:
            Appended count per account, in first-seen account order
        """
        batches: Dict[str, List[Trade]] = {}
        skipped = 0
        for trade in trades:
            account = (trade.account or "").strip()
            if not account:
                skipped += 1
                continue
            batches.setdefault(account, []).append(trade)

        if skipped:
            logger.warning(f"Excluded {skipped} trades without an account")

        return {account: self.merge(batch, account) for account, batch in batches.items()}


# Convenience functions
def merge_trades(trades: Iterable[Trade], account: str, store: JournalStore) -> int:
    """Merge trades into one account of the store; returns appended count"""
    return JournalMerger(store).merge(trades, account)


def merge_trades_by_account(trades: Iterable[Trade], store: JournalStore) -> Dict[str, int]:
    """Merge a mixed batch per trade account; returns appended count per account"""
    return JournalMerger(store).merge_by_account(trades)
