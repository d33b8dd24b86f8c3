"""
Journal statistics

Summary figures for an account's journal. All P&L figures use net P&L
(gross P&L minus fees).
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable

import pandas as pd

from ..importer.models import Trade

logger = logging.getLogger(__name__)


@dataclass
class JournalStats:
    """Journal summary statistics"""
    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    breakevens: int = 0
    win_rate: float = 0.0  # percent
    total_pl: float = 0.0
    average_pl: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    average_win: float = 0.0
    average_loss: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def trades_to_dataframe(trades: Iterable[Trade]) -> pd.DataFrame:
    """Frame with outcome and float net P&L per trade"""
    rows = [
        {
            'trade_id': trade.trade_id,
            'date': trade.date,
            'symbol': trade.symbol,
            'outcome': trade.outcome.value,
            'net_pl': float(trade.net_pl),
        }
        for trade in trades
    ]
    return pd.DataFrame(rows, columns=['trade_id', 'date', 'symbol', 'outcome', 'net_pl'])


def compute_journal_stats(trades: Iterable[Trade]) -> JournalStats:
    """
    Compute win/loss statistics for a set of journal trades

    Args:
        trades: Journal trades (typically one account)

    Returns:
        JournalStats, all zero for an empty journal
    """
    df = trades_to_dataframe(trades)
    if df.empty:
        return JournalStats()

    outcome = df['outcome'].str.lower()
    wins = df.loc[outcome == 'win', 'net_pl']
    losses = df.loc[outcome == 'loss', 'net_pl']
    breakevens = int((outcome == 'breakeven').sum())

    stats = JournalStats(
        total_trades=len(df),
        wins=len(wins),
        losses=len(losses),
        breakevens=breakevens,
        win_rate=len(wins) / len(df) * 100,
        total_pl=float(df['net_pl'].sum()),
        average_pl=float(df['net_pl'].mean()),
        largest_win=float(wins.max()) if not wins.empty else 0.0,
        largest_loss=float(losses.min()) if not losses.empty else 0.0,
        average_win=float(wins.mean()) if not wins.empty else 0.0,
        average_loss=float(losses.mean()) if not losses.empty else 0.0,
    )

    logger.debug(f"Journal stats: {stats.total_trades} trades, {stats.win_rate:.1f}% win rate")
    return stats
