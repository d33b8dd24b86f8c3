"""
Trade synthesis

Turns a group of execution legs (or a single ungrouped leg) into a
journal Trade: entry/exit times and prices, contracts, aggregated P&L
and fees, direction, outcome and notes.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from .models import RawExecutionRecord, Trade, TradeDirection, TradeOutcome
from .parsers import DateTimeParse, format_time_of_day

logger = logging.getLogger(__name__)

NOTES_SEPARATOR = " | "


def determine_direction(side: Optional[str]) -> TradeDirection:
    """Buy -> Long, Sell -> Short (case-insensitive), anything else unknown"""
    side = (side or "").strip().lower()
    if side == "buy":
        return TradeDirection.LONG
    if side == "sell":
        return TradeDirection.SHORT
    return TradeDirection.UNKNOWN


def determine_outcome(net_pl: Decimal) -> TradeOutcome:
    if net_pl > 0:
        return TradeOutcome.WIN
    if net_pl < 0:
        return TradeOutcome.LOSS
    return TradeOutcome.BREAKEVEN


def extract_account(account_field: Optional[str]) -> str:
    """
    Leading token of the account field

    Exports write e.g. "FFN-25S951058292787 LilDee249"; the journal keys
    on "FFN-25S951058292787".
    """
    parts = (account_field or "").split()
    return parts[0] if parts else ""


def build_notes(record: RawExecutionRecord) -> str:
    notes = []
    if record.order_type.strip():
        notes.append(f"Order Type: {record.order_type}")
    if record.comment.strip():
        notes.append(record.comment)
    return NOTES_SEPARATOR.join(notes)


class TradeSynthesizer:
    """
    Builds Trade objects from execution legs

    Entry fields come from the chronologically first leg and exit fields
    from the last. P&L, fees and net P&L are summed over every leg and the
    outcome is classified on the summed net P&L column, not on pl - fees.
    """

    def __init__(self, extra_datetime_formats: Iterable[str] = ()):
        self.extra_datetime_formats = tuple(extra_datetime_formats)

    def synthesize_group(self, records: Sequence[RawExecutionRecord], group_key: str = "",
                         warnings: Optional[List[str]] = None) -> Trade:
        """
        Build one trade from legs sharing a group key

        Args:
            records: Legs of the trade, in any order
            group_key: Key the legs were grouped by (used in warnings)
            warnings: Optional list receiving non-fatal data problems

        Returns:
            Trade

        Raises:
            ValueError: If the group is empty
        """
        if not records:
            raise ValueError("trade group contains no rows")

        # sorted() is stable, so equal or unparsable timestamps keep file
        # order; the unparsed sentinel sorts ahead of every real date
        legs = sorted(
            ((record.parsed_date_time(self.extra_datetime_formats), record) for record in records),
            key=lambda leg: leg[0].value,
        )
        first_time, first = legs[0]
        last_time, last = legs[-1]

        total_gross = sum((record.decimal('gross_pl') for _, record in legs), Decimal("0"))
        total_fees = sum((record.decimal('fee') for _, record in legs), Decimal("0"))
        total_net = sum((record.decimal('net_pl') for _, record in legs), Decimal("0"))

        self._check_entry_time(first_time, first, f"trade group {group_key}", warnings)

        trade = self._build_trade(first, first_time, last, last_time, total_gross, total_fees, total_net)
        logger.debug(f"Synthesized {trade.symbol} trade from {len(legs)} legs (group {group_key})")
        return trade

    def synthesize_single(self, record: RawExecutionRecord,
                          warnings: Optional[List[str]] = None) -> Trade:
        """Build a trade from one leg; entry and exit are the same fill"""
        parsed = record.parsed_date_time(self.extra_datetime_formats)
        self._check_entry_time(parsed, record, "single row", warnings)
        return self._build_trade(
            record, parsed, record, parsed,
            record.decimal('gross_pl'), record.decimal('fee'), record.decimal('net_pl'),
        )

    def _build_trade(self, first: RawExecutionRecord, first_time: DateTimeParse,
                     last: RawExecutionRecord, last_time: DateTimeParse,
                     gross_pl: Decimal, fees: Decimal, net_pl: Decimal) -> Trade:
        return Trade(
            symbol=first.symbol,
            account=extract_account(first.account),
            trade_type=determine_direction(first.side),
            date=first_time.value.date(),
            entry_time=format_time_of_day(first_time.value),
            exit_time=format_time_of_day(last_time.value),
            entry_price=first.decimal('price'),
            exit_price=last.decimal('price'),
            contracts=abs(first.integer('quantity')),
            pl=gross_pl,
            fees=fees,
            outcome=determine_outcome(net_pl),
            notes=build_notes(first),
        )

    @staticmethod
    def _check_entry_time(parsed: DateTimeParse, record: RawExecutionRecord, source: str,
                          warnings: Optional[List[str]]) -> None:
        if parsed.parsed:
            return
        message = f"Unparsable Date/Time '{record.date_time}' in {source}"
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)
