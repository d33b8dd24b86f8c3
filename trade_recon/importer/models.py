"""
Data models for execution imports and journal trades
"""

import datetime as dt
import logging
import uuid
from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Tuple

import pandas as pd

from .columns import ColumnMap
from .parsers import DateTimeParse, parse_datetime_result, parse_decimal, parse_int

logger = logging.getLogger(__name__)


class TradeDirection(Enum):
    """Trade direction derived from the entry leg's side"""
    LONG = "Long"
    SHORT = "Short"
    UNKNOWN = ""


class TradeOutcome(Enum):
    """Trade outcome derived from summed net P&L"""
    WIN = "Win"
    LOSS = "Loss"
    BREAKEVEN = "Breakeven"


# Export header name for each RawExecutionRecord field
RECORD_COLUMNS = {
    'account': "Account",
    'date_time': "Date/Time",
    'symbol': "Symbol",
    'description': "Description",
    'symbol_type': "Symbol type",
    'expiration_date': "Expiration date",
    'strike_price': "Strike price",
    'side': "Side",
    'order_type': "Order type",
    'quantity': "Quantity",
    'price': "Price",
    'gross_pl': "Gross P/L",
    'fee': "Fee",
    'net_pl': "Net P/L",
    'trade_value': "Trade value",
    'trade_id': "Trade ID",
    'order_id': "Order ID",
    'position_id': "Position ID",
    'connection_name': "Connection name",
    'comment': "Comment",
    'exchange': "Exchange",
}


@dataclass(frozen=True)
class RawExecutionRecord:
    """
    One data line of an execution export

    Every field is kept as the raw string; typed values are parsed on
    demand by the grouping and synthesis stages.
    """
    account: str = ""
    date_time: str = ""
    symbol: str = ""
    description: str = ""
    symbol_type: str = ""
    expiration_date: str = ""
    strike_price: str = ""
    side: str = ""
    order_type: str = ""
    quantity: str = ""
    price: str = ""
    gross_pl: str = ""
    fee: str = ""
    net_pl: str = ""
    trade_value: str = ""
    trade_id: str = ""
    order_id: str = ""
    position_id: str = ""
    connection_name: str = ""
    comment: str = ""
    exchange: str = ""

    @classmethod
    def from_values(cls, values: List[str], column_map: ColumnMap) -> 'RawExecutionRecord':
        """Map tokenized values to a record; absent columns and short rows give "" """
        return cls(**{
            attr: column_map.value(values, column)
            for attr, column in RECORD_COLUMNS.items()
        })

    @property
    def group_key(self) -> str:
        """Position ID if present, else Trade ID, else "" (never grouped)"""
        if self.position_id.strip():
            return self.position_id.strip()
        if self.trade_id.strip():
            return self.trade_id.strip()
        return ""

    def parsed_date_time(self, extra_formats=()) -> DateTimeParse:
        return parse_datetime_result(self.date_time, extra_formats)

    def decimal(self, attr: str) -> Decimal:
        return parse_decimal(getattr(self, attr))

    def integer(self, attr: str) -> int:
        return parse_int(getattr(self, attr))


@dataclass
class Trade:
    """Journal trade rebuilt from one or more execution legs"""

    symbol: str = ""
    date: dt.date = field(default_factory=dt.date.today)
    outcome: TradeOutcome = TradeOutcome.BREAKEVEN
    trade_type: TradeDirection = TradeDirection.UNKNOWN
    account: str = ""

    entry_time: str = ""
    exit_time: str = ""
    entry_price: Decimal = Decimal("0")
    exit_price: Decimal = Decimal("0")
    contracts: int = 1

    pl: Decimal = Decimal("0")  # Gross P&L
    fees: Decimal = Decimal("0")

    # Journal fields filled in by the user after import
    model: str = ""
    session: str = ""
    rr: float = 0.0
    notes: str = ""
    followed_plan: bool = True
    emotions: str = ""

    trade_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def net_pl(self) -> Decimal:
        return self.pl - self.fees

    @property
    def dedup_key(self) -> Tuple[dt.date, str, str, Decimal, int]:
        """Business key used to suppress duplicate journal entries"""
        return (self.date, self.symbol, self.entry_time, self.pl, self.contracts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert trade to JSON-friendly dictionary"""
        return {
            'trade_id': self.trade_id,
            'date': self.date.isoformat(),
            'symbol': self.symbol,
            'outcome': self.outcome.value,
            'trade_type': self.trade_type.value,
            'account': self.account,
            'entry_time': self.entry_time,
            'exit_time': self.exit_time,
            'entry_price': str(self.entry_price),
            'exit_price': str(self.exit_price),
            'contracts': self.contracts,
            'pl': str(self.pl),
            'fees': str(self.fees),
            'net_pl': str(self.net_pl),
            'model': self.model,
            'session': self.session,
            'rr': self.rr,
            'notes': self.notes,
            'followed_plan': self.followed_plan,
            'emotions': self.emotions,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Trade':
        """Create trade from dictionary produced by to_dict() or a store row"""
        trade_date = data.get('date')
        if isinstance(trade_date, dt.datetime):
            trade_date = trade_date.date()
        elif isinstance(trade_date, str):
            trade_date = dt.date.fromisoformat(trade_date)

        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs['date'] = trade_date or dt.date.today()
        kwargs['outcome'] = TradeOutcome(data.get('outcome') or TradeOutcome.BREAKEVEN.value)
        kwargs['trade_type'] = TradeDirection(data.get('trade_type') or "")
        for money in ('entry_price', 'exit_price', 'pl', 'fees'):
            kwargs[money] = Decimal(str(data.get(money) or 0))
        kwargs['contracts'] = int(data.get('contracts') or 0)
        kwargs['rr'] = float(data.get('rr') or 0.0)
        kwargs['followed_plan'] = bool(data.get('followed_plan', True))
        return cls(**kwargs)


@dataclass
class ImportResult:
    """Outcome of importing one export file"""
    trades: List[Trade] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    total_rows_parsed: int = 0
    successful_trades: int = 0
    fatal: bool = False

    @property
    def success(self) -> bool:
        return not self.fatal

    def add_error(self, message: str) -> None:
        logger.warning(message)
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def fail(self, message: str) -> 'ImportResult':
        """Record a file-level error; the result carries only that error and no trades"""
        logger.error(f"Import aborted: {message}")
        self.trades = []
        self.successful_trades = 0
        self.fatal = True
        self.errors = [message]
        self.warnings = []
        return self

    def to_dataframe(self) -> pd.DataFrame:
        """Preview table with one row per imported trade"""
        columns = list(Trade().to_dict().keys())
        if not self.trades:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame([trade.to_dict() for trade in self.trades], columns=columns)
