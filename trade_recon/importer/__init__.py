"""
Importer Module

Parses trading platform execution exports and rebuilds round-trip trades
from their legs.
"""

from .csv_import import CsvTradeImporter, parse_trade_csv
from .errors import EmptyFileError, MissingColumnsError, TradeImportError
from .models import ImportResult, RawExecutionRecord, Trade, TradeDirection, TradeOutcome

__all__ = [
    'CsvTradeImporter',
    'parse_trade_csv',
    'ImportResult',
    'RawExecutionRecord',
    'Trade',
    'TradeDirection',
    'TradeOutcome',
    'TradeImportError',
    'MissingColumnsError',
    'EmptyFileError',
]
