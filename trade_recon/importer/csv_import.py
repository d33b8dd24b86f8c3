"""
Execution Export Importer

Reads a trading platform execution export (one row per fill or order
leg), rebuilds round-trip trades and reports what happened as an
ImportResult. The importer never raises: file-level problems abort with
a single error, row and group problems are collected and skipped.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .columns import ColumnMap, build_column_map, validate_required_columns
from .errors import EmptyFileError, TradeImportError
from .grouper import group_records
from .models import ImportResult, RawExecutionRecord
from .synthesizer import TradeSynthesizer
from .tokenizer import split_lines, tokenize_line

logger = logging.getLogger(__name__)


class CsvTradeImporter:
    """
    Importer for platform execution exports

    The first line is the header; required columns are Account, Date/Time,
    Symbol, Side, Quantity and Price. Legs are grouped by Position ID (or
    Trade ID) and each group becomes one Trade.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize importer with configuration

        Args:
            config: Importer section of the journal import config
        """
        self.config = {**self._default_config(), **(config or {})}
        self.encoding = self.config['encoding']
        self.synthesizer = TradeSynthesizer(self.config['extra_datetime_formats'] or ())

    def _default_config(self) -> Dict[str, Any]:
        return {
            'encoding': 'utf-8-sig',
            'extra_datetime_formats': [],
        }

    def parse_file(self, file_path: Union[str, Path]) -> ImportResult:
        """
        Parse an export file into trades

        Args:
            file_path: Path to the export file

        Returns:
            ImportResult with trades, row errors and group warnings. On a
            file-level failure it holds one error and no trades.
        """
        result = ImportResult()

        try:
            file_path = Path(file_path)
            found = file_path.exists()
        except (TypeError, ValueError, OSError) as e:
            return result.fail(f"Error reading CSV file: {e}")

        if not found:
            return result.fail(f"File not found: {file_path}")

        try:
            lines = split_lines(file_path.read_text(encoding=self.encoding))
        except (OSError, UnicodeDecodeError) as e:
            return result.fail(f"Error reading CSV file: {e}")

        logger.info(f"Importing executions from {file_path.name} ({len(lines)} lines)")

        try:
            self._parse_lines(lines, result)
        except TradeImportError as e:
            return result.fail(str(e))
        except Exception as e:
            logger.exception(f"Unexpected failure importing {file_path}")
            return result.fail(f"Error reading CSV file: {e}")

        logger.info(f"Imported {result.successful_trades} trades from {result.total_rows_parsed} rows "
                    f"({len(result.errors)} errors, {len(result.warnings)} warnings)")
        return result

    def _parse_lines(self, lines: List[str], result: ImportResult) -> None:
        if len(lines) < 2:
            raise EmptyFileError()

        column_map = build_column_map(tokenize_line(lines[0]))
        validate_required_columns(column_map)

        records = self._map_rows(lines, column_map, result)

        result.trades = self._synthesize_trades(records, result)
        result.successful_trades = len(result.trades)

    def _map_rows(self, lines: List[str], column_map: ColumnMap,
                  result: ImportResult) -> List[RawExecutionRecord]:
        records = []
        for line_number, line in enumerate(lines[1:], start=2):
            try:
                values = tokenize_line(line)
                if not values or not values[0].strip():
                    continue
                records.append(RawExecutionRecord.from_values(values, column_map))
                result.total_rows_parsed += 1
            except Exception as e:
                result.add_error(f"Error parsing row {line_number}: {e}")
        return records

    def _synthesize_trades(self, records: List[RawExecutionRecord], result: ImportResult):
        groups = group_records(records)
        trades = []

        for key, group in groups.grouped.items():
            try:
                trades.append(self.synthesizer.synthesize_group(group, key, result.warnings))
            except Exception as e:
                result.add_warning(f"Error processing trade group {key}: {e}")

        for record in groups.ungrouped:
            try:
                trades.append(self.synthesizer.synthesize_single(record, result.warnings))
            except Exception as e:
                result.add_warning(f"Error processing single row: {e}")

        logger.debug(f"Built {len(trades)} trades from {len(groups.grouped)} groups "
                     f"and {len(groups.ungrouped)} single rows")
        return trades


# Convenience functions
def parse_trade_csv(file_path: Union[str, Path], config: Optional[Dict[str, Any]] = None) -> ImportResult:
    """
    Convenience function to import an execution export

    Args:
        file_path: Path to export file
        config: Optional importer configuration

    Returns:
        ImportResult
    """
    importer = CsvTradeImporter(config)
    return importer.parse_file(file_path)
