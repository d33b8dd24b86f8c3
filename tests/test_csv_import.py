"""
Tests for the execution export importer
"""

from datetime import date
from decimal import Decimal

from trade_recon.importer import csv_import
from trade_recon.importer.csv_import import CsvTradeImporter, parse_trade_csv
from trade_recon.importer.models import RawExecutionRecord, TradeDirection, TradeOutcome


class TestCsvTradeImporter:
    """Test cases for CsvTradeImporter"""

    def setup_method(self):
        """Set up test fixtures"""
        self.importer = CsvTradeImporter()

    def test_sample_export(self, sample_export):
        """Test import of a round trip plus a single-leg trade"""
        result = self.importer.parse_file(sample_export)

        assert result.success
        assert result.errors == []
        assert result.warnings == []
        assert result.total_rows_parsed == 3
        assert result.successful_trades == 2
        assert len(result.trades) == 2

        round_trip, single = result.trades

        assert round_trip.symbol == "MNQM4"
        assert round_trip.account == "FFN-25S951058292787"
        assert round_trip.trade_type == TradeDirection.LONG
        assert round_trip.date == date(2024, 5, 3)
        assert round_trip.entry_time == "9:30:05 AM"
        assert round_trip.exit_time == "9:45:10 AM"
        assert round_trip.entry_price == Decimal("18000.25")
        assert round_trip.exit_price == Decimal("18010.75")
        assert round_trip.contracts == 2
        assert round_trip.pl == Decimal("42.00")
        assert round_trip.fees == Decimal("2.48")
        assert round_trip.net_pl == Decimal("39.52")
        assert round_trip.outcome == TradeOutcome.WIN
        assert round_trip.notes == "Order Type: Market"

        assert single.symbol == "MESM4"
        assert single.trade_type == TradeDirection.SHORT
        assert single.contracts == 1
        assert single.outcome == TradeOutcome.LOSS
        assert single.entry_time == single.exit_time == "10:02:00 AM"
        assert single.entry_price == single.exit_price == Decimal("5100.00")

    def test_missing_file(self, tmp_path):
        path = tmp_path / "nope.csv"
        result = self.importer.parse_file(path)

        assert not result.success
        assert result.errors == [f"File not found: {path}"]
        assert result.trades == []

    def test_header_only(self, write_export, export_header):
        result = self.importer.parse_file(write_export(export_header + "\n"))

        assert not result.success
        assert result.errors == ["CSV file is empty or contains no data rows"]
        assert result.total_rows_parsed == 0

    def test_empty_file(self, write_export):
        result = self.importer.parse_file(write_export(""))

        assert not result.success
        assert len(result.errors) == 1

    def test_missing_required_columns(self, write_export):
        path = write_export("Account,Symbol,Quantity\nACC,MNQM4,1\n")
        result = self.importer.parse_file(path)

        assert not result.success
        assert result.errors == ["Missing required columns: Date/Time, Side, Price"]
        assert result.trades == []

    def test_case_insensitive_headers(self, write_export):
        path = write_export(
            "ACCOUNT,date/time,symbol,SIDE,quantity,PRICE,net p/l\n"
            "ACC,5/3/2024 9:30:05 AM,MNQM4,Buy,1,18000,5.00\n"
        )
        result = self.importer.parse_file(path)

        assert result.success
        assert result.successful_trades == 1
        assert result.trades[0].outcome == TradeOutcome.WIN

    def test_blank_account_rows_skipped(self, write_export, export_header):
        path = write_export("\n".join([
            export_header,
            ",5/3/2024 9:30:05 AM,MNQM4,,,Buy,Market,1,18000,0,0,0,,,,",
            "",
            "ACC,5/3/2024 9:31:00 AM,MNQM4,,,Buy,Market,1,18000,0,0,0,,,,",
        ]))
        result = self.importer.parse_file(path)

        assert result.success
        assert result.total_rows_parsed == 1
        assert result.successful_trades == 1
        assert result.errors == []

    def test_breakeven(self, write_export, export_header):
        path = write_export("\n".join([
            export_header,
            "ACC,5/3/2024 9:30:05 AM,MNQM4,,,Buy,Market,1,18000,0.62,0.62,0.00,,,,",
        ]))
        result = self.importer.parse_file(path)

        assert result.trades[0].outcome == TradeOutcome.BREAKEVEN

    def test_trade_id_groups_without_position_id(self, write_export, export_header):
        path = write_export("\n".join([
            export_header,
            "ACC,5/3/2024 9:30:05 AM,MNQM4,,,Sell,Market,1,18000,0,0.62,-0.62,T9,O1,,",
            "ACC,5/3/2024 9:40:00 AM,MNQM4,,,Buy,Market,-1,17990,5.00,0.62,4.38,T9,O2,,",
        ]))
        result = self.importer.parse_file(path)

        assert result.successful_trades == 1
        trade = result.trades[0]
        assert trade.trade_type == TradeDirection.SHORT
        assert trade.exit_price == Decimal("17990")
        assert trade.pl == Decimal("5.00")

    def test_legs_sorted_by_time(self, write_export, export_header):
        path = write_export("\n".join([
            export_header,
            "ACC,5/3/2024 9:45:00 AM,MNQM4,,,Sell,Limit,-1,101,10,1,9,,,P7,",
            "ACC,5/3/2024 9:30:00 AM,MNQM4,,,Buy,Market,1,100,0,1,-1,,,P7,",
        ]))
        trade = self.importer.parse_file(path).trades[0]

        assert trade.entry_time == "9:30:00 AM"
        assert trade.exit_time == "9:45:00 AM"
        assert trade.entry_price == Decimal("100")
        assert trade.exit_price == Decimal("101")
        assert trade.trade_type == TradeDirection.LONG

    def test_unparsable_datetime_warns(self, write_export, export_header):
        path = write_export("\n".join([
            export_header,
            "ACC,yesterday-ish,MNQM4,,,Buy,Market,1,18000,0,0,0,,,,",
        ]))
        result = self.importer.parse_file(path)

        assert result.success
        assert result.successful_trades == 1
        assert result.trades[0].date == date.min
        assert result.warnings == ["Unparsable Date/Time 'yesterday-ish' in single row"]

    def test_row_error_collected(self, sample_export, monkeypatch):
        original = RawExecutionRecord.from_values.__func__

        def flaky(cls, values, column_map):
            if values[1].startswith("5/3/2024 9:45"):
                raise ValueError("bad row")
            return original(cls, values, column_map)

        monkeypatch.setattr(RawExecutionRecord, "from_values", classmethod(flaky))
        result = self.importer.parse_file(sample_export)

        assert result.success
        assert result.errors == ["Error parsing row 3: bad row"]
        assert result.total_rows_parsed == 2
        assert result.successful_trades == 2

    def test_group_warning_collected(self, sample_export, monkeypatch):
        def broken(records, group_key="", warnings=None):
            raise ValueError("cannot build")

        monkeypatch.setattr(self.importer.synthesizer, "synthesize_group", broken)
        result = self.importer.parse_file(sample_export)

        assert result.success
        assert result.warnings == ["Error processing trade group P1: cannot build"]
        assert result.successful_trades == 1
        assert result.trades[0].symbol == "MESM4"

    def test_unexpected_failure_is_reported(self, sample_export, monkeypatch):
        def explode(records):
            raise RuntimeError("boom")

        monkeypatch.setattr(csv_import, "group_records", explode)
        result = self.importer.parse_file(sample_export)

        assert not result.success
        assert result.errors == ["Error reading CSV file: boom"]

    def test_unicode_separator_inside_comment(self, write_export, export_header):
        """Only CR and LF end a line; U+2028 in a quoted comment stays in the row"""
        path = write_export("\n".join([
            export_header,
            'ACC,5/3/2024 9:30:05 AM,MNQM4,,,Buy,Market,1,18000,0,0,0,,,,"note\u2028more"',
        ]) + "\n")
        result = self.importer.parse_file(path)

        assert result.success
        assert result.total_rows_parsed == 1
        assert result.successful_trades == 1
        assert result.warnings == []
        assert result.trades[0].notes == "Order Type: Market | note\u2028more"

    def test_crlf_and_cr_line_endings(self, write_export, export_header):
        path = write_export(
            export_header + "\r\n"
            + "ACC,5/3/2024 9:30:05 AM,MNQM4,,,Buy,Market,1,18000,0,0,0,,,,\r"
            + "ACC,5/3/2024 9:31:05 AM,MESM4,,,Sell,Market,1,5100,0,0,0,,,,\r\n"
        )
        result = self.importer.parse_file(path)

        assert result.total_rows_parsed == 2
        assert [t.symbol for t in result.trades] == ["MNQM4", "MESM4"]

    def test_invalid_path_argument(self):
        result = self.importer.parse_file(None)

        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Error reading CSV file: ")
        assert result.trades == []

    def test_fatal_failure_keeps_single_error(self, sample_export, monkeypatch):
        original = RawExecutionRecord.from_values.__func__

        def flaky(cls, values, column_map):
            if values[2] == "MESM4":
                raise ValueError("bad row")
            return original(cls, values, column_map)

        def explode(records):
            raise RuntimeError("boom")

        monkeypatch.setattr(RawExecutionRecord, "from_values", classmethod(flaky))
        monkeypatch.setattr(csv_import, "group_records", explode)
        result = self.importer.parse_file(sample_export)

        assert not result.success
        assert result.errors == ["Error reading CSV file: boom"]
        assert result.warnings == []
        assert result.trades == []

    def test_to_dataframe(self, sample_export):
        df = self.importer.parse_file(sample_export).to_dataframe()

        assert len(df) == 2
        assert list(df['symbol']) == ["MNQM4", "MESM4"]
        assert df.loc[0, 'pl'] == "42.00"


def test_parse_trade_csv_convenience(sample_export):
    result = parse_trade_csv(sample_export)
    assert result.successful_trades == 2


def test_extra_datetime_formats_from_config(write_export, export_header):
    path = write_export("\n".join([
        export_header,
        "ACC,03|05|2024 09:30,MNQM4,,,Buy,Market,1,18000,0,0,0,,,,",
    ]))
    result = parse_trade_csv(path, {'extra_datetime_formats': ["%d|%m|%Y %H:%M"]})

    assert result.warnings == []
    assert result.trades[0].date == date(2024, 5, 3)


def test_bom_is_stripped(tmp_path, export_header):
    path = tmp_path / "bom.csv"
    path.write_text(export_header + "\nACC,5/3/2024 9:30:05 AM,MNQM4,,,Buy,Market,1,1,0,0,0,,,,\n",
                    encoding="utf-8-sig")

    result = parse_trade_csv(path)

    assert result.success
    assert result.successful_trades == 1
