"""
Tests for the line tokenizer and column resolver
"""

import pytest

from trade_recon.importer.columns import (
    OPTIONAL_COLUMNS,
    REQUIRED_COLUMNS,
    build_column_map,
    missing_required_columns,
    validate_required_columns,
)
from trade_recon.importer.errors import MissingColumnsError
from trade_recon.importer.tokenizer import split_lines, tokenize_line


class TestTokenizeLine:
    """Test cases for tokenize_line"""

    def test_quoted_field_keeps_separator(self):
        assert tokenize_line('a,"b,c",d') == ["a", "b,c", "d"]

    def test_empty_line(self):
        assert tokenize_line("") == [""]

    def test_values_are_trimmed(self):
        assert tokenize_line("  a , b ,c  ") == ["a", "b", "c"]

    def test_trailing_separator_gives_empty_value(self):
        assert tokenize_line("a,b,") == ["a", "b", ""]

    def test_trailing_newline_is_trimmed(self):
        assert tokenize_line("a,b\r\n") == ["a", "b"]

    def test_doubled_quotes_toggle(self):
        """Embedded quotes are not escapes: every quote flips quoted mode"""
        assert tokenize_line('x,"say ""hi"""') == ["x", "say hi"]

    def test_unterminated_quote_swallows_rest(self):
        assert tokenize_line('a,"b,c') == ["a", "b,c"]

    def test_money_with_thousands_separator(self):
        values = tokenize_line('ACC,"1,234.50",2')
        assert values == ["ACC", "1,234.50", "2"]


class TestSplitLines:
    """Test cases for split_lines"""

    def test_line_endings(self):
        assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]

    def test_trailing_terminator(self):
        assert split_lines("a\nb\n") == ["a", "b"]
        assert split_lines("a\n\n") == ["a", ""]

    def test_empty_text(self):
        assert split_lines("") == []

    def test_other_separators_kept(self):
        text = "a\u2028b\x0bc\x0cd\x85e\u2029f"
        assert split_lines(text) == [text]


class TestColumnResolver:
    """Test cases for column map building and validation"""

    def test_case_insensitive_lookup(self):
        column_map = build_column_map(tokenize_line("account,DATE/TIME,Symbol,side,QUANTITY,price"))

        assert "Account" in column_map
        assert "Date/Time" in column_map
        assert column_map.index_of("Price") == 5
        assert missing_required_columns(column_map) == []

    def test_blank_header_cells_skipped(self):
        column_map = build_column_map(["Account", "", "  ", "Symbol"])

        assert len(column_map) == 2
        assert column_map.index_of("symbol") == 3
        assert column_map.names == ["Account", "Symbol"]

    def test_missing_columns_in_declaration_order(self):
        column_map = build_column_map(["Price", "Symbol", "Account"])

        assert missing_required_columns(column_map) == ["Date/Time", "Side", "Quantity"]

        with pytest.raises(MissingColumnsError) as exc_info:
            validate_required_columns(column_map)

        assert str(exc_info.value) == "Missing required columns: Date/Time, Side, Quantity"
        assert exc_info.value.missing_columns == ["Date/Time", "Side", "Quantity"]

    def test_all_missing(self):
        column_map = build_column_map(["Foo"])

        with pytest.raises(MissingColumnsError, match="Account, Date/Time, Symbol, Side, Quantity, Price"):
            validate_required_columns(column_map)

    def test_value_for_absent_column_or_short_row(self):
        column_map = build_column_map(["Account", "Symbol", "Comment"])

        assert column_map.value(["ACC", "MNQ", "note"], "comment") == "note"
        assert column_map.value(["ACC", "MNQ"], "Comment") == ""
        assert column_map.value(["ACC", "MNQ", "note"], "Exchange") == ""

    def test_duplicate_header_last_wins(self):
        column_map = build_column_map(["Price", "Symbol", "price"])
        assert column_map.index_of("Price") == 2

    def test_known_column_sets(self):
        assert len(REQUIRED_COLUMNS) == 6
        assert "Position ID" in OPTIONAL_COLUMNS
        assert not set(REQUIRED_COLUMNS) & set(OPTIONAL_COLUMNS)
