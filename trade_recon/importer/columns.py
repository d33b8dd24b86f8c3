"""
Column resolution for execution export headers

Maps header names to field indices (case-insensitive) and checks that the
columns needed to rebuild a trade are present.
"""

from typing import Dict, Iterable, List, Optional

from .errors import MissingColumnsError

REQUIRED_COLUMNS = ("Account", "Date/Time", "Symbol", "Side", "Quantity", "Price")

OPTIONAL_COLUMNS = (
    "Description",
    "Symbol type",
    "Expiration date",
    "Strike price",
    "Order type",
    "Gross P/L",
    "Fee",
    "Net P/L",
    "Trade value",
    "Trade ID",
    "Order ID",
    "Position ID",
    "Connection name",
    "Comment",
    "Exchange",
)


class ColumnMap:
    """
    Case-insensitive column name -> index lookup

    Blank header cells are skipped. When a name repeats, the last
    occurrence wins.
    """

    def __init__(self, header_values: Iterable[str]):
        self._indices: Dict[str, int] = {}
        self.names: List[str] = []

        for index, name in enumerate(header_values):
            name = name.strip()
            if not name:
                continue
            if name.casefold() not in self._indices:
                self.names.append(name)
            self._indices[name.casefold()] = index

    def __contains__(self, name: str) -> bool:
        return name.casefold() in self._indices

    def __len__(self) -> int:
        return len(self._indices)

    def index_of(self, name: str) -> Optional[int]:
        return self._indices.get(name.casefold())

    def value(self, values: List[str], name: str) -> str:
        """Return the field for `name`, or "" when the column or the cell is missing"""
        index = self.index_of(name)
        if index is None or index >= len(values):
            return ""
        return values[index]


def build_column_map(header_values: Iterable[str]) -> ColumnMap:
    """Build a ColumnMap from a tokenized header row"""
    return ColumnMap(header_values)


def missing_required_columns(column_map: ColumnMap) -> List[str]:
    """Required columns absent from the header, in declaration order"""
    return [column for column in REQUIRED_COLUMNS if column not in column_map]


def validate_required_columns(column_map: ColumnMap) -> None:
    """
    Ensure every required column is present

    Raises:
        MissingColumnsError: naming all missing columns
    """
    missing = missing_required_columns(column_map)
    if missing:
        raise MissingColumnsError(missing)
