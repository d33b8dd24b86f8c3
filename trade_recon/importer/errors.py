"""
Import error types
"""


class TradeImportError(Exception):
    """Base error for a file that cannot be imported"""


class MissingColumnsError(TradeImportError):
    """Raised when the header lacks one or more required columns"""

    def __init__(self, missing_columns):
        self.missing_columns = list(missing_columns)
        super().__init__(f"Missing required columns: {', '.join(self.missing_columns)}")


class EmptyFileError(TradeImportError):
    """Raised when a file has no header or no data rows"""

    def __init__(self):
        super().__init__("CSV file is empty or contains no data rows")
