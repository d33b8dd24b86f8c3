"""
Line tokenizer for platform execution exports

Splits a single export line into trimmed field values. A double quote
toggles quoted mode; commas inside a quoted field are kept literally.
Embedded quotes cannot be escaped: every `"` flips the mode.
"""

from typing import List

FIELD_SEPARATOR = ','
QUOTE_CHAR = '"'


def tokenize_line(line: str) -> List[str]:
    """
    Split one line into field values

    Args:
        line: Raw text line (may include a trailing newline)

    Returns:
        Trimmed values, always at least one (an empty line yields [""])
    """
    values = []
    current = []
    in_quotes = False

    for char in line:
        if char == QUOTE_CHAR:
            in_quotes = not in_quotes
        elif char == FIELD_SEPARATOR and not in_quotes:
            values.append(''.join(current).strip())
            current = []
        else:
            current.append(char)

    values.append(''.join(current).strip())
    return values


def split_lines(text: str) -> List[str]:
    """
    Split file text into lines on \\r\\n, \\r or \\n only

    Other Unicode line separators may appear inside quoted comments and
    stay part of their line. A final line terminator does not produce a
    trailing empty line.
    """
    lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    if lines[-1] == '':
        lines.pop()
    return lines
