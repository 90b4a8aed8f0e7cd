"""
CSV line parser.

Splits a single CSV line into trimmed fields, keeping commas that sit
between double quotes.
"""

from typing import List


def parse_csv_line(line: str) -> List[str]:
    """
    Tokenize one CSV line.

    A double quote toggles the "inside quotes" state and is dropped from the
    output, so an escaped quote ("") inside a quoted field cannot be
    represented. An unbalanced quote is not an error: the end of the line
    always closes the final field.

    Args:
        line: One line of CSV text, without its line terminator

    Returns:
        Field values with surrounding whitespace removed.
        An empty line yields [""]; N bare commas yield N + 1 empty fields.
    """
    fields = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields
