import string

COLUMN_LETTERS = string.ascii_uppercase


class OutOfRangeError(ValueError):
    """Raised when a cell position cannot be written as a one or two letter address."""


def column_letters(col: int) -> str:
    """Convert a zero-based column index to 'A'..'Z' or 'AA'..'YZ'.

    Only two-letter columns are supported; index 676 (26 * 26) and above
    raise OutOfRangeError.
    """
    if col < 0:
        raise OutOfRangeError(f"Column index must not be negative: {col}")
    size = len(COLUMN_LETTERS)
    offset = col // size
    if offset == 0:
        return COLUMN_LETTERS[col]
    if offset < size:
        return COLUMN_LETTERS[offset - 1] + COLUMN_LETTERS[col - size * offset]
    raise OutOfRangeError(f"Cell column out of range: {col}")


def cell_address(row: int, col: int) -> str:
    """Render zero-based (row, col) as a one-based address, e.g. (5, 27) -> 'AB6'."""
    if row < 0:
        raise OutOfRangeError(f"Row index must not be negative: {row}")
    return f"{column_letters(col)}{row + 1}"
