import math
from decimal import Decimal
from typing import Optional

from .types import CellValue, MatchOutcome, Number, SearchConfig, SearchMode, Text


def render_number(number: float) -> str:
    """Render a cell number the way spreadsheet tools print doubles.

    Magnitudes in [1e-3, 1e7) and zero use plain decimals ('123.0', '0.001');
    anything else uses one leading digit and an exponent ('1.0E7', '1.5E-5').
    """
    number = float(number)
    if math.isnan(number):
        return 'NaN'
    if math.isinf(number):
        return 'Infinity' if number > 0 else '-Infinity'
    magnitude = abs(number)
    if magnitude == 0 or 1e-3 <= magnitude < 1e7:
        # repr stays in positional form across this range
        return repr(number)
    sign, digits, exponent = Decimal(repr(number)).as_tuple()
    digits = ''.join(str(d) for d in digits)
    fraction = digits[1:].rstrip('0') or '0'
    return f"{'-' if sign else ''}{digits[0]}.{fraction}E{len(digits) + exponent - 1}"


def render_value(value: CellValue) -> Optional[str]:
    """Return the string a cell is matched against, or None for cells that never match."""
    if isinstance(value, Text):
        return value.text
    if isinstance(value, Number):
        # 123 -> '123.0', the same text for integer and float storage
        return render_number(value.number)
    return None


def matches(config: SearchConfig, rendered: str) -> bool:
    if config.mode is SearchMode.FUZZY:
        # Plain containment; the word is only read as a regex when replacing
        return config.word in rendered
    return rendered == config.word


def replace(config: SearchConfig, rendered: str) -> str:
    if config.mode is SearchMode.STRICTLY:
        return config.replacement
    replacement = config.replacement
    return config.pattern.sub(lambda _m: replacement, rendered)


def evaluate(config: SearchConfig, value: CellValue) -> Optional[MatchOutcome]:
    rendered = render_value(value)
    if rendered is None or not matches(config, rendered):
        return None
    if not config.replacing:
        return MatchOutcome(value=rendered)
    return MatchOutcome(value=rendered, replacement=replace(config, rendered))
