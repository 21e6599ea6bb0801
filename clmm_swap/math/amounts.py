"""
Human amount <-> base unit conversion

All conversions are exact integer arithmetic scaled by 10^decimals:
- parse_amount() is for transaction-building paths and raises InvalidAmount
- parse_amount_or_zero() is for display paths and never raises
- format_amount() never raises; unparseable input renders "0"
"""

import logging
import re
from typing import Union

from ..errors import InvalidAmount

logger = logging.getLogger(__name__)

MAX_DECIMALS = 255

# Plain decimal notation only: "10", "10.5", ".5", "10."
_AMOUNT_RE = re.compile(r"^(\d*)(?:\.(\d*))?$")


def _check_decimals(decimals) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise InvalidAmount.bad_decimals(decimals)
    if decimals < 0 or decimals > MAX_DECIMALS:
        raise InvalidAmount.bad_decimals(decimals)
    return decimals


def parse_amount(human: str, decimals: int) -> int:
    """
    Parse a human-entered decimal string into base units.

    Args:
        human: Amount as typed by the user (e.g. "10", "0.5")
        decimals: Token decimals (0..255)

    Returns:
        Integer amount in base units

    Raises:
        InvalidAmount: empty, non-numeric, negative or over-precise input
    """
    decimals = _check_decimals(decimals)
    if not isinstance(human, str):
        raise InvalidAmount.not_numeric(repr(human))

    text = human.strip()
    if text.startswith("-"):
        raise InvalidAmount.negative(human)

    match = _AMOUNT_RE.match(text)
    if match is None:
        raise InvalidAmount.not_numeric(human)

    whole, fraction = match.group(1), match.group(2) or ""
    if not whole and not fraction:
        raise InvalidAmount.not_numeric(human)

    fraction = fraction.rstrip("0")
    if len(fraction) > decimals:
        raise InvalidAmount.too_precise(human, decimals)

    scale = 10 ** decimals
    whole_units = int(whole) * scale if whole else 0
    fraction_units = int(fraction.ljust(decimals, "0")) if fraction else 0
    return whole_units + fraction_units


def parse_amount_or_zero(human: str, decimals: int) -> int:
    """Display-path parse: malformed or empty input is a normal UI state, returns 0"""
    try:
        return parse_amount(human, decimals)
    except InvalidAmount as e:
        logger.debug(f"Treating amount as zero: {e.message}")
        return 0


def format_amount(raw: Union[int, str], decimals: int) -> str:
    """
    Format a base-unit integer as a minimal decimal string.

    format_amount(9_850_000_000_000_000_000, 18) == "9.85"
    """
    try:
        decimals = _check_decimals(decimals)
        if isinstance(raw, bool):
            return "0"
        if isinstance(raw, str):
            raw = int(raw.strip(), 10)
        elif not isinstance(raw, int):
            return "0"
    except (InvalidAmount, ValueError):
        return "0"

    sign = "-" if raw < 0 else ""
    value = -raw if raw < 0 else raw

    if decimals == 0:
        return f"{sign}{value}"

    whole, fraction = divmod(value, 10 ** decimals)
    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0")
    if not fraction_text:
        return f"{sign}{whole}"
    return f"{sign}{whole}.{fraction_text}"


def is_positive_amount(text: str) -> bool:
    """Check that a formatted/entered amount is a usable, strictly positive number"""
    try:
        return parse_amount(text, MAX_DECIMALS) > 0
    except InvalidAmount:
        return False
