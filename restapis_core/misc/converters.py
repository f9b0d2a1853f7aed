"""
Conversion of user-supplied strings into numbers
"""

import re
from typing import Optional


NUMBER_PATTERN = re.compile(r"[-+]?[0-9]*\.?[0-9]+")


def _normalize(value: str) -> str:
    # decimal comma is accepted as well
    return value.replace(",", ".")


def is_numeric(value: Optional[str]) -> bool:
    if value is None:
        return False
    return NUMBER_PATTERN.fullmatch(_normalize(value)) is not None


def convert_to_float(value: Optional[str]) -> float:
    """
    Convert the string into a float, accepting a comma as decimal separator

    :raises ValueError: when the value is missing or is no number
    """

    if not is_numeric(value):
        raise ValueError(f"{value!r} is not numeric")
    return float(_normalize(value))
