"""
Module: common.labels

Purpose:
    Positional option labels. Heading lists are labelled with Roman
    numerals (i, ii, iii...), every other answer bank with letters
    (A, B, C...). Labels are always derived from position, never stored.

Key Functions:
    - to_roman(): 3 -> "III"
    - from_roman(): "iii" -> 3, None when the text is not a numeral
    - letter_label(): 0 -> "A"
    - option_label(): Label for an index under a group type
    - label_position(): Inverse of option_label
"""

from __future__ import annotations

import re
from typing import Optional

_ROMAN_TABLE = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)

_ROMAN_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}
_ROMAN_RE = re.compile(r"^[IVXLCDM]+$")


def to_roman(number: int) -> str:
    """
    Convert a positive integer to an upper-case Roman numeral.

    Args:
        number: Value >= 1

    Returns:
        Roman numeral string

    Raises:
        ValueError: If number < 1
    """
    if number < 1:
        raise ValueError(f"Roman numerals start at 1: {number}")
    result = []
    for value, numeral in _ROMAN_TABLE:
        count, number = divmod(number, value)
        result.append(numeral * count)
    return "".join(result)


def from_roman(text: str) -> Optional[int]:
    """
    Parse a Roman numeral, case-insensitively.

    Only canonical numerals are accepted ("iiii" is rejected), so a
    heading text that happens to be made of I/V/X letters is not
    mistaken for a label unless it is written the standard way.

    Args:
        text: Candidate numeral

    Returns:
        Integer value, or None if text is not a canonical numeral
    """
    candidate = (text or "").strip().upper()
    if not candidate or not _ROMAN_RE.match(candidate):
        return None
    total = 0
    previous = 0
    for char in reversed(candidate):
        value = _ROMAN_VALUES[char]
        if value < previous:
            total -= value
        else:
            total += value
            previous = value
    if total < 1 or to_roman(total) != candidate:
        return None
    return total


def letter_label(index: int) -> str:
    """0 -> "A", 25 -> "Z", 26 -> "AA"."""
    if index < 0:
        raise ValueError(f"Label index cannot be negative: {index}")
    label = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def option_label(group_type, index: int) -> str:
    """
    Positional label for the option at `index`.

    Args:
        group_type: GroupType (or None for plain letters)
        index: 0-based option position

    Returns:
        Lower-case Roman numeral for heading lists, letter otherwise
    """
    if group_type is not None and group_type.uses_roman_labels:
        return to_roman(index + 1).lower()
    return letter_label(index)


def label_position(group_type, label: str) -> Optional[int]:
    """
    Inverse of option_label.

    Returns:
        0-based position, or None if the label is not valid for the type
    """
    text = (label or "").strip()
    if not text:
        return None
    if group_type is not None and group_type.uses_roman_labels:
        value = from_roman(text)
        return value - 1 if value is not None else None
    if not text.isalpha() or not text.isascii():
        return None
    position = 0
    for char in text.upper():
        position = position * 26 + (ord(char) - ord("A") + 1)
    return position - 1
