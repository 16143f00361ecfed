"""Free-text entry parser.

Turns what a person types into the list ("Milk (2 gallons)", "Eggs x12",
"Apples 2 lbs", "3 onions") into a name and an optional free-text quantity.
Patterns are tried in a fixed order and the first match wins:

  1. parenthetical suffix   "Milk (2 gallons)"  -> Milk / 2 gallons
  2. x-count suffix         "Eggs x12"          -> Eggs / 12
  3. trailing number+unit   "Apples 2 lbs"      -> Apples / 2 lbs
  4. leading number+unit    "2 dozen eggs"      -> eggs / 2 dozen

Anything else is a bare name. Stateless, never raises.
"""
from __future__ import annotations
import re
from typing import NamedTuple, Optional

from grocery.utilities.constants import LEADING_UNITS, TRAILING_UNITS

__all__ = ["ParsedEntry", "parse_item_input"]

_NUMBER = r"\d+(?:\.\d+)?"

_PAREN_RE = re.compile(r"^(.+?)\s*\(([^)]+)\)$")
# Whitespace before the x keeps words like "Wax 2" out of this pattern
_X_COUNT_RE = re.compile(rf"^(.+?)\s+x\s*({_NUMBER})$")
_TRAILING_RE = re.compile(
    rf"^(.+?)\s+({_NUMBER}(?:\s*(?:{'|'.join(TRAILING_UNITS)}))?)$",
    re.IGNORECASE,
)
_LEADING_RE = re.compile(
    rf"^({_NUMBER}(?:\s+(?:{'|'.join(LEADING_UNITS)}))?)\s+(.+)$",
    re.IGNORECASE,
)


class ParsedEntry(NamedTuple):
    name: str
    quantity: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.name


def parse_item_input(text: Optional[str]) -> ParsedEntry:
    """Split a raw entry into (name, quantity). Empty input gives an empty name."""
    trimmed = (text or "").strip()
    if not trimmed:
        return ParsedEntry("")

    m = _PAREN_RE.match(trimmed)
    if m:
        return ParsedEntry(m.group(1).strip(), m.group(2).strip())

    m = _X_COUNT_RE.match(trimmed)
    if m:
        return ParsedEntry(m.group(1).strip(), m.group(2))

    m = _TRAILING_RE.match(trimmed)
    if m and m.group(1).strip():
        return ParsedEntry(m.group(1).strip(), m.group(2).strip())

    m = _LEADING_RE.match(trimmed)
    if m:
        return ParsedEntry(m.group(2).strip(), m.group(1).strip())

    return ParsedEntry(trimmed)
