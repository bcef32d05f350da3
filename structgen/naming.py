"""Convert catalog identifiers to exported Go names.

Pattern: split on underscores, capitalize each segment, join.

Examples:
  users          -> Users
  user_id        -> UserID
  id_card_id     -> IDCardID
  2fa_codes      -> A2faCodes
"""

from __future__ import annotations

# Only this one acronym is fixed up
_ACRONYMS: dict[str, str] = {"Id": "ID"}

# Prepended when a name would start with a digit
DIGIT_PREFIX = "A"


def _capitalize_segment(segment: str) -> str:
    """Upper-case the first character, leave the rest untouched."""
    return segment[:1].upper() + segment[1:]


def format_name(name: str) -> str:
    """Build a Go identifier from a table or column name."""
    new_name = "".join(_capitalize_segment(s) for s in name.split("_") if s)
    for old, new in _ACRONYMS.items():
        new_name = new_name.replace(old, new)

    if new_name[:1].isdigit():
        new_name = DIGIT_PREFIX + new_name
    return new_name
