"""Tokenizer for manufacturer option-code strings.

Option strings list codes separated by whitespace, with packages written as
``CODE ( CHILD CHILD ... )``.  A package and its children are kept together
as a single token so ``"337 ( 1G6 223 ) 5AC"`` becomes
``["337 ( 1G6 223 )", "5AC"]``.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

WHITESPACE_RE = re.compile(r"\s+")


class OptionCodeParseError(ValueError):
    """Raised when an option string has unbalanced parentheses."""


def _push(units: List[str], current: List[str]) -> None:
    token = "".join(current).strip()
    if token:
        units.append(token)


def _split_units(text: str) -> List[str]:
    units: List[str] = []
    current: List[str] = []
    depth = 0

    for position, char in enumerate(text):
        if char == "(":
            depth += 1
            current.append(char)
        elif char == ")":
            if depth == 0:
                raise OptionCodeParseError(f"Unexpected ')' at position {position} in option string {text!r}")
            depth -= 1
            current.append(char)
            if depth == 0:
                _push(units, current)
                current = []
        elif char == " " and depth == 0:
            _push(units, current)
            current = []
        else:
            current.append(char)

    if depth:
        raise OptionCodeParseError(f"Unterminated '(' in option string {text!r}")
    _push(units, current)
    return units


def _is_group(unit: str) -> bool:
    return unit.startswith("(") and unit.endswith(")")


def parse_option_string(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    text = WHITESPACE_RE.sub(" ", str(raw)).strip()
    if not text:
        return []

    units = _split_units(text)

    tokens: List[str] = []
    idx = 0
    while idx < len(units):
        unit = units[idx]
        following = units[idx + 1] if idx + 1 < len(units) else None
        if following is not None and _is_group(following):
            tokens.append(f"{unit} {following}")
            idx += 2
        else:
            tokens.append(unit)
            idx += 1
    return tokens


def flatten_option_codes(tokens: Iterable[str]) -> List[str]:
    """Every individual code in ``tokens``, package headers and children alike."""
    codes: List[str] = []
    for token in tokens:
        for code in token.replace("(", " ").replace(")", " ").split():
            if code not in codes:
                codes.append(code)
    return codes
