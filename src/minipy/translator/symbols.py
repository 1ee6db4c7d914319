"""
MiniPy Symbol Table
===================

A flat, insertion-ordered registry of declared variable names. MiniPy
has no functions and no scopes, so a single table covers the whole
program.

A name is declared the first time it is the target of an assignment.
Names are never removed, and the declaration order is the order in
which the emitter writes the C declarations and the closing printf
calls.

Example
-------
>>> table = SymbolTable()
>>> table.declare("x")
True
>>> table.declare("x")
False
>>> table.names()
['x']
"""

import logging
from typing import Iterator, Optional

from minipy.errors import SourceLocation

logger = logging.getLogger(__name__)


class SymbolTable:
    """
    Insertion-ordered set of declared variable names.

    Each name maps to the location of its first declaration (or None
    when declared programmatically without one).
    """

    def __init__(self) -> None:
        self._symbols: dict[str, Optional[SourceLocation]] = {}

    def declare(self, name: str, location: Optional[SourceLocation] = None) -> bool:
        """
        Declare a name if it is not already present.

        Args:
            name: Variable name
            location: Where the first assignment occurs

        Returns:
            True if the name was newly declared, False if already present
        """
        if name in self._symbols:
            return False
        self._symbols[name] = location
        logger.debug("Declared symbol '%s' at %s", name, location)
        return True

    def is_declared(self, name: str) -> bool:
        """Return True if the name has been declared."""
        return name in self._symbols

    def location_of(self, name: str) -> Optional[SourceLocation]:
        """Return the location of the first declaration of a name."""
        return self._symbols.get(name)

    def names(self) -> list[str]:
        """Return all declared names in declaration order."""
        return list(self._symbols)

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def find_similar(self, name: str) -> list[str]:
        """
        Find declared names that look like a typo of the given name.

        Uses a simple edit distance heuristic, returning at most three
        suggestions in declaration order.
        """
        name_lower = name.lower()
        similar = []

        for symbol in self._symbols:
            symbol_lower = symbol.lower()
            if (
                symbol_lower == name_lower or
                abs(len(symbol) - len(name)) <= 1 and
                _edit_distance(name_lower, symbol_lower) <= 2
            ):
                similar.append(symbol)

        return similar[:3]


def _edit_distance(a: str, b: str) -> int:
    """
    Number of single-character insertions, deletions and substitutions
    that turn one name into the other.

    Keeps one row of the dynamic-programming table, sized by the
    shorter name.
    """
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for row, char_a in enumerate(a, start=1):
        current = [row]
        for col, char_b in enumerate(b, start=1):
            substitution = previous[col - 1] + (char_a != char_b)
            current.append(min(previous[col] + 1, current[col - 1] + 1, substitution))
        previous = current

    return previous[-1]
