"""
Per-run translation state shared by the lexer and the parser.
"""

from dataclasses import dataclass, field

from minipy.translator.errors import TranslationErrorCollector
from minipy.translator.symbols import SymbolTable


@dataclass
class TranslationContext:
    """
    State for one translation run.

    Attributes:
        symbols: Variables declared so far, in declaration order
        errors: Non-fatal errors recorded so far, in order of occurrence
    """
    symbols: SymbolTable = field(default_factory=SymbolTable)
    errors: TranslationErrorCollector = field(default_factory=TranslationErrorCollector)

    def error_count(self) -> int:
        return self.errors.error_count()
