"""
Shared diagnostics for the Kolang front end.

Both the lexer and the parser report into one DiagnosticSink so that a
single pass over a source unit yields every lexical and syntactic problem,
in the order they were found.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Tuple

if TYPE_CHECKING:
    from .lexer.tokens import SourceLocation

logger = logging.getLogger(__name__)


class Severity(Enum):
    """How serious a diagnostic is."""
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single lexical or syntactic problem."""
    kind: Any                       # LexErrorKind or ParseErrorKind member
    message: str
    location: "SourceLocation"
    severity: Severity = Severity.ERROR
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Tuple[str, ...] = ()

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def __str__(self) -> str:
        prefix = self.severity.value
        if self.code:
            prefix += f"[{self.code}]"
        result = f"{prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class DiagnosticSink:
    """
    Ordered collector of diagnostics.

    One sink is normally shared by the lexer and parser working on the same
    source unit. Sinks are not shared between units.
    """

    def __init__(self):
        self._items: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> Diagnostic:
        """Record a diagnostic and return it."""
        if not isinstance(diagnostic, Diagnostic):
            raise TypeError(f"expected Diagnostic, got {type(diagnostic).__name__}")
        self._items.append(diagnostic)
        logger.debug("%s at %s: %s", diagnostic.code, diagnostic.location, diagnostic.message)
        return diagnostic

    def extend(self, diagnostics) -> None:
        for diagnostic in diagnostics:
            self.report(diagnostic)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.WARNING]

    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._items)

    def sorted(self) -> List[Diagnostic]:
        """Diagnostics ordered by source offset (stable for equal offsets)."""
        return sorted(self._items, key=lambda d: d.location.offset)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))

    def __getitem__(self, index):
        return self._items[index]

    def __repr__(self) -> str:
        return f"DiagnosticSink({len(self._items)} diagnostics)"
