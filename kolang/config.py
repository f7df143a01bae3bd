"""
Front-end configuration for the Kolang lexer and parser.

A single frozen settings object is passed explicitly to every component;
there is no process-wide mutable configuration.
"""

from dataclasses import dataclass, replace as _replace


@dataclass(frozen=True)
class FrontendConfig:
    """
    Settings shared by the lexer and the parser.

    Attributes:
        max_nesting_depth: Maximum statement/expression nesting before the
            parser reports NESTING_TOO_DEEP instead of recursing further.
        keep_comments: Emit LINE_COMMENT/BLOCK_COMMENT tokens instead of
            discarding comments. The parser skips them either way.
    """
    max_nesting_depth: int = 64
    keep_comments: bool = False

    def __post_init__(self):
        if not isinstance(self.max_nesting_depth, int) or isinstance(self.max_nesting_depth, bool):
            raise TypeError(
                f"max_nesting_depth must be an int, got {type(self.max_nesting_depth).__name__}"
            )
        if self.max_nesting_depth < 1:
            raise ValueError(f"max_nesting_depth must be at least 1, got {self.max_nesting_depth}")

    def replace(self, **changes) -> "FrontendConfig":
        """Return a copy with the given fields changed."""
        return _replace(self, **changes)


DEFAULT_CONFIG = FrontendConfig()
