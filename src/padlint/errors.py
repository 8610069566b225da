class PadlintError(Exception):
    """Base class for every error raised by padlint."""


class ConfigurationError(PadlintError, ValueError):
    """Raised when a rule mode, option or exception tag is not recognised."""


class StructuralError(PadlintError, RuntimeError):
    """Raised when tokens and syntax nodes disagree with each other.

    This means the provider broke its contract; the current pass is aborted.
    """


class UnreachableCategoryError(PadlintError, RuntimeError):
    """Raised when a non-padded node kind is routed into category resolution."""


class SourceParseError(PadlintError, ValueError):
    """Raised when a source unit does not parse cleanly."""

    def __init__(self, message: str, row: int = 0, column: int = 0) -> None:
        super().__init__(message)
        self.row = row
        self.column = column
