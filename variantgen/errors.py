"""
Error taxonomy for variant generation.

Every failure is terminal for the process; the CLI maps each of these to
exit status 1.
"""


class VariantGenError(Exception):
    """Base class for all variantgen failures."""
    pass


class LoadError(VariantGenError):
    """Raised when the input table cannot be opened or read."""
    pass


class ParseError(LoadError):
    """Raised when the delimited-record syntax is invalid."""
    pass


class FormatError(LoadError):
    """Raised when the table has too few records or columns."""
    pass


class EmitError(VariantGenError):
    """Raised when the output file cannot be created or written."""
    pass


class FormatterError(VariantGenError):
    """Raised when the external source formatter is missing or fails."""

    def __init__(self, message: str, command=None, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.stderr = stderr
