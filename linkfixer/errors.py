"""Exceptions raised by Link Fixer."""


class LinkFixerError(Exception):
    """Base exception for all Link Fixer errors."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f'{base_msg} (Caused by: {type(self.original_error).__name__}: {self.original_error})'
        return base_msg


class ClipboardError(LinkFixerError):
    """Base class for clipboard access errors."""
    pass


class ReadError(ClipboardError):
    """Reading the clipboard failed or is unsupported here."""
    pass


class WriteError(ClipboardError):
    """Writing the clipboard failed or is unsupported here."""
    pass


class RuleApplicationError(LinkFixerError):
    """A rewrite rule stopped making progress."""
    pass


class ConfigurationError(LinkFixerError):
    """Invalid environment configuration."""
    pass
