"""Domain-specific exceptions for the finance tracker core."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class RecordNotFoundError(LookupError):
    """Raised when a transaction cannot be located."""


class PersistenceError(IOError):
    """Raised when the storage layer cannot read or write the saved state."""


class ParseError(ValueError):
    """Raised when an imported payload is not valid finance tracker data."""
