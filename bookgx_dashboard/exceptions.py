"""Exception types raised across the pipeline."""


class BookGXError(Exception):
    """Base class for dashboard errors."""


class FetchError(BookGXError):
    """Raised when a spreadsheet source cannot be read."""


class DataQualityError(BookGXError):
    """Raised in strict parsing mode for values that cannot be cleaned."""


class AuthenticationError(BookGXError):
    """Raised when login credentials or a passcode do not match."""
