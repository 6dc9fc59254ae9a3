"""
Project-wide custom exception hierarchy.
All modules raise subclasses of QRSitesError — never bare Exception.
"""

__all__ = [
    "QRSitesError",
    "StoreError",
    "ValidationError",
    "StoreIOError",
    "StoreTimeoutError",
    "ParseError",
    "GeneratorError",
    "EncodingError",
]


class QRSitesError(Exception):
    """Root exception for all qr-sites errors."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(QRSitesError):
    """Base class for record store errors."""


class ValidationError(StoreError):
    """Raised when a record field is missing or would corrupt the line format."""


class StoreIOError(StoreError):
    """Raised when the store file cannot be read, written or locked."""


class StoreTimeoutError(StoreIOError):
    """Raised when the store lock is not acquired within the configured timeout."""


class ParseError(StoreError):
    """Raised when a persisted line does not split into exactly three fields."""

    def __init__(self, message: str, line: str = "", lineno: int = 0) -> None:
        super().__init__(message)
        self.line = line
        self.lineno = lineno


# ── Generator ─────────────────────────────────────────────────────────────────

class GeneratorError(QRSitesError):
    """Base class for QR generation errors."""


class EncodingError(GeneratorError):
    """Raised when the QR encoder fails to produce the image artifact."""
