"""qr-sites — QR code generation with a flat-file record store."""

__version__ = "0.1.0"
