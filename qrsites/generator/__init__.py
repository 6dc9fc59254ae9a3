"""
generator — QR image generation for named sites.

Public API
──────────
SiteGenerator     — encode a site's URL and upsert its record
GenerationResult  — record + image path returned by SiteGenerator.generate()
QREncoder         — encoder interface; QRCodeEncoder is the `qrcode` backend
"""

from .encoder import QREncoder, QRCodeEncoder
from .site_generator import (
    GenerationResult,
    SiteGenerator,
    artifact_name,
    normalize_url,
)

__all__ = [
    "QREncoder",
    "QRCodeEncoder",
    "GenerationResult",
    "SiteGenerator",
    "artifact_name",
    "normalize_url",
]
