"""
store — flat-file persistence layer for generated QR code records.

Public API
──────────
SiteRecord   — dataclass representing one stored line
RecordStore  — load / upsert interface over the store file
"""

from qrsites.store.models import SEPARATOR, SiteRecord, validate_fields
from qrsites.store.db import RecordStore

__all__ = ["SEPARATOR", "SiteRecord", "RecordStore", "validate_fields"]
