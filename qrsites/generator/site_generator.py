"""
SiteGenerator — turns a (name, url) pair into a QR image plus a store record.

Pipeline: validate → normalise URL → name artifact → encode image → upsert.
The store is only touched after the image has been written successfully.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from qrsites.exceptions import StoreIOError, ValidationError
from qrsites.generator.encoder import QRCodeEncoder, QREncoder
from qrsites.store.db import RecordStore
from qrsites.store.models import SiteRecord, validate_fields

__all__ = ["GenerationResult", "SiteGenerator", "normalize_url", "artifact_name"]

logger = logging.getLogger(__name__)

_SCHEMES = ("http://", "https://")


def normalize_url(url: str) -> str:
    """Strip *url* and prefix "https://" unless it already has an http(s) scheme."""
    url = (url or "").strip()
    if not url:
        raise ValidationError("URL must not be empty")
    if not url.startswith(_SCHEMES):
        url = "https://" + url
    return url


def artifact_name(key: str) -> str:
    """Image filename for *key*, e.g. "qr_Acme.png"; unsafe characters become "_"."""
    safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)
    return f"qr_{safe}.png"


@dataclass
class GenerationResult:
    """
    Outcome of SiteGenerator.generate().

    record     — the record now stored for the site
    image_path — absolute path of the written PNG
    """
    record:     SiteRecord
    image_path: Path

    def __str__(self) -> str:
        return f"{self.record} -> {self.image_path}"


class SiteGenerator:
    """Generates QR images for named sites and records them in a RecordStore."""

    def __init__(
        self,
        store: RecordStore,
        image_dir: str,
        encoder: Optional[QREncoder] = None,
    ) -> None:
        self._store = store
        self._image_dir = Path(image_dir).expanduser()
        self._encoder = encoder or QRCodeEncoder()

    def generate(self, name: str, url: str) -> GenerationResult:
        """
        Encode *url* as a QR image for site *name* and upsert its record.

        Raises:
            ValidationError: empty name/URL or a value that breaks the line format.
            EncodingError:   the encoder failed; the store is left unchanged.
            StoreIOError:    the image directory or store file is unusable.
        """
        final_url = normalize_url(url)
        filename = artifact_name(name)
        # Reject bad input before anything is written to disk.
        validate_fields(name, final_url, filename)

        self._ensure_image_dir()
        image_path = (self._image_dir / filename).resolve()

        logger.info("Generating QR code for %r -> %s", name, final_url)
        self._encoder.encode(final_url, image_path)
        logger.info("QR image written to %s", image_path)

        record = self._store.upsert(name, final_url, filename)
        return GenerationResult(record=record, image_path=image_path)

    def _ensure_image_dir(self) -> None:
        try:
            self._image_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIOError(
                f"Cannot create image directory {self._image_dir}: {exc}"
            ) from exc
