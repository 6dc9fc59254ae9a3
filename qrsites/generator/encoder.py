"""QR image encoders used by SiteGenerator."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import qrcode
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError

from qrsites.exceptions import EncodingError

__all__ = ["QREncoder", "QRCodeEncoder"]

logger = logging.getLogger(__name__)


class QREncoder(ABC):
    """
    Turns a string into a QR image file.
    SiteGenerator depends only on this interface.
    """

    @abstractmethod
    def encode(self, data: str, path: Path) -> None:
        """
        Write a QR image encoding *data* to *path*.

        Raises:
            EncodingError: the image could not be produced or saved.
        """
        ...


class QRCodeEncoder(QREncoder):
    """PNG encoder backed by the `qrcode` library (Pillow image factory)."""

    def __init__(self, box_size: int = 10, border: int = 4) -> None:
        self.box_size = box_size
        self.border = border

    def encode(self, data: str, path: Path) -> None:
        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
        )
        try:
            qr.add_data(data)
            qr.make(fit=True)
            img = qr.make_image(fill_color="black", back_color="white")
            img.save(str(path))
        except (OSError, ValueError, DataOverflowError) as exc:
            raise EncodingError(f"Cannot encode QR image {path}: {exc}") from exc
        logger.debug("Encoded %d chars into %s (version %s)",
                     len(data), path, qr.version)
