"""
Runtime settings for qr-sites.

Defaults can be overridden through environment variables; command-line
flags take precedence over both (see qrsites.cli.main).

  QRSITES_STORE_PATH    store file path           (default: BD.txt)
  QRSITES_IMAGE_DIR     generated image directory (default: image)
  QRSITES_LOCK_TIMEOUT  store lock timeout, secs  (default: 10)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from qrsites.store.db import DEFAULT_LOCK_TIMEOUT

__all__ = ["Settings"]

_ENV_STORE_PATH   = "QRSITES_STORE_PATH"
_ENV_IMAGE_DIR    = "QRSITES_IMAGE_DIR"
_ENV_LOCK_TIMEOUT = "QRSITES_LOCK_TIMEOUT"


@dataclass
class Settings:
    """Runtime configuration shared by the CLI, store and generator."""
    store_path:   str   = "BD.txt"
    image_dir:    str   = "image"
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT   # seconds
    box_size:     int   = 10                     # pixels per QR module
    border:       int   = 4                      # quiet zone, in modules

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from *environ* (default: os.environ).

        Raises:
            ValueError: QRSITES_LOCK_TIMEOUT is not a non-negative number.
        """
        env = os.environ if environ is None else environ
        settings = cls()

        if env.get(_ENV_STORE_PATH):
            settings.store_path = env[_ENV_STORE_PATH]
        if env.get(_ENV_IMAGE_DIR):
            settings.image_dir = env[_ENV_IMAGE_DIR]

        raw_timeout = env.get(_ENV_LOCK_TIMEOUT)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ValueError(
                    f"{_ENV_LOCK_TIMEOUT} must be a number, got {raw_timeout!r}"
                ) from None
            if timeout < 0:
                raise ValueError(f"{_ENV_LOCK_TIMEOUT} must be >= 0, got {timeout}")
            settings.lock_timeout = timeout

        return settings
