"""
RecordStore — flat-file persistence for generated QR code records.

Usage::

    store = RecordStore("BD.txt")

    # Insert or replace the record for a site (moves it to the end)
    store.upsert("Acme", "https://acme.test", "qr_Acme.png")

    # Read everything back in file order
    for rec in store.load():
        print(rec.key, rec.url, rec.artifact)

File format: one record per line, "<key> / <url> / <artifact>", with a
trailing newline after the last line. The file and its parent directory are
created on the first upsert.
"""

import logging
import os
import shutil
import tempfile
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

try:
    import fcntl
except ImportError:  # Windows: no advisory file locks, thread lock only
    fcntl = None

from qrsites.exceptions import ParseError, StoreIOError, StoreTimeoutError
from qrsites.store.models import SEPARATOR, SiteRecord, key_of, validate_fields

__all__ = ["RecordStore", "DEFAULT_LOCK_TIMEOUT"]

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 10.0
# Interval between non-blocking flock attempts while waiting for another writer
_LOCK_POLL_INTERVAL = 0.05


class RecordStore:
    """
    Deduplicated, human-readable store of (key, url, artifact) triples.

    Every upsert is a read-modify-write of the whole file. The sequence runs
    under an in-process lock plus an advisory flock on "<path>.lock", so
    concurrent writers (threads or processes) never lose each other's update.
    The new content is written to a temporary file and atomically renamed
    over the store.
    """

    def __init__(
        self,
        path: str,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
        strict: bool = False,
    ) -> None:
        if lock_timeout < 0:
            raise ValueError(f"lock_timeout must be >= 0, got {lock_timeout}")
        self._path = Path(path).expanduser()
        self._lock_path = self._path.with_name(self._path.name + ".lock")
        self._lock_timeout = lock_timeout
        self._strict = strict
        self._thread_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ── Internal helpers ──────────────────────────────────────────────────

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold the writer lock for the duration of the block."""
        deadline = time.monotonic() + self._lock_timeout
        if not self._thread_lock.acquire(timeout=self._lock_timeout):
            raise StoreTimeoutError(
                f"Timed out after {self._lock_timeout}s waiting for {self._path}"
            )
        try:
            if fcntl is None:
                yield
                return

            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                lock_file = open(self._lock_path, "a")
            except OSError as exc:
                raise StoreIOError(f"Cannot open lock file {self._lock_path}: {exc}") from exc

            try:
                while True:
                    try:
                        fcntl.flock(lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
                        break
                    except BlockingIOError:
                        if time.monotonic() >= deadline:
                            raise StoreTimeoutError(
                                f"Timed out after {self._lock_timeout}s waiting "
                                f"for file lock {self._lock_path}"
                            )
                        time.sleep(_LOCK_POLL_INTERVAL)
                    except OSError as exc:
                        raise StoreIOError(f"Cannot lock {self._lock_path}: {exc}") from exc

                logger.debug("Acquired store lock %s", self._lock_path)
                try:
                    yield
                finally:
                    fcntl.flock(lock_file, fcntl.LOCK_UN)
            finally:
                lock_file.close()
        finally:
            self._thread_lock.release()

    def _read_text(self) -> str:
        """Return the raw store content; a missing file reads as empty."""
        try:
            return self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as exc:
            raise StoreIOError(f"Cannot read {self._path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise StoreIOError(f"{self._path} is not valid UTF-8: {exc}") from exc

    def _read_lines(self) -> list[str]:
        """Return the non-blank lines of the store, unmodified otherwise."""
        return [line for line in self._read_text().splitlines() if line.strip()]

    def _write_lines(self, lines: list[str]) -> None:
        """Replace the store content with *lines*, one per line."""
        data = "".join(line + "\n" for line in lines)
        tmp_path: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            if self._path.exists():
                shutil.copymode(self._path, tmp_path)
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise StoreIOError(f"Cannot write {self._path}: {exc}") from exc
        logger.debug("Wrote %d lines to %s", len(lines), self._path)

    # ── Public API ────────────────────────────────────────────────────────

    def load(self) -> list[SiteRecord]:
        """
        Return all persisted records in file order.

        Blank and whitespace-only lines are ignored. A line that does not
        split into exactly three fields is skipped with a warning, or raises
        ParseError when the store was opened with strict=True.

        Returns:
            List of SiteRecord; empty if the store file does not exist.

        Raises:
            StoreIOError: the file exists but cannot be read.
            ParseError:   malformed line in strict mode.
        """
        records: list[SiteRecord] = []
        for lineno, line in enumerate(self._read_text().splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(SiteRecord.from_line(line, lineno=lineno))
            except ParseError:
                if self._strict:
                    raise
                logger.warning("Skipping malformed line %d in %s: %r",
                               lineno, self._path, line)
        return records

    def upsert(self, key: str, url: str, artifact: str) -> SiteRecord:
        """
        Insert or replace the record for *key* and move it to the end.

        Lines for other keys keep their relative order; lines that cannot be
        parsed are kept verbatim. A line only counts as a record for *key*
        when it contains the separator, so a bare "A" line survives an upsert
        of "A" while "A / x" is replaced. The file is rewritten as a whole.

        Returns:
            The stored SiteRecord.

        Raises:
            ValidationError:   empty field, separator or line break in a field.
            StoreIOError:      the store cannot be read, written or locked.
            StoreTimeoutError: another writer held the lock past lock_timeout.
        """
        validate_fields(key, url, artifact)
        record = SiteRecord(key=key, url=url, artifact=artifact)

        with self._locked():
            lines = self._read_lines()
            kept = [
                line for line in lines
                if not (SEPARATOR in line and key_of(line) == key)
            ]
            replaced = len(lines) - len(kept)
            kept.append(record.to_line())
            self._write_lines(kept)

        if replaced:
            logger.info("Replaced record %r in %s", key, self._path)
        else:
            logger.info("Added record %r to %s", key, self._path)
        return record
