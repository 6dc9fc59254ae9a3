"""Data models and line codec for the store module."""

from dataclasses import dataclass

from qrsites.exceptions import ParseError, ValidationError

__all__ = ["SEPARATOR", "SiteRecord", "validate_fields", "key_of"]

# Field separator of the store line format: "<key> / <url> / <artifact>"
SEPARATOR = " / "


def _has_line_break(value: str) -> bool:
    # Any boundary str.splitlines() honours, including \x0b, \x85 and \u2028
    return value.splitlines() != [value]


def validate_fields(key: str, url: str, artifact: str) -> None:
    """
    Reject values that cannot be stored unambiguously.

    A record is accepted only if its rendered line parses back to the same
    three fields, so a key ending in " /" or an artifact starting with "/ "
    is rejected even though neither contains the separator itself.

    Raises:
        ValidationError: empty key/url/artifact, a field containing the
                         separator or a line break, or fields that would
                         re-parse as a different record.
    """
    if not key or not key.strip():
        raise ValidationError("Site name must not be empty")
    if not url:
        raise ValidationError("URL must not be empty")
    if not artifact:
        raise ValidationError("Artifact filename must not be empty")

    for name, value in (("key", key), ("url", url), ("artifact", artifact)):
        if SEPARATOR in value:
            raise ValidationError(
                f"{name} {value!r} contains the field separator {SEPARATOR!r}"
            )
        if _has_line_break(value):
            raise ValidationError(f"{name} {value!r} contains a line break")

    record = SiteRecord(key=key, url=url, artifact=artifact)
    try:
        parsed = SiteRecord.from_line(record.to_line())
    except ParseError:
        parsed = None
    if parsed != record:
        raise ValidationError(
            f"Fields {key!r}, {url!r}, {artifact!r} do not survive the "
            f"{SEPARATOR!r} line format unchanged"
        )


def key_of(line: str) -> str:
    """Return the key segment of *line* (text before the first separator)."""
    return line.split(SEPARATOR, 1)[0]


@dataclass(frozen=True)
class SiteRecord:
    """
    One stored QR code.

    Fields
    ──────
    key      — site name, unique within the store
    url      — scheme-prefixed target URL encoded in the QR image
    artifact — filename of the generated image, e.g. "qr_Acme.png"
    """
    key:      str
    url:      str
    artifact: str

    def to_line(self) -> str:
        """Render the record in the store line format (no trailing newline)."""
        return SEPARATOR.join((self.key, self.url, self.artifact))

    @classmethod
    def from_line(cls, line: str, lineno: int = 0) -> "SiteRecord":
        """
        Parse one store line.

        Raises:
            ParseError: the line does not split into exactly three fields.
        """
        fields = line.rstrip("\r\n").split(SEPARATOR)
        if len(fields) != 3:
            raise ParseError(
                f"Line {lineno}: expected 3 fields, got {len(fields)}: {line!r}",
                line=line,
                lineno=lineno,
            )
        return cls(key=fields[0], url=fields[1], artifact=fields[2])

    def __str__(self) -> str:
        return self.to_line()
