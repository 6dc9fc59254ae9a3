"""
CLI entry point for qr-sites.

Usage
─────
  # Generate (or regenerate) the QR code for a site
  python -m qrsites generate --name Acme --url acme.test

  # List stored records
  python -m qrsites list
  python -m qrsites --store ./data/BD.txt list --strict

Subcommands are implemented as standalone functions (cmd_generate, cmd_list)
so they can be unit-tested without invoking argparse.
"""

import argparse
import logging
import sys
from typing import Optional

from qrsites.config import Settings
from qrsites.exceptions import QRSitesError
from qrsites.generator import GenerationResult, QRCodeEncoder, SiteGenerator
from qrsites.store.db import RecordStore

__all__ = ["build_parser", "cmd_generate", "cmd_list", "main"]

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    """
    Build and return the top-level argument parser.

    Subcommands: generate | list
    """
    parser = argparse.ArgumentParser(
        prog="qr-sites",
        description="Generate QR codes for named sites and keep a flat-file record of them",
    )
    parser.add_argument(
        "--store",
        default=None,
        metavar="PATH",
        help="Record store file (default: $QRSITES_STORE_PATH or BD.txt)",
    )
    parser.add_argument(
        "--image-dir",
        default=None,
        dest="image_dir",
        metavar="DIR",
        help="Directory for generated images (default: $QRSITES_IMAGE_DIR or image)",
    )
    parser.add_argument(
        "--lock-timeout",
        default=None,
        type=float,
        dest="lock_timeout",
        metavar="SECONDS",
        help="Maximum wait for the store lock (default: $QRSITES_LOCK_TIMEOUT or 10)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable verbose debug logging",
    )

    sub = parser.add_subparsers(dest="subcommand")

    # ── generate ──────────────────────────────────────────────────────────
    gen = sub.add_parser("generate", help="Generate a QR code and record it")
    gen.add_argument(
        "--name",
        required=True,
        metavar="NAME",
        help="Site name (record key)",
    )
    gen.add_argument(
        "--url",
        required=True,
        metavar="URL",
        help="Target URL; https:// is added when no http(s) scheme is given",
    )

    # ── list ──────────────────────────────────────────────────────────────
    lst = sub.add_parser("list", help="List stored records")
    lst.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Fail on malformed store lines instead of skipping them",
    )

    return parser


# ── Command implementations ───────────────────────────────────────────────────


def cmd_generate(generator: SiteGenerator, name: str, url: str) -> GenerationResult:
    """Generate the QR image for *name* and print the stored record."""
    result = generator.generate(name, url)
    print(f"Saved  → {result.record}")
    print(f"Image  → {result.image_path}")
    return result


def cmd_list(store: RecordStore) -> None:
    """Print stored records to stdout."""
    records = store.load()
    if not records:
        print("0 records found.")
        return
    for rec in records:
        print(f"{rec.key:<25} {rec.url:<45} {rec.artifact}")


# ── Entry point ───────────────────────────────────────────────────────────────


def _settings_from_args(ns: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if ns.store:
        settings.store_path = ns.store
    if ns.image_dir:
        settings.image_dir = ns.image_dir
    if ns.lock_timeout is not None:
        if ns.lock_timeout < 0:
            raise ValueError(f"--lock-timeout must be >= 0, got {ns.lock_timeout}")
        settings.lock_timeout = ns.lock_timeout
    return settings


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point. Returns exit code."""
    parser = build_parser()
    ns = parser.parse_args(argv)

    level = logging.DEBUG if ns.debug else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")

    if ns.subcommand is None:
        parser.print_help()
        return 0

    try:
        settings = _settings_from_args(ns)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    store = RecordStore(
        settings.store_path,
        lock_timeout=settings.lock_timeout,
        strict=getattr(ns, "strict", False),
    )

    try:
        if ns.subcommand == "list":
            cmd_list(store=store)
            return 0

        if ns.subcommand == "generate":
            generator = SiteGenerator(
                store,
                settings.image_dir,
                encoder=QRCodeEncoder(box_size=settings.box_size, border=settings.border),
            )
            cmd_generate(generator, name=ns.name, url=ns.url)
            return 0
    except QRSitesError as exc:
        logger.debug("%s failed", ns.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
