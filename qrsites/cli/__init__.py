"""
cli — command-line interface for qr-sites.

Entry points
────────────
  python -m qrsites   (via qrsites/__main__.py)
  qr-sites            (via pyproject.toml [project.scripts])

Subcommands: generate | list
"""

from qrsites.cli.main import build_parser, cmd_generate, cmd_list, main

__all__ = ["build_parser", "cmd_generate", "cmd_list", "main"]
