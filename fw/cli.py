"""
fw — narzędzie CLI dla formweave (import / scalanie / eksport formularzy).

Użycie:
  fw [--store file|pg] [--store-dir KATALOG] [-v] <komenda> [opcje]

Komendy:
  check         Klasyfikuje i waliduje plik importu.
  analyze       Analizuje konflikty importu względem zapisanego formularza.
  import        Scala import z formularzem i zapisuje wynik.
  export        Eksportuje formularz do pliku JSON (format wymiany).
  show          Wyświetla drzewo formularza.
  apply-schema  Tworzy tabelę form_document w PostgreSQL (idempotentne).
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

# Windows: terminal może używać cp1252, więc wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from fw._store import STORE_KINDS
from fw.commands import analyze as cmd_analyze
from fw.commands import apply_schema as cmd_apply_schema
from fw.commands import check as cmd_check
from fw.commands import export as cmd_export
from fw.commands import import_form as cmd_import
from fw.commands import show as cmd_show


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fw",
        description="formweave — import, scalanie i eksport formularzy.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="fw 0.1.0"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Logowanie szczegółowe (DEBUG).",
    )
    parser.add_argument(
        "--store",
        choices=STORE_KINDS,
        default=None,
        help="Magazyn dokumentów (domyślnie: $FORMWEAVE_STORE lub file).",
    )
    parser.add_argument(
        "--store-dir",
        default=None,
        metavar="KATALOG",
        help="Katalog magazynu plikowego (domyślnie: $FORMWEAVE_STORE_DIR lub ./forms).",
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_check.add_parser(subparsers)
    cmd_analyze.add_parser(subparsers)
    cmd_import.add_parser(subparsers)
    cmd_export.add_parser(subparsers)
    cmd_show.add_parser(subparsers)
    cmd_apply_schema.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    args.func(args)


if __name__ == "__main__":
    main()
