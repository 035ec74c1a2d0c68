"""Komenda: fw export — eksport formularza z magazynu do pliku JSON."""

from __future__ import annotations

import argparse
import pathlib

from exporter import build_export

from fw.commands._shared import console, load_existing, open_store, print_errors


def run(args: argparse.Namespace) -> None:
    store = open_store(args)
    doc   = load_existing(store, args.form_id)
    if doc is None:
        console.print(f"[red]Nie znaleziono formularza:[/red] {args.form_id}")
        raise SystemExit(1)

    result = build_export(doc)
    if not result.is_valid:
        print_errors(result.errors, f"Eksport {doc.id}")
        raise SystemExit(1)

    out_dir = pathlib.Path(args.output)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / result.filename
    out_path.write_text(result.to_json(), encoding="utf-8")

    console.print(f"[green]Wyeksportowano[/green] {doc.id} → {out_path}")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "export",
        help="Eksportuje formularz do pliku JSON (format wymiany).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Buduje minimalny dokument eksportu: bez stanu UI, znaczników czasu,
statusu i wersji. Wynik jest ponownie walidowany jako pełny formularz —
np. strona bez sekcji blokuje eksport.

Nazwa pliku: form-<slug nazwy>-<YYYY-MM-DDTHH-MM-SS>.json

Przykłady:
  fw export form-1
  fw export form-1 --output eksporty/
        """,
    )
    p.add_argument("form_id", metavar="ID", help="Identyfikator formularza w magazynie.")
    p.add_argument(
        "--output", "-o",
        default=".",
        metavar="KATALOG",
        help="Katalog docelowy (domyślnie: bieżący).",
    )
    p.set_defaults(func=run)
