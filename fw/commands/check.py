"""Komenda: fw check — klasyfikuje i waliduje plik importu formularza."""

from __future__ import annotations

import argparse
import dataclasses
import json
import pathlib
import sys

from form_import import ClassifiedImport, classify_and_validate, describe_import_kind

from fw.commands._shared import console, print_errors, print_warnings


def _counts(imp: ClassifiedImport) -> str:
    pages    = imp.pages()
    sections = imp.sections() or [s for p in pages for s in p.sections]
    fields   = sum(len(s.fields) for s in sections)
    return f"{len(pages)} stron, {len(sections)} sekcji, {fields} pól"


def run(args: argparse.Namespace) -> None:
    path = pathlib.Path(args.file)
    if not path.exists():
        console.print(f"[red]Brak pliku importu:[/red] {path}")
        raise SystemExit(1)

    report = classify_and_validate(path.read_bytes())

    if args.json_output:
        out: dict = {
            "is_valid": report.is_valid,
            "kind": report.kind,
            "errors": [dataclasses.asdict(e) for e in report.errors],
            "warnings": report.warnings,
        }
        print(json.dumps(out, ensure_ascii=False, indent=2))
    elif report.is_valid:
        imp: ClassifiedImport = report.value
        console.print(
            f"[green]OK[/green]  {path.name}: [bold]{imp.kind}[/bold] — "
            f"{describe_import_kind(imp.kind)} ({_counts(imp)})."
        )
        print_warnings(report.warnings)
    else:
        print_errors(report.errors, f"Import {path.name}")
        print_warnings(report.warnings)

    if not report.is_valid:
        sys.exit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "check",
        help="Klasyfikuje i waliduje plik importu (JSON).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Rozpoznaje kształt pliku importu i waliduje go:

  full_form       { id, name, formType, pages }
  pages_only      { pages }
  sections_only   { sections }
  single_section  { id, title, fields }

Wszystkie błędy są raportowane naraz (ścieżka + komunikat).

Przykłady:
  fw check formularz.json
  fw check sekcje.json --json-output
        """,
    )
    p.add_argument("file", metavar="PLIK", help="Plik JSON z importem.")
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz raport walidacji jako JSON na stdout.",
    )
    p.set_defaults(func=run)
