"""Komenda: fw import — scala plik importu z formularzem i zapisuje wynik."""

from __future__ import annotations

import argparse

from form_import import ImportModeError, MergeMode, analyze, merge
from validator import ImportKind
from storage import StorageError

from fw.commands._shared import (
    console,
    document_tree,
    load_existing,
    open_store,
    print_analysis,
    read_import,
)
from fw.commands.analyze import add_merge_arguments


def run(args: argparse.Namespace) -> None:
    imp   = read_import(args.file)
    store = open_store(args)
    form_id = args.form or (imp.data.id if imp.kind is ImportKind.FULL_FORM else None)
    existing = load_existing(store, form_id)

    mode        = MergeMode(args.mode)
    resolutions = dict(args.resolve or [])

    analysis = analyze(imp, existing, mode, args.target_page, resolutions)
    print_analysis(analysis)
    if not analysis.can_proceed:
        console.print("[red]Import zablokowany.[/red]")
        raise SystemExit(1)

    try:
        result = merge(imp, existing, mode, args.target_page, resolutions)
    except ImportModeError as e:
        console.print(f"[red]Niedozwolony tryb scalania:[/red] {e}")
        raise SystemExit(1)

    if args.dry_run:
        console.print(document_tree(result))
        console.print("[dim]--dry-run: nic nie zapisano.[/dim]")
        return

    try:
        store.save_document(result)
    except StorageError as e:
        console.print(f"[red]Błąd zapisu:[/red] {e}")
        raise SystemExit(1)

    console.print(
        f"[green]Zapisano[/green] formularz [bold]{result.id}[/bold] "
        f"({len(result.pages)} stron)."
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "import",
        help="Scala plik importu z formularzem w magazynie i zapisuje wynik.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Polityki scalania:

  overwrite         cały formularz zastępowany importem (tylko pełny formularz)
  append            nowe strony/sekcje dopisywane, kolizje sekcji pomijane
  replace-matching  kolizje sekcji zastępowane treścią z importu
                    (pozycja sekcji zachowana)

Import sekcji (sections_only / single_section) trafia na --target-page,
a gdy jej brak — na nową stronę "Imported Sections".

Przykłady:
  fw import formularz.json --mode overwrite
  fw import sekcje.json --form form-1 --target-page p1 --mode append
  fw import strony.json --form form-1 --resolve p1-s1=overwrite
  fw import sekcje.json --form form-1 -t p1 --dry-run
        """,
    )
    add_merge_arguments(p)
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Pokaż wynik scalania bez zapisu.",
    )
    p.set_defaults(func=run)
