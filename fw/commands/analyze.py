"""Komenda: fw analyze — analiza konfliktów importu względem zapisanego formularza."""

from __future__ import annotations

import argparse
import sys

from form_import import MergeMode, analyze

from fw.commands._shared import (
    MODE_CHOICES,
    console,
    load_existing,
    open_store,
    parse_resolution,
    print_analysis,
    read_import,
)


def run(args: argparse.Namespace) -> None:
    imp      = read_import(args.file)
    store    = open_store(args)
    existing = load_existing(store, args.form)

    if args.form and existing is None:
        console.print(f"[dim]Formularz {args.form} nie istnieje — import utworzy nowy.[/dim]")

    analysis = analyze(
        imp,
        existing,
        MergeMode(args.mode),
        target_page_id=args.target_page,
        resolutions=dict(args.resolve or []),
    )
    print_analysis(analysis)

    if analysis.can_proceed:
        console.print("[green]Można kontynuować.[/green]")
    else:
        console.print("[red]Import zablokowany — popraw błędy lub rozstrzygnij konflikty.[/red]")
        sys.exit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "analyze",
        help="Analizuje konflikty importu względem formularza w magazynie.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Porównuje import z zapisanym formularzem (po identyfikatorach stron i sekcji)
i wypisuje podsumowanie: nowe strony, nowe sekcje, sekcje zastąpione, konflikty.

Przykłady:
  fw analyze formularz.json --form form-1 --mode append
  fw analyze sekcje.json --form form-1 --mode replace-matching --target-page p1
        """,
    )
    add_merge_arguments(p)
    p.set_defaults(func=run)


def add_merge_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("file", metavar="PLIK", help="Plik JSON z importem.")
    p.add_argument("--form", "-f", default=None, metavar="ID", help="Identyfikator formularza w magazynie.")
    p.add_argument(
        "--mode", "-m",
        choices=MODE_CHOICES,
        default=str(MergeMode.APPEND),
        help="Polityka scalania (domyślnie: append).",
    )
    p.add_argument(
        "--target-page", "-t",
        default=None,
        metavar="PAGE_ID",
        help="Strona docelowa dla importu sekcji.",
    )
    p.add_argument(
        "--resolve", "-r",
        action="append",
        type=parse_resolution,
        metavar="KLUCZ=AKCJA[:NOWE_ID]",
        help="Rozstrzygnięcie konfliktu, np. p1-s1=overwrite lub p1-s1=rename:s1b (wielokrotnie).",
    )
