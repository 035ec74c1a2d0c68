"""Komenda: fw show — drzewo formularza zapisanego w magazynie."""

from __future__ import annotations

import argparse

from fw.commands._shared import console, document_tree, load_existing, open_store


def run(args: argparse.Namespace) -> None:
    store = open_store(args)
    doc   = load_existing(store, args.form_id)
    if doc is None:
        console.print(f"[red]Nie znaleziono formularza:[/red] {args.form_id}")
        raise SystemExit(1)

    console.print(document_tree(doc))
    n_sections = sum(len(p.sections) for p in doc.pages)
    n_fields   = sum(len(s.fields) for _, s in doc.iter_sections())
    updated    = doc.updated_at.isoformat(timespec="seconds") if doc.updated_at else "—"
    console.print(
        f"[dim]{len(doc.pages)} stron · {n_sections} sekcji · {n_fields} pól · "
        f"status: {doc.status} · wersja {doc.version} · zmieniono: {updated}[/dim]"
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "show",
        help="Wyświetla drzewo stron, sekcji i pól formularza.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Przykład:
  fw show form-1
  fw --store pg show form-1
        """,
    )
    p.add_argument("form_id", metavar="ID", help="Identyfikator formularza w magazynie.")
    p.set_defaults(func=run)
