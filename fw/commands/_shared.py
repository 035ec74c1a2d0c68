"""Wspólne elementy komend fw: wczytanie importu, magazyn, wydruki rich."""

from __future__ import annotations

import argparse
import pathlib

from rich import box
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from data_model import Document
from form_import import (
    ClassifiedImport,
    ConflictResolution,
    ImportAnalysis,
    MergeMode,
    ResolutionAction,
    classify_and_validate,
    describe_import_kind,
)
from storage import DocumentStore, StorageError
from validator import ValidationError

from fw._store import get_store

console = Console()

MODE_CHOICES = [str(m) for m in MergeMode]


# ---------------------------------------------------------------------------
# Wydruki
# ---------------------------------------------------------------------------

def print_errors(errors: list[ValidationError], title: str) -> None:
    console.print(f"[red]BŁĄD[/red]  {title} — {len(errors)} błąd(ów).")
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Kod",      style="yellow", no_wrap=True)
    table.add_column("Ścieżka", style="cyan",   no_wrap=True)
    table.add_column("Komunikat")
    for e in errors:
        table.add_row(e.code, e.path, e.message)
    console.print(table)


def print_warnings(warnings: list[str]) -> None:
    if warnings:
        console.print("[yellow]Ostrzeżenia:[/yellow]")
        for w in warnings:
            console.print(f"  [yellow]·[/yellow] {w}")


def print_analysis(analysis: ImportAnalysis) -> None:
    s = analysis.summary
    table = Table(box=box.SIMPLE_HEAD, show_header=False)
    table.add_column(style="bold")
    table.add_column(justify="right")
    table.add_row("Rodzaj importu",      str(analysis.import_kind))
    table.add_row("Nowe strony",         str(s.new_pages))
    table.add_row("Nowe sekcje",         str(s.new_sections))
    table.add_row("Zastąpione sekcje",   str(s.replaced_sections))
    table.add_row("Pola w imporcie",     str(s.total_fields))
    console.print(table)

    if analysis.requires_target_page:
        console.print("[dim]Import częściowy — wymaga strony docelowej (--target-page).[/dim]")

    if analysis.conflicts:
        ct = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        ct.add_column("Klucz",       style="cyan", no_wrap=True)
        ct.add_column("Typ",         style="yellow")
        ct.add_column("Komunikat")
        ct.add_column("Sugestia",    style="dim")
        for c in analysis.conflicts:
            ct.add_row(c.key, c.type, c.message, c.suggested_action)
        console.print(ct)

    if analysis.errors:
        print_errors(analysis.errors, "Analiza importu")
    print_warnings(analysis.warnings)


def document_tree(doc: Document) -> Tree:
    root = Tree(f"[bold]{doc.name}[/bold] [dim]({doc.id}, {doc.form_type})[/dim]")
    for page in doc.pages:
        p = root.add(f"[cyan]{page.page_order}. {page.title}[/cyan] [dim]{page.id}[/dim]")
        for section in page.sections:
            s = p.add(f"{section.section_order}. {section.title} [dim]{section.id}[/dim]")
            for f in section.fields:
                req = " [red]*[/red]" if f.required else ""
                s.add(f"{f.field_order}. {f.label}{req} [dim]{f.field_type} · {f.id}[/dim]")
    return root


# ---------------------------------------------------------------------------
# Wejście
# ---------------------------------------------------------------------------

def read_import(path_str: str) -> ClassifiedImport:
    """Parsuje, klasyfikuje i waliduje plik importu; przy błędach kończy z kodem 1."""
    path = pathlib.Path(path_str)
    if not path.exists():
        console.print(f"[red]Brak pliku importu:[/red] {path}")
        raise SystemExit(1)

    report = classify_and_validate(path.read_bytes())
    if not report.is_valid:
        print_errors(report.errors, f"Import {path.name}")
        print_warnings(report.warnings)
        raise SystemExit(1)

    imp: ClassifiedImport = report.value
    console.print(
        f"[green]OK[/green]  {path.name}: [bold]{imp.kind}[/bold] "
        f"[dim]({describe_import_kind(imp.kind)})[/dim]"
    )
    print_warnings(report.warnings)
    return imp


def open_store(args: argparse.Namespace) -> DocumentStore:
    try:
        return get_store(args.store, args.store_dir)
    except Exception as e:
        console.print(f"[red]Błąd otwarcia magazynu:[/red] {e}")
        raise SystemExit(1)


def load_existing(store: DocumentStore, form_id: str | None) -> Document | None:
    """Dokument istniejący albo None, gdy nie podano id lub dokumentu nie ma."""
    if not form_id:
        return None
    try:
        if not store.exists(form_id):
            return None
        return store.load_document(form_id)
    except StorageError as e:
        console.print(f"[red]Błąd odczytu dokumentu:[/red] {e}")
        raise SystemExit(1)


def parse_resolution(text: str) -> tuple[str, ConflictResolution]:
    """'p1-s1=rename:s1-copy' → ('p1-s1', ConflictResolution(RENAME, 's1-copy'))."""
    key, sep, rhs = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Oczekiwano KLUCZ=AKCJA[:NOWE_ID], otrzymano: {text!r}")
    action, _, new_id = rhs.partition(":")
    try:
        return key, ConflictResolution(ResolutionAction(action), new_id or None)
    except ValueError:
        allowed = ", ".join(ResolutionAction)
        raise argparse.ArgumentTypeError(f"Nieznana akcja {action!r} (dozwolone: {allowed})")
