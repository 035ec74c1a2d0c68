"""Komenda: fw apply-schema — tworzy tabelę form_document magazynu PostgreSQL."""

from __future__ import annotations

import argparse
from importlib import resources

from rich import box
from rich.console import Console
from rich.table import Table

from fw._db import get_connection

console = Console()

# Schemat jest danymi pakietu storage, więc działa także po zwykłej instalacji.
SCHEMA_RESOURCE = resources.files("storage") / "schema.sql"


def load_schema() -> str:
    return SCHEMA_RESOURCE.read_text(encoding="utf-8")


def split_statements(sql: str) -> list[str]:
    """
    Dzieli SQL na pojedyncze instrukcje, respektując bloki $$...$$
    (DO $$ BEGIN ... EXCEPTION ... END $$ dodający ograniczenie form_type).

    Instrukcja kończy się średnikiem na końcu linii poza blokiem $$.
    Linie komentarza "--" przed instrukcją są do niej doklejane; same
    komentarze na końcu pliku są pomijane.
    """
    stmts: list[str] = []
    buf:   list[str] = []
    in_dollar = False

    for line in sql.splitlines(keepends=True):
        buf.append(line)
        if line.count("$$") % 2 == 1:
            in_dollar = not in_dollar
        if not in_dollar and line.rstrip().endswith(";"):
            stmts.append("".join(buf).strip())
            buf = []

    remaining = "".join(buf).strip()
    if any(ln.strip() and not ln.lstrip().startswith("--") for ln in remaining.splitlines()):
        stmts.append(remaining)

    return stmts


def _summary(stmt: str) -> str:
    """Pierwsza linia instrukcji bez komentarzy, np. 'CREATE TABLE IF NOT EXISTS form_document ('."""
    for ln in stmt.splitlines():
        if ln.strip() and not ln.lstrip().startswith("--"):
            return ln.strip()
    return stmt


def _print_plan(stmts: list[str]) -> None:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Instrukcja")
    for i, stmt in enumerate(stmts, start=1):
        table.add_row(str(i), _summary(stmt))
    console.print(table)


def run(args: argparse.Namespace) -> None:
    stmts = split_statements(load_schema())

    if args.dry_run:
        _print_plan(stmts)
        console.print(f"[dim]--dry-run: {len(stmts)} instrukcji, nic nie wykonano.[/dim]")
        return

    try:
        conn = get_connection()
    except Exception as e:
        console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
        raise SystemExit(1)

    # autocommit: blok DO $$ ... $$ odwołuje się do tabeli utworzonej przez
    # CREATE TABLE z poprzedniej instrukcji; każda instrukcja jest idempotentna.
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            for stmt in stmts:
                cur.execute(stmt)
    except Exception as e:
        console.print(f"[red]Błąd wykonania schematu:[/red] {e}")
        conn.close()
        raise SystemExit(1)

    conn.close()
    console.print(f"[green]Schemat zastosowany:[/green] form_document ({len(stmts)} instrukcji)")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "apply-schema",
        help="Tworzy tabelę form_document w PostgreSQL (idempotentne).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Wykonuje schemat magazynu "pg" (storage/schema.sql, dołączony do pakietu)
przeciwko bazie skonfigurowanej zmiennymi PGHOST, PGPORT, PGDATABASE,
PGUSER, PGPASSWORD. Bezpieczne do wielokrotnego uruchomienia.

Przykłady:
  fw apply-schema
  fw apply-schema --dry-run
        """,
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Wypisz instrukcje schematu bez łączenia z bazą.",
    )
    p.set_defaults(func=run)
