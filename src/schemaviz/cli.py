"""Command line interface for SchemaViz."""

import logging
import sys
from collections.abc import Iterable
from dataclasses import asdict
from json import dumps
from pathlib import Path
from typing import Literal, TypeAlias

from cyclopts import App
from ddl import (
    ParsedSchema,
    SchemaExtractionError,
    SkippedBlock,
    extract_schema,
    load_sample_sql,
)
from diagram import (
    DiagramSession,
    KeyOwnershipPolicy,
    Relationship,
    diagram_to_html,
    infer_relationships,
    load_policy,
)
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

app = App(help="SchemaViz: SQL DDL to ER diagram")


Format: TypeAlias = Literal["table", "json"]


console = Console()
err_console = Console(stderr=True)

# Constants
SQL_EXTENSIONS = {".sql", ".txt"}


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(level: int = logging.WARNING) -> None:
    """Send library log records to stderr through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def validate_sql_location(sql_location: Path) -> None:
    """Validate that the dump exists and looks like a SQL or text file."""
    if not sql_location.exists():
        print_error(f"SQL file does not exist: {sql_location}")
        sys.exit(1)
    if sql_location.suffix.lower() not in SQL_EXTENSIONS:
        print_error(
            f"SQL file has invalid extension: {', '.join(sorted(SQL_EXTENSIONS))}",
        )
        sys.exit(1)


def read_sql(sql_location: Path) -> str:
    """Read a dump as UTF-8 text."""
    validate_sql_location(sql_location)
    print_info(f"Source file: {sql_location}")
    try:
        return sql_location.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print_error(f"Cannot read SQL file: {sql_location} ({e})")
        sys.exit(1)


def load_schema(sql_location: Path) -> ParsedSchema:
    """Extract the schema of a dump, exiting on the reportable failures."""
    sql = read_sql(sql_location)
    try:
        schema = extract_schema(sql)
    except SchemaExtractionError as e:
        print_error(str(e))
        sys.exit(1)

    if schema.skipped:
        print_info(f"Skipped {len(schema.skipped)} unparseable block(s)")
    return schema


def resolve_policy(policy_location: Path | None) -> KeyOwnershipPolicy | None:
    """Load a custom key ownership policy, or defer to the bundled one."""
    if policy_location is None:
        return None
    try:
        return load_policy(policy_location)
    except ValueError as e:
        print_error(str(e))
        sys.exit(1)


def format_schema_table(schema: ParsedSchema) -> None:
    """Format extracted tables as a rich table."""
    table = Table(title="Extracted Tables")
    table.add_column("Table", style="bold cyan")
    table.add_column("Columns", justify="right")
    table.add_column("Primary Key", style="bold yellow")
    table.add_column("Comment")

    for definition in schema.tables:
        table.add_row(
            definition.name,
            str(len(definition.columns)),
            ", ".join(definition.primary_keys),
            definition.comment,
        )

    console.print(table)
    if schema.skipped:
        format_skipped_table(schema.skipped)


def format_skipped_table(skipped: Iterable[SkippedBlock]) -> None:
    """Format skipped block diagnostics as a rich table."""
    table = Table(title="Skipped Blocks")
    table.add_column("Reason", style="bold red")
    table.add_column("Excerpt")
    for block in skipped:
        table.add_row(block.reason, block.excerpt)
    console.print(table)


def format_relationships_table(relationships: Iterable[Relationship]) -> None:
    """Format inferred relationships as a rich table."""
    table = Table(title="Inferred Relationships")
    table.add_column("From", style="bold cyan")
    table.add_column("To", style="bold cyan")
    table.add_column("Column", style="bold yellow")
    for rel in relationships:
        table.add_row(rel.source, rel.target, rel.column)
    console.print(table)


def relationship_to_dict(relationship: Relationship) -> dict[str, str]:
    """Convert a relationship to a JSON-ready mapping."""
    return {"id": relationship.id, **relationship._asdict()}


@app.command
def parse(sql_location: Path, fmt: Format = "table") -> None:
    """Extract table definitions from a DDL dump."""
    schema = load_schema(sql_location)

    if fmt == "json":
        sys.stdout.write(dumps(asdict(schema), ensure_ascii=False))
    elif fmt == "table":
        format_schema_table(schema)

    print_success(f"Extracted {len(schema.tables)} table(s)")


@app.command
def relationships(
    sql_location: Path,
    fmt: Format = "table",
    *,
    policy: Path | None = None,
) -> None:
    """Infer relationships between the tables of a DDL dump."""
    ownership_policy = resolve_policy(policy)
    schema = load_schema(sql_location)
    inferred = infer_relationships(schema.tables, ownership_policy)

    if fmt == "json":
        payload = [relationship_to_dict(rel) for rel in inferred]
        sys.stdout.write(dumps(payload, ensure_ascii=False))
    elif fmt == "table":
        format_relationships_table(inferred)

    print_success(f"Inferred {len(inferred)} relationship(s)")


@app.command
def diagram(
    sql_location: Path,
    fmt: Literal["json", "html"] = "json",
    *,
    select: str | None = None,
    policy: Path | None = None,
    title: str | None = None,
) -> None:
    """Generate an ER diagram document from a DDL dump."""
    session = DiagramSession(resolve_policy(policy))
    sql = read_sql(sql_location)
    print_info(f"Output format: {fmt}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
    ) as progress:
        progress.add_task("Generating diagram...", total=None)
        loaded = session.load(sql)

    if not loaded:
        print_error(session.error or "Failed to load schema")
        sys.exit(1)

    if select is not None:
        if select not in session.schema.table_ids:
            print_error(f"Unknown table '{select}'")
            sys.exit(1)
        session.select(select)
        print_info(f"Selected table: {select}")

    document = session.document(name=sql_location.stem)
    if fmt == "json":
        sys.stdout.write(dumps(document, ensure_ascii=False))
    elif fmt == "html":
        sys.stdout.write(diagram_to_html(document, title))

    print_success("Diagram generation completed successfully")


@app.command
def sample() -> None:
    """Write the bundled sample dump to stdout."""
    sys.stdout.write(load_sample_sql())


def main() -> None:
    """Entry point for the CLI."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
