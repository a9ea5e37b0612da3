"""Command-line interface for xsd-audit."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from xsd_audit.document import Document
from xsd_audit.errors import Mode, UnresolvedPolicy, ValidationResult
from xsd_audit.resources import CachingResources, ProjectResources
from xsd_audit.validator import SchemaValidator

console = Console()
error_console = Console(stderr=True)

XML_EXTENSIONS = {".xml", ".xsl", ".xslt", ".xhtml", ".wsdl"}


def _collect_files(path: Path, recursive: bool) -> list[Path]:
    if path.is_dir():
        if not recursive:
            raise ValueError(
                f"{path} is a directory. Use --recursive to validate all files."
            )
        return sorted({p for ext in XML_EXTENSIONS for p in path.rglob(f"*{ext}")})
    return [path]


@click.command()
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--strict",
    is_flag=True,
    help="Fail documents that declare no schema.",
)
@click.option(
    "--fail-unresolved",
    is_flag=True,
    help="Fail documents whose schemas cannot be loaded instead of passing them.",
)
@click.option(
    "--format-check",
    is_flag=True,
    help="Also require documents to be laid out as their pretty-printed form.",
)
@click.option(
    "--resource-root",
    default="",
    show_default=False,
    help="Directory searched for relative schema locations after the document's own.",
)
@click.option(
    "--offline",
    is_flag=True,
    help="Never fetch remote schemas.",
)
@click.option(
    "--timeout",
    type=float,
    default=10.0,
    show_default=True,
    help="Timeout in seconds for remote schema fetches.",
)
@click.option(
    "--jobs",
    "-j",
    type=int,
    default=1,
    show_default=True,
    help="Number of documents validated in parallel.",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format.",
)
@click.option(
    "--recursive",
    "-r",
    is_flag=True,
    help="Validate all XML files in directory.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only output errors, no success messages.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Log schema resolution details.",
)
def main(
    path: Path,
    strict: bool,
    fail_unresolved: bool,
    format_check: bool,
    resource_root: str,
    offline: bool,
    timeout: float,
    jobs: int,
    output: str,
    recursive: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Validate XML documents against the XSD schemas they declare.

    PATH can be a single file or a directory (with --recursive).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )

    try:
        files = _collect_files(path, recursive)
    except ValueError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    if path.is_dir() and not files:
        error_console.print(f"[yellow]Warning:[/yellow] No XML files found in {path}")
        sys.exit(0)

    # Shared across documents so each remote schema is fetched once.
    resources = CachingResources(
        ProjectResources(Path.cwd(), timeout=timeout, allow_network=not offline)
    )
    validator = SchemaValidator(
        resources=resources,
        mode=Mode.STRICT if strict else Mode.LENIENT,
        on_unresolved=UnresolvedPolicy.FAIL if fail_unresolved else UnresolvedPolicy.PASS,
        resource_root=resource_root,
        check_formatting=format_check,
    )

    # Fatal errors fail their own document only; the run carries on.
    results = validator.validate_many(
        [Document.from_file(f) for f in files], workers=jobs, capture_errors=True
    )

    if output == "json":
        _output_json(results)
    else:
        _output_text(results, quiet)

    sys.exit(0 if all(r.is_valid for r in results) else 1)


def _output_text(results: list[ValidationResult], quiet: bool) -> None:
    """Output results as formatted text."""
    for result in results:
        if result.is_valid:
            if not quiet:
                console.print(f"[green]✓[/green] {result.document} - Valid")
        else:
            console.print(f"[red]✗[/red] {result.document} - Invalid")

            table = Table(show_header=True, header_style="bold")
            table.add_column("Type", style="dim", width=14)
            table.add_column("Line", justify="right", width=6)
            table.add_column("Description")

            for violation in result.violations:
                table.add_row(
                    violation.kind.value,
                    str(violation.line),
                    violation.message,
                )

            console.print(table)
            console.print()

    # Summary
    total = len(results)
    valid = sum(1 for r in results if r.is_valid)
    invalid = total - valid

    if total > 1:
        console.print(f"\n[bold]Summary:[/bold] {valid}/{total} files valid", end="")
        if invalid > 0:
            console.print(f", [red]{invalid} invalid[/red]")
        else:
            console.print()


def _output_json(results: list[ValidationResult]) -> None:
    """Output results as JSON."""
    output = []
    for result in results:
        output.append({
            "file": result.document,
            "valid": result.is_valid,
            "violation_count": result.violation_count,
            "violations": [
                {
                    "type": v.kind.value,
                    "line": v.line,
                    "column": v.column,
                    "message": v.message,
                }
                for v in result.violations
            ],
        })

    console.print_json(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
