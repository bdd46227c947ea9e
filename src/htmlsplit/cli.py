"""Command line interface for htmlsplit."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from htmlsplit.config import AppConfig
from htmlsplit.errors import IncompleteRejoinError
from htmlsplit.html.dom import structurally_equal
from htmlsplit.models import Document
from htmlsplit.project import HtmlProject
from htmlsplit.streams import TransformFailure, fork_stream, merge_streams
from htmlsplit.utils.files import iter_html_paths


console = Console()
app = typer.Typer(help="htmlsplit - split inline scripts out of HTML and rejoin them")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _read_documents(paths: List[Path], base: Path) -> Iterator[Document]:
    for path in paths:
        yield Document(path=path, contents=path.read_bytes(), base=base)


def _print_failures(failures: List[TransformFailure]) -> None:
    for failure in failures:
        console.print(f"[red]Failed[/red] {failure.path}: {failure.error.message}")


@app.command()
def split(
    inputs: List[Path] = typer.Argument(
        ..., help="HTML files or directories containing them.", resolve_path=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List the scripts that would be split out of each HTML file."""
    _setup_logging(verbose)
    html_paths = list(iter_html_paths(inputs))
    if not html_paths:
        console.print("[yellow]No HTML files found.[/yellow]")
        return

    project = HtmlProject(AppConfig(root=Path.cwd()))
    splitter = project.split_html()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Parent")
    table.add_column("Script")
    table.add_column("Type")
    table.add_column("Bytes", justify="right")

    count = 0
    for document in splitter(_read_documents(html_paths, project.root)):
        record = project.get_parent_file(document.path)
        if record is None:
            continue
        count += 1
        table.add_row(
            str(record.parent_path),
            document.path.name,
            document.path.suffix.lstrip("."),
            str(len(document.contents)),
        )

    if count:
        console.print(table)
    console.print(f"Split {count} inline script(s) from {len(html_paths)} file(s)")
    _print_failures(splitter.failures)
    if splitter.failures:
        raise typer.Exit(code=1)


@app.command()
def roundtrip(
    inputs: List[Path] = typer.Argument(
        ..., help="HTML files or directories containing them.", resolve_path=True
    ),
    shuffle: bool = typer.Option(
        True, "--shuffle/--no-shuffle", help="Deliver split documents to the rejoiner in random order"
    ),
    seed: Optional[int] = typer.Option(None, help="Seed for the shuffled delivery order"),
    strict: bool = typer.Option(
        AppConfig().strict_parts, "--strict", help="Fail on parts no split record owns"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Split and rejoin HTML files, checking each comes back unchanged."""
    _setup_logging(verbose)
    html_paths = list(iter_html_paths(inputs))
    if not html_paths:
        console.print("[yellow]No HTML files found.[/yellow]")
        return

    project = HtmlProject(AppConfig(root=Path.cwd(), strict_parts=strict))
    originals: Dict[Path, Document] = {
        document.path: document for document in _read_documents(html_paths, project.root)
    }
    splitter = project.split_html()
    rejoiner = project.rejoin_html()

    # TypeScript parts travel on their own branch, as they would to a compiler.
    typescript, other = fork_stream(
        splitter(originals.values()), lambda document: document.path.suffix == ".ts"
    )
    merged = merge_streams(typescript, other, shuffle=shuffle, seed=seed)
    results = {document.path: document for document in rejoiner(merged)}

    failed = {failure.path for failure in splitter.failures + rejoiner.failures}

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Document")
    table.add_column("Parts", justify="right")
    table.add_column("Status")

    ok = True
    for path, original in originals.items():
        record = project.get_split_file(path)
        parts = str(len(record.parts)) if record is not None else "0"
        if path in failed:
            status = "[red]failed[/red]"
            ok = False
        elif path not in results:
            status = "[yellow]incomplete[/yellow]"
            ok = False
        elif structurally_equal(original.text, results[path].text):
            status = "[green]ok[/green]"
        else:
            status = "[red]mismatch[/red]"
            ok = False
        table.add_row(str(path), parts, status)

    console.print(table)
    console.print(f"Rejoined {len(results)} of {len(originals)} file(s)")
    _print_failures(splitter.failures + rejoiner.failures)
    try:
        project.finalize()
    except IncompleteRejoinError as exc:
        console.print(f"[red]{exc.message}[/red]")
        ok = False

    if not ok:
        raise typer.Exit(code=1)
