"""Convert command implementation."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from epub2cbz.core.converter import convert_epub
from epub2cbz.core.errors import OutputExists
from epub2cbz.core.events import EventSink
from epub2cbz.models.config import ConvertConfig
from epub2cbz.models.result import ConversionResult

log = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".epub"}


def collect_inputs(paths: list[Path], console: Console) -> list[Path]:
    """Expand directories to the EPUB files they contain, keeping argument order."""
    inputs: list[Path] = []
    seen: set[Path] = set()

    for path in paths:
        if path.is_dir():
            found = sorted(
                (p for p in path.iterdir() if p.suffix.lower() in SUPPORTED_SUFFIXES),
                key=lambda p: p.name.lower(),
            )
            if not found:
                console.print(f"[yellow]No EPUB files in {path}[/]")
            candidates = found
        elif path.is_file():
            candidates = [path]
        else:
            console.print(f"[red]File not found: {path}[/]")
            continue

        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved not in seen:
                seen.add(resolved)
                inputs.append(resolved)

    return inputs


def convert_one(epub_path: Path, config: ConvertConfig) -> ConversionResult:
    """Convert a file, turning any failure into a failed result."""
    events = EventSink(log)
    try:
        return convert_epub(epub_path, config, events)
    except OutputExists as e:
        events.warning(str(e))
        return ConversionResult(
            source=epub_path, events=events.events, error=str(e), skipped=True
        )
    except Exception as e:
        log.debug("Conversion of %s failed", epub_path, exc_info=True)
        events.error(str(e))
        return ConversionResult(source=epub_path, events=events.events, error=str(e))


def run_batch(
    inputs: list[Path],
    config: ConvertConfig,
    progress: Progress | None = None,
) -> list[ConversionResult]:
    """Convert every input. Results are returned in input order."""
    task = None
    if progress is not None:
        task = progress.add_task("Converting...", total=len(inputs))

    results: dict[Path, ConversionResult] = {}

    def record(result: ConversionResult) -> None:
        results[result.source] = result
        if progress is not None and task is not None:
            progress.update(
                task, advance=1, description=f"Converted: {result.source.name[:40]}"
            )

    if config.jobs == 1 or len(inputs) == 1:
        for epub_path in inputs:
            record(convert_one(epub_path, config))
    else:
        with ThreadPoolExecutor(max_workers=config.jobs) as executor:
            futures = [executor.submit(convert_one, p, config) for p in inputs]
            for future in as_completed(futures):
                record(future.result())

    return [results[p] for p in inputs]


def display_results(results: list[ConversionResult], console: Console) -> None:
    """Per-file result table followed by warnings and errors."""
    table = Table(title="Conversion Results", show_header=True, header_style="bold cyan")
    table.add_column("File", style="white")
    table.add_column("Pages", justify="right", style="green")
    table.add_column("Cover", justify="center")
    table.add_column("Source", style="dim")
    table.add_column("Status")

    for result in results:
        if result.success:
            status = "[green]done[/]"
        elif result.skipped:
            status = "[yellow]skipped[/]"
        else:
            status = "[red]failed[/]"
        table.add_row(
            result.source.name,
            str(result.page_count) if result.success else "-",
            "yes" if result.has_cover else "-",
            result.strategy or "-",
            status,
        )

    console.print(table)

    for result in results:
        messages = [e for e in result.events if e.level in ("warning", "error")]
        if not messages:
            continue
        console.print(f"\n[bold]{result.source.name}[/]")
        for event in messages:
            color = "red" if event.level == "error" else "yellow"
            console.print(f"  [{color}]{event.message}[/]")


def execute_convert(
    paths: list[Path],
    config: ConvertConfig,
    quiet: bool,
    console: Console,
) -> list[ConversionResult]:
    """Execute the convert command."""
    inputs = collect_inputs(paths, console)
    if not inputs:
        console.print("[yellow]Nothing to convert.[/]")
        return []

    if config.output_dir is not None:
        config.output_dir.mkdir(parents=True, exist_ok=True)

    if quiet:
        results = run_batch(inputs, config)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            console=console,
        ) as progress:
            results = run_batch(inputs, config, progress)

    converted = sum(1 for r in results if r.success)
    skipped = sum(1 for r in results if r.skipped)
    failed = len(results) - converted - skipped

    if not quiet:
        console.print()
        display_results(results, console)
        console.print()

        summary_lines = [f"[green]Converted {converted} of {len(results)} file(s)[/]"]
        if skipped:
            summary_lines.append(f"[yellow]Skipped {skipped} existing output(s)[/]")
        if failed:
            summary_lines.append(f"[red]Failed {failed} file(s)[/]")
        if config.output_dir is not None:
            summary_lines.append("")
            summary_lines.append(f"[dim]Output directory:[/] {config.output_dir}")

        console.print(
            Panel(
                "\n".join(summary_lines),
                title="Complete",
                border_style="green" if not failed else "yellow",
            )
        )

    return results
