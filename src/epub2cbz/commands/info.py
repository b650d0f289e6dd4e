"""Info command implementation."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from epub2cbz.core.archive import extract_archive, scratch_workspace
from epub2cbz.core.converter import build_page_plan, comicinfo_for
from epub2cbz.core.events import EventSink
from epub2cbz.models.config import ConvertConfig


def execute_info(epub_path: Path, config: ConvertConfig, console: Console) -> None:
    """Resolve an EPUB's pages and show metadata and the planned archive layout."""
    events = EventSink()

    with scratch_workspace(epub_path, config.scratch_dir) as workspace:
        root = extract_archive(epub_path, workspace / "epub")
        plan = build_page_plan(root, config, events)
        info = comicinfo_for(plan, fallback_title=epub_path.stem)

        info_lines = [
            f"[bold]{info.title or epub_path.stem}[/]",
            "",
            f"[dim]Series:[/] {info.series or 'Unknown'}",
            f"[dim]Number:[/] {info.number or '-'}",
            f"[dim]Writer(s):[/] {info.writer or 'Unknown'}",
            f"[dim]Artist(s):[/] {info.penciller or 'Unknown'}",
            f"[dim]Publisher:[/] {info.publisher or 'Unknown'}",
            f"[dim]Language:[/] {info.language_iso or 'Unknown'}",
            f"[dim]Manga:[/] {info.manga or 'Unknown'}",
            f"[dim]Pages:[/] {len(plan.output)}",
            f"[dim]Source:[/] {plan.strategy.value}",
        ]
        if plan.package is not None:
            opf = plan.package.path.relative_to(plan.root).as_posix()
            info_lines.append(f"[dim]Package:[/] {opf}")
        if plan.cover.path is not None:
            info_lines.append(
                f"[dim]Cover:[/] {plan.cover.path.name} ({plan.cover.provenance.value})"
            )

        if events.warnings:
            info_lines.append("")
            for warning in events.warnings:
                info_lines.append(f"[yellow]! {warning}[/]")

        console.print()
        console.print(Panel("\n".join(info_lines), title="Book Information", border_style="green"))

        console.print()
        table = Table(title="Pages", show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=4)
        table.add_column("Archive Entry", style="white")
        table.add_column("Page", style="cyan")
        table.add_column("Source", style="dim")

        for image in plan.output:
            table.add_row(
                str(image.sequence),
                image.filename,
                image.source_href or "-",
                image.path.relative_to(plan.root).as_posix(),
            )

        console.print(table)
        console.print()
