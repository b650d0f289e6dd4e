"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from epub2cbz.commands.convert import execute_convert
from epub2cbz.models.config import ConvertConfig

app = typer.Typer(
    name="epub2cbz",
    help="Convert EPUB comics and manga into CBZ archives with ComicInfo metadata.",
    add_completion=False,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Stream pipeline logs to the console when verbose, otherwise only errors."""
    logger = logging.getLogger("epub2cbz")
    logger.handlers.clear()
    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.ERROR)
    logger.propagate = False


@app.command()
def convert(
    paths: Annotated[
        list[Path],
        typer.Argument(
            help="EPUB files or directories containing EPUB files",
        ),
    ],
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--output-dir",
            "-o",
            help="Output directory (default: next to each input file)",
        ),
    ] = None,
    overwrite: Annotated[
        bool,
        typer.Option(
            "--overwrite",
            help="Replace existing .cbz files instead of skipping them",
        ),
    ] = False,
    jobs: Annotated[
        int,
        typer.Option(
            "--jobs",
            "-j",
            help="Number of files to convert in parallel",
            min=1,
        ),
    ] = 1,
    min_image_size: Annotated[
        int,
        typer.Option(
            "--min-image-size",
            help="Smallest image (bytes) kept when falling back to image discovery",
            min=0,
        ),
    ] = 10 * 1024,
    store: Annotated[
        bool,
        typer.Option(
            "--store",
            help="Store images without compression",
        ),
    ] = False,
    scratch_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--scratch-dir",
            help="Directory for temporary extraction (default: system temp)",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress progress output",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging from the page resolution pipeline",
        ),
    ] = False,
) -> None:
    """Convert one or more EPUB files to CBZ.

    Pages follow the EPUB's reading order. A failed file is reported and the
    batch continues with the next one.
    """
    configure_logging(verbose)

    config = ConvertConfig(
        output_dir=output_dir.resolve() if output_dir else None,
        overwrite=overwrite,
        min_image_bytes=min_image_size,
        scratch_dir=scratch_dir.resolve() if scratch_dir else None,
        jobs=jobs,
        compression="stored" if store else "deflated",
    )

    results = execute_convert(
        paths=paths,
        config=config,
        quiet=quiet,
        console=console,
    )

    if not results:
        raise typer.Exit(1)


@app.command()
def info(
    epub_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the EPUB file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging from the page resolution pipeline",
        ),
    ] = False,
) -> None:
    """Display metadata and the planned page order without writing a CBZ."""
    configure_logging(verbose)

    try:
        from epub2cbz.commands.info import execute_info

        execute_info(epub_path=epub_path, config=ConvertConfig(), console=console)
    except Exception as e:
        console.print(f"[red]Error reading file: {e}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
