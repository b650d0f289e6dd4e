"""ZIP container I/O and per-file scratch workspaces."""

import logging
import shutil
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from epub2cbz.core.errors import ArchiveCreationFailed, ArchiveReadFailed
from epub2cbz.models.pages import OutputSet

log = logging.getLogger(__name__)

COMICINFO_NAME = "ComicInfo.xml"

# Fixed entry timestamp so identical inputs produce identical archives
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

COMPRESSION = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


@contextmanager
def scratch_workspace(epub_path: Path, parent: Path | None = None) -> Iterator[Path]:
    """Private temporary directory for one input file, removed on exit."""
    if parent is not None:
        parent.mkdir(parents=True, exist_ok=True)
    prefix = f"epub2cbz-{epub_path.stem[:40]}-"
    with tempfile.TemporaryDirectory(prefix=prefix, dir=parent) as tmp:
        yield Path(tmp)


def extract_archive(archive_path: Path, destination: Path) -> Path:
    """Extract a ZIP container into destination.

    Raises:
        ArchiveReadFailed: If the file is missing or not a ZIP container
    """
    destination.mkdir(parents=True, exist_ok=True)
    try:
        with zipfile.ZipFile(archive_path) as zf:
            zf.extractall(destination)
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveReadFailed(archive_path, str(e)) from e
    return destination


def _entry(name: str, compression: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
    info.compress_type = COMPRESSION[compression]
    info.external_attr = 0o644 << 16
    return info


def assemble_cbz(
    output: OutputSet,
    comicinfo: bytes,
    out_path: Path,
    compression: str = "deflated",
) -> Path:
    """Write an output set and its metadata as a CBZ archive.

    Images are streamed from their resolved paths in output order, followed
    by ComicInfo.xml. The archive is written next to out_path first and moved
    into place, so a failed run never leaves a truncated output behind.

    Raises:
        ArchiveCreationFailed: If there are no images, two images share an
            archive name, or writing fails
    """
    if not output:
        raise ArchiveCreationFailed("No pages to write")
    seen = set()
    for name in output.filenames():
        if name in seen:
            raise ArchiveCreationFailed(f"Duplicate output name: {name}")
        seen.add(name)

    out_path.parent.mkdir(parents=True, exist_ok=True)
    partial = out_path.with_name(out_path.name + ".part")
    try:
        with zipfile.ZipFile(partial, "w", COMPRESSION[compression]) as zf:
            for image in output:
                with open(image.path, "rb") as src, zf.open(
                    _entry(image.filename, compression), "w"
                ) as dest:
                    shutil.copyfileobj(src, dest)
            zf.writestr(_entry(COMICINFO_NAME, compression), comicinfo)
        partial.replace(out_path)
    except OSError as e:
        partial.unlink(missing_ok=True)
        raise ArchiveCreationFailed(f"Could not write {out_path.name}: {e}") from e
    log.debug("Wrote %d entries to %s", len(output) + 1, out_path)
    return out_path
