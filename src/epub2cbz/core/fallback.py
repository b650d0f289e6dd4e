"""Directory-wide image discovery when the spine yields nothing."""

import logging
from pathlib import Path

from epub2cbz.core.walk import walk_files
from epub2cbz.models.pages import OutputSet, ResolvedImage

log = logging.getLogger(__name__)

RASTER_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}

METADATA_DIR = "META-INF"


def discover_images(
    root: Path,
    min_bytes: int = 10 * 1024,
    max_depth: int = 10,
) -> OutputSet:
    """Number every sizeable raster image under root, ordered by path.

    Images inside META-INF and files smaller than min_bytes (icons, ornaments)
    are ignored. Ordering is lexical by full path, which only approximates the
    reading order in archives that spread pages over several directories.
    """
    root = root.resolve()

    def skip_dir(directory: Path) -> bool:
        return directory.name.upper() == METADATA_DIR and directory.parent == root

    candidates = []
    for path in walk_files(root, max_depth, skip_dir=skip_dir):
        if path.suffix.lower() not in RASTER_SUFFIXES:
            continue
        size = path.stat().st_size
        if size < min_bytes:
            log.debug("Ignoring small image %s (%d bytes)", path.name, size)
            continue
        candidates.append(path)

    candidates.sort(key=lambda p: p.as_posix())

    output = OutputSet()
    for sequence, path in enumerate(candidates, start=1):
        output.append(ResolvedImage(path=path, sequence=sequence, label=str(sequence)))
    return output
