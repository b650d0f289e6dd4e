"""Resolve image references to files on disk."""

import logging
import posixpath
from pathlib import Path

from epub2cbz.core.errors import ImageNotFound
from epub2cbz.core.hrefs import clean_href, is_external
from epub2cbz.core.walk import walk_files
from epub2cbz.models.pages import ImageReference

log = logging.getLogger(__name__)


class PathResolver:
    """Map image references to existing files under the extraction root.

    EPUB producers disagree on whether image paths are relative to the page,
    the package document or a flattened asset folder, so several layouts are
    tried before falling back to a bounded search by file name.
    """

    def __init__(self, root: Path, content_dir: Path | None = None, max_depth: int = 5):
        self.root = root.resolve()
        self.content_dir = (content_dir or root).resolve()
        self.max_depth = max_depth

    def candidates(self, page_dir: Path, href: str) -> list[Path]:
        """Conventional locations for an href, in the order they are tried."""
        basename = posixpath.basename(href)
        return [
            page_dir / href,
            self.content_dir / href,
            self.root / "OEBPS" / "images" / basename,
            self.root / "images" / basename,
            self.root / basename,
        ]

    def resolve(self, page_path: Path, reference: ImageReference) -> Path:
        """Resolve a reference made from the content document at page_path.

        Raises:
            ImageNotFound: If no candidate exists and the name search finds nothing
        """
        if is_external(reference.url):
            raise ImageNotFound(reference.url, page_path)

        href = clean_href(reference.url)
        if not href:
            raise ImageNotFound(reference.url, page_path)

        page_dir = page_path.resolve().parent
        for candidate in self.candidates(page_dir, href):
            found = self._accept(candidate)
            if found is not None:
                return found

        found = self.search(posixpath.basename(href))
        if found is not None:
            log.debug("Found %s by name search at %s", reference.url, found)
            return found

        raise ImageNotFound(reference.url, page_path)

    def resolve_href(self, href: str) -> Path | None:
        """Resolve a manifest href (relative to the package document)."""
        return self._accept(self.content_dir / clean_href(href))

    def search(self, basename: str) -> Path | None:
        """First file under the root with this exact name, in walk order."""
        if not basename:
            return None
        for path in walk_files(self.root, self.max_depth):
            if path.name == basename:
                return path
        return None

    def _accept(self, candidate: Path) -> Path | None:
        """The resolved candidate if it is a file inside the root."""
        try:
            resolved = candidate.resolve()
        except OSError:
            return None
        if not resolved.is_file():
            return None
        try:
            resolved.relative_to(self.root)
        except ValueError:
            log.debug("Ignoring %s outside the extraction root", resolved)
            return None
        return resolved
