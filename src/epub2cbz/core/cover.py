"""Cover identification and first-page duplicate detection."""

import logging
import posixpath
import re
from pathlib import Path

from epub2cbz.core.errors import ImageNotFound
from epub2cbz.core.image_refs import read_image_references
from epub2cbz.core.resolver import PathResolver
from epub2cbz.models.package import PackageDocument
from epub2cbz.models.pages import CoverCandidate, CoverProvenance, ResolvedImage

log = logging.getLogger(__name__)

COVER_LABEL = "Cover"

# Dedicated cover content documents: cover.xhtml, p-cover.xhtml, cover_page.html ...
COVER_PAGE_PATTERN = re.compile(r"(^|[-_.])cover([-_]?page)?\.x?html?$", re.IGNORECASE)

IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tif", ".tiff"}


def is_cover_page(href: str) -> bool:
    """True if the spine href names a dedicated cover document."""
    return bool(COVER_PAGE_PATTERN.search(posixpath.basename(href)))


def resolve_cover(package: PackageDocument, resolver: PathResolver) -> CoverCandidate:
    """Find the cover image from package hints.

    Tries <meta name="cover">, then the EPUB 3 cover-image manifest property,
    then a guide reference of type "cover". The first candidate that exists
    on disk wins.
    """
    for item_id in (package.cover_id, package.cover_image_id):
        if not item_id:
            continue
        href = package.href_for(item_id)
        if href is None:
            log.debug("Cover id %r is not in the manifest", item_id)
            continue
        path = resolver.resolve_href(href)
        if path is not None:
            return CoverCandidate(path=path, provenance=CoverProvenance.MANIFEST)
        log.debug("Manifest cover %s does not exist", href)

    if package.guide_cover_href:
        path = _resolve_guide_cover(package.guide_cover_href, resolver)
        if path is not None:
            return CoverCandidate(path=path, provenance=CoverProvenance.GUIDE)

    return CoverCandidate()


def _resolve_guide_cover(href: str, resolver: PathResolver) -> Path | None:
    """Resolve a guide cover, which may be an image or a page wrapping one."""
    target = resolver.resolve_href(href)
    if target is None:
        log.debug("Guide cover %s does not exist", href)
        return None

    if target.suffix.lower() in IMAGE_SUFFIXES:
        return target

    for reference in read_image_references(target):
        try:
            return resolver.resolve(target, reference)
        except ImageNotFound as e:
            log.debug("%s", e)
    return None


def stage_cover(cover: CoverCandidate) -> ResolvedImage | None:
    """Output slot 0 for a found cover."""
    if cover.path is None:
        return None
    return ResolvedImage(path=cover.path, sequence=0, label=COVER_LABEL)


def is_cover_duplicate(cover: CoverCandidate, image: ResolvedImage) -> bool:
    """True if image has the same content as the cover."""
    if cover.path is None:
        return False
    if image.path == cover.path:
        return True
    return image.content_hash == cover.content_hash
