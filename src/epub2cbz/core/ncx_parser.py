"""Parse NCX navigation files."""

import logging
from pathlib import Path

from lxml import etree

from epub2cbz.core.errors import NavigationParseError
from epub2cbz.core.hrefs import clean_href
from epub2cbz.models.package import NavigationMap

log = logging.getLogger(__name__)


def parse_navigation(ncx_path: Path, content_dir: Path) -> NavigationMap:
    """Parse an NCX file into a NavigationMap keyed relative to content_dir.

    Navigation points missing a label or a content source are skipped, as are
    sources outside content_dir. When an href appears more than once the last
    label wins.

    Raises:
        NavigationParseError: If the file is not well-formed XML
    """
    try:
        tree = etree.parse(str(ncx_path))
    except (etree.XMLSyntaxError, OSError) as e:
        raise NavigationParseError(ncx_path, str(e)) from e

    ncx_dir = ncx_path.parent.resolve()
    base = content_dir.resolve()
    labels: dict[str, str] = {}

    for nav_point in tree.xpath("//*[local-name()='navPoint']"):
        label = _label_text(nav_point)
        src = _content_src(nav_point)
        if not label or not src:
            continue
        href = clean_href(src)
        if not href:
            continue
        try:
            key = (ncx_dir / href).resolve().relative_to(base).as_posix()
        except ValueError:
            log.debug("Navigation target %s is outside %s", src, base)
            continue
        labels[key] = label

    log.debug("Read %d navigation labels from %s", len(labels), ncx_path.name)
    return NavigationMap(labels=labels)


def _label_text(nav_point: etree._Element) -> str | None:
    # Only the point's own label, not those of nested points
    for child in nav_point:
        if isinstance(child.tag, str) and etree.QName(child).localname == "navLabel":
            text = " ".join("".join(child.itertext()).split())
            return text or None
    return None


def _content_src(nav_point: etree._Element) -> str | None:
    for child in nav_point:
        if isinstance(child.tag, str) and etree.QName(child).localname == "content":
            return child.get("src")
    return None
