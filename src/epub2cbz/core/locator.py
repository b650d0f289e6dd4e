"""Locate the OPF package document and NCX navigation file in an extracted EPUB."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from lxml import etree

from epub2cbz.core.errors import ManifestNotFound
from epub2cbz.core.walk import find_by_suffix

log = logging.getLogger(__name__)

CONTAINER_PATH = Path("META-INF") / "container.xml"

# Directories producers commonly put the package document in
CONVENTIONAL_DIRS = ["", "OEBPS", "OPS", "EPUB", "content"]

# Preferred file names when a recursive search finds several candidates
PREFERRED_NAMES = {
    ".opf": ("content.opf", "package.opf"),
    ".ncx": ("toc.ncx",),
}


@dataclass
class LocatorStrategy:
    """One way of finding a file under the extraction root."""

    name: str
    fn: Callable[[Path], Path | None]


def from_container(root: Path) -> Path | None:
    """Read META-INF/container.xml and return the declared root file if it exists."""
    container = root / CONTAINER_PATH
    if not container.is_file():
        return None

    try:
        tree = etree.parse(str(container))
    except (etree.XMLSyntaxError, OSError) as e:
        log.debug("Unreadable container.xml: %s", e)
        return None

    for rootfile in tree.xpath("//*[local-name()='rootfile']"):
        full_path = rootfile.get("full-path")
        if not full_path:
            continue
        candidate = root / full_path
        if not candidate.resolve().is_relative_to(root.resolve()):
            log.debug("container.xml points outside the tree: %s", full_path)
            continue
        if candidate.is_file():
            return candidate
        log.debug("container.xml points at missing file %s", full_path)
    return None


def in_conventional_dirs(suffix: str) -> Callable[[Path], Path | None]:
    """Search the conventional package directories for a file with this suffix."""

    def search(root: Path) -> Path | None:
        for directory in CONVENTIONAL_DIRS:
            base = root / directory if directory else root
            if not base.is_dir():
                continue
            matches = sorted(
                p for p in base.iterdir() if p.is_file() and p.suffix.lower() == suffix
            )
            if matches:
                return matches[0]
        return None

    return search


def by_recursive_search(suffix: str, max_depth: int) -> Callable[[Path], Path | None]:
    """Search the whole tree for a suffix, preferring well-known file names."""

    def search(root: Path) -> Path | None:
        matches = sorted(
            find_by_suffix(root, suffix, max_depth),
            key=lambda p: p.relative_to(root).as_posix(),
        )
        if not matches:
            return None
        for match in matches:
            if match.name.lower() in PREFERRED_NAMES.get(suffix, ()):
                return match
        return matches[0]

    return search


def build_strategies(suffix: str, max_depth: int = 5) -> list[LocatorStrategy]:
    """Ordered strategies for locating a file with the given suffix."""
    strategies = []
    if suffix == ".opf":
        strategies.append(LocatorStrategy("container", from_container))
    strategies.append(LocatorStrategy("conventional", in_conventional_dirs(suffix)))
    strategies.append(
        LocatorStrategy("recursive", by_recursive_search(suffix, max_depth))
    )
    return strategies


def run_strategies(root: Path, strategies: list[LocatorStrategy]) -> Path | None:
    """Evaluate strategies in order and return the first hit."""
    for strategy in strategies:
        found = strategy.fn(root)
        if found is not None:
            log.debug("Located %s via %s strategy", found, strategy.name)
            return found
    return None


def locate_package(root: Path, max_depth: int = 5) -> Path:
    """Find the OPF package document.

    Raises:
        ManifestNotFound: If no strategy finds an .opf file
    """
    found = run_strategies(root, build_strategies(".opf", max_depth))
    if found is None:
        raise ManifestNotFound(root)
    return found


def locate_navigation(root: Path, max_depth: int = 5) -> Path | None:
    """Find the NCX navigation file. Returns None when there is none."""
    return run_strategies(root, build_strategies(".ncx", max_depth))
