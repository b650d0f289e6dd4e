"""Convert one EPUB into a CBZ archive."""

import logging
from pathlib import Path

from epub2cbz.core.archive import assemble_cbz, extract_archive, scratch_workspace
from epub2cbz.core.cover import resolve_cover
from epub2cbz.core.errors import (
    ArchiveCreationFailed,
    ManifestNotFound,
    ManifestParseError,
    NavigationParseError,
    NoImagesResolved,
    OutputExists,
)
from epub2cbz.core.events import EventSink
from epub2cbz.core.fallback import discover_images
from epub2cbz.core.locator import locate_navigation, locate_package
from epub2cbz.core.metadata_mapper import map_metadata, render_comicinfo
from epub2cbz.core.ncx_parser import parse_navigation
from epub2cbz.core.opf_parser import parse_package
from epub2cbz.core.resolver import PathResolver
from epub2cbz.core.sequencer import PageSequencer
from epub2cbz.models.comicinfo import ComicInfo
from epub2cbz.models.config import ConvertConfig
from epub2cbz.models.package import NavigationMap, PackageDocument
from epub2cbz.models.pages import PagePlan, PlanStrategy
from epub2cbz.models.result import ConversionResult

log = logging.getLogger(__name__)


def load_navigation(
    root: Path,
    package: PackageDocument,
    resolver: PathResolver,
    config: ConvertConfig,
    events: EventSink,
) -> NavigationMap:
    """NavigationMap for a package, empty when there is no usable NCX."""
    events = events.bound(log)
    ncx_path = None
    declared = package.navigation_href()
    if declared:
        ncx_path = resolver.resolve_href(declared)
    if ncx_path is None:
        ncx_path = locate_navigation(root, config.search_depth)
    if ncx_path is None:
        log.debug("No navigation file; using sequence numbers as labels")
        return NavigationMap()

    try:
        return parse_navigation(ncx_path, package.content_dir)
    except NavigationParseError as e:
        events.warning(f"{e}; using sequence numbers as labels")
        return NavigationMap()


def _fallback_plan(
    root: Path,
    config: ConvertConfig,
    events: EventSink,
    package: PackageDocument | None,
) -> PagePlan:
    events = events.bound(log)
    output = discover_images(root, config.min_image_bytes, config.fallback_depth)
    events.info(f"Image discovery found {len(output)} image(s)")
    return PagePlan(
        root=root, output=output, strategy=PlanStrategy.FALLBACK, package=package
    )


def build_page_plan(root: Path, config: ConvertConfig, events: EventSink) -> PagePlan:
    """Run the page resolution pipeline over an extracted EPUB.

    Structured resolution through the package document is tried first. When
    no package is found, it cannot be parsed, or its spine yields no images,
    every sizeable image in the tree is used instead.
    """
    events = events.bound(log)
    root = root.resolve()

    try:
        opf_path = locate_package(root, config.search_depth)
        package = parse_package(opf_path)
    except (ManifestNotFound, ManifestParseError) as e:
        events.warning(f"{e}; falling back to image discovery")
        return _fallback_plan(root, config, events, package=None)

    resolver = PathResolver(root, package.content_dir, config.search_depth)
    navigation = load_navigation(root, package, resolver, config, events)

    cover = resolve_cover(package, resolver)
    if cover.path is not None:
        events.info(f"Cover: {cover.path.name} ({cover.provenance.value})")

    sequencer = PageSequencer(package, resolver, navigation, events)
    try:
        output = sequencer.run(cover)
    except NoImagesResolved:
        events.warning("No images resolved from the spine; falling back to image discovery")
        return _fallback_plan(root, config, events, package=package)

    return PagePlan(
        root=root,
        output=output,
        strategy=PlanStrategy.SPINE,
        package=package,
        cover=cover,
    )


def comicinfo_for(plan: PagePlan, fallback_title: str | None = None) -> ComicInfo:
    """ComicInfo document for a resolved plan."""
    package = plan.package
    return map_metadata(
        package.metadata if package else None,
        plan.output,
        package.page_progression_direction if package else None,
        fallback_title=fallback_title,
    )


def convert_epub(
    epub_path: Path,
    config: ConvertConfig | None = None,
    events: EventSink | None = None,
) -> ConversionResult:
    """Convert a single EPUB file to CBZ.

    Raises:
        OutputExists: If the target exists and overwrite is off
        ArchiveReadFailed: If the input is not a ZIP container
        ArchiveCreationFailed: If no images were found or writing failed
    """
    config = config or ConvertConfig()
    events = (events or EventSink()).bound(log)
    out_path = config.output_path_for(epub_path)

    if out_path.exists() and not config.overwrite:
        raise OutputExists(out_path)

    with scratch_workspace(epub_path, config.scratch_dir) as workspace:
        root = extract_archive(epub_path, workspace / "epub")
        plan = build_page_plan(root, config, events)

        if not plan.output:
            raise ArchiveCreationFailed(f"No images found in {epub_path.name}")

        info = comicinfo_for(plan, fallback_title=epub_path.stem)
        assemble_cbz(
            plan.output,
            render_comicinfo(info),
            out_path,
            config.compression,
        )

    events.info(f"Created {out_path.name} ({len(plan.output)} pages)")
    return ConversionResult(
        source=epub_path,
        output=out_path,
        page_count=len(plan.output),
        has_cover=plan.output.has_cover,
        strategy=plan.strategy.value,
        title=info.title,
        events=events.events,
    )
