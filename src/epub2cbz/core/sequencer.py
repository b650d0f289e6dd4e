"""Drive the spine into an ordered, numbered output set."""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from epub2cbz.core.cover import is_cover_duplicate, is_cover_page, stage_cover
from epub2cbz.core.errors import ImageNotFound, NoImagesResolved
from epub2cbz.core.events import EventSink
from epub2cbz.core.image_refs import read_image_references
from epub2cbz.core.resolver import PathResolver
from epub2cbz.models.package import NavigationMap, PackageDocument
from epub2cbz.models.pages import ContentPage, CoverCandidate, OutputSet, ResolvedImage

log = logging.getLogger(__name__)


def sanitize_label(label: str) -> str:
    """Make a navigation label safe to use inside a file name."""
    # Replace control characters and path separators with space
    sanitized = re.sub(r"[\x00-\x1f\x7f-\x9f/\\]", " ", label)
    # Remove characters reserved on common file systems
    sanitized = re.sub(r'[<>:"|?*]', "", sanitized)
    # Collapse multiple spaces
    sanitized = re.sub(r"\s+", " ", sanitized)
    return sanitized.strip(" .")


@dataclass
class SequencingContext:
    """State threaded through one sequencing run."""

    cover: CoverCandidate
    output: OutputSet = field(default_factory=OutputSet)
    # Only the first resolved spine image is compared against the cover
    dedup_pending: bool = True
    spine_images: int = 0

    def consume_dedup(self) -> bool:
        pending = self.dedup_pending
        self.dedup_pending = False
        return pending


class PageSequencer:
    """Walk the spine, resolve each page's images and number them."""

    def __init__(
        self,
        package: PackageDocument,
        resolver: PathResolver,
        navigation: NavigationMap | None = None,
        events: EventSink | None = None,
    ):
        self.package = package
        self.resolver = resolver
        self.navigation = navigation or NavigationMap()
        self.events = (events or EventSink()).bound(log)

    def pages(self) -> Iterator[ContentPage]:
        """Spine content documents that exist on disk, in reading order."""
        for entry in self.package.spine:
            href = self.package.href_for(entry.idref)
            if href is None:
                self.events.warning(f"Spine item {entry.idref!r} is not in the manifest")
                continue
            if is_cover_page(href):
                log.debug("Skipping cover page %s", href)
                continue
            path = self.resolver.resolve_href(href)
            if path is None:
                self.events.warning(f"Content page not found: {href}")
                continue
            yield ContentPage(href=href, path=path, label=self.navigation.label_for(href))

    def run(self, cover: CoverCandidate) -> OutputSet:
        """Sequence the whole spine.

        Raises:
            NoImagesResolved: If the spine produced no images
        """
        context = SequencingContext(cover=cover)
        staged = stage_cover(cover)
        if staged is not None:
            context.output.append(staged)

        for page in self.pages():
            self._sequence_page(page, context)

        if context.spine_images == 0:
            raise NoImagesResolved("No images resolved from the spine")
        return context.output

    def _sequence_page(self, page: ContentPage, context: SequencingContext) -> None:
        try:
            references = list(read_image_references(page.path))
        except OSError as e:
            self.events.warning(f"Could not read {page.href}: {e}")
            return

        emitted = set()
        for reference in references:
            try:
                path = self.resolver.resolve(page.path, reference)
            except ImageNotFound as e:
                self.events.warning(str(e))
                continue
            if path in emitted:
                continue

            sequence = context.output.next_sequence
            image = ResolvedImage(
                path=path,
                sequence=sequence,
                label=self._label(page, sequence),
                source_href=page.href,
            )

            if context.consume_dedup() and is_cover_duplicate(context.cover, image):
                self.events.info(f"Dropped {path.name} from {page.href}: duplicate of cover")
                emitted.add(path)
                continue

            context.output.append(image)
            context.spine_images += 1
            emitted.add(path)

    def _label(self, page: ContentPage, sequence: int) -> str:
        if page.label:
            label = sanitize_label(page.label)
            if label:
                return label
        return str(sequence)
