"""Data models for resolved pages and the output set."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from epub2cbz.core.walk import file_hash
from epub2cbz.models.package import PackageDocument


class CoverProvenance(str, Enum):
    """Where a cover candidate came from."""

    MANIFEST = "manifest-cover"
    GUIDE = "guide-cover"
    NONE = "none"


class PlanStrategy(str, Enum):
    """Which resolution path produced the output set."""

    SPINE = "spine"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ImageReference:
    """Raw image URL as written in a content page."""

    url: str


@dataclass
class ContentPage:
    """One spine-ordered content document."""

    href: str
    path: Path
    label: str | None = None


@dataclass
class ResolvedImage:
    """An image on disk with its target slot in the archive."""

    path: Path
    sequence: int
    label: str
    source_href: str | None = None
    _hash: str | None = field(default=None, repr=False)

    @property
    def extension(self) -> str:
        return self.path.suffix

    @property
    def content_hash(self) -> str:
        """SHA-256 of the file, computed on first access."""
        if self._hash is None:
            self._hash = file_hash(self.path)
        return self._hash

    @property
    def filename(self) -> str:
        """Destination entry name inside the archive."""
        return f"{self.sequence:03d} - {self.label}{self.extension}"


@dataclass
class CoverCandidate:
    """Cover image identified from package hints."""

    path: Path | None = None
    provenance: CoverProvenance = CoverProvenance.NONE
    _hash: str | None = field(default=None, repr=False)

    @property
    def found(self) -> bool:
        return self.path is not None

    @property
    def content_hash(self) -> str | None:
        if self.path is None:
            return None
        if self._hash is None:
            self._hash = file_hash(self.path)
        return self._hash


@dataclass
class OutputSet:
    """Ordered images destined for the archive."""

    images: list[ResolvedImage] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.images)

    def __iter__(self):
        return iter(self.images)

    def __bool__(self) -> bool:
        return bool(self.images)

    @property
    def has_cover(self) -> bool:
        return bool(self.images) and self.images[0].sequence == 0

    @property
    def next_sequence(self) -> int:
        return self.images[-1].sequence + 1 if self.images else 1

    def append(self, image: ResolvedImage) -> None:
        if self.images and image.sequence <= self.images[-1].sequence:
            raise ValueError(
                f"Sequence {image.sequence} does not follow {self.images[-1].sequence}"
            )
        self.images.append(image)

    def filenames(self) -> list[str]:
        return [image.filename for image in self.images]


@dataclass
class PagePlan:
    """Everything the pipeline resolved for one extracted EPUB."""

    root: Path
    output: OutputSet
    strategy: PlanStrategy
    package: PackageDocument | None = None
    cover: CoverCandidate = field(default_factory=CoverCandidate)
