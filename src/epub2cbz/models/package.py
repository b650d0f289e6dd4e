"""Data models for the OPF package document."""

from pathlib import Path

from pydantic import BaseModel, Field


class Creator(BaseModel):
    """A dc:creator entry with its optional MARC relator role."""

    name: str
    role: str | None = None  # "aut", "art", "ill", ...


class BookMetadata(BaseModel):
    """Dublin Core metadata read from the package. No field is mandatory."""

    title: str | None = None
    creators: list[Creator] = Field(default_factory=list)
    publisher: str | None = None
    date: str | None = None
    subjects: list[str] = Field(default_factory=list)
    language: str | None = None
    description: str | None = None
    # calibre extensions
    series: str | None = None
    series_index: str | None = None


class ManifestItem(BaseModel):
    """Single manifest entry."""

    id: str
    href: str  # relative to the package document, fragment stripped
    media_type: str | None = None
    properties: list[str] = Field(default_factory=list)


class SpineEntry(BaseModel):
    """Single itemref in the spine."""

    idref: str


class PackageDocument(BaseModel):
    """Parsed OPF manifest, spine and cover hints."""

    path: Path
    spine: list[SpineEntry] = Field(default_factory=list)
    manifest: dict[str, ManifestItem] = Field(default_factory=dict)
    metadata: BookMetadata = Field(default_factory=BookMetadata)
    cover_id: str | None = None  # <meta name="cover" content="...">
    cover_image_id: str | None = None  # EPUB 3 properties="cover-image"
    guide_cover_href: str | None = None
    page_progression_direction: str | None = None
    toc_id: str | None = None  # spine toc attribute

    @property
    def content_dir(self) -> Path:
        """Directory that manifest hrefs are relative to."""
        return self.path.parent

    def href_for(self, item_id: str) -> str | None:
        item = self.manifest.get(item_id)
        return item.href if item else None

    def navigation_href(self) -> str | None:
        """Href of the NCX declared by the spine or by media type."""
        if self.toc_id and self.toc_id in self.manifest:
            return self.manifest[self.toc_id].href
        for item in self.manifest.values():
            if item.media_type == "application/x-dtbncx+xml":
                return item.href
        return None


class NavigationMap(BaseModel):
    """Content href -> display label, read from the NCX.

    Hrefs are relative to the package document's directory so they can be
    looked up with spine hrefs directly.
    """

    labels: dict[str, str] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.labels)

    def label_for(self, href: str) -> str | None:
        return self.labels.get(href)
