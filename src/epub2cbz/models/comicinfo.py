"""ComicInfo.xml document model."""

from typing import ClassVar

from pydantic import BaseModel, Field


class ComicPage(BaseModel):
    """Entry in the ComicInfo Pages list."""

    image: int
    type: str | None = None  # "FrontCover", "Story", ...


class ComicInfo(BaseModel):
    """Subset of the ComicInfo v2 schema filled from Dublin Core metadata.

    Field order is the element order in the rendered document.
    """

    title: str | None = None
    series: str | None = None
    number: str | None = None
    summary: str | None = None
    year: int | None = None
    month: int | None = None
    day: int | None = None
    writer: str | None = None
    penciller: str | None = None
    editor: str | None = None
    translator: str | None = None
    publisher: str | None = None
    genre: str | None = None
    language_iso: str | None = None
    page_count: int | None = None
    manga: str | None = None  # "Yes" | "No" | "YesAndRightToLeft"
    pages: list[ComicPage] = Field(default_factory=list)

    # Model field -> ComicInfo element name
    ELEMENT_NAMES: ClassVar[dict[str, str]] = {
        "language_iso": "LanguageISO",
        "page_count": "PageCount",
    }

    @classmethod
    def element_name(cls, field_name: str) -> str:
        if field_name in cls.ELEMENT_NAMES:
            return cls.ELEMENT_NAMES[field_name]
        return "".join(part.capitalize() for part in field_name.split("_"))
