"""Map Dublin Core metadata onto the ComicInfo schema."""

import logging
import re

from bs4 import BeautifulSoup
from lxml import etree

from epub2cbz.models.comicinfo import ComicInfo, ComicPage
from epub2cbz.models.package import BookMetadata
from epub2cbz.models.pages import OutputSet

log = logging.getLogger(__name__)

VOLUME_PATTERN = re.compile(
    r"^(?P<series>.+?)[\s,:-]*\b(?:vol(?:ume)?\.?)\s*(?P<number>\d+(?:\.\d+)?)",
    re.IGNORECASE,
)
ISSUE_PATTERN = re.compile(r"^(?P<series>.+?)\s*#\s*(?P<number>\d+(?:\.\d+)?)")
DATE_PATTERN = re.compile(r"^(?P<year>\d{4})(?:-(?P<month>\d{1,2})(?:-(?P<day>\d{1,2}))?)?")

RTL_KEYWORDS = ("manga",)
MANGA_KEYWORDS = ("manga", "manhua", "manhwa")

WRITER_ROLES = {"aut"}
PENCILLER_ROLES = {"art", "ill"}
ROLE_FIELDS = {"edt": "editor", "trl": "translator"}

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
XSD_NS = "http://www.w3.org/2001/XMLSchema"


def parse_series(title: str) -> tuple[str, str]:
    """Split "Title Vol. N" or "Title #N" into (series, number).

    Titles matching neither form become the series with issue number "1".
    """
    title = title.strip()
    for pattern in (VOLUME_PATTERN, ISSUE_PATTERN):
        match = pattern.match(title)
        if match:
            series = match.group("series").strip(" ,:-")
            if series:
                return series, _normalize_number(match.group("number"))
    return title, "1"


def _normalize_number(number: str) -> str:
    """'05' -> '5', '3.0' -> '3', '2.5' stays."""
    try:
        value = float(number)
    except ValueError:
        return number.strip()
    if value.is_integer():
        return str(int(value))
    return str(value)


def manga_flag(
    metadata: BookMetadata, page_progression_direction: str | None
) -> str | None:
    """ComicInfo Manga value from the spine direction or title/subject keywords."""
    direction = (page_progression_direction or "").lower()
    if direction == "rtl":
        return "YesAndRightToLeft"
    if direction == "ltr":
        return "No"

    haystack = " ".join([metadata.title or "", *metadata.subjects]).lower()
    if any(re.search(rf"\b{k}\b", haystack) for k in RTL_KEYWORDS):
        return "YesAndRightToLeft"
    if any(re.search(rf"\b{k}\b", haystack) for k in MANGA_KEYWORDS):
        return "Yes"
    return None


def split_date(date: str | None) -> tuple[int | None, int | None, int | None]:
    """Year, month and day from an ISO-ish date string."""
    if not date:
        return None, None, None
    match = DATE_PATTERN.match(date.strip())
    if not match:
        return None, None, None
    parts = [match.group("year"), match.group("month"), match.group("day")]
    return tuple(int(p) if p else None for p in parts)  # type: ignore[return-value]


def _plain_text(markup: str | None) -> str | None:
    """Descriptions are often HTML; keep only the text."""
    if not markup:
        return None
    if "<" not in markup:
        return markup.strip() or None
    text = BeautifulSoup(markup, "lxml").get_text(" ", strip=True)
    return text or None


def _join(names: list[str]) -> str | None:
    return ", ".join(names) if names else None


def map_metadata(
    metadata: BookMetadata | None,
    output: OutputSet,
    page_progression_direction: str | None = None,
    fallback_title: str | None = None,
) -> ComicInfo:
    """Build the ComicInfo document for an output set.

    Never raises on missing metadata: every field is optional.
    """
    metadata = metadata or BookMetadata()
    title = metadata.title or fallback_title

    series, number = (None, None)
    if title:
        series, number = parse_series(title)
    if metadata.series:
        series = metadata.series
        if metadata.series_index:
            number = _normalize_number(metadata.series_index)

    roles: dict[str, list[str]] = {"writer": [], "penciller": [], "editor": [], "translator": []}
    for creator in metadata.creators:
        if creator.role is None or creator.role in WRITER_ROLES:
            roles["writer"].append(creator.name)
        elif creator.role in PENCILLER_ROLES:
            roles["penciller"].append(creator.name)
        elif creator.role in ROLE_FIELDS:
            roles[ROLE_FIELDS[creator.role]].append(creator.name)
        else:
            log.debug("Ignoring creator %s with role %s", creator.name, creator.role)

    year, month, day = split_date(metadata.date)

    pages = [
        ComicPage(image=index, type="FrontCover" if image.sequence == 0 else None)
        for index, image in enumerate(output)
    ]

    return ComicInfo(
        title=title,
        series=series,
        number=number,
        summary=_plain_text(metadata.description),
        year=year,
        month=month,
        day=day,
        writer=_join(roles["writer"]),
        penciller=_join(roles["penciller"]),
        editor=_join(roles["editor"]),
        translator=_join(roles["translator"]),
        publisher=metadata.publisher,
        genre=_join(metadata.subjects),
        language_iso=metadata.language,
        page_count=len(output),
        manga=manga_flag(metadata, page_progression_direction),
        pages=pages,
    )


def render_comicinfo(info: ComicInfo) -> bytes:
    """Serialize ComicInfo to XML. Unset fields are omitted."""
    root = etree.Element("ComicInfo", nsmap={"xsi": XSI_NS, "xsd": XSD_NS})

    for field_name in ComicInfo.model_fields:
        if field_name == "pages":
            continue
        value = getattr(info, field_name)
        if value is None:
            continue
        element = etree.SubElement(root, ComicInfo.element_name(field_name))
        element.text = str(value)

    if info.pages:
        pages_el = etree.SubElement(root, "Pages")
        for page in info.pages:
            page_el = etree.SubElement(pages_el, "Page", Image=str(page.image))
            if page.type:
                page_el.set("Type", page.type)

    return etree.tostring(
        root, xml_declaration=True, encoding="utf-8", pretty_print=True
    )
