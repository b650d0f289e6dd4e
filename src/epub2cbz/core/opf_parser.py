"""Parse OPF package documents."""

import logging
from pathlib import Path

from lxml import etree

from epub2cbz.core.errors import ManifestParseError
from epub2cbz.core.hrefs import clean_href
from epub2cbz.models.package import (
    BookMetadata,
    Creator,
    ManifestItem,
    PackageDocument,
    SpineEntry,
)

log = logging.getLogger(__name__)

OPF_NS = "http://www.idpf.org/2007/opf"


def _local(element: etree._Element) -> str:
    return etree.QName(element).localname


def _children(parent: etree._Element | None, name: str) -> list[etree._Element]:
    """Direct children with the given local name, in any namespace."""
    if parent is None:
        return []
    return [
        child
        for child in parent
        if isinstance(child.tag, str) and _local(child) == name
    ]


def _first(parent: etree._Element, name: str) -> etree._Element | None:
    found = parent.xpath(f".//*[local-name()='{name}']")
    return found[0] if found else None


def _text(element: etree._Element) -> str | None:
    text = "".join(element.itertext()).strip()
    return text or None


def _attr(element: etree._Element, name: str) -> str | None:
    """Attribute by local name, with or without the OPF namespace."""
    value = element.get(name)
    if value is None:
        value = element.get(f"{{{OPF_NS}}}{name}")
    return value


class OpfParser:
    """Parse an OPF file into a PackageDocument."""

    def __init__(self, opf_path: Path):
        self.path = opf_path

    def parse(self) -> PackageDocument:
        """Parse the package document.

        Raises:
            ManifestParseError: If the file is not well-formed XML
        """
        try:
            tree = etree.parse(str(self.path))
        except etree.XMLSyntaxError as e:
            raise ManifestParseError(self.path, str(e)) from e
        except OSError as e:
            raise ManifestParseError(self.path, str(e)) from e

        root = tree.getroot()
        metadata_el = _first(root, "metadata")
        manifest = self._get_manifest(root)
        spine_el = _first(root, "spine")

        package = PackageDocument(
            path=self.path,
            manifest=manifest,
            spine=self._get_spine(spine_el),
            metadata=self._get_metadata(metadata_el),
            guide_cover_href=self._get_guide_cover(root),
        )

        if spine_el is not None:
            package.page_progression_direction = spine_el.get(
                "page-progression-direction"
            )
            package.toc_id = spine_el.get("toc")

        package.cover_id = self._get_meta_content(metadata_el, "cover")
        for item in manifest.values():
            if "cover-image" in item.properties:
                package.cover_image_id = item.id
                break

        return package

    def _get_manifest(self, root: etree._Element) -> dict[str, ManifestItem]:
        """Build the id -> item map. The first declaration of an id wins."""
        items: dict[str, ManifestItem] = {}
        for element in root.xpath("//*[local-name()='manifest']/*[local-name()='item']"):
            item_id = element.get("id")
            href = clean_href(element.get("href") or "")
            if not item_id or not href:
                log.debug("Skipping manifest item without id or href")
                continue
            if item_id in items:
                continue
            items[item_id] = ManifestItem(
                id=item_id,
                href=href,
                media_type=element.get("media-type"),
                properties=(element.get("properties") or "").split(),
            )
        return items

    def _get_spine(self, spine_el: etree._Element | None) -> list[SpineEntry]:
        """Get reading order from spine."""
        entries = []
        for itemref in _children(spine_el, "itemref"):
            idref = itemref.get("idref")
            if not idref:
                continue
            entries.append(SpineEntry(idref=idref))
        return entries

    def _get_guide_cover(self, root: etree._Element) -> str | None:
        for reference in root.xpath(
            "//*[local-name()='guide']/*[local-name()='reference']"
        ):
            if (reference.get("type") or "").lower() == "cover":
                href = clean_href(reference.get("href") or "")
                if href:
                    return href
        return None

    def _get_meta_content(
        self, metadata_el: etree._Element | None, name: str
    ) -> str | None:
        for meta in _children(metadata_el, "meta"):
            if meta.get("name") == name:
                content = meta.get("content")
                if content:
                    return content.strip()
        return None

    def _get_metadata(self, metadata_el: etree._Element | None) -> BookMetadata:
        """Extract Dublin Core metadata. Missing elements are left unset."""
        if metadata_el is None:
            return BookMetadata()

        def first_text(name: str) -> str | None:
            for element in _children(metadata_el, name):
                text = _text(element)
                if text:
                    return text
            return None

        refined_roles = self._get_refined_roles(metadata_el)
        creators = []
        for element in _children(metadata_el, "creator"):
            name = _text(element)
            if not name:
                continue
            role = _attr(element, "role")
            if role is None and element.get("id"):
                role = refined_roles.get(element.get("id"))
            creators.append(Creator(name=name, role=role.strip().lower() if role else None))

        subjects = [
            text for text in (_text(e) for e in _children(metadata_el, "subject")) if text
        ]

        return BookMetadata(
            title=first_text("title"),
            creators=creators,
            publisher=first_text("publisher"),
            date=first_text("date"),
            subjects=subjects,
            language=first_text("language"),
            description=first_text("description"),
            series=self._get_meta_content(metadata_el, "calibre:series"),
            series_index=self._get_meta_content(metadata_el, "calibre:series_index"),
        )

    def _get_refined_roles(self, metadata_el: etree._Element) -> dict[str, str]:
        """EPUB 3 roles: <meta refines="#id" property="role">aut</meta>."""
        roles = {}
        for meta in _children(metadata_el, "meta"):
            if meta.get("property") != "role":
                continue
            target = (meta.get("refines") or "").lstrip("#")
            text = _text(meta)
            if target and text:
                roles[target] = text
        return roles


def parse_package(opf_path: Path) -> PackageDocument:
    """Parse an OPF file into a PackageDocument."""
    return OpfParser(opf_path).parse()
