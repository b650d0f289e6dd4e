"""Data models."""

from epub2cbz.models.comicinfo import ComicInfo, ComicPage
from epub2cbz.models.config import ConvertConfig
from epub2cbz.models.package import (
    BookMetadata,
    Creator,
    ManifestItem,
    NavigationMap,
    PackageDocument,
    SpineEntry,
)
from epub2cbz.models.pages import (
    ContentPage,
    CoverCandidate,
    CoverProvenance,
    ImageReference,
    OutputSet,
    PagePlan,
    PlanStrategy,
    ResolvedImage,
)
from epub2cbz.models.result import ConversionEvent, ConversionResult

__all__ = [
    # Package models
    "Creator",
    "BookMetadata",
    "ManifestItem",
    "SpineEntry",
    "PackageDocument",
    "NavigationMap",
    # Page models
    "ImageReference",
    "ContentPage",
    "ResolvedImage",
    "CoverCandidate",
    "CoverProvenance",
    "OutputSet",
    "PagePlan",
    "PlanStrategy",
    # Output models
    "ComicPage",
    "ComicInfo",
    "ConvertConfig",
    "ConversionEvent",
    "ConversionResult",
]
