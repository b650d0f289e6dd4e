"""Errors raised by the conversion pipeline."""

from pathlib import Path


class Epub2CbzError(Exception):
    """Base class for pipeline errors."""


class ManifestNotFound(Epub2CbzError):
    """No OPF package document could be located."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(f"No package document (.opf) found under {root}")


class ManifestParseError(Epub2CbzError):
    """The OPF package document is not well-formed XML."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse {path.name}: {reason}")


class NavigationParseError(Epub2CbzError):
    """The NCX navigation file is not well-formed XML."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse {path.name}: {reason}")


class ImageNotFound(Epub2CbzError):
    """An image reference did not resolve to a file."""

    def __init__(self, url: str, page: Path | None = None):
        self.url = url
        self.page = page
        where = f" (referenced from {page.name})" if page else ""
        super().__init__(f"Image not found: {url}{where}")


class NoImagesResolved(Epub2CbzError):
    """Spine sequencing emitted no images."""


class ArchiveReadFailed(Epub2CbzError):
    """The input file is not a readable ZIP container."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Could not open {path.name}: {reason}")


class ArchiveCreationFailed(Epub2CbzError):
    """No output images were collected, or the archive could not be written."""


class OutputExists(Epub2CbzError):
    """The target archive exists and overwriting is disabled."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Output already exists: {path} (use --overwrite)")
