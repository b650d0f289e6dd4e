"""Helpers for the URL-style hrefs used inside EPUB packages."""

import posixpath
import re
from urllib.parse import unquote, urlsplit

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def is_external(href: str) -> bool:
    """True for data: URIs and remote URLs, which never resolve to package files."""
    return bool(_SCHEME.match(href.strip()))


def clean_href(href: str) -> str:
    """Percent-decode an href and drop its query and fragment.

    The result is a normalized POSIX relative path ("" if nothing is left).
    """
    path = unquote(urlsplit(href.strip()).path)
    if not path:
        return ""
    normalized = posixpath.normpath(path)
    return "" if normalized == "." else normalized

