import pytest

from conftest import write

from epub2cbz.core.errors import NavigationParseError
from epub2cbz.core.ncx_parser import parse_navigation

NCX = """<?xml version="1.0" encoding="utf-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <navMap>
    <navPoint id="n1" playOrder="1">
      <navLabel><text>Chapter 1</text></navLabel>
      <content src="{prefix}p1.xhtml#top"/>
      <navPoint id="n1a" playOrder="2">
        <navLabel><text>Chapter 1 part 2</text></navLabel>
        <content src="{prefix}p2.xhtml"/>
      </navPoint>
    </navPoint>
    <navPoint id="n2" playOrder="3">
      <navLabel><text>  Missing   source </text></navLabel>
    </navPoint>
    <navPoint id="n3" playOrder="4">
      <content src="{prefix}p3.xhtml"/>
    </navPoint>
    <navPoint id="n4" playOrder="5">
      <navLabel><text>Renamed</text></navLabel>
      <content src="{prefix}p1.xhtml"/>
    </navPoint>
  </navMap>
</ncx>
"""


def test_labels_by_href_last_wins(tmp_path):
    ncx = write(tmp_path / "toc.ncx", NCX.format(prefix=""))

    nav = parse_navigation(ncx, tmp_path)

    assert nav.label_for("p1.xhtml") == "Renamed"
    assert nav.label_for("p2.xhtml") == "Chapter 1 part 2"
    # Points without a label or source are skipped
    assert nav.label_for("p3.xhtml") is None
    assert len(nav) == 2


def test_hrefs_rebased_onto_content_dir(tmp_path):
    # NCX in a sibling directory of the package document
    ncx = write(tmp_path / "nav" / "toc.ncx", NCX.format(prefix="../text/"))

    nav = parse_navigation(ncx, tmp_path)

    assert nav.label_for("text/p2.xhtml") == "Chapter 1 part 2"


def test_ncx_above_content_dir(tmp_path):
    # toc.ncx at the root next to OEBPS/content.opf
    ncx = write(tmp_path / "toc.ncx", NCX.format(prefix="OEBPS/"))

    nav = parse_navigation(ncx, tmp_path / "OEBPS")

    assert nav.label_for("p1.xhtml") == "Renamed"
    assert nav.label_for("p2.xhtml") == "Chapter 1 part 2"
    assert set(nav.labels) == {"p1.xhtml", "p2.xhtml"}


def test_targets_outside_content_dir_are_skipped(tmp_path):
    ncx = write(tmp_path / "toc.ncx", NCX.format(prefix="extras/"))

    nav = parse_navigation(ncx, tmp_path / "OEBPS")

    assert len(nav) == 0


def test_malformed_ncx_raises(tmp_path):
    ncx = write(tmp_path / "toc.ncx", "<ncx><navMap><navPoint></ncx>")

    with pytest.raises(NavigationParseError):
        parse_navigation(ncx, tmp_path)
