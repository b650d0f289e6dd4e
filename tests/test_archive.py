import zipfile

import pytest

from conftest import image_bytes, write

from epub2cbz.core.archive import COMICINFO_NAME, ZIP_EPOCH, assemble_cbz
from epub2cbz.core.errors import ArchiveCreationFailed
from epub2cbz.models.pages import OutputSet, ResolvedImage


def make_output(tmp_path, *names):
    output = OutputSet()
    for sequence, name in enumerate(names, start=1):
        path = write(tmp_path / "src" / f"{sequence}" / name, image_bytes(name))
        output.append(ResolvedImage(path=path, sequence=sequence, label=str(sequence)))
    return output


def test_entries_stream_from_resolved_paths(tmp_path):
    output = make_output(tmp_path, "b.jpg", "a.png")
    out_path = tmp_path / "out" / "book.cbz"

    assemble_cbz(output, b"<ComicInfo/>", out_path, "stored")

    with zipfile.ZipFile(out_path) as zf:
        assert zf.namelist() == ["001 - 1.jpg", "002 - 2.png", COMICINFO_NAME]
        assert zf.read("001 - 1.jpg") == image_bytes("b.jpg")
        assert zf.read(COMICINFO_NAME) == b"<ComicInfo/>"
        assert {info.date_time for info in zf.infolist()} == {ZIP_EPOCH}
    # Only the finished archive is left behind
    assert sorted(p.name for p in out_path.parent.iterdir()) == ["book.cbz"]


def test_duplicate_entry_names_rejected(tmp_path):
    output = make_output(tmp_path, "x.jpg", "y.jpg")
    output.images[1].sequence = 1
    output.images[1].label = "1"
    out_path = tmp_path / "book.cbz"

    with pytest.raises(ArchiveCreationFailed, match="001 - 1.jpg"):
        assemble_cbz(output, b"", out_path)

    assert not out_path.exists()


def test_empty_output_rejected(tmp_path):
    with pytest.raises(ArchiveCreationFailed):
        assemble_cbz(OutputSet(), b"", tmp_path / "book.cbz")
