import zipfile

from typer.testing import CliRunner

from conftest import write

from epub2cbz.cli import app

runner = CliRunner()


def test_convert_writes_cbz(simple_epub, tmp_path):
    out = tmp_path / "out"

    result = runner.invoke(app, ["convert", str(simple_epub), "-o", str(out), "-q"])

    assert result.exit_code == 0
    with zipfile.ZipFile(out / "Test Book.cbz") as zf:
        assert "001 - 1.jpg" in zf.namelist()


def test_batch_continues_after_failure(simple_epub, tmp_path):
    bogus = write(tmp_path / "bogus.epub", b"not a zip")
    out = tmp_path / "out"

    result = runner.invoke(
        app, ["convert", str(bogus), str(simple_epub), "-o", str(out), "--jobs", "2"]
    )

    assert result.exit_code == 0
    assert (out / "Test Book.cbz").exists()
    assert not (out / "bogus.cbz").exists()
    assert "failed" in result.output


def test_directory_input(simple_epub, tmp_path):
    out = tmp_path / "out"

    result = runner.invoke(app, ["convert", str(simple_epub.parent), "-o", str(out), "-q"])

    assert result.exit_code == 0
    assert (out / "Test Book.cbz").exists()


def test_no_inputs_exits_nonzero(tmp_path):
    result = runner.invoke(app, ["convert", str(tmp_path / "missing.epub")])

    assert result.exit_code == 1


def test_info_lists_pages(simple_epub):
    result = runner.invoke(app, ["info", str(simple_epub)])

    assert result.exit_code == 0
    assert "Test Book" in result.output
    assert "001 - 1.jpg" in result.output
    # Each entry names the spine document it was found on
    assert "p1.xhtml" in result.output
    assert "p2.xhtml" in result.output
