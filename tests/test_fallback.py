from conftest import image_bytes, write

from epub2cbz.core.fallback import discover_images


def test_orders_by_path_and_numbers_from_one(tmp_path):
    write(tmp_path / "OEBPS" / "img" / "b.jpg", image_bytes("b"))
    write(tmp_path / "OEBPS" / "img" / "a.png", image_bytes("a"))
    write(tmp_path / "Images" / "z.jpeg", image_bytes("z"))

    output = discover_images(tmp_path)

    assert [(i.sequence, i.path.name) for i in output] == [
        (1, "z.jpeg"),
        (2, "a.png"),
        (3, "b.jpg"),
    ]
    assert [i.label for i in output] == ["1", "2", "3"]


def test_skips_small_files_metadata_dir_and_non_images(tmp_path):
    write(tmp_path / "META-INF" / "thumb.jpg", image_bytes("meta"))
    write(tmp_path / "OEBPS" / "ornament.png", image_bytes("o", size=512))
    write(tmp_path / "OEBPS" / "page.xhtml", "<html/>" * 4096)
    write(tmp_path / "OEBPS" / "page.jpg", image_bytes("p"))

    output = discover_images(tmp_path, min_bytes=10 * 1024)

    assert [i.path.name for i in output] == ["page.jpg"]


def test_threshold_is_configurable(tmp_path):
    write(tmp_path / "small.gif", image_bytes("s", size=600))

    assert len(discover_images(tmp_path, min_bytes=1024)) == 0
    assert len(discover_images(tmp_path, min_bytes=100)) == 1


def test_empty_tree(tmp_path):
    assert not discover_images(tmp_path)
