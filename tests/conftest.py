import logging
import sys
import pathlib
import zipfile

import pytest

# Ensure src/ is on sys.path for test imports
SRC_PATH = pathlib.Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def image_bytes(seed: str, size: int = 16 * 1024) -> bytes:
    """Fake JPEG payload, unique per seed and large enough for image discovery."""
    body = (seed.encode() * (size // max(len(seed), 1) + 1))[: size - 4]
    return b"\xff\xd8\xff\xe0" + body


def page_xhtml(*srcs: str, svg: str | None = None) -> str:
    imgs = "".join(f'<img src="{src}" alt=""/>' for src in srcs)
    svg_block = ""
    if svg is not None:
        svg_block = (
            '<svg xmlns="http://www.w3.org/2000/svg" '
            'xmlns:xlink="http://www.w3.org/1999/xlink">'
            f'<image xlink:href="{svg}"/></svg>'
        )
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml"><head><title>p</title></head>'
        f"<body>{svg_block}{imgs}</body></html>"
    )


def make_opf(
    items: list[tuple[str, str, str]],
    spine: list[str],
    metadata: str = "<dc:title>Test Book</dc:title>",
    guide: str = "",
    spine_attrs: str = "",
) -> str:
    manifest = "\n".join(
        f'    <item id="{i}" href="{h}" media-type="{m}"/>' for i, h, m in items
    )
    itemrefs = "\n".join(f'    <itemref idref="{i}"/>' for i in spine)
    guide_block = f"<guide>{guide}</guide>" if guide else ""
    return f"""<?xml version="1.0" encoding="utf-8"?>
<package xmlns="http://www.idpf.org/2007/opf" xmlns:opf="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    {metadata}
  </metadata>
  <manifest>
{manifest}
  </manifest>
  <spine{spine_attrs}>
{itemrefs}
  </spine>
  {guide_block}
</package>
"""


def write(path: pathlib.Path, content: str | bytes) -> pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


def write_container(root: pathlib.Path, opf_path: str) -> None:
    write(root / "META-INF" / "container.xml", CONTAINER_XML.format(path=opf_path))


def build_simple_tree(root: pathlib.Path, cover: bytes | None = None) -> pathlib.Path:
    """Two-page EPUB tree under OEBPS/, optionally with a declared cover."""
    write(root / "mimetype", "application/epub+zip")
    write_container(root, "OEBPS/content.opf")
    write(root / "OEBPS" / "p1.xhtml", page_xhtml("images/a.jpg"))
    write(root / "OEBPS" / "p2.xhtml", page_xhtml("images/b.jpg"))
    write(root / "OEBPS" / "images" / "a.jpg", image_bytes("a"))
    write(root / "OEBPS" / "images" / "b.jpg", image_bytes("b"))

    items = [
        ("p1", "p1.xhtml", "application/xhtml+xml"),
        ("p2", "p2.xhtml", "application/xhtml+xml"),
        ("img-a", "images/a.jpg", "image/jpeg"),
        ("img-b", "images/b.jpg", "image/jpeg"),
    ]
    metadata = "<dc:title>Test Book</dc:title>"
    if cover is not None:
        write(root / "OEBPS" / "images" / "cover.jpg", cover)
        items.append(("cover-img", "images/cover.jpg", "image/jpeg"))
        metadata += '<meta name="cover" content="cover-img"/>'

    write(root / "OEBPS" / "content.opf", make_opf(items, ["p1", "p2"], metadata))
    return root


def zip_tree(root: pathlib.Path, epub_path: pathlib.Path) -> pathlib.Path:
    """Pack a directory tree into an .epub file."""
    with zipfile.ZipFile(epub_path, "w") as zf:
        for path in sorted(root.rglob("*")):
            if path.is_file():
                zf.write(path, path.relative_to(root).as_posix())
    return epub_path


@pytest.fixture
def simple_tree(tmp_path):
    return build_simple_tree(tmp_path / "book")


@pytest.fixture
def simple_epub(tmp_path):
    root = build_simple_tree(tmp_path / "src_tree")
    return zip_tree(root, tmp_path / "Test Book.epub")


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo the CLI's logging setup so caplog sees records in later tests."""
    yield
    logger = logging.getLogger("epub2cbz")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
