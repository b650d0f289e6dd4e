"""Convert EPUB-packaged comics and manga into CBZ archives."""

__version__ = "0.1.0"
