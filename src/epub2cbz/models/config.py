"""Conversion settings."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class ConvertConfig(BaseModel):
    """Settings shared by every file in a conversion batch."""

    output_dir: Path | None = None  # None = next to each input file
    overwrite: bool = False
    min_image_bytes: int = Field(default=10 * 1024, ge=0)
    search_depth: int = Field(default=5, ge=0)
    fallback_depth: int = Field(default=10, ge=0)
    scratch_dir: Path | None = None  # None = system temp directory
    jobs: int = Field(default=1, ge=1)
    compression: Literal["deflated", "stored"] = "deflated"

    def output_path_for(self, epub_path: Path) -> Path:
        """Target .cbz path for an input file."""
        directory = self.output_dir or epub_path.parent
        return directory / f"{epub_path.stem}.cbz"
