"""Per-file conversion results."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class ConversionEvent(BaseModel):
    """Progress or warning message emitted by the pipeline."""

    level: Literal["info", "warning", "error"]
    message: str


class ConversionResult(BaseModel):
    """Outcome of converting a single EPUB."""

    source: Path
    output: Path | None = None
    page_count: int = 0
    has_cover: bool = False
    strategy: str | None = None  # "spine" | "fallback"
    title: str | None = None
    events: list[ConversionEvent] = Field(default_factory=list)
    error: str | None = None
    skipped: bool = False

    @property
    def success(self) -> bool:
        return self.error is None and self.output is not None

    @property
    def warnings(self) -> list[str]:
        return [e.message for e in self.events if e.level == "warning"]
