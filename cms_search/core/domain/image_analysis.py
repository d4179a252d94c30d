"""Image analysis configuration and results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..ports.image_analysis_port import ImageAnalysisPort


@dataclass(frozen=True)
class ImageAnalysisDisabled:
    """Image analysis is switched off; every call yields no caption."""

    reason: str = "no image-analysis credentials configured"


@dataclass(frozen=True)
class ImageAnalysisEnabled:
    """Image analysis is available through ``client``."""

    client: ImageAnalysisPort


ImageAnalysisConfig = ImageAnalysisDisabled | ImageAnalysisEnabled


@dataclass
class ImageAnalysisResult:
    """Caption produced for one image, or ``None`` when unavailable."""

    source_image_url: str
    caption: str | None = None

    @property
    def analyzed(self) -> bool:
        return bool(self.caption)
