"""Pixel heuristics that estimate how hard a page is to OCR.

Three independent passes over the same buffer:
1. Text density: share of interior pixels with a strong horizontal or
   vertical intensity step on the red channel.
2. Image presence: share of non-background pixels that are colorful or dark.
3. Tables / handwriting: placeholders derived from density / constant.
"""

import numpy as np
from PIL import Image

from docrouter.analysis.models import PageComplexity
from docrouter.analysis.page import PageImage, as_rgb_array
from docrouter.logging.logger import Log

_EDGE_DELTA = 30
_BACKGROUND_MIN = 240
_CHANNEL_DIVERGENCE = 20
_DARK_MAX = 200
_IMAGE_RATIO = 0.15
_TABLE_DENSITY = 0.25


class PageComplexityAnalyzer:
    """Side-effect-free analyzer; one instance can serve every page of a run."""

    def analyze(self, page: PageImage | Image.Image) -> PageComplexity:
        pixels = as_rgb_array(page)

        text_density = self._text_density(pixels)
        has_images = self._has_images(pixels)
        has_tables = self._detect_tables(text_density)
        is_handwritten = self._detect_handwriting(pixels)
        confidence = self._confidence(text_density, has_images)

        return PageComplexity(
            has_images=has_images,
            has_tables=has_tables,
            text_density=text_density,
            is_handwritten=is_handwritten,
            confidence=confidence,
        )

    @staticmethod
    def _text_density(pixels: PageImage) -> float:
        red = pixels[:, :, 0].astype(np.int16)
        height, width = red.shape
        if height < 3 or width < 3:
            return 0.0

        current = red[1 : height - 1, 1 : width - 1]
        right = red[1 : height - 1, 2:width]
        below = red[2:height, 1 : width - 1]
        edges = (np.abs(current - right) > _EDGE_DELTA) | (
            np.abs(current - below) > _EDGE_DELTA
        )
        return float(edges.sum()) / edges.size

    @staticmethod
    def _has_images(pixels: PageImage) -> bool:
        total = pixels.shape[0] * pixels.shape[1]
        if total == 0:
            return False

        rgb = pixels.astype(np.int16)
        r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
        background = (r > _BACKGROUND_MIN) & (g > _BACKGROUND_MIN) & (b > _BACKGROUND_MIN)
        colorful = (
            (np.abs(r - g) > _CHANNEL_DIVERGENCE)
            | (np.abs(g - b) > _CHANNEL_DIVERGENCE)
            | ((r < _DARK_MAX) & (g < _DARK_MAX) & (b < _DARK_MAX))
        )
        ratio = float((colorful & ~background).sum()) / total
        return ratio > _IMAGE_RATIO

    @staticmethod
    def _detect_tables(text_density: float) -> bool:
        # No line-structure detection yet: dense edges stand in for ruled tables.
        has_tables = text_density > _TABLE_DENSITY
        if has_tables:
            Log.debug(
                "Table flag inferred from edge density (low confidence)",
                text_density=round(text_density, 3),
            )
        return has_tables

    @staticmethod
    def _detect_handwriting(pixels: PageImage) -> bool:
        _ = pixels  # stroke-variance analysis not implemented
        return False

    @staticmethod
    def _confidence(text_density: float, has_images: bool) -> float:
        if text_density > 0.1 and not has_images:
            return 0.9
        if has_images or text_density < 0.05:
            return 0.7
        return 0.6
