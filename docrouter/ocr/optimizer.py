"""Page preparation for remote OCR calls.

Crops empty margins, picks a JPEG quality from the page's color variance,
then applies the per-override quality floor/ceiling before encoding to a
base64 data URL. Fewer bytes sent means fewer vision tokens billed.
"""

import base64
import io
from dataclasses import dataclass

import numpy as np
from PIL import Image

from docrouter.analysis.page import PageImage, as_rgb_array, brightness
from docrouter.logging.logger import Log
from docrouter.strategy.models import QualityOverride

_CONTENT_BRIGHTNESS = 250
_CROP_PADDING = 20
_MIN_CROP_SHARE = 0.3
_VARIANCE_SAMPLE_STEP = 10
_REFERENCE_QUALITY = 0.95


@dataclass(frozen=True)
class OptimizationResult:
    payload: str  # data:image/jpeg;base64,...
    original_size: int
    optimized_size: int
    savings: float
    cropped_width: int
    cropped_height: int
    quality: float


class ImageOptimizer:
    """Compresses pages before they are sent to the remote OCR client."""

    def optimize(self, page: PageImage | Image.Image) -> OptimizationResult:
        """Crop + adaptive quality, no tier adjustments."""
        pixels = as_rgb_array(page)
        cropped = self.crop_whitespace(pixels)
        return self._encode_result(pixels, cropped, self.optimal_quality(cropped))

    def optimize_for_tier(
        self,
        page: PageImage | Image.Image,
        override: QualityOverride,
    ) -> OptimizationResult:
        pixels = as_rgb_array(page)
        cropped = self.crop_whitespace(pixels)
        quality = self.tier_quality(self.optimal_quality(cropped), override)
        result = self._encode_result(pixels, cropped, quality)
        Log.debug(
            f"Optimized page for {override.value}",
            savings=f"{result.savings * 100:.1f}%",
            quality=result.quality,
        )
        return result

    @staticmethod
    def tier_quality(adaptive_quality: float, override: QualityOverride) -> float:
        """Cheap caps quality at 0.7, premium floors it at 0.85, premium-pipeline pins 0.95."""
        if override is QualityOverride.CHEAP and adaptive_quality > 0.75:
            return 0.7
        if override is QualityOverride.PREMIUM_PIPELINE:
            return 0.95
        if override is QualityOverride.PREMIUM and adaptive_quality < 0.8:
            return 0.85
        return adaptive_quality

    @staticmethod
    def crop_whitespace(pixels: PageImage) -> PageImage:
        """Trim near-white margins, keeping 20px of padding.

        Returns the input unchanged when the crop would keep less than 30%
        of either dimension.
        """
        height, width = pixels.shape[:2]
        content = brightness(pixels) < _CONTENT_BRIGHTNESS
        rows = np.flatnonzero(content.any(axis=1))
        if rows.size == 0:
            return pixels

        top = max(0, int(rows[0]) - _CROP_PADDING)
        bottom = min(height, int(rows[-1]) + _CROP_PADDING)
        cols = np.flatnonzero(content[top:bottom].any(axis=0))
        if cols.size == 0:
            return pixels
        left = max(0, int(cols[0]) - _CROP_PADDING)
        right = min(width, int(cols[-1]) + _CROP_PADDING)

        crop_width = right - left
        crop_height = bottom - top
        if (
            crop_width <= 0
            or crop_height <= 0
            or crop_width < width * _MIN_CROP_SHARE
            or crop_height < height * _MIN_CROP_SHARE
        ):
            return pixels
        return pixels[top:bottom, left:right]

    @staticmethod
    def optimal_quality(pixels: PageImage) -> float:
        """0.7 for grayscale text, 0.8 for mixed, 0.9 for colorful pages."""
        sampled = pixels.reshape(-1, 3)[::_VARIANCE_SAMPLE_STEP].astype(np.int16)
        if sampled.size == 0:
            return 0.85
        r, g, b = sampled[:, 0], sampled[:, 1], sampled[:, 2]
        variance = float((np.abs(r - g) + np.abs(g - b) + np.abs(b - r)).mean())
        if variance < 10:
            return 0.7
        if variance < 30:
            return 0.8
        return 0.9

    @staticmethod
    def encode_jpeg(pixels: PageImage, quality: float) -> str:
        buffer = io.BytesIO()
        Image.fromarray(pixels).save(buffer, format="JPEG", quality=round(quality * 100))
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:image/jpeg;base64,{encoded}"

    def _encode_result(
        self, original: PageImage, cropped: PageImage, quality: float
    ) -> OptimizationResult:
        original_size = len(self.encode_jpeg(original, _REFERENCE_QUALITY))
        payload = self.encode_jpeg(cropped, quality)
        optimized_size = len(payload)
        savings = 1 - optimized_size / original_size if original_size > 0 else 0.0
        return OptimizationResult(
            payload=payload,
            original_size=original_size,
            optimized_size=optimized_size,
            savings=savings,
            cropped_width=cropped.shape[1],
            cropped_height=cropped.shape[0],
            quality=quality,
        )
