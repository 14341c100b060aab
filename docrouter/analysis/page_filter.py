"""Blank-page detection and perceptual-hash duplicate detection."""

import numpy as np
from PIL import Image

from docrouter.analysis.models import SkipReason
from docrouter.analysis.page import PageImage, as_rgb_array, brightness

BLANK_SAMPLE_STEP = 40
BLANK_BRIGHTNESS = 250
BLANK_DARK_RATIO = 0.01

HASH_GRID = 8
DUPLICATE_DISTANCE_RATIO = 0.1


def is_blank_page(page: PageImage | Image.Image, sample_step: int = BLANK_SAMPLE_STEP) -> bool:
    """Return True when fewer than 1% of sampled pixels are darker than 250."""
    pixels = as_rgb_array(page)
    sampled = pixels.reshape(-1, 3)[::sample_step]
    if sampled.size == 0:
        return True
    dark = brightness(sampled[np.newaxis, :, :]) < BLANK_BRIGHTNESS
    return float(dark.sum()) / dark.size < BLANK_DARK_RATIO


def page_hash(page: PageImage | Image.Image, grid: int = HASH_GRID) -> str:
    """Average hash: one bit per cell of a grid x grid luminance thumbnail.

    Returns a string of '0'/'1' characters of length grid * grid.
    """
    pixels = as_rgb_array(page)
    thumbnail = Image.fromarray(pixels).convert("L").resize(
        (grid, grid), Image.Resampling.BOX
    )
    cells = np.asarray(thumbnail, dtype=np.float64).ravel()
    mean = cells.mean()
    return "".join("1" if cell > mean else "0" for cell in cells)


def hamming_distance(hash1: str, hash2: str) -> int:
    """Count differing bits between two equal-length fingerprints."""
    if len(hash1) != len(hash2):
        raise ValueError(
            f"Fingerprints differ in length: {len(hash1)} != {len(hash2)}"
        )
    return sum(1 for a, b in zip(hash1, hash2) if a != b)


def are_duplicates(hash1: str, hash2: str) -> bool:
    """Fingerprints are duplicates when under 10% of their bits differ."""
    if len(hash1) != len(hash2) or not hash1:
        return False
    return hamming_distance(hash1, hash2) < len(hash1) * DUPLICATE_DISTANCE_RATIO


class PageHashSet:
    """Fingerprints seen so far in one document run.

    Owned by a single run and discarded with it; never shared across documents.
    """

    def __init__(self) -> None:
        self._fingerprints: list[str] = []

    def __len__(self) -> int:
        return len(self._fingerprints)

    def find_duplicate(self, fingerprint: str) -> str | None:
        """Return the first stored fingerprint that duplicates *fingerprint*."""
        for existing in self._fingerprints:
            if are_duplicates(fingerprint, existing):
                return existing
        return None

    def add(self, fingerprint: str) -> None:
        """Remember a processed page fingerprint."""
        self._fingerprints.append(fingerprint)


class PageFilter:
    """Decides whether a page can be skipped before any OCR work."""

    def __init__(self, *, skip_blank: bool = True, skip_duplicates: bool = True) -> None:
        self._skip_blank = skip_blank
        self._skip_duplicates = skip_duplicates

    def check(
        self,
        page: PageImage | Image.Image,
        hash_set: PageHashSet | None = None,
    ) -> SkipReason | None:
        """Return the reason to skip *page*, or None if it needs OCR.

        Unseen fingerprints are added to *hash_set* so later pages can match them.
        """
        pixels = as_rgb_array(page)
        if self._skip_blank and is_blank_page(pixels):
            return SkipReason.BLANK

        if self._skip_duplicates and hash_set is not None:
            fingerprint = page_hash(pixels)
            if hash_set.find_duplicate(fingerprint) is not None:
                return SkipReason.DUPLICATE
            hash_set.add(fingerprint)

        return None
