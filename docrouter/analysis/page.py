"""Pixel-grid helpers shared by the analyzer, filter and optimizer."""

import numpy as np
from numpy.typing import NDArray
from PIL import Image

PageImage = NDArray[np.uint8]


def as_rgb_array(page: PageImage | Image.Image) -> PageImage:
    """Normalize a page to a (height, width, 3) uint8 RGB array.

    Accepts PIL images in any mode, grayscale arrays and RGBA arrays.
    """
    if isinstance(page, Image.Image):
        return np.asarray(page.convert("RGB"), dtype=np.uint8)

    array = np.asarray(page)
    if array.dtype != np.uint8:
        array = np.clip(array, 0, 255).astype(np.uint8)
    if array.ndim == 2:
        return np.stack([array, array, array], axis=-1)
    if array.ndim == 3 and array.shape[2] == 4:
        return array[:, :, :3]
    if array.ndim == 3 and array.shape[2] == 3:
        return array
    raise ValueError(f"Unsupported page shape: {array.shape}")


def brightness(page: PageImage) -> NDArray[np.float64]:
    """Per-pixel mean of the three channels."""
    return page.astype(np.float64).mean(axis=2)
