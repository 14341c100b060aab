import io

from PIL import Image, ImageSequence, UnidentifiedImageError

from docrouter.analysis.page import PageImage, as_rgb_array
from docrouter.rendering.base import BasePageRenderer
from docrouter.rendering.exceptions import RenderError


class PillowImageRenderer(BasePageRenderer):
    """Decodes image uploads; multi-frame images (TIFF, GIF) yield one page per frame."""

    def render(self, data: bytes) -> list[PageImage]:
        try:
            with Image.open(io.BytesIO(data)) as image:
                return [as_rgb_array(frame.convert("RGB")) for frame in ImageSequence.Iterator(image)]
        except (UnidentifiedImageError, OSError) as exc:
            raise RenderError(f"Pillow decoding failed: {exc}") from exc

    def page_count(self, data: bytes) -> int:
        try:
            with Image.open(io.BytesIO(data)) as image:
                return getattr(image, "n_frames", 1)
        except (UnidentifiedImageError, OSError) as exc:
            raise RenderError(f"Pillow decoding failed: {exc}") from exc
