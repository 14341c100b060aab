import asyncio

import pytesseract
from PIL import Image

from docrouter.analysis.page import PageImage, as_rgb_array
from docrouter.logging.logger import Log
from docrouter.ocr.base import BaseLocalOcrEngine
from docrouter.ocr.exceptions import LocalOcrError


class TesseractAdapter(BaseLocalOcrEngine):
    """Free OCR through the local Tesseract binary (pytesseract)."""

    def __init__(self, *, lang: str = "eng", tesseract_cmd: str = "") -> None:
        self._lang = lang
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    async def recognize(self, page: PageImage) -> str:
        image = Image.fromarray(as_rgb_array(page))
        try:
            # The engine runs as a subprocess; waiting for it off-loop keeps
            # sibling remote calls in the batch moving.
            text = await asyncio.to_thread(
                pytesseract.image_to_string, image, lang=self._lang
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError) as exc:
            Log.error(f"Tesseract OCR failed: {exc}")
            raise LocalOcrError(f"Tesseract OCR processing failed: {exc}") from exc
        return str(text)
