import re
from typing import Any, ClassVar

import httpx
import openai

from docrouter.logging.logger import Log
from docrouter.ocr.base import BaseRemoteOcrClient
from docrouter.ocr.exceptions import OcrError, OcrNetworkError


class OpenAIVisionClientAdapter(BaseRemoteOcrClient):
    """Remote OCR over an OpenAI-compatible chat API with image inputs.

    The `detail` field of each image part selects the provider's compression:
    "low" for the cheap strategy, "high" for premium.
    """

    LOW_DETAIL_PROMPT: ClassVar[str] = (
        "<image>\nExtract all text from this document. Return ONLY the plain text "
        "content without any bounding boxes, coordinates, or special formatting "
        "markers. Preserve paragraph structure, headings, and lists using clean "
        "markdown format."
    )
    HIGH_DETAIL_PROMPT: ClassVar[str] = (
        "<image>\n<|grounding|>Convert the document to markdown. Extract all text, "
        "headings, lists, tables, and formulas. Preserve the structure and formatting."
    )

    _LABELED_BOX_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"\w+\[\[\d+,\s*\d+,\s*\d+,\s*\d+\]\]"
    )
    _BOX_RE: ClassVar[re.Pattern[str]] = re.compile(r"\[\[\d+,\s*\d+,\s*\d+,\s*\d+\]\]")

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        base_url: str | None = None,
        low_detail_max_tokens: int = 2048,
        high_detail_max_tokens: int = 8192,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self._model = model
        self._low_detail_max_tokens = low_detail_max_tokens
        self._high_detail_max_tokens = high_detail_max_tokens

    async def extract_low_detail(self, image: str, page_num: int) -> str:
        text = await self._complete(
            image,
            prompt=self.LOW_DETAIL_PROMPT,
            detail="low",
            max_tokens=self._low_detail_max_tokens,
        )
        Log.debug(f"Low-detail OCR page {page_num}: {len(text)} chars")
        return text

    async def extract_high_detail(self, images: list[str]) -> str:
        if not images:
            raise OcrError("No images provided for high-detail OCR")

        parts: list[str] = []
        for index, image in enumerate(images, start=1):
            text = await self._complete(
                image,
                prompt=self.HIGH_DETAIL_PROMPT,
                detail="high",
                max_tokens=self._high_detail_max_tokens,
            )
            if len(images) > 1:
                parts.append(f"## Page {index}\n\n{text}\n\n---\n\n")
            else:
                parts.append(text)
        return "".join(parts)

    async def _complete(self, image: str, *, prompt: str, detail: str, max_tokens: int) -> str:
        messages: list[dict[str, Any]] = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": image, "detail": detail}},
                ],
            }
        ]
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,  # type: ignore[arg-type]
                temperature=0.0,
                max_tokens=max_tokens,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise OcrNetworkError(f"OCR provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise OcrNetworkError(f"OCR provider API error: {exc}") from exc

        if not response.choices:
            raise OcrError("OCR provider returned no choices")
        content = response.choices[0].message.content or ""
        return self.strip_bounding_boxes(content)

    @classmethod
    def strip_bounding_boxes(cls, text: str) -> str:
        """Drop `label[[x1, y1, x2, y2]]` grounding annotations."""
        text = cls._LABELED_BOX_RE.sub("", text)
        return cls._BOX_RE.sub("", text).strip()
