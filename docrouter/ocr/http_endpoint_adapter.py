from typing import Any

import httpx

from docrouter.ocr.base import BaseRemoteOcrClient
from docrouter.ocr.exceptions import OcrError, OcrNetworkError


class HttpOcrEndpointAdapter(BaseRemoteOcrClient):
    """Remote OCR through the upload service's own JSON endpoints.

    POST {base_url}/parse-cheap  {"image", "pageNum", "detail": "low"} -> {"text"}
    POST {base_url}/parse        {"images": [...]}                     -> {"text"}

    Any non-2xx response is a hard error.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    async def extract_low_detail(self, image: str, page_num: int) -> str:
        payload = {"image": image, "pageNum": page_num, "detail": "low"}
        return await self._post("/parse-cheap", payload, label="Cheap OCR")

    async def extract_high_detail(self, images: list[str]) -> str:
        return await self._post("/parse", {"images": images}, label="Premium OCR")

    async def _post(self, path: str, payload: dict[str, Any], *, label: str) -> str:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(path, json=payload)
        except httpx.TransportError as exc:
            raise OcrNetworkError(f"{label} network error: {exc}") from exc

        if not response.is_success:
            raise OcrError(
                f"{label} failed: {response.status_code} {response.reason_phrase}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise OcrError(f"{label} returned invalid JSON: {exc}") from exc
        if not isinstance(body, dict) or not isinstance(body.get("text"), str):
            raise OcrError(f"{label} response has no 'text' field")
        return body["text"]
