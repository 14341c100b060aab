from typing import ClassVar

from docrouter.config.settings import Settings
from docrouter.ocr.base import BaseLocalOcrEngine, BaseRemoteOcrClient
from docrouter.ocr.example_adapter import ExampleLocalEngine, ExampleRemoteClient
from docrouter.ocr.http_endpoint_adapter import HttpOcrEndpointAdapter
from docrouter.ocr.openai_vision_adapter import OpenAIVisionClientAdapter
from docrouter.ocr.tesseract_adapter import TesseractAdapter


class OcrBackendFactory:
    """Creates the configured local engine and remote OCR client."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "deepinfra": "https://api.deepinfra.com/v1/openai",
        "openrouter": "https://openrouter.ai/api/v1",
        "together": "https://api.together.xyz/v1",
    }

    @classmethod
    def create_local_engine(cls, settings: Settings) -> BaseLocalOcrEngine:
        engine = settings.ocr_local_engine.lower()
        if engine == "tesseract":
            return TesseractAdapter(
                lang=settings.tesseract_lang,
                tesseract_cmd=settings.tesseract_cmd,
            )
        if engine == "example":
            return ExampleLocalEngine()
        raise ValueError(
            f"Unknown local OCR engine '{engine}'. Choose from: ['example', 'tesseract']"
        )

    @classmethod
    def create_remote_client(cls, settings: Settings) -> BaseRemoteOcrClient:
        provider = settings.ocr_remote_provider.lower()
        if provider == "example":
            return ExampleRemoteClient()
        if provider == "http":
            return HttpOcrEndpointAdapter(
                base_url=settings.ocr_http_base_url,
                timeout_seconds=settings.ocr_http_timeout_seconds,
            )
        return OpenAIVisionClientAdapter(
            api_key=settings.ocr_openai_api_key,
            model=settings.ocr_openai_model_name,
            timeout_seconds=settings.ocr_openai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
            low_detail_max_tokens=settings.ocr_low_detail_max_tokens,
            high_detail_max_tokens=settings.ocr_high_detail_max_tokens,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = (settings.ocr_openai_base_url or "").strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "ocr_openai_base_url is required for ocr_remote_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = [
            "example",
            "http",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown remote OCR provider '{provider}'. Choose from: {supported}"
        )
