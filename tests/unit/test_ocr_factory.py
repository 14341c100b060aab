from unittest.mock import patch

import pytest

from docrouter.ocr.example_adapter import ExampleLocalEngine, ExampleRemoteClient
from docrouter.ocr.factory import OcrBackendFactory
from docrouter.ocr.http_endpoint_adapter import HttpOcrEndpointAdapter
from docrouter.ocr.openai_vision_adapter import OpenAIVisionClientAdapter
from docrouter.ocr.tesseract_adapter import TesseractAdapter


def _make_settings(**values: object):  # type: ignore[no-untyped-def]
    """Create a minimal Settings-like object with only the given fields."""
    defaults: dict[str, object] = {
        "ocr_local_engine": "tesseract",
        "tesseract_lang": "eng",
        "tesseract_cmd": "",
        "ocr_remote_provider": "deepinfra",
        "ocr_openai_api_key": "k",
        "ocr_openai_base_url": "",
        "ocr_openai_model_name": "deepseek-ai/DeepSeek-OCR",
        "ocr_openai_timeout_seconds": 60,
        "ocr_low_detail_max_tokens": 2048,
        "ocr_high_detail_max_tokens": 8192,
        "ocr_http_base_url": "http://localhost:3000/api/upload",
        "ocr_http_timeout_seconds": 60,
    }
    defaults.update(values)
    with patch("docrouter.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        for name, value in defaults.items():
            setattr(settings, name, value)
        return settings


class TestCreateLocalEngine:
    def test_creates_tesseract(self) -> None:
        engine = OcrBackendFactory.create_local_engine(_make_settings())
        assert isinstance(engine, TesseractAdapter)

    def test_creates_example(self) -> None:
        engine = OcrBackendFactory.create_local_engine(_make_settings(ocr_local_engine="Example"))
        assert isinstance(engine, ExampleLocalEngine)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown local OCR engine"):
            OcrBackendFactory.create_local_engine(_make_settings(ocr_local_engine="easyocr"))


class TestCreateRemoteClient:
    def test_creates_example(self) -> None:
        client = OcrBackendFactory.create_remote_client(
            _make_settings(ocr_remote_provider="example")
        )
        assert isinstance(client, ExampleRemoteClient)

    def test_creates_http(self) -> None:
        client = OcrBackendFactory.create_remote_client(_make_settings(ocr_remote_provider="http"))
        assert isinstance(client, HttpOcrEndpointAdapter)

    def test_creates_deepinfra_with_default_base_url(self) -> None:
        with patch("docrouter.ocr.factory.OpenAIVisionClientAdapter") as adapter_cls:
            OcrBackendFactory.create_remote_client(_make_settings())
        assert adapter_cls.call_args.kwargs["base_url"] == "https://api.deepinfra.com/v1/openai"

    def test_base_url_override_wins(self) -> None:
        with patch("docrouter.ocr.factory.OpenAIVisionClientAdapter") as adapter_cls:
            OcrBackendFactory.create_remote_client(
                _make_settings(ocr_openai_base_url="https://proxy.local/v1")
            )
        assert adapter_cls.call_args.kwargs["base_url"] == "https://proxy.local/v1"

    def test_openai_uses_sdk_default(self) -> None:
        with patch("docrouter.ocr.factory.OpenAIVisionClientAdapter") as adapter_cls:
            OcrBackendFactory.create_remote_client(_make_settings(ocr_remote_provider="openai"))
        assert adapter_cls.call_args.kwargs["base_url"] is None

    def test_builds_real_openai_adapter(self) -> None:
        client = OcrBackendFactory.create_remote_client(_make_settings())
        assert isinstance(client, OpenAIVisionClientAdapter)

    def test_openai_compatible_requires_base_url(self) -> None:
        with pytest.raises(ValueError, match="ocr_openai_base_url is required"):
            OcrBackendFactory.create_remote_client(
                _make_settings(ocr_remote_provider="openai_compatible")
            )

    def test_raises_for_unknown_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown remote OCR provider"):
            OcrBackendFactory.create_remote_client(_make_settings(ocr_remote_provider="acme"))
