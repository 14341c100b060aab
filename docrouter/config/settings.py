from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    user_tier: str | None = None
    render_scale: float = 2.5

    ocr_local_engine: str = "tesseract"
    tesseract_lang: str = "eng"
    tesseract_cmd: str = ""

    ocr_remote_provider: str = "deepinfra"
    ocr_openai_api_key: str = ""
    ocr_openai_base_url: str = ""
    ocr_openai_model_name: str = "deepseek-ai/DeepSeek-OCR"
    ocr_openai_timeout_seconds: int = 60
    ocr_low_detail_max_tokens: int = 2048
    ocr_high_detail_max_tokens: int = 8192

    ocr_http_base_url: str = "http://localhost:3000/api/upload"
    ocr_http_timeout_seconds: int = 60

    decision_recorder: str = "log"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docrouter"
    db_username: str = "docrouter"
    db_password: str = "secret"
