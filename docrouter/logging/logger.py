import logging
import sys


class _ContextFormatter(logging.Formatter):
    """Appends keyword context passed to Log.* calls as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context: dict[str, object] = getattr(record, "context", {})
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} | {pairs}"


class Log:
    """Centralized logging for the routing and OCR pipeline."""

    _logger: logging.Logger = logging.getLogger("docrouter")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                _ContextFormatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra={"context": context})

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra={"context": context})

    @classmethod
    def exception(cls, message: str, **context: object) -> None:
        """Log an error message with the active exception's traceback."""
        cls._logger.exception(message, extra={"context": context})

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra={"context": context})

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra={"context": context})
