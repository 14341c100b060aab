class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class UploadNotFoundError(ProcessorError):
    """Raised when the upload file does not exist on disk."""


class MissingContextError(ProcessorError):
    """Raised when a step runs before the step that fills its inputs."""
