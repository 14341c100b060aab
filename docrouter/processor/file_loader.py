import mimetypes
from pathlib import Path

from docrouter.processor.exceptions import UploadNotFoundError
from docrouter.profiling.models import UploadedFile

DEFAULT_MIME_TYPE = "application/octet-stream"


class FileLoader:
    """Reads a file from disk into an UploadedFile."""

    def load(self, path: Path, mime_type: str | None = None) -> UploadedFile:
        """Read *path*; the MIME type is guessed from the extension unless given.

        Raises:
            UploadNotFoundError: if the file does not exist.
        """
        if not path.is_file():
            raise UploadNotFoundError(f"File not found: {path}")
        guessed, _ = mimetypes.guess_type(path.name)
        return UploadedFile(
            name=path.name,
            mime_type=mime_type or guessed or DEFAULT_MIME_TYPE,
            data=path.read_bytes(),
        )
