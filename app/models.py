"""
Request-scoped data models

Key Models:
- UploadError: transport-level upload status codes
- UploadedImage: a staged upload, borrowed by the handler for one request
- GenerationFailure: error result returned by the PDF renderer
"""
import enum
from dataclasses import dataclass
from typing import Optional


# Only PNG uploads are rendered; the declared MIME type is trusted as-is.
ALLOWED_IMAGE_EXTENSIONS = ("png",)


class UploadError(enum.IntEnum):
    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


@dataclass
class UploadedImage:
    mime_type: str
    tmp_path: str
    size: int = 0
    filename: str = ""

    @property
    def extension(self) -> str:
        """Lower-cased MIME subtype, e.g. ``image/PNG`` -> ``png``"""
        parts = (self.mime_type or "").split("/", 1)
        if len(parts) < 2:
            return ""
        return parts[1].strip().lower()

    @property
    def is_allowed(self) -> bool:
        return self.extension in ALLOWED_IMAGE_EXTENSIONS


@dataclass
class GenerationFailure:
    message: str
    cause: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "GenerationFailure":
        cause = exc.__cause__
        return cls(
            message=str(exc) or type(exc).__name__,
            cause=(str(cause) or type(cause).__name__) if cause is not None else None,
        )
