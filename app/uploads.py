"""
Upload staging

Writes the multipart ``image`` field to a temporary file so the handler can
work from a path, and reports transport problems as UploadError codes.
The staged file belongs to the request: callers discard it once the response
is built.
"""
import os
import tempfile
from typing import Optional, Tuple

from app.models import UploadError, UploadedImage


def stage_upload(files, field: str = "image", upload_dir: Optional[str] = None) -> Tuple[Optional[UploadedImage], UploadError]:
    file = files.get(field)
    if file is None:
        return None, UploadError.NO_FILE

    filename = (getattr(file, "filename", "") or "").strip()
    upload_dir = upload_dir or tempfile.gettempdir()

    try:
        os.makedirs(upload_dir, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix="upload_", suffix=".tmp", dir=upload_dir)
    except OSError:
        return None, UploadError.NO_TMP_DIR

    try:
        with os.fdopen(fd, "wb") as f:
            file.save(f)
    except OSError:
        _remove(path)
        return None, UploadError.CANT_WRITE

    size = os.path.getsize(path)
    # Browsers submit an empty part when no file was chosen
    if not filename and size == 0:
        _remove(path)
        return None, UploadError.NO_FILE

    image = UploadedImage(
        mime_type=(file.content_type or ""),
        tmp_path=path,
        size=size,
        filename=filename,
    )
    return image, UploadError.OK


def discard_upload(image: Optional[UploadedImage]) -> None:
    if image is None:
        return
    _remove(image.tmp_path)


def _remove(path: str) -> None:
    try:
        if path and os.path.exists(path):
            os.remove(path)
    except OSError:
        pass
