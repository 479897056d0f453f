"""
Upload Staging Tests
"""
import io
import os

from werkzeug.datastructures import FileStorage

from app.models import UploadError, UploadedImage
from app.uploads import discard_upload, stage_upload


def file_storage(data: bytes, filename: str = 'plaque.png', content_type: str = 'image/png') -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)


class TestStageUpload:
    """Test writing uploads to temp files"""

    def test_missing_field(self, upload_dir):
        image, err = stage_upload({}, 'image', upload_dir)
        assert image is None
        assert err == UploadError.NO_FILE

    def test_empty_part(self, upload_dir):
        """No file chosen in the browser"""
        image, err = stage_upload({'image': file_storage(b'', filename='')}, 'image', upload_dir)
        assert image is None
        assert err == UploadError.NO_FILE
        assert os.listdir(upload_dir) == []

    def test_stages_file(self, upload_dir, png_bytes):
        image, err = stage_upload({'image': file_storage(png_bytes)}, 'image', upload_dir)
        assert err == UploadError.OK
        assert image.mime_type == 'image/png'
        assert image.filename == 'plaque.png'
        assert image.size == len(png_bytes)
        with open(image.tmp_path, 'rb') as f:
            assert f.read() == png_bytes

        discard_upload(image)
        assert not os.path.exists(image.tmp_path)

    def test_unusable_upload_dir(self, tmp_path, png_bytes):
        blocker = tmp_path / 'not-a-dir'
        blocker.write_text('x')
        image, err = stage_upload({'image': file_storage(png_bytes)}, 'image', str(blocker))
        assert image is None
        assert err == UploadError.NO_TMP_DIR

    def test_declared_type_kept_verbatim(self, upload_dir, png_bytes):
        fs = file_storage(png_bytes, content_type='image/png; charset=x')
        image, err = stage_upload({'image': fs}, 'image', upload_dir)
        assert err == UploadError.OK
        assert image.mime_type == 'image/png; charset=x'
        assert not image.is_allowed
        discard_upload(image)


class TestDiscardUpload:
    """Cleanup is best effort"""

    def test_none(self):
        discard_upload(None)

    def test_already_gone(self, tmp_path):
        discard_upload(UploadedImage(mime_type='image/png', tmp_path=str(tmp_path / 'gone')))
