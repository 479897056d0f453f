"""
Test Configuration and Fixtures
"""
import io
import os
import pytest
from PIL import Image
from app import create_app


@pytest.fixture(scope='function')
def error_log():
    """Messages recorded by the app's error log"""
    return []


@pytest.fixture(scope='function')
def upload_dir(tmp_path):
    return str(tmp_path / 'uploads')


@pytest.fixture(scope='function')
def app(error_log, upload_dir):
    """Create application for testing"""
    os.environ['SECRET_KEY'] = 'test-secret-key'

    app = create_app('testing', error_log=error_log.append)
    app.config['TESTING'] = True
    app.config['UPLOAD_FOLDER'] = upload_dir
    yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture(scope='session')
def png_bytes():
    """A small valid PNG"""
    img = Image.new('RGBA', (48, 48), (220, 40, 40, 255))
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


@pytest.fixture(scope='function')
def png_path(tmp_path, png_bytes):
    path = tmp_path / 'plaque.png'
    path.write_bytes(png_bytes)
    return str(path)



@pytest.fixture(scope='session')
def jpeg_bytes():
    """A small valid JPEG"""
    img = Image.new('RGB', (48, 48), (40, 40, 220))
    buf = io.BytesIO()
    img.save(buf, format='JPEG')
    return buf.getvalue()


@pytest.fixture(scope='session')
def gif_bytes():
    img = Image.new('P', (48, 48))
    buf = io.BytesIO()
    img.save(buf, format='GIF')
    return buf.getvalue()
