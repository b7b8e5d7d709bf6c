"""
Pytest configuration and fixtures for Frame Studio tests.

Provides the Flask test app, generated photos and textures, and
FrameSpec objects built from the shipped catalog.
"""

import io
import pytest
import shutil
import tempfile
from pathlib import Path
from typing import Tuple
from PIL import Image, ImageDraw

from framestudio import create_app
from framestudio.catalog import load_catalog
from framestudio.compositor import CompositorSettings, PreviewCompositor
from framestudio.models import PhotoAsset, RenderSurface
from framestudio.textures import TextureLibrary


PROJECT_ROOT = Path(__file__).parent.parent
CATALOG_FILE = PROJECT_ROOT / 'config' / 'catalog.yaml'

PHOTO_RED = (200, 30, 30)
PHOTO_BLUE = (30, 30, 200)


def make_image_bytes(size: Tuple[int, int], color=PHOTO_RED, fmt: str = 'PNG') -> bytes:
    """Encode a solid-color image."""
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_photo(size: Tuple[int, int], color=PHOTO_RED, filename: str = 'photo.png') -> PhotoAsset:
    return PhotoAsset.from_bytes(make_image_bytes(size, color), filename=filename)


@pytest.fixture(scope='session')
def work_root():
    root = Path(tempfile.mkdtemp())
    yield root
    shutil.rmtree(root, ignore_errors=True)


@pytest.fixture(scope='session')
def app(work_root):
    """Create and configure a test Flask application."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-key',
        'TEMP_FOLDER': str(work_root / 'tmp'),
        'LOG_FILE': str(work_root / 'logs' / 'app.log'),
        'TEXTURE_DIR': str(work_root / 'textures'),
        'CATALOG_FILE': str(CATALOG_FILE),
        'DEBUG': True,
    })

    yield app


@pytest.fixture
def client(app):
    """Create a test client for the Flask application."""
    return app.test_client()


@pytest.fixture(scope='session')
def catalog():
    return load_catalog(str(CATALOG_FILE))


@pytest.fixture
def temp_work_dir():
    """Create a temporary work directory for test processing."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def texture_dir(temp_work_dir):
    """Write sample material textures: a checkerboard and a plain white tile."""
    textures = temp_work_dir / 'textures'
    textures.mkdir()

    checker = Image.new('RGB', (16, 16), (220, 180, 120))
    draw = ImageDraw.Draw(checker)
    draw.rectangle([0, 0, 7, 7], fill=(160, 110, 60))
    draw.rectangle([8, 8, 15, 15], fill=(160, 110, 60))
    checker.save(textures / 'grain.png')

    Image.new('RGB', (8, 8), (255, 255, 255)).save(textures / 'white.png')
    (textures / 'broken.png').write_bytes(b'not an image')

    return textures


@pytest.fixture
def compositor(texture_dir):
    settings = CompositorSettings(texture_dir=str(texture_dir))
    return PreviewCompositor(settings, TextureLibrary(texture_dir))


@pytest.fixture
def surface():
    return RenderSurface(400, 400)


@pytest.fixture
def square_photo():
    return make_photo((1000, 1000))


@pytest.fixture
def landscape_photo():
    return make_photo((1600, 900))


@pytest.fixture
def portrait_photo():
    return make_photo((900, 1600))


@pytest.fixture
def make_spec(catalog):
    """Build a FrameSpec from catalog ids; material fields can be overridden."""

    def _make(material_overrides: dict = None, **payload):
        payload.setdefault('size', '8x10')
        payload.setdefault('material', 'oak')
        payload.setdefault('color', 'natural-oak')
        payload.setdefault('thickness', 'half')
        spec = catalog.build_spec(payload)
        if material_overrides:
            material = spec.material.model_copy(update=material_overrides)
            spec = spec.model_copy(update={'material': material})
        return spec

    return _make
