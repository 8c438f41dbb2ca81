"""
Pytest fixtures for thumbswitch tests.
"""

import io
import logging
import os

import pytest


class MemoryStore:
    """In-memory stand-in for SwitchDb used by the filter and handler tests."""

    def __init__(self, values=None):
        self.values = dict(values or {})
        self.transients = {}
        self.saved = []

    def get_setting(self, key, default=''):
        return self.values.get(key, default)

    def get_all_settings(self):
        return dict(self.values)

    def save_setting(self, key, value):
        self.values[key] = value
        self.saved.append(key)
        return True

    def delete_setting(self, key):
        self.values.pop(key, None)
        return True

    def get_transient(self, name):
        return self.transients.get(name)

    def set_transient(self, name, value, expiration=0):
        self.transients[name] = value
        return True

    def delete_transient(self, name):
        self.transients.pop(name, None)
        return True


@pytest.fixture
def store():
    """Fixture providing an empty in-memory settings store."""
    return MemoryStore()


@pytest.fixture
def registry(store):
    """Fixture providing a registry with core, theme and plugin sizes."""
    from thumbswitch.image_size import ImageSize
    from thumbswitch.size_registry import SizeRegistry

    core = {
        'thumbnail': ImageSize('thumbnail', 150, 150, True),
        'medium': ImageSize('medium', 300, 300, False),
        'medium_large': ImageSize('medium_large', 768, 0, False),
        'large': ImageSize('large', 1024, 1024, False),
    }
    additional = {
        'twentytwenty-fullscreen': (1980, 9999, False),
        'woocommerce_thumbnail': (300, 300, True),
        'hero-banner': (1600, 600, True),
    }
    return SizeRegistry(
        store,
        core_sizes=core,
        additional_sizes=additional,
        theme_name='Twenty Twenty',
        theme_text_domain='twentytwenty',
        active_plugins=['woocommerce/woocommerce.php'],
    )


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes (1000x500)."""
    from PIL import Image

    img = Image.new('RGB', (1000, 500), color='red')
    buffer = io.BytesIO()
    img.save(buffer, format='JPEG')
    return buffer.getvalue()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency."""
    from PIL import Image

    img = Image.new('RGBA', (400, 400), color=(255, 0, 0, 128))
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def base_dir(tmp_path, sample_image_bytes):
    """Fixture providing an attachments tree with one original."""
    from thumbswitch import storage_paths

    original = storage_paths.attached_file('abcd1234.jpg', str(tmp_path))
    os.makedirs(os.path.dirname(original))
    with open(original, 'wb') as f:
        f.write(sample_image_bytes)
    return str(tmp_path)


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')
