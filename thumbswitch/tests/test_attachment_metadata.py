"""Tests for MetadataGenerator class."""

import os

import pytest

from thumbswitch import storage_paths
from thumbswitch.attachment_metadata import MetadataGenerator
from thumbswitch.size_filter import SizeFilter
from thumbswitch.thumbnail_generator import ThumbnailGenerator


class TestMetadataGenerator:
    """Tests for MetadataGenerator class."""

    @pytest.fixture
    def generator(self, registry, store, logger):
        return MetadataGenerator(registry, SizeFilter(store), ThumbnailGenerator(), logger=logger)

    @pytest.fixture
    def original(self, base_dir):
        return storage_paths.attached_file('abcd1234.jpg', base_dir)

    @pytest.fixture
    def thumb_dir(self, base_dir):
        return storage_paths.thumbnail_dir('abcd1234.jpg', base_dir)

    def test_generates_every_size_smaller_than_original(self, generator, original, thumb_dir):
        metadata = generator.generate_attachment_metadata(original, thumb_dir)

        assert metadata['width'] == 1000
        assert metadata['height'] == 500
        assert metadata['file'] == 'abcd1234.jpg'
        assert sorted(metadata['sizes']) == ['medium', 'medium_large', 'thumbnail', 'woocommerce_thumbnail']
        assert metadata['sizes']['medium']['file'] == 'abcd1234-300x150.jpg'
        assert os.path.exists(os.path.join(thumb_dir, 'abcd1234-768x384.jpg'))

    def test_disabled_sizes_are_not_written(self, generator, store, original, thumb_dir):
        store.values['disabled_sizes'] = ['medium', 'woocommerce_thumbnail']

        metadata = generator.generate_attachment_metadata(original, thumb_dir)

        assert sorted(metadata['sizes']) == ['medium_large', 'thumbnail']
        assert not os.path.exists(os.path.join(thumb_dir, 'abcd1234-300x150.jpg'))

    def test_disable_all_writes_nothing(self, generator, store, original, thumb_dir):
        store.values['disable_all'] = True

        metadata = generator.generate_attachment_metadata(original, thumb_dir)

        assert metadata['sizes'] == {}
        assert not os.path.exists(thumb_dir)

    def test_sizes_to_generate(self, generator, store):
        store.values['disabled_sizes'] = ['large', 'hero-banner']

        sizes = generator.sizes_to_generate({})

        assert 'large' not in sizes
        assert 'hero-banner' not in sizes
        assert 'thumbnail' in sizes
