"""
MetadataGenerator - Builds attachment metadata, generating every enabled size.
"""

import logging
import os
from typing import Optional

from PIL import Image

from .size_filter import SizeFilter
from .size_registry import SizeRegistry
from .thumbnail_generator import ThumbnailGenerator


class MetadataGenerator:
    """
    Generates the derivatives of an original and describes them.

    The size list goes through both filters before anything is written,
    so disabled sizes never reach the disk.
    """

    def __init__(
        self,
        registry: SizeRegistry,
        size_filter: SizeFilter,
        thumbnail_generator: ThumbnailGenerator,
        logger: Optional[logging.Logger] = None
    ):
        self.registry = registry
        self.size_filter = size_filter
        self.thumb_gen = thumbnail_generator
        self.logger = logger or logging.getLogger(__name__)

    def sizes_to_generate(self, metadata: dict) -> dict:
        sizes = self.registry.registered_sizes()
        names = self.size_filter.filter_size_names(list(sizes))
        sizes = {name: sizes[name] for name in names if name in sizes}
        return self.size_filter.filter_image_sizes(sizes, metadata)

    def generate_attachment_metadata(self, file_path: str, thumb_dir: str) -> dict:
        """
        Generate derivatives for an original and return its metadata.

        Args:
            file_path: Path of the original image
            thumb_dir: Directory the derivatives are written to

        Returns:
            {'width', 'height', 'file', 'sizes': {name: {...}}}
        """
        filename = os.path.basename(file_path)
        root, ext = os.path.splitext(filename)

        with Image.open(file_path) as img:
            img.load()
            metadata = {
                'width': img.width,
                'height': img.height,
                'file': filename,
                'sizes': {},
            }

            for name, size in self.sizes_to_generate(metadata).items():
                result = self.thumb_gen.make_subsize(img, size, root, ext, thumb_dir)
                if result is not None:
                    metadata['sizes'][name] = result

        self.logger.info(f"Generated {len(metadata['sizes'])} sizes for {filename}")
        return metadata
