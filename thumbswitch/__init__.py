"""
Thumbnail switch for the asset server.

Lets an administrator turn individual thumbnail sizes (core, theme or
plugin sizes) or all thumbnail generation off, and regenerate the sizes of
existing image attachments in batches.
"""

__version__ = "1.0.0"

from .image_size import ImageSize
from .size_registry import SizeRegistry
from .size_filter import SizeFilter, remove_disabled
from .thumbnail_generator import ThumbnailGenerator
from .attachment_metadata import MetadataGenerator
from .regeneration_stats import RegenerationStats
from .regeneration_progress import RegenerationProgress
from .regenerator import Regenerator, percent_complete

__all__ = [
    "ImageSize",
    "SizeRegistry",
    "SizeFilter",
    "remove_disabled",
    "ThumbnailGenerator",
    "MetadataGenerator",
    "RegenerationStats",
    "RegenerationProgress",
    "Regenerator",
    "percent_complete",
]
