"""
SizeRegistry - Every registered thumbnail size and where it comes from.
"""

import logging
import os
import posixpath
from typing import Dict, Iterable, Optional, Tuple

import settings
import size_definitions

from .image_size import ImageSize

SIZES_TRANSIENT = 'thumbswitch_image_sizes'

SOURCES = ('core', 'theme', 'plugins')

SizeTuple = Tuple[int, int, bool]


def core_sizes_from_env(defaults: Dict[str, SizeTuple]) -> Dict[str, ImageSize]:
    """Build the core sizes, letting <NAME>_SIZE_W / _SIZE_H / _CROP override them."""
    sizes = {}
    for name, (width, height, crop) in defaults.items():
        env_name = name.upper()
        width = int(os.getenv(f"{env_name}_SIZE_W", width))
        height = int(os.getenv(f"{env_name}_SIZE_H", height))
        crop_env = os.getenv(f"{env_name}_CROP")
        if crop_env is not None:
            crop = crop_env.strip().lower() in ('1', 'true', 'yes')
        sizes[name] = ImageSize(name, width, height, bool(crop))
    return sizes


class SizeRegistry:
    """
    Holds the core sizes and the additional sizes registered by the theme
    and by plugins, and groups them by origin for the admin page.
    """

    def __init__(
        self,
        store,
        core_sizes: Optional[Dict[str, ImageSize]] = None,
        additional_sizes: Optional[Dict[str, SizeTuple]] = None,
        theme_name: str = '',
        theme_text_domain: str = '',
        active_plugins: Iterable[str] = (),
        plugin_patterns: Iterable[str] = size_definitions.PLUGIN_PATTERNS,
        cache_ttl: int = 3600,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            store: Settings store providing get/set/delete_transient
            core_sizes: Core sizes by name
            additional_sizes: Theme and plugin sizes as name -> (width, height, crop)
            theme_name: Display name of the active theme
            theme_text_domain: Text domain of the active theme
            active_plugins: Plugin entries such as 'woocommerce/woocommerce.php'
            plugin_patterns: Name fragments that identify plugin sizes
            cache_ttl: Seconds the grouped view stays cached
            logger: Optional logger instance
        """
        self.store = store
        self.core_sizes = dict(core_sizes or {})
        self.additional_sizes: Dict[str, ImageSize] = {}
        self.theme_name = theme_name or ''
        self.theme_text_domain = theme_text_domain or ''
        self.active_plugins = list(active_plugins)
        self.plugin_patterns = tuple(plugin_patterns)
        self.cache_ttl = cache_ttl
        self.logger = logger or logging.getLogger(__name__)

        for name, (width, height, crop) in (additional_sizes or {}).items():
            self.add_image_size(name, width, height, crop)

    @classmethod
    def from_settings(cls, store, logger: Optional[logging.Logger] = None) -> 'SizeRegistry':
        return cls(
            store,
            core_sizes=core_sizes_from_env(size_definitions.CORE_IMAGE_SIZES),
            additional_sizes=size_definitions.ADDITIONAL_IMAGE_SIZES,
            theme_name=settings.THEME_NAME,
            theme_text_domain=settings.THEME_TEXT_DOMAIN,
            active_plugins=settings.ACTIVE_PLUGINS,
            cache_ttl=settings.SIZES_CACHE_TTL,
            logger=logger,
        )

    def add_image_size(self, name: str, width: int, height: int, crop: bool = False) -> ImageSize:
        size = ImageSize(name, int(width), int(height), bool(crop))
        self.additional_sizes[name] = size
        return size

    def remove_image_size(self, name: str) -> bool:
        return self.additional_sizes.pop(name, None) is not None

    def has_image_size(self, name: str) -> bool:
        return name in self.core_sizes or name in self.additional_sizes

    def registered_sizes(self) -> Dict[str, ImageSize]:
        """All sizes, core first, then additional sizes in registration order."""
        sizes = dict(self.core_sizes)
        for name, size in self.additional_sizes.items():
            sizes.setdefault(name, size)
        return sizes

    def get_all_image_sizes(self) -> Dict[str, Dict[str, dict]]:
        """
        Get every size grouped by origin.

        Returns:
            {'core': {...}, 'theme': {...}, 'plugins': {...}} where each entry
            maps a size name to {'width', 'height', 'crop'}
        """
        cached = self.store.get_transient(SIZES_TRANSIENT)
        if cached is not None:
            return cached

        sizes = {source: {} for source in SOURCES}
        for name, size in self.core_sizes.items():
            sizes['core'][name] = size.to_dict()

        for name, size in self.additional_sizes.items():
            if name in self.core_sizes:
                continue
            source = self.determine_size_source(name)
            sizes[source][name] = size.to_dict()

        self.store.set_transient(SIZES_TRANSIENT, sizes, self.cache_ttl)
        return sizes

    def determine_size_source(self, size_name: str) -> str:
        """Guess whether an additional size belongs to the theme or a plugin."""
        size_lower = size_name.lower()

        theme_ids = (
            self.theme_text_domain.lower(),
            self.theme_name.lower().replace(' ', '-'),
        )
        if any(theme_id and theme_id in size_lower for theme_id in theme_ids):
            return 'theme'

        for plugin in self.active_plugins:
            plugin_slug = posixpath.dirname(plugin)
            if not plugin_slug or plugin_slug == '.':
                plugin_slug = posixpath.basename(plugin)
                if plugin_slug.endswith('.php'):
                    plugin_slug = plugin_slug[:-len('.php')]
            if plugin_slug and plugin_slug.lower() in size_lower:
                return 'plugins'

        for pattern in self.plugin_patterns:
            if pattern in size_lower:
                return 'plugins'

        # unknown sizes are attributed to the theme
        return 'theme'

    def clear_sizes_cache(self) -> None:
        self.store.delete_transient(SIZES_TRANSIENT)
