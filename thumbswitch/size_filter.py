"""
SizeFilter - Drops disabled sizes from the list of sizes to generate.
"""

import logging
from collections.abc import Mapping
from typing import Optional

from .utils import is_truthy


def remove_disabled(candidates, disable_all, disabled_sizes):
    """
    Remove disabled sizes from candidates.

    Args:
        candidates: List of size names, or a mapping of size name to size
        disable_all: Generate nothing at all
        disabled_sizes: Names of sizes not to generate

    Returns:
        Same kind of container as candidates, with disabled entries removed
    """
    is_mapping = isinstance(candidates, Mapping)
    if disable_all:
        return {} if is_mapping else []

    if not isinstance(disabled_sizes, (list, tuple, set, frozenset)) or not disabled_sizes:
        return candidates

    disabled = set(disabled_sizes)
    if is_mapping:
        return {name: size for name, size in candidates.items() if name not in disabled}
    return [name for name in candidates if name not in disabled]


class SizeFilter:
    """Applies the stored switch settings to the sizes about to be generated."""

    def __init__(self, store, logger: Optional[logging.Logger] = None):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

    def _switches(self):
        disable_all = is_truthy(self.store.get_setting('disable_all', False))
        disabled_sizes = self.store.get_setting('disabled_sizes', [])
        return disable_all, disabled_sizes

    def filter_image_sizes(self, sizes, metadata=None):
        """Filter a mapping of size name to size definition."""
        disable_all, disabled_sizes = self._switches()
        filtered = remove_disabled(sizes, disable_all, disabled_sizes)
        if len(filtered) != len(sizes):
            self.logger.debug(f"Skipping sizes: {sorted(set(sizes) - set(filtered))}")
        return filtered

    def filter_size_names(self, names):
        """Filter a plain list of size names."""
        disable_all, disabled_sizes = self._switches()
        return remove_disabled(list(names), disable_all, disabled_sizes)
