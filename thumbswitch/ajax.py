"""
Request handlers for the admin page. They take the posted form (a Bottle
FormsDict or anything with get/getall and `in`) and return the JSON payload.
"""

import logging

from .errors import SettingsError
from .utils import is_truthy, sanitize_text

logger = logging.getLogger(__name__)

SETTINGS_SAVED = 'Settings saved successfully!'
SAVE_FAILED = 'Failed to save setting'


def json_success(data=None):
    return {'success': True, 'data': data}


def json_error(data=None):
    return {'success': False, 'data': data}


def parse_disabled_sizes(forms):
    """Size names posted as disabled_sizes[] (or disabled_sizes), sanitized."""
    values = list(forms.getall('disabled_sizes[]')) + list(forms.getall('disabled_sizes'))
    names = []
    for value in values:
        name = sanitize_text(value)
        if name and name not in names:
            names.append(name)
    return names


def parse_batch(value):
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def save_settings(store, registry, forms):
    """Store the three switches from a posted settings form."""
    # checkboxes are only posted when ticked
    disable_all = 'disable_all' in forms
    cleanup_on_uninstall = 'cleanup_on_uninstall' in forms
    disabled_sizes = parse_disabled_sizes(forms)

    try:
        store.save_setting('disable_all', disable_all)
        store.save_setting('cleanup_on_uninstall', cleanup_on_uninstall)
        store.save_setting('disabled_sizes', disabled_sizes)
    except SettingsError as e:
        logger.error(f"Saving settings failed: {e}")
        return json_error(SAVE_FAILED)

    registry.clear_sizes_cache()
    logger.info(f"Settings saved: disable_all={disable_all} disabled_sizes={disabled_sizes}")
    return json_success({'message': SETTINGS_SAVED})


def regenerate_thumbnails(regenerator, forms):
    """Run one regeneration batch."""
    batch = parse_batch(forms.get('batch', 0))
    return json_success(regenerator.regenerate_batch(batch))


def page_data(store, registry):
    """Everything the settings page shows."""
    disabled_sizes = store.get_setting('disabled_sizes', [])
    if not isinstance(disabled_sizes, list):
        disabled_sizes = []
    return {
        'sizes': registry.get_all_image_sizes(),
        'disable_all': is_truthy(store.get_setting('disable_all', False)),
        'disabled_sizes': disabled_sizes,
        'cleanup_on_uninstall': is_truthy(store.get_setting('cleanup_on_uninstall', False)),
    }
