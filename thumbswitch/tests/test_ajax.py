"""Tests for the admin request handlers."""

from unittest.mock import MagicMock

import pytest
from bottle import FormsDict

from thumbswitch import ajax
from thumbswitch.errors import SettingsError
from thumbswitch.size_registry import SIZES_TRANSIENT


def make_form(*pairs):
    forms = FormsDict()
    for key, value in pairs:
        forms.append(key, value)
    return forms


class TestSaveSettings:
    """Tests for the save settings handler."""

    def test_saves_checked_boxes(self, store, registry):
        forms = make_form(
            ('disable_all', '1'),
            ('disabled_sizes[]', 'medium'),
            ('disabled_sizes[]', '<b>large</b> '),
        )

        result = ajax.save_settings(store, registry, forms)

        assert result == {'success': True, 'data': {'message': 'Settings saved successfully!'}}
        assert store.values == {
            'disable_all': True,
            'cleanup_on_uninstall': False,
            'disabled_sizes': ['medium', 'large'],
        }

    def test_unchecked_boxes_are_false(self, store, registry):
        ajax.save_settings(store, registry, make_form())

        assert store.values['disable_all'] is False
        assert store.values['cleanup_on_uninstall'] is False
        assert store.values['disabled_sizes'] == []

    def test_clears_sizes_cache(self, store, registry):
        registry.get_all_image_sizes()
        assert SIZES_TRANSIENT in store.transients

        ajax.save_settings(store, registry, make_form(('cleanup_on_uninstall', '1')))

        assert SIZES_TRANSIENT not in store.transients

    def test_database_failure(self, registry):
        failing = MagicMock()
        failing.save_setting.side_effect = SettingsError("down")

        result = ajax.save_settings(failing, registry, make_form())

        assert result == {'success': False, 'data': 'Failed to save setting'}


@pytest.mark.parametrize('value,expected', [
    ('3', 3),
    ('0', 0),
    ('-2', 0),
    ('abc', 0),
    (None, 0),
])
def test_parse_batch(value, expected):
    assert ajax.parse_batch(value) == expected


def test_regenerate_thumbnails_passes_batch():
    regenerator = MagicMock()
    regenerator.regenerate_batch.return_value = {'done': True, 'message': 'x', 'total': 0}

    result = ajax.regenerate_thumbnails(regenerator, make_form(('batch', '4')))

    regenerator.regenerate_batch.assert_called_once_with(4)
    assert result['success'] is True
    assert result['data']['done'] is True


def test_page_data(store, registry):
    store.values.update({'disable_all': '1', 'disabled_sizes': ['medium']})

    data = ajax.page_data(store, registry)

    assert data['disable_all'] is True
    assert data['disabled_sizes'] == ['medium']
    assert data['cleanup_on_uninstall'] is False
    assert 'thumbnail' in data['sizes']['core']
