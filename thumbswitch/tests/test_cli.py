"""Tests for CLI module."""

from thumbswitch.cli import create_parser, main, print_sizes


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_regenerate_command(self):
        parser = create_parser()
        args = parser.parse_args(['regenerate', '--start-batch', '3', '--per-page', '20', '--show-files'])

        assert args.command == 'regenerate'
        assert args.start_batch == 3
        assert args.per_page == 20
        assert args.show_files is True

    def test_switch_defaults_leave_flags_alone(self):
        parser = create_parser()
        args = parser.parse_args(['switch', '--disable', 'medium', '--disable', 'large'])

        assert args.disable == ['medium', 'large']
        assert args.disable_all is None
        assert args.cleanup_on_uninstall is None

    def test_switch_enable_all(self):
        parser = create_parser()
        args = parser.parse_args(['switch', '--enable-all', '--cleanup-on-uninstall'])

        assert args.disable_all is False
        assert args.cleanup_on_uninstall is True

    def test_lifecycle_commands(self):
        parser = create_parser()

        for command in ('activate', 'deactivate', 'uninstall', 'sizes'):
            assert parser.parse_args([command]).command == command


class TestMain:
    """Tests for main entry point."""

    def test_no_command(self):
        assert main([]) == 1


def test_print_sizes(store, registry, capsys):
    store.values['disabled_sizes'] = ['medium']

    print_sizes(store, registry)

    out = capsys.readouterr().out
    assert 'Core Thumbnails' in out
    assert 'Plugin Thumbnails' in out
    assert '[off] medium ' in out
    assert '[ on] thumbnail' in out
    assert 'Size: 150 x 150 px, Crop: Yes' in out
