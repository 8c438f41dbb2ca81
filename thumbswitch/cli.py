"""
Command Line Interface for the thumbnail switch.
"""

import argparse
import logging
from typing import List, Optional

import settings
from attachment_db import AttachmentDb
from switch_db import SwitchDb

from .attachment_metadata import MetadataGenerator
from .errors import SettingsError
from .image_size import ImageSize
from .regeneration_progress import RegenerationProgress
from .regenerator import Regenerator
from .size_filter import SizeFilter
from .size_registry import SOURCES, SizeRegistry
from .thumbnail_generator import ThumbnailGenerator
from .utils import is_truthy

SOURCE_TITLES = {
    'core': 'Core Thumbnails',
    'theme': 'Theme Thumbnails',
    'plugins': 'Plugin Thumbnails',
}


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('mysql.connector').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('thumbswitch')


def cmd_activate(args: argparse.Namespace) -> int:
    logger = setup_logging(args.verbose)
    SwitchDb().activate()
    AttachmentDb().create_tables()
    logger.info("Tables created and defaults stored")
    return 0


def cmd_deactivate(args: argparse.Namespace) -> int:
    logger = setup_logging(args.verbose)
    SwitchDb().deactivate()
    logger.info("Cached size list cleared")
    return 0


def cmd_uninstall(args: argparse.Namespace) -> int:
    setup_logging(args.verbose)
    SwitchDb().uninstall()
    return 0


def cmd_sizes(args: argparse.Namespace) -> int:
    """Print every size by origin, marking the disabled ones."""
    setup_logging(args.verbose)
    store = SwitchDb()
    registry = SizeRegistry.from_settings(store)
    print_sizes(store, registry)
    return 0


def print_sizes(store, registry: SizeRegistry) -> None:
    all_sizes = registry.get_all_image_sizes()
    disabled = store.get_setting('disabled_sizes', []) or []
    disable_all = is_truthy(store.get_setting('disable_all', False))

    if disable_all:
        print("All thumbnail generation is DISABLED")
    for source in SOURCES:
        group = all_sizes.get(source) or {}
        if not group:
            continue
        print()
        print(SOURCE_TITLES[source])
        print("-" * len(SOURCE_TITLES[source]))
        for name, data in group.items():
            size = ImageSize.from_dict(name, data)
            state = 'off' if disable_all or name in disabled else 'on'
            print(f"  [{state:>3}] {name:<32} {size.describe()}")


def cmd_switch(args: argparse.Namespace) -> int:
    """Change the stored switches."""
    logger = setup_logging(args.verbose)
    store = SwitchDb()
    registry = SizeRegistry.from_settings(store)

    disabled = store.get_setting('disabled_sizes', []) or []
    if not isinstance(disabled, list):
        disabled = []

    for name in args.disable or []:
        if not registry.has_image_size(name):
            logger.warning(f"Unknown size: {name}")
        if name not in disabled:
            disabled.append(name)
    for name in args.enable or []:
        if name in disabled:
            disabled.remove(name)

    try:
        store.save_setting('disabled_sizes', disabled)
        if args.disable_all is not None:
            store.save_setting('disable_all', args.disable_all)
        if args.cleanup_on_uninstall is not None:
            store.save_setting('cleanup_on_uninstall', args.cleanup_on_uninstall)
    except SettingsError as e:
        logger.error(str(e))
        return 1

    registry.clear_sizes_cache()
    logger.info(f"Disabled sizes: {', '.join(disabled) or 'none'}")
    return 0


def cmd_regenerate(args: argparse.Namespace) -> int:
    """Regenerate every image attachment, batch after batch."""
    logger = setup_logging(args.verbose)

    store = SwitchDb()
    registry = SizeRegistry.from_settings(store, logger=logger)
    metadata_generator = MetadataGenerator(
        registry,
        SizeFilter(store, logger),
        ThumbnailGenerator(quality=settings.JPEG_QUALITY, logger=logger),
        logger=logger
    )
    regenerator = Regenerator(
        AttachmentDb(),
        metadata_generator,
        base_dir=args.base_dir or settings.BASE_DIR,
        per_page=args.per_page,
        logger=logger
    )

    progress = None
    if not args.quiet:
        progress = RegenerationProgress(show_files=args.show_files, logger=logger)

    try:
        stats = regenerator.run(start_batch=args.start_batch, progress=progress, cadence=args.cadence)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Regeneration failed: {e}")
        return 1

    if not args.quiet:
        print()
        print(f"Regenerated: {stats.regenerated}")
        print(f"Skipped: {stats.skipped}")
        print(f"Errors: {stats.errors}")
        print(f"Time: {stats.elapsed_seconds:.1f}s")

    return 0 if stats.errors == 0 else 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='thumbswitch',
        description='Switch thumbnail sizes on and off and regenerate existing images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Typical workflow:
  1. Setup:      python -m thumbswitch activate
  2. Review:     python -m thumbswitch sizes
  3. Switch:     python -m thumbswitch switch --disable medium_large
  4. Regenerate: python -m thumbswitch regenerate
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    for name, help_text in (
        ('activate', 'Create tables and store default settings'),
        ('deactivate', 'Clear the cached size list'),
        ('uninstall', 'Drop all tables if cleanup on uninstall is enabled'),
        ('sizes', 'List registered sizes by origin'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    switch_parser = subparsers.add_parser('switch', help='Enable or disable sizes')
    switch_parser.add_argument('--disable', action='append', metavar='SIZE', help='Size to disable')
    switch_parser.add_argument('--enable', action='append', metavar='SIZE', help='Size to enable again')
    switch_parser.add_argument('--disable-all', dest='disable_all', action='store_true', default=None,
                               help='Stop generating any size')
    switch_parser.add_argument('--enable-all', dest='disable_all', action='store_false', default=None,
                               help='Generate the enabled sizes again')
    switch_parser.add_argument('--cleanup-on-uninstall', dest='cleanup_on_uninstall', action='store_true',
                               default=None, help='Remove all data on uninstall')
    switch_parser.add_argument('--keep-on-uninstall', dest='cleanup_on_uninstall', action='store_false', default=None,
                               help='Keep data on uninstall')
    switch_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    regen_parser = subparsers.add_parser('regenerate', help='Regenerate sizes of all image attachments')
    regen_parser.add_argument('--start-batch', type=int, default=0, metavar='N',
                              help='Batch to start from (resume)')
    regen_parser.add_argument('--per-page', type=int, default=settings.REGENERATE_PER_PAGE,
                              help='Attachments per batch')
    regen_parser.add_argument('-c', '--cadence', type=float, default=0.0, help='Seconds between batches')
    regen_parser.add_argument('--base-dir', metavar='PATH', help='Override BASE_DIR')
    regen_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    regen_parser.add_argument('--show-files', action='store_true',
                              help='Print each attachment as processed with result')
    regen_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    return parser


COMMANDS = {
    'activate': cmd_activate,
    'deactivate': cmd_deactivate,
    'uninstall': cmd_uninstall,
    'sizes': cmd_sizes,
    'switch': cmd_switch,
    'regenerate': cmd_regenerate,
}


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    return COMMANDS[parsed_args.command](parsed_args)
