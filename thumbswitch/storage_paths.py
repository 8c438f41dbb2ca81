"""
Storage layout for originals and their derivatives.
"""

import os

import settings


def get_rel_path(thumb_p, storename):
    """Return originals or thumbnails subdirectory of the main
    attachments directory for the given stored file name.
    """
    type_dir = settings.THUMB_DIR if thumb_p else settings.ORIG_DIR
    first_subdir = storename[0:2]
    second_subdir = storename[2:4]
    return os.path.join(type_dir, first_subdir, second_subdir)


def attached_file(storename, base_dir=None):
    """Absolute path of the original for a stored file name."""
    base_dir = settings.BASE_DIR if base_dir is None else base_dir
    return os.path.join(base_dir, get_rel_path(False, storename), storename)


def thumbnail_dir(storename, base_dir=None):
    """Directory holding the derivatives of a stored file name."""
    base_dir = settings.BASE_DIR if base_dir is None else base_dir
    return os.path.join(base_dir, get_rel_path(True, storename))
