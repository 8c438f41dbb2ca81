"""
Small helpers shared by the server, the database layer and the CLI.
"""

import re

TAG_PATTERN = re.compile(r'<[^>]*>')
CONTROL_PATTERN = re.compile(r'[\x00-\x1f\x7f]')
WHITESPACE_PATTERN = re.compile(r'\s+')


def str2bool(value, raise_exc=False):
    """converts diverse string values into boolean True or False,
       replaces deprecated distutils and str2bool."""
    true_set = {'yes', 'true', 't', 'y', '1'}
    false_set = {'no', 'false', 'f', 'n', '0'}

    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        value = str(value)

    if isinstance(value, str):
        value = value.strip().lower()
        if value in true_set:
            return True
        if value in false_set:
            return False

    if raise_exc:
        raise ValueError('Expected "%s"' % '", "'.join(true_set | false_set))
    return None


def is_truthy(value) -> bool:
    """True only for values str2bool reads as an explicit yes."""
    return str2bool(value) is True


def sanitize_text(value) -> str:
    """Strip tags and control characters and collapse whitespace."""
    if value is None:
        return ''
    text = TAG_PATTERN.sub('', str(value))
    text = CONTROL_PATTERN.sub(' ', text)
    return WHITESPACE_PATTERN.sub(' ', text).strip()

