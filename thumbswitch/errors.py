"""
Exceptions raised by the thumbnail switch.
"""


class SettingsError(Exception):
    """Raised when a setting could not be written to the database."""
    pass


class TokenException(Exception):
    """Raised when an auth token is invalid for some reason."""
    pass
