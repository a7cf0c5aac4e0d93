"""Chat animation settings exceptions.

A storage miss is not an error: stores return ``None`` for absent keys.
"""


class ChatAnimationSettingsError(Exception):
    """Base exception for chat animation settings."""


class DecodingError(ChatAnimationSettingsError):
    """Raised when a JSON payload is malformed or misses a required field."""


class EncodingError(ChatAnimationSettingsError):
    """Raised when settings cannot be serialized."""


class PathResolutionError(ChatAnimationSettingsError):
    """Raised when the export directory cannot be resolved."""


class FileWriteError(ChatAnimationSettingsError):
    """Raised when the export file cannot be written."""


class FileReadError(ChatAnimationSettingsError):
    """Raised when an import file cannot be read."""
