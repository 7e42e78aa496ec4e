"""
Services used by the command-line harness: settings and file input.
"""

from diffable.services.file_io import FileIOService, TextContent
from diffable.services.settings import (
    ComparisonSettings,
    DiffSettings,
    ImageSettings,
    LoggingSettings,
    SettingsManager,
)

__all__ = [
    'FileIOService',
    'TextContent',
    'ComparisonSettings',
    'DiffSettings',
    'ImageSettings',
    'LoggingSettings',
    'SettingsManager',
]
