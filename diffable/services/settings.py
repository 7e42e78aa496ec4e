"""
Settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from diffable.core.diff.alignment import (
    AlignmentAlgorithm,
    LineCompareOptions,
    WhitespaceMode,
)


@dataclass
class ComparisonSettings:
    """Settings for sequence and text comparison."""
    algorithm: AlignmentAlgorithm = AlignmentAlgorithm.MYERS
    whitespace_mode: WhitespaceMode = WhitespaceMode.EXACT
    ignore_case: bool = False
    ignore_line_endings: bool = True

    def line_options(self) -> LineCompareOptions:
        """Line comparison options for these settings."""
        return LineCompareOptions(
            algorithm=self.algorithm,
            ignore_case=self.ignore_case,
            whitespace_mode=self.whitespace_mode,
            ignore_line_endings=self.ignore_line_endings,
        )


@dataclass
class ImageSettings:
    """Settings for image comparison."""
    algorithm: str = "default"


@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: str = "WARNING"
    log_file: str = ""


@dataclass
class DiffSettings:
    """Main settings container."""
    comparison: ComparisonSettings = field(default_factory=ComparisonSettings)
    image: ImageSettings = field(default_factory=ImageSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


class SettingsManager:
    """Manager for loading/saving settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[DiffSettings] = None

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'diffable' / 'settings.json'
        else:
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'diffable' / 'settings.json'

    @property
    def settings(self) -> DiffSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> DiffSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return DiffSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return self._from_dict(data)
        except (OSError, ValueError, AttributeError) as e:
            logging.warning(f"SettingsManager - Could not read {self.settings_path}: {e}")
            return DiffSettings()

    def save(self, settings: Optional[DiffSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)
        except OSError as e:
            logging.error(f"SettingsManager - Could not write {self.settings_path}: {e}")
            return False

        self._settings = settings
        return True

    def reset(self) -> DiffSettings:
        """Reset to default settings."""
        self._settings = DiffSettings()
        self.save()
        return self._settings

    def _to_dict(self, settings: DiffSettings) -> dict:
        """Convert settings to a JSON-friendly dictionary."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> DiffSettings:
        """Convert a dictionary back to settings objects."""
        def get_enum(enum_class: type, value: Any, default: Enum) -> Enum:
            if isinstance(value, str):
                try:
                    return enum_class[value.upper()]
                except KeyError:
                    logging.warning(
                        f"SettingsManager - Unknown {enum_class.__name__} '{value}', "
                        f"using {default.name}"
                    )
            return default

        defaults = DiffSettings()
        comparison_data = data.get('comparison', {})
        image_data = data.get('image', {})
        logging_data = data.get('logging', {})

        comparison = ComparisonSettings(
            algorithm=get_enum(
                AlignmentAlgorithm,
                comparison_data.get('algorithm'),
                defaults.comparison.algorithm,
            ),
            whitespace_mode=get_enum(
                WhitespaceMode,
                comparison_data.get('whitespace_mode'),
                defaults.comparison.whitespace_mode,
            ),
            ignore_case=comparison_data.get('ignore_case', defaults.comparison.ignore_case),
            ignore_line_endings=comparison_data.get(
                'ignore_line_endings', defaults.comparison.ignore_line_endings
            ),
        )

        image = ImageSettings(
            algorithm=image_data.get('algorithm', defaults.image.algorithm),
        )

        log_settings = LoggingSettings(
            level=logging_data.get('level', defaults.logging.level),
            log_file=logging_data.get('log_file', defaults.logging.log_file),
        )

        return DiffSettings(comparison=comparison, image=image, logging=log_settings)
