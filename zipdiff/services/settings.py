"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from zipdiff.core.archive.comparer import ArchiveCompareOptions, default_worker_count
from zipdiff.core.diff.image_diff import IMAGE_EXTENSIONS
from zipdiff.services.hashing import DEFAULT_CHUNK_SIZE, HashAlgorithm


@dataclass
class ComparisonSettings:
    """Settings for archive comparison."""
    hash_algorithm: HashAlgorithm = HashAlgorithm.XXH64
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # Performance
    parallel_workers: int = field(default_factory=default_worker_count)
    parallel_catalogs: bool = True

    # Entry filters
    junk_prefixes: list[str] = field(default_factory=lambda: ['__MACOSX/'])
    junk_suffixes: list[str] = field(default_factory=lambda: ['.DS_Store'])
    image_extensions: list[str] = field(default_factory=lambda: list(IMAGE_EXTENSIONS))

    def to_options(self) -> ArchiveCompareOptions:
        """Build engine options from these settings."""
        return ArchiveCompareOptions(
            hash_algorithm=self.hash_algorithm,
            chunk_size=self.chunk_size,
            parallel_workers=self.parallel_workers,
            parallel_catalogs=self.parallel_catalogs,
            junk_prefixes=list(self.junk_prefixes),
            junk_suffixes=list(self.junk_suffixes),
            image_extensions=list(self.image_extensions),
        )


@dataclass
class OutputSettings:
    """Settings for command line output."""
    indent: int = 2
    include_summary: bool = False
    log_level: str = "INFO"


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    comparison: ComparisonSettings = field(default_factory=ComparisonSettings)
    output: OutputSettings = field(default_factory=OutputSettings)


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'ZipDiff' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'zipdiff' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return self._from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"SettingsManager - Ignoring unreadable settings {self.settings_path}: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)

            self._settings = settings
            self._notify_observers()
            return True

        except OSError as e:
            logging.error(f"SettingsManager - Failed to save settings to {self.settings_path}: {e}")
            return False

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            try:
                callback(self._settings)
            except Exception as e:
                logging.error(f"SettingsManager - Settings observer failed: {e}")

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            else:
                return obj

        # asdict() keeps enum members as-is; convert() renders them by name
        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        defaults = ComparisonSettings()
        comparison_data = data.get('comparison', {})
        output_data = data.get('output', {})

        algorithm = comparison_data.get('hash_algorithm', defaults.hash_algorithm.name)
        try:
            hash_algorithm = HashAlgorithm.from_string(algorithm)
        except ValueError:
            logging.warning(f"SettingsManager - Unknown hash algorithm {algorithm!r}, using default")
            hash_algorithm = defaults.hash_algorithm

        comparison = ComparisonSettings(
            hash_algorithm=hash_algorithm,
            chunk_size=int(comparison_data.get('chunk_size', defaults.chunk_size)),
            parallel_workers=int(comparison_data.get('parallel_workers', defaults.parallel_workers)),
            parallel_catalogs=bool(comparison_data.get('parallel_catalogs', defaults.parallel_catalogs)),
            junk_prefixes=list(comparison_data.get('junk_prefixes', defaults.junk_prefixes)),
            junk_suffixes=list(comparison_data.get('junk_suffixes', defaults.junk_suffixes)),
            image_extensions=list(comparison_data.get('image_extensions', defaults.image_extensions)),
        )

        output = OutputSettings(
            indent=int(output_data.get('indent', 2)),
            include_summary=bool(output_data.get('include_summary', False)),
            log_level=str(output_data.get('log_level', 'INFO')).upper(),
        )

        return ApplicationSettings(comparison=comparison, output=output)
