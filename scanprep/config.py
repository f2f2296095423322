"""
Settings loader - parses YAML settings files into a Settings object
"""

import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import logging

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = 'sonar-project.properties'
SETTINGS_FILE_NAMES = ('.scanprep.yaml', '.scanprep.yml')
LIBRARY_PATH_STRATEGIES = ('absolute', 'relative', 'glob')

KNOWN_SECTIONS = {
    'config_file',
    'dependency_resolution',
    'library_path_strategy',
    'analyzers',
    'exclusions',
}


@dataclass(frozen=True)
class Settings:
    """User settings for a validation or recovery run"""
    config_file: str = DEFAULT_CONFIG_FILE
    resolve_dependencies: bool = True
    resolution_timeout: float = 30.0
    library_path_strategy: str = 'relative'
    disabled_analyzers: Tuple[str, ...] = ()
    extra_exclusions: Tuple[str, ...] = ()
    source_file: Optional[str] = None


class SettingsLoader:
    """Loads scanprep settings from YAML files"""

    def __init__(self, project_path: Optional[Union[str, Path]] = None):
        self.project_path = Path(project_path) if project_path else None

    def load(self, config_path: Optional[Union[str, Path]] = None) -> Settings:
        """
        Load settings.

        An explicit config_path must exist and be valid YAML. Without one,
        a .scanprep.yaml in the project root is used if present; a broken
        discovered file is logged and ignored.

        Raises:
            ConfigurationError: explicit file missing or unparseable
        """
        if config_path:
            return self.load_from_file(Path(config_path))

        discovered = self._discover()
        if not discovered:
            return Settings()

        try:
            return self.load_from_file(discovered)
        except ConfigurationError as e:
            logger.error(f"Ignoring settings file {discovered}: {e}")
            return Settings()

    def load_from_file(self, filepath: Path) -> Settings:
        """Load settings from a single YAML file"""
        if not filepath.is_file():
            raise ConfigurationError("Settings file not found", str(filepath))

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Cannot read settings file ({e})", str(filepath)) from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML ({e})", str(filepath)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("Settings file must contain a mapping", str(filepath))

        logger.info(f"Loaded settings from {filepath}")
        return self._parse_settings(data, str(filepath))

    def _discover(self) -> Optional[Path]:
        if not self.project_path:
            return None
        for name in SETTINGS_FILE_NAMES:
            candidate = self.project_path / name
            if candidate.is_file():
                return candidate
        return None

    def _parse_settings(self, raw: Dict[str, Any], source: str) -> Settings:
        """Parse settings from raw YAML data"""
        for key in raw:
            if key not in KNOWN_SECTIONS:
                logger.debug(f"Ignoring unknown settings key: {key}")

        defaults = Settings()

        config_file = raw.get('config_file', defaults.config_file)
        if not isinstance(config_file, str) or not config_file.strip():
            logger.warning(f"Invalid config_file {config_file!r}, using {defaults.config_file}")
            config_file = defaults.config_file

        resolution = self._section(raw, 'dependency_resolution')
        enabled = resolution.get('enabled', defaults.resolve_dependencies)
        if not isinstance(enabled, bool):
            logger.warning(f"Invalid dependency_resolution.enabled {enabled!r}, using default")
            enabled = defaults.resolve_dependencies

        timeout = resolution.get('timeout_seconds', defaults.resolution_timeout)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            logger.warning(f"Invalid dependency_resolution.timeout_seconds {timeout!r}, using default")
            timeout = defaults.resolution_timeout

        strategy = raw.get('library_path_strategy', defaults.library_path_strategy)
        if strategy not in LIBRARY_PATH_STRATEGIES:
            logger.warning(f"Invalid library_path_strategy {strategy!r}, using default")
            strategy = defaults.library_path_strategy

        analyzers = self._section(raw, 'analyzers')
        exclusions = self._section(raw, 'exclusions')

        return Settings(
            config_file=config_file.strip(),
            resolve_dependencies=enabled,
            resolution_timeout=float(timeout),
            library_path_strategy=strategy,
            disabled_analyzers=tuple(s.lower() for s in self._string_list(analyzers, 'disabled')),
            extra_exclusions=tuple(self._string_list(exclusions, 'extra')),
            source_file=source,
        )

    def _section(self, raw: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = raw.get(name) or {}
        if not isinstance(section, dict):
            logger.warning(f"Settings section {name} must be a mapping, ignoring it")
            return {}
        return section

    def _string_list(self, section: Dict[str, Any], key: str) -> List[str]:
        values = section.get(key) or []
        if isinstance(values, str):
            values = [values]
        if not isinstance(values, list):
            logger.warning(f"Settings value {key} must be a list, ignoring it")
            return []
        return [str(v) for v in values if v is not None and str(v).strip()]


def load_settings(project_path: Optional[Union[str, Path]] = None,
                  config_path: Optional[Union[str, Path]] = None) -> Settings:
    """Convenience wrapper around SettingsLoader."""
    return SettingsLoader(project_path).load(config_path)
