"""
Reading and writing of sonar-project.properties files.

Only the subset of the Java properties format that scanner configuration
files use is supported: one key=value pair per line, '#' comment
lines, no line continuations.
"""

import logging
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .config import DEFAULT_CONFIG_FILE
from .exceptions import PropertiesWriteError
from .models import WriteResult

logger = logging.getLogger(__name__)

COMMENT_PREFIX = '#'
VALID_KEY = re.compile(r'^[A-Za-z0-9._\-]+$')


def parse_properties(content: str) -> Dict[str, str]:
    """
    Parse key=value lines.

    Blank and comment lines are skipped, the first '=' splits key from
    value, and a repeated key keeps the later value.
    """
    properties: Dict[str, str] = {}
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        if '=' not in stripped:
            logger.debug(f"Skipping line without '=': {stripped}")
            continue
        key, value = stripped.split('=', 1)
        key = key.strip()
        if key:
            properties[key] = value.strip()
    return properties


def read_properties(path: Union[str, Path]) -> Optional[Dict[str, str]]:
    """Read and parse a properties file, None if it cannot be read."""
    try:
        content = Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read properties file {path}: {e}")
        return None
    return parse_properties(content)


@dataclass(frozen=True)
class SonarModuleConfig:
    """One module of a multi-module configuration"""
    name: str
    base_dir: str
    sources: str
    tests: Optional[str] = None
    binaries: Optional[str] = None
    exclusions: Optional[str] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class SonarPropertiesConfig:
    """Everything needed to render a sonar-project.properties file"""
    project_key: str
    sources: str = 'src'
    project_name: Optional[str] = None
    project_version: Optional[str] = None
    tests: Optional[str] = None
    exclusions: Optional[str] = None
    encoding: Optional[str] = 'UTF-8'
    modules: Tuple[SonarModuleConfig, ...] = ()
    java_binaries: Optional[str] = None
    java_libraries: Optional[str] = None
    coverage_report_paths: Optional[str] = None
    additional_properties: Dict[str, str] = field(default_factory=dict)


class PropertiesFileManager:
    """Reads, renders and writes the scanner configuration file of a project"""

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self.config_file = config_file

    def config_path(self, project_path: Union[str, Path]) -> Path:
        return Path(project_path) / self.config_file

    def exists(self, project_path: Union[str, Path]) -> bool:
        return self.config_path(project_path).is_file()

    def read(self, project_path: Union[str, Path]) -> Optional[Dict[str, str]]:
        return read_properties(self.config_path(project_path))

    def delete(self, project_path: Union[str, Path]) -> bool:
        """Delete the configuration file. Returns False if there was none."""
        path = self.config_path(project_path)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info(f"Deleted {path}")
        return True

    def write_config(self, project_path: Union[str, Path],
                     config: SonarPropertiesConfig) -> WriteResult:
        """
        Render and write the configuration file.

        An existing file is first copied to <name>.backup.<timestamp>, and
        the file name is appended to an existing .gitignore that does not
        list it yet. Failures are reported in the result, never raised.
        """
        path = self.config_path(project_path)
        content = self.generate_content(config)
        backup_path = None

        try:
            if self.exists(project_path):
                backup_path = self._backup(path)
            self._write(path, content)
        except PropertiesWriteError as e:
            logger.error(f"Failed to write configuration: {e}")
            return WriteResult(
                success=False,
                config_path=str(path),
                generated_content=content,
                backup_path=backup_path,
                error=str(e),
            )

        self._register_in_gitignore(Path(project_path))
        logger.info(f"Wrote {path}")
        return WriteResult(
            success=True,
            config_path=str(path),
            generated_content=content,
            backup_path=backup_path,
        )

    def generate_content(self, config: SonarPropertiesConfig) -> str:
        lines = [
            '# SonarQube Project Configuration',
            f"# Generated by scanprep on {datetime.now().isoformat(timespec='seconds')}",
            '',
            '# Project identification',
            f"sonar.projectKey={config.project_key}",
        ]
        if config.project_name:
            lines.append(f"sonar.projectName={config.project_name}")
        if config.project_version:
            lines.append(f"sonar.projectVersion={config.project_version}")
        lines.append('')

        lines.append('# Source configuration')
        lines.append(f"sonar.sources={config.sources}")
        if config.tests:
            lines.append(f"sonar.tests={config.tests}")
        if config.encoding:
            lines.append(f"sonar.sourceEncoding={config.encoding}")
        lines.append('')

        if config.modules:
            lines.extend(self._module_lines(config.modules))

        if config.java_binaries or config.java_libraries:
            lines.append('# Java')
            if config.java_binaries:
                lines.append(f"sonar.java.binaries={config.java_binaries}")
            if config.java_libraries:
                lines.append(f"sonar.java.libraries={config.java_libraries}")
            lines.append('')

        if config.coverage_report_paths:
            lines.append('# Coverage')
            lines.append(f"sonar.coverage.jacoco.xmlReportPaths={config.coverage_report_paths}")
            lines.append('')

        if config.exclusions:
            lines.append('# Exclusions')
            lines.append(f"sonar.exclusions={config.exclusions}")
            lines.append('')

        if config.additional_properties:
            lines.append('# Additional properties')
            for key, value in config.additional_properties.items():
                if not VALID_KEY.match(key):
                    logger.warning(f"Property key {key!r} contains unexpected characters")
                lines.append(f"{key}={value}")
            lines.append('')

        return '\n'.join(lines)

    def _module_lines(self, modules: Tuple[SonarModuleConfig, ...]) -> List[str]:
        lines = [
            '# Modules',
            f"sonar.modules={','.join(m.name for m in modules)}",
            '',
        ]
        for module in modules:
            prefix = module.name
            lines.append(f"# Module: {module.name}")
            lines.append(f"{prefix}.sonar.projectBaseDir={module.base_dir}")
            lines.append(f"{prefix}.sonar.sources={module.sources}")
            if module.tests:
                lines.append(f"{prefix}.sonar.tests={module.tests}")
            if module.binaries:
                lines.append(f"{prefix}.sonar.java.binaries={module.binaries}")
            if module.exclusions:
                lines.append(f"{prefix}.sonar.exclusions={module.exclusions}")
            if module.language:
                lines.append(f"{prefix}.sonar.language={module.language}")
            lines.append('')
        return lines

    def _backup(self, path: Path) -> str:
        timestamp = datetime.now().strftime('%Y%m%d%H%M%S')
        backup = path.with_name(f"{path.name}.backup.{timestamp}")
        try:
            shutil.copy2(path, backup)
        except OSError as e:
            raise PropertiesWriteError(f"Cannot back up existing file ({e})", str(path)) from e
        logger.info(f"Backed up {path} to {backup}")
        return str(backup)

    def _write(self, path: Path, content: str) -> None:
        try:
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise PropertiesWriteError(f"Cannot write configuration ({e})", str(path)) from e

    def _register_in_gitignore(self, project_path: Path) -> None:
        gitignore = project_path / '.gitignore'
        if not gitignore.is_file():
            return
        try:
            content = gitignore.read_text(encoding='utf-8')
            if self.config_file in {line.strip() for line in content.splitlines()}:
                return
            separator = '' if not content or content.endswith('\n') else '\n'
            with open(gitignore, 'a', encoding='utf-8') as f:
                f.write(f"{separator}{self.config_file}\n")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not update {gitignore}: {e}")
            return
        logger.debug(f"Added {self.config_file} to {gitignore}")
