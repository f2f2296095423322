"""Shared test fixtures for the scanprep test suite."""

import sys
import pytest
from pathlib import Path

# Ensure scanprep is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from scanprep.analyzers import AnalyzerRegistry, LanguageAnalyzer
from scanprep.config import Settings
from scanprep.models import (
    Confidence, DetectedProperty, LanguageAnalysisResult,
    ValidationWarning, WarningSeverity,
)


def write_tree(root: Path, files: dict) -> Path:
    """
    Create files under root. Keys ending in '/' are created as directories,
    everything else as files holding the mapped text.
    """
    for relative, content in files.items():
        target = root / relative
        if relative.endswith('/'):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content or '', encoding='utf-8')
    return root


@pytest.fixture
def make_project(tmp_path):
    """Factory building a project tree inside tmp_path."""
    def _make(files: dict, name: str = 'project') -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        return write_tree(root, files)
    return _make


@pytest.fixture
def offline_settings():
    """Settings that never start a build tool."""
    return Settings(resolve_dependencies=False)


@pytest.fixture
def offline_registry(offline_settings):
    """Default analyzers without dependency resolution."""
    return AnalyzerRegistry.with_defaults(offline_settings)


@pytest.fixture
def maven_project(make_project):
    """A compiled single-module Maven project with tests and a JaCoCo report."""
    return make_project({
        'pom.xml': (
            '<project>\n'
            '  <properties>\n'
            '    <maven.compiler.source>17</maven.compiler.source>\n'
            '  </properties>\n'
            '</project>\n'
        ),
        'src/main/java/App.java': 'class App {}',
        'src/test/java/AppTest.java': 'class AppTest {}',
        'target/classes/': None,
        'target/test-classes/': None,
        'target/site/jacoco/jacoco.xml': '<report/>',
    })


@pytest.fixture
def python_project(make_project):
    """A src-layout pyproject project with tests and a coverage report."""
    return make_project({
        'pyproject.toml': '[project]\nname = "demo"\nrequires-python = ">=3.10"\n',
        'src/demo/__init__.py': '',
        'tests/test_demo.py': '',
        'coverage.xml': '<coverage/>',
    })


class StubAnalyzer(LanguageAnalyzer):
    """Configurable analyzer for orchestrator tests."""

    def __init__(self, language='stub', detected=True, properties=(), warnings=(),
                 critical=('sonar.sources',), recommended=(), fail_with=None):
        self._language = language
        self._detected = detected
        self._properties = tuple(properties)
        self._warnings = tuple(warnings)
        self._critical = list(critical)
        self._recommended = list(recommended)
        self._fail_with = fail_with

    @property
    def language(self):
        return self._language

    def detect(self, project_path):
        return self._detected

    def analyze(self, project_path):
        if self._fail_with:
            raise self._fail_with
        return LanguageAnalysisResult(
            detected=True,
            language=self._language,
            properties=self._properties,
            warnings=self._warnings,
        )

    def get_critical_properties(self):
        return list(self._critical)

    def get_recommended_properties(self):
        return list(self._recommended)


def prop(key, value='x', confidence=Confidence.HIGH, source='test'):
    return DetectedProperty(key=key, value=value, confidence=confidence, source=source)


def warning(code='W', severity=WarningSeverity.WARNING, message='msg'):
    return ValidationWarning(code=code, severity=severity, message=message)
