"""
Python analyzer for scanprep.

Detects the packaging tool, the interpreter version, source and test
directories and coverage.py reports.
"""

import logging
from pathlib import Path
from typing import List

from ..base import LanguageAnalyzer
from ..helpers import (
    AnalysisDraft,
    any_exists,
    existing_paths,
    file_exists,
    first_existing,
    guarded_analysis,
    read_text,
)
from ..patterns import PYTHON_VERSION, first_match
from ..registry import register_default
from ...models import Confidence, WarningSeverity

logger = logging.getLogger(__name__)


@register_default
class PythonAnalyzer(LanguageAnalyzer):
    """Python analyzer for pyproject, setuptools, pipenv and pip projects."""

    MARKERS = (
        'pyproject.toml',
        'setup.py',
        'setup.cfg',
        'requirements.txt',
        'Pipfile',
        'poetry.lock',
    )

    SOURCE_CANDIDATES = ('src', 'lib', 'app')
    TEST_CANDIDATES = ('tests', 'test', 'spec')

    EXCLUSIONS = '**/__pycache__/**,**/venv/**,**/.venv/**,**/env/**,**/*.pyc'

    @property
    def language(self) -> str:
        return "python"

    def get_critical_properties(self) -> List[str]:
        return ['sonar.sources']

    def get_recommended_properties(self) -> List[str]:
        return [
            'sonar.python.version',
            'sonar.tests',
            'sonar.python.coverage.reportPaths',
            'sonar.exclusions',
        ]

    def detect(self, project_path) -> bool:
        return any_exists(project_path, self.MARKERS)

    def analyze(self, project_path):
        return guarded_analysis(self.language, project_path, self.detect, self._analyze_project)

    def _analyze_project(self, root: Path, draft: AnalysisDraft) -> None:
        if file_exists(root / 'pyproject.toml'):
            content = read_text(root / 'pyproject.toml')
            draft.build_tool = 'poetry' if content and '[tool.poetry]' in content else 'pyproject'
            draft.version = first_match(PYTHON_VERSION, content)
        elif file_exists(root / 'Pipfile'):
            draft.build_tool = 'pipenv'
        elif file_exists(root / 'setup.py'):
            draft.build_tool = 'setuptools'
        elif file_exists(root / 'requirements.txt'):
            draft.build_tool = 'pip'

        if not draft.version:
            pinned = read_text(root / '.python-version')
            if pinned and pinned.strip():
                draft.version = pinned.strip().splitlines()[0].strip()

        if draft.version:
            draft.add_property(
                'sonar.python.version', draft.version, Confidence.HIGH,
                'detected from project configuration',
            )

        source_dirs = existing_paths(root, self.SOURCE_CANDIDATES)
        if source_dirs:
            draft.add_property(
                'sonar.sources', ','.join(source_dirs), Confidence.HIGH,
                'detected Python source directories',
            )
        else:
            draft.add_property('sonar.sources', '.', Confidence.LOW, 'defaulting to project root')
            draft.warn(
                'PYTHON-WARN-001', WarningSeverity.INFO,
                'No standard Python source directory found (src/, lib/)',
                'Consider organizing code in a src/ directory',
            )

        test_dirs = existing_paths(root, self.TEST_CANDIDATES)
        if test_dirs:
            draft.add_property(
                'sonar.tests', ','.join(test_dirs), Confidence.HIGH,
                'detected Python test directories',
            )

        self._detect_coverage(root, draft)

        draft.add_property(
            'sonar.exclusions', self.EXCLUSIONS, Confidence.MEDIUM,
            'standard Python exclusions',
        )

    def _detect_coverage(self, root: Path, draft: AnalysisDraft) -> None:
        report = first_existing(root, ('coverage.xml', 'htmlcov/coverage.xml'))
        if report:
            draft.add_property(
                'sonar.python.coverage.reportPaths', report, Confidence.HIGH,
                f"detected coverage report at {report}",
            )
        elif file_exists(root / '.coverage'):
            # Raw coverage.py data, the XML report still has to be generated
            draft.add_property(
                'sonar.python.coverage.reportPaths', 'coverage.xml', Confidence.LOW,
                '.coverage found - run "coverage xml" to generate XML report',
            )
