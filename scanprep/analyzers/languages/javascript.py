"""
JavaScript/TypeScript analyzer for scanprep.
"""

import logging
import posixpath
from pathlib import Path
from typing import List

from ..base import LanguageAnalyzer
from ..helpers import (
    AnalysisDraft,
    existing_paths,
    file_exists,
    first_existing,
    guarded_analysis,
    read_json,
)
from ..registry import register_default
from ...models import Confidence, WarningSeverity

logger = logging.getLogger(__name__)


@register_default
class JavaScriptAnalyzer(LanguageAnalyzer):
    """
    Analyzer for package.json based projects.

    TypeScript is reported as the version when a tsconfig.json is present.
    """

    # Lock file -> package manager, checked in order
    LOCK_FILES = (
        ('pnpm-lock.yaml', 'pnpm'),
        ('yarn.lock', 'yarn'),
        ('package-lock.json', 'npm'),
    )

    SOURCE_CANDIDATES = ('src', 'lib', 'app', 'source')
    TEST_CANDIDATES = ('test', 'tests', '__tests__', 'spec', 'specs')
    LCOV_REPORTS = (
        'coverage/lcov.info',
        'coverage/lcov-report/lcov.info',
        '.nyc_output/lcov.info',
    )

    EXCLUSIONS = '**/node_modules/**,**/dist/**,**/build/**,**/*.min.js,**/coverage/**'

    @property
    def language(self) -> str:
        return "javascript"

    def get_critical_properties(self) -> List[str]:
        return ['sonar.sources']

    def get_recommended_properties(self) -> List[str]:
        return [
            'sonar.tests',
            'sonar.javascript.lcov.reportPaths',
            'sonar.typescript.tsconfigPath',
            'sonar.exclusions',
        ]

    def detect(self, project_path) -> bool:
        return file_exists(Path(project_path) / 'package.json')

    def analyze(self, project_path):
        return guarded_analysis(self.language, project_path, self.detect, self._analyze_project)

    def _analyze_project(self, root: Path, draft: AnalysisDraft) -> None:
        package_json = read_json(root / 'package.json')
        if not isinstance(package_json, dict):
            package_json = {}

        draft.build_tool = 'npm'
        for lock_file, manager in self.LOCK_FILES:
            if file_exists(root / lock_file):
                draft.build_tool = manager
                break

        if file_exists(root / 'tsconfig.json'):
            draft.version = 'typescript'
            draft.add_property(
                'sonar.typescript.tsconfigPath', 'tsconfig.json', Confidence.HIGH,
                'detected TypeScript configuration',
            )

        source_dirs = existing_paths(root, self.SOURCE_CANDIDATES)
        main = package_json.get('main')
        if source_dirs:
            draft.add_property(
                'sonar.sources', ','.join(source_dirs), Confidence.HIGH,
                'detected source directories',
            )
        elif isinstance(main, str) and main:
            main_dir = posixpath.dirname(posixpath.normpath(main.replace('\\', '/'))) or '.'
            draft.add_property(
                'sonar.sources', 'src' if main_dir == '.' else main_dir, Confidence.MEDIUM,
                'inferred from package.json main field',
            )
        else:
            draft.add_property('sonar.sources', 'src', Confidence.LOW, 'defaulting to src/')

        test_dirs = existing_paths(root, self.TEST_CANDIDATES)
        if test_dirs:
            draft.add_property(
                'sonar.tests', ','.join(test_dirs), Confidence.HIGH,
                'detected test directories',
            )

        report = first_existing(root, self.LCOV_REPORTS)
        if report:
            draft.add_property(
                'sonar.javascript.lcov.reportPaths', report, Confidence.HIGH,
                f"detected LCOV report at {report}",
            )
        else:
            draft.warn(
                'JS-INFO-001', WarningSeverity.INFO,
                'No coverage report found',
                'Run tests with --coverage flag to generate lcov.info',
            )

        draft.add_property(
            'sonar.exclusions', self.EXCLUSIONS, Confidence.HIGH,
            'standard JavaScript/TypeScript exclusions',
        )
