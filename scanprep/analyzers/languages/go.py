"""
Go analyzer for scanprep.

Go keeps tests beside sources, so both properties point at the module
root and test files are split out with inclusion/exclusion patterns.
"""

import logging
from pathlib import Path
from typing import List

from ..base import LanguageAnalyzer
from ..helpers import AnalysisDraft, file_exists, first_existing, guarded_analysis, read_text
from ..patterns import GO_VERSION, first_match
from ..registry import register_default
from ...models import Confidence, WarningSeverity

logger = logging.getLogger(__name__)


@register_default
class GoAnalyzer(LanguageAnalyzer):
    """Go modules analyzer (go.mod)."""

    COVERAGE_REPORTS = ('coverage.out', 'cover.out', 'coverage.txt')

    @property
    def language(self) -> str:
        return "go"

    def get_critical_properties(self) -> List[str]:
        return ['sonar.sources']

    def get_recommended_properties(self) -> List[str]:
        return [
            'sonar.go.coverage.reportPaths',
            'sonar.tests',
            'sonar.exclusions',
        ]

    def detect(self, project_path) -> bool:
        return file_exists(Path(project_path) / 'go.mod')

    def analyze(self, project_path):
        return guarded_analysis(self.language, project_path, self.detect, self._analyze_project)

    def _analyze_project(self, root: Path, draft: AnalysisDraft) -> None:
        draft.build_tool = 'go'
        draft.version = first_match(GO_VERSION, read_text(root / 'go.mod'))

        draft.add_property('sonar.sources', '.', Confidence.HIGH, 'Go project root directory')
        draft.add_property(
            'sonar.tests', '.', Confidence.MEDIUM,
            'Go tests are co-located with source files',
        )

        report = first_existing(root, self.COVERAGE_REPORTS)
        if report:
            draft.add_property(
                'sonar.go.coverage.reportPaths', report, Confidence.HIGH,
                f"detected Go coverage report at {report}",
            )
        else:
            draft.warn(
                'GO-INFO-001', WarningSeverity.INFO,
                'No coverage report found',
                'Run "go test -coverprofile=coverage.out ./..." to generate coverage',
            )

        draft.add_property(
            'sonar.exclusions', '**/vendor/**,**/*_test.go', Confidence.HIGH,
            'standard Go exclusions (vendor and test files from sources)',
        )
        draft.add_property(
            'sonar.test.inclusions', '**/*_test.go', Confidence.HIGH,
            'Go test file pattern',
        )
