"""
C/C++ analyzer for scanprep.

Covers CMake, Meson, Make, Autotools and Bazel trees. The CFamily scanner
needs either a compilation database or build-wrapper output, so a missing
compile_commands.json is reported with the command that generates it.
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
)
from ..registry import register_default
from ...models import Confidence, WarningSeverity

logger = logging.getLogger(__name__)


@register_default
class CppAnalyzer(LanguageAnalyzer):
    """C/C++ analyzer."""

    MARKERS = (
        'CMakeLists.txt',
        'Makefile',
        'meson.build',
        'configure.ac',
        'BUILD.bazel',
        'compile_commands.json',
    )

    # Build file -> build tool, checked in order
    BUILD_TOOLS = (
        ('CMakeLists.txt', 'cmake'),
        ('meson.build', 'meson'),
        ('Makefile', 'make'),
        ('BUILD.bazel', 'bazel'),
    )

    SOURCE_CANDIDATES = ('src', 'source', 'lib', 'include')
    TEST_CANDIDATES = ('test', 'tests', 'unittest', 'unit_tests')
    COMPILE_COMMANDS = (
        'compile_commands.json',
        'build/compile_commands.json',
        'cmake-build-debug/compile_commands.json',
        'cmake-build-release/compile_commands.json',
    )
    BUILD_WRAPPER_OUTPUT = ('bw-output', 'build-wrapper-output', '.sonar/bw-output')

    EXCLUSIONS = '**/build/**,**/cmake-build-*/**,**/third_party/**,**/vendor/**'

    @property
    def language(self) -> str:
        return "cpp"

    def get_critical_properties(self) -> List[str]:
        return [
            'sonar.sources',
            'sonar.cfamily.compile-commands',
        ]

    def get_recommended_properties(self) -> List[str]:
        return [
            'sonar.cfamily.build-wrapper-output',
            'sonar.tests',
            'sonar.exclusions',
        ]

    def detect(self, project_path) -> bool:
        return any_exists(project_path, self.MARKERS)

    def analyze(self, project_path):
        return guarded_analysis(self.language, project_path, self.detect, self._analyze_project)

    def _analyze_project(self, root: Path, draft: AnalysisDraft) -> None:
        for build_file, tool in self.BUILD_TOOLS:
            if file_exists(root / build_file):
                draft.build_tool = tool
                break

        source_dirs = existing_paths(root, self.SOURCE_CANDIDATES)
        if source_dirs:
            draft.add_property(
                'sonar.sources', ','.join(source_dirs), Confidence.HIGH,
                'detected C/C++ source directories',
            )
        else:
            draft.add_property('sonar.sources', 'src', Confidence.LOW, 'defaulting to src/')
            draft.warn(
                'CPP-WARN-001', WarningSeverity.WARNING,
                'No standard source directory found',
                'Configure sonar.sources to point to your source directories',
            )

        compile_commands = first_existing(root, self.COMPILE_COMMANDS)
        if compile_commands:
            draft.add_property(
                'sonar.cfamily.compile-commands', compile_commands, Confidence.HIGH,
                'detected compile_commands.json',
            )
        else:
            if draft.build_tool == 'cmake':
                suggestion = 'Run "cmake -DCMAKE_EXPORT_COMPILE_COMMANDS=ON ." to generate'
            else:
                suggestion = 'Use bear or intercept-build to generate compile_commands.json'
            draft.warn(
                'CPP-WARN-002', WarningSeverity.WARNING,
                'No compile_commands.json found',
                suggestion,
            )

        wrapper_output = first_existing(root, self.BUILD_WRAPPER_OUTPUT)
        if wrapper_output:
            draft.add_property(
                'sonar.cfamily.build-wrapper-output', wrapper_output, Confidence.HIGH,
                'detected build-wrapper output directory',
            )

        test_dirs = existing_paths(root, self.TEST_CANDIDATES)
        if test_dirs:
            draft.add_property(
                'sonar.tests', ','.join(test_dirs), Confidence.HIGH,
                'detected test directories',
            )

        draft.add_property(
            'sonar.exclusions', self.EXCLUSIONS, Confidence.MEDIUM,
            'standard C/C++ exclusions',
        )
