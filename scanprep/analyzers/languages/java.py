"""
Java analyzer for scanprep (Maven and Gradle builds).

Detects:
- Java version from pom.xml or build.gradle(.kts)
- Standard source, test and compiled-output directories
- Multi-module layouts (<modules> in pom.xml, include in settings.gradle)
- Compile classpath through the build tool, with a bounded timeout
- JaCoCo XML coverage reports
"""

import logging
import os
from pathlib import Path
from typing import List, TYPE_CHECKING

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
from ..patterns import (
    GRADLE_JAVA_VERSION,
    MAVEN_JAVA_VERSION,
    first_match,
    gradle_modules,
    maven_modules,
)
from ..registry import register_default
from ..resolution import (
    DEFAULT_TIMEOUT_SECONDS,
    DependencyResolution,
    Failed,
    Resolved,
    TimedOut,
    parse_classpath,
    resolve_dependencies,
)
from ...models import Confidence, ModuleInfo, WarningSeverity

if TYPE_CHECKING:
    from ...config import Settings

logger = logging.getLogger(__name__)


@register_default
class JavaAnalyzer(LanguageAnalyzer):
    """
    Java analyzer covering Maven and Gradle projects.

    Maven wins when both a pom.xml and a Gradle build file are present.
    """

    MARKERS = ('pom.xml', 'build.gradle', 'build.gradle.kts')
    GRADLE_BUILD_FILES = ('build.gradle', 'build.gradle.kts')
    GRADLE_SETTINGS_FILES = ('settings.gradle', 'settings.gradle.kts')

    SOURCES_DIR = 'src/main/java'
    TESTS_DIR = 'src/test/java'

    MAVEN_BINARIES = 'target/classes'
    MAVEN_TEST_BINARIES = 'target/test-classes'
    GRADLE_BINARIES = ('build/classes/java/main', 'build/classes/kotlin/main')
    GRADLE_TEST_BINARIES = 'build/classes/java/test'

    JACOCO_REPORTS = (
        # Maven
        'target/site/jacoco/jacoco.xml',
        'target/jacoco-report/jacoco.xml',
        'target/jacoco/jacoco.xml',
        # Gradle
        'build/reports/jacoco/test/jacocoTestReport.xml',
        'build/reports/jacoco/jacocoTestReport.xml',
        'build/jacoco/test.xml',
    )

    MAVEN_CLASSPATH_COMMAND = ('mvn', 'dependency:build-classpath', '-DincludeScope=compile', '-q')

    def __init__(self, resolve_dependencies: bool = True,
                 timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.resolve_dependencies = resolve_dependencies
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: "Settings") -> "JavaAnalyzer":
        return cls(
            resolve_dependencies=settings.resolve_dependencies,
            timeout_seconds=settings.resolution_timeout,
        )

    @property
    def language(self) -> str:
        return "java"

    def get_critical_properties(self) -> List[str]:
        return [
            'sonar.sources',
            'sonar.java.binaries',
        ]

    def get_recommended_properties(self) -> List[str]:
        return [
            'sonar.tests',
            'sonar.java.libraries',
            'sonar.java.source',
            'sonar.java.test.binaries',
            'sonar.coverage.jacoco.xmlReportPaths',
        ]

    def detect(self, project_path) -> bool:
        return any_exists(project_path, self.MARKERS)

    def analyze(self, project_path):
        return guarded_analysis(self.language, project_path, self.detect, self._analyze_project)

    def _analyze_project(self, root: Path, draft: AnalysisDraft) -> None:
        if file_exists(root / 'pom.xml'):
            draft.build_tool = 'maven'
            self._analyze_maven(root, draft)
        elif any_exists(root, self.GRADLE_BUILD_FILES):
            draft.build_tool = 'gradle'
            self._analyze_gradle(root, draft)

        reports = existing_paths(root, self.JACOCO_REPORTS)
        if reports:
            draft.add_property(
                'sonar.coverage.jacoco.xmlReportPaths',
                ','.join(reports),
                Confidence.HIGH,
                f"detected JaCoCo reports: {', '.join(reports)}",
            )

    # ------------------------------------------------------------------
    # Maven
    # ------------------------------------------------------------------

    def _analyze_maven(self, root: Path, draft: AnalysisDraft) -> None:
        pom_content = read_text(root / 'pom.xml')

        draft.version = first_match(MAVEN_JAVA_VERSION, pom_content)
        if draft.version:
            draft.add_property(
                'sonar.java.source', draft.version, Confidence.HIGH,
                'detected from pom.xml maven.compiler.source',
            )

        self._add_layout_dirs(root, draft, 'Maven standard layout')

        if file_exists(root / self.MAVEN_BINARIES):
            draft.add_property(
                'sonar.java.binaries', self.MAVEN_BINARIES, Confidence.HIGH,
                'Maven target/classes directory',
            )
        else:
            draft.warn(
                'JAVA-WARN-001', WarningSeverity.WARNING,
                'No compiled classes found in target/classes',
                'Run "mvn compile" before scanning',
            )

        if file_exists(root / self.MAVEN_TEST_BINARIES):
            draft.add_property(
                'sonar.java.test.binaries', self.MAVEN_TEST_BINARIES, Confidence.HIGH,
                'Maven target/test-classes directory',
            )

        for name in maven_modules(pom_content):
            draft.modules.append(ModuleInfo(
                name=name,
                relative_path=name,
                language=('java',),
                sources_dirs=(f"{name}/{self.SOURCES_DIR}",),
                tests_dirs=(f"{name}/{self.TESTS_DIR}",),
                binary_dirs=(f"{name}/{self.MAVEN_BINARIES}",),
                build_file=f"{name}/pom.xml",
                build_tool='maven',
            ))

        if self.resolve_dependencies:
            outcome = resolve_dependencies(
                self.MAVEN_CLASSPATH_COMMAND,
                root,
                lambda stdout: parse_classpath(stdout, os.pathsep),
                self.timeout_seconds,
            )
            self._record_maven_libraries(outcome, draft)

    def _record_maven_libraries(self, outcome: DependencyResolution, draft: AnalysisDraft) -> None:
        if isinstance(outcome, Resolved) and outcome.paths:
            draft.add_property(
                'sonar.java.libraries',
                ','.join(outcome.paths),
                Confidence.HIGH,
                f"resolved {len(outcome.paths)} JARs via mvn dependency:build-classpath",
            )
            return

        draft.warn(
            'JAVA-WARN-002', WarningSeverity.WARNING,
            self._unresolved_message('Maven', outcome),
            'Run "mvn dependency:resolve" to download dependencies',
        )

    # ------------------------------------------------------------------
    # Gradle
    # ------------------------------------------------------------------

    def _analyze_gradle(self, root: Path, draft: AnalysisDraft) -> None:
        build_file = first_existing(root, self.GRADLE_BUILD_FILES)
        gradle_content = read_text(root / build_file) if build_file else None

        draft.version = first_match(GRADLE_JAVA_VERSION, gradle_content)
        if draft.version:
            draft.add_property(
                'sonar.java.source', draft.version, Confidence.HIGH,
                'detected from build.gradle sourceCompatibility',
            )

        self._add_layout_dirs(root, draft, 'Gradle standard layout')

        binaries = first_existing(root, self.GRADLE_BINARIES)
        if binaries:
            draft.add_property(
                'sonar.java.binaries', binaries, Confidence.HIGH,
                f"Gradle {binaries} directory",
            )
        else:
            draft.warn(
                'JAVA-WARN-001', WarningSeverity.WARNING,
                'No compiled classes found in build/classes',
                'Run "gradle build" or "./gradlew build" before scanning',
            )

        if file_exists(root / self.GRADLE_TEST_BINARIES):
            draft.add_property(
                'sonar.java.test.binaries', self.GRADLE_TEST_BINARIES, Confidence.HIGH,
                'Gradle build/classes/java/test directory',
            )

        settings_file = first_existing(root, self.GRADLE_SETTINGS_FILES)
        settings_content = read_text(root / settings_file) if settings_file else None
        for name in gradle_modules(settings_content):
            # ':libs:core' lives in libs/core
            module_dir = name.replace(':', '/')
            draft.modules.append(ModuleInfo(
                name=name,
                relative_path=module_dir,
                language=('java',),
                sources_dirs=(f"{module_dir}/{self.SOURCES_DIR}",),
                tests_dirs=(f"{module_dir}/{self.TESTS_DIR}",),
                binary_dirs=(f"{module_dir}/{self.GRADLE_BINARIES[0]}",),
                build_file=f"{module_dir}/build.gradle",
                build_tool='gradle',
            ))

        if self.resolve_dependencies:
            wrapper = root / 'gradlew'
            gradle_cmd = str(wrapper) if file_exists(wrapper) else 'gradle'
            outcome = resolve_dependencies(
                (gradle_cmd, 'dependencies', '--configuration', 'compileClasspath', '-q'),
                root,
                lambda stdout: [],
                self.timeout_seconds,
            )
            self._record_gradle_libraries(outcome, draft)

    def _record_gradle_libraries(self, outcome: DependencyResolution, draft: AnalysisDraft) -> None:
        # The dependency tree lists coordinates, not jar paths
        if isinstance(outcome, Resolved) and file_exists(self._gradle_cache()):
            draft.warn(
                'JAVA-WARN-003', WarningSeverity.INFO,
                'Gradle dependencies detected but not fully resolved',
                'Libraries will be resolved from Gradle cache',
            )
            return

        draft.warn(
            'JAVA-WARN-002', WarningSeverity.WARNING,
            self._unresolved_message('Gradle', outcome),
            'Run "./gradlew build" to download dependencies',
        )

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    def _add_layout_dirs(self, root: Path, draft: AnalysisDraft, source: str) -> None:
        if file_exists(root / self.SOURCES_DIR):
            draft.add_property('sonar.sources', self.SOURCES_DIR, Confidence.HIGH, source)
        if file_exists(root / self.TESTS_DIR):
            draft.add_property('sonar.tests', self.TESTS_DIR, Confidence.HIGH, source)

    @staticmethod
    def _unresolved_message(tool: str, outcome: DependencyResolution) -> str:
        if isinstance(outcome, TimedOut):
            return f"{tool} dependency resolution timed out after {outcome.timeout_seconds:g}s"
        if isinstance(outcome, Failed):
            return f"Could not resolve {tool} dependencies: {outcome.reason}"
        return f"Could not resolve {tool} dependencies"

    @staticmethod
    def _gradle_cache() -> Path:
        return Path.home() / '.gradle' / 'caches' / 'modules-2' / 'files-2.1'
