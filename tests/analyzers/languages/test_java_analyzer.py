"""Tests for Java language analyzer."""

import pytest
from scanprep.analyzers.languages import java as java_module
from scanprep.analyzers.languages.java import JavaAnalyzer
from scanprep.analyzers.resolution import Failed, Resolved, TimedOut
from scanprep.config import Settings
from scanprep.models import Confidence, WarningSeverity


@pytest.fixture
def analyzer():
    return JavaAnalyzer(resolve_dependencies=False)


def by_key(result):
    return {p.key: p for p in result.properties}


def codes(result):
    return [w.code for w in result.warnings]


class TestJavaAnalyzerProperties:
    def test_language(self, analyzer):
        assert analyzer.language == "java"

    def test_critical_properties(self, analyzer):
        assert analyzer.get_critical_properties() == ['sonar.sources', 'sonar.java.binaries']

    def test_recommended_properties(self, analyzer):
        assert 'sonar.java.libraries' in analyzer.get_recommended_properties()
        assert 'sonar.coverage.jacoco.xmlReportPaths' in analyzer.get_recommended_properties()

    def test_from_settings(self):
        analyzer = JavaAnalyzer.from_settings(Settings(resolve_dependencies=False, resolution_timeout=5.0))
        assert analyzer.resolve_dependencies is False
        assert analyzer.timeout_seconds == 5.0


class TestJavaDetection:
    @pytest.mark.parametrize('marker', ['pom.xml', 'build.gradle', 'build.gradle.kts'])
    def test_markers(self, analyzer, tmp_path, marker):
        (tmp_path / marker).write_text('')
        assert analyzer.detect(tmp_path)

    def test_no_markers(self, analyzer, tmp_path):
        (tmp_path / 'App.java').write_text('class App {}')
        assert not analyzer.detect(tmp_path)

    def test_nonexistent_path(self, analyzer, tmp_path):
        assert not analyzer.detect(tmp_path / 'missing')
        assert analyzer.analyze(tmp_path / 'missing').detected is False


class TestJavaMaven:
    def test_compiled_project(self, analyzer, maven_project):
        result = analyzer.analyze(maven_project)
        props = by_key(result)

        assert result.detected is True
        assert result.build_tool == 'maven'
        assert result.version == '17'
        assert props['sonar.java.source'].value == '17'
        assert props['sonar.sources'].value == 'src/main/java'
        assert props['sonar.tests'].value == 'src/test/java'
        assert props['sonar.java.binaries'].value == 'target/classes'
        assert props['sonar.java.test.binaries'].value == 'target/test-classes'
        assert props['sonar.coverage.jacoco.xmlReportPaths'].value == 'target/site/jacoco/jacoco.xml'
        assert all(p.confidence == Confidence.HIGH for p in result.properties)
        assert result.warnings == ()

    def test_missing_classes_warns(self, analyzer, tmp_path):
        (tmp_path / 'pom.xml').write_text('<project/>')
        (tmp_path / 'src/main/java').mkdir(parents=True)
        result = analyzer.analyze(tmp_path)

        assert 'sonar.java.binaries' not in by_key(result)
        assert codes(result) == ['JAVA-WARN-001']
        assert result.warnings[0].severity == WarningSeverity.WARNING
        assert 'mvn compile' in result.warnings[0].suggestion

    @pytest.mark.parametrize('pom, version', [
        ('<maven.compiler.target>11</maven.compiler.target>', '11'),
        ('<java.version>1.8</java.version>', '1.8'),
        ('<maven.compiler.source>21</maven.compiler.source><java.version>17</java.version>', '21'),
    ])
    def test_version_sources(self, analyzer, tmp_path, pom, version):
        (tmp_path / 'pom.xml').write_text(f'<project><properties>{pom}</properties></project>')
        assert analyzer.analyze(tmp_path).version == version

    def test_no_version(self, analyzer, tmp_path):
        (tmp_path / 'pom.xml').write_text('<project/>')
        result = analyzer.analyze(tmp_path)
        assert result.version is None
        assert 'sonar.java.source' not in by_key(result)

    def test_modules(self, analyzer, tmp_path):
        (tmp_path / 'pom.xml').write_text(
            '<project><modules>\n  <module>api</module>\n  <module>web</module>\n</modules></project>')
        result = analyzer.analyze(tmp_path)

        assert [m.name for m in result.modules] == ['api', 'web']
        api = result.modules[0]
        assert api.sources_dirs == ('api/src/main/java',)
        assert api.binary_dirs == ('api/target/classes',)
        assert api.build_file == 'api/pom.xml'
        assert api.build_tool == 'maven'

    def test_maven_wins_over_gradle(self, analyzer, tmp_path):
        (tmp_path / 'pom.xml').write_text('<project/>')
        (tmp_path / 'build.gradle').write_text('')
        assert analyzer.analyze(tmp_path).build_tool == 'maven'


class TestJavaGradle:
    def test_compiled_project(self, analyzer, make_project):
        root = make_project({
            'build.gradle': "sourceCompatibility = '17'\n",
            'settings.gradle': "include ':app'\ninclude ':libs:core'\n",
            'src/main/java/': None,
            'build/classes/java/main/': None,
            'build/classes/java/test/': None,
            'build/reports/jacoco/test/jacocoTestReport.xml': '<report/>',
        })
        result = analyzer.analyze(root)
        props = by_key(result)

        assert result.build_tool == 'gradle'
        assert result.version == '17'
        assert props['sonar.java.binaries'].value == 'build/classes/java/main'
        assert props['sonar.java.test.binaries'].value == 'build/classes/java/test'
        assert props['sonar.coverage.jacoco.xmlReportPaths'].value == \
            'build/reports/jacoco/test/jacocoTestReport.xml'
        assert [(m.name, m.relative_path) for m in result.modules] == [
            ('app', 'app'),
            ('libs:core', 'libs/core'),
        ]
        assert result.warnings == ()

    def test_kotlin_dsl_toolchain(self, analyzer, tmp_path):
        (tmp_path / 'build.gradle.kts').write_text(
            'java { toolchain { languageVersion.set(JavaLanguageVersion.of(21)) } }')
        result = analyzer.analyze(tmp_path)
        assert result.version == '21'

    def test_kotlin_output_directory(self, analyzer, make_project):
        root = make_project({'build.gradle': '', 'build/classes/kotlin/main/': None})
        assert by_key(analyzer.analyze(root))['sonar.java.binaries'].value == 'build/classes/kotlin/main'

    def test_missing_classes_warns(self, analyzer, tmp_path):
        (tmp_path / 'build.gradle').write_text('')
        result = analyzer.analyze(tmp_path)
        assert codes(result) == ['JAVA-WARN-001']
        assert 'build/classes' in result.warnings[0].message


class TestJavaDependencyResolution:
    def fake_resolution(self, monkeypatch, outcome):
        calls = []

        def resolve(command, cwd, parse, timeout_seconds):
            calls.append((tuple(command), cwd, timeout_seconds))
            return outcome

        monkeypatch.setattr(java_module, 'resolve_dependencies', resolve)
        return calls

    def test_maven_resolved(self, maven_project, monkeypatch):
        calls = self.fake_resolution(monkeypatch, Resolved(paths=('/r/a.jar', '/r/b.jar')))
        result = JavaAnalyzer(timeout_seconds=12.0).analyze(maven_project)

        assert calls == [(JavaAnalyzer.MAVEN_CLASSPATH_COMMAND, maven_project, 12.0)]
        libraries = by_key(result)['sonar.java.libraries']
        assert libraries.value == '/r/a.jar,/r/b.jar'
        assert libraries.confidence == Confidence.HIGH
        assert 'resolved 2 JARs' in libraries.source
        assert result.warnings == ()

    def test_maven_timeout(self, maven_project, monkeypatch):
        self.fake_resolution(monkeypatch, TimedOut(timeout_seconds=30.0))
        result = JavaAnalyzer().analyze(maven_project)

        assert codes(result) == ['JAVA-WARN-002']
        assert result.warnings[0].message == 'Maven dependency resolution timed out after 30s'
        assert 'sonar.java.libraries' not in by_key(result)

    def test_maven_failure(self, maven_project, monkeypatch):
        self.fake_resolution(monkeypatch, Failed(reason='mvn: command not found'))
        result = JavaAnalyzer().analyze(maven_project)
        assert result.warnings[0].message == 'Could not resolve Maven dependencies: mvn: command not found'

    def test_maven_empty_classpath(self, maven_project, monkeypatch):
        self.fake_resolution(monkeypatch, Resolved(paths=()))
        result = JavaAnalyzer().analyze(maven_project)
        assert codes(result) == ['JAVA-WARN-002']

    def test_disabled(self, maven_project, monkeypatch):
        calls = self.fake_resolution(monkeypatch, Resolved(paths=('/r/a.jar',)))
        JavaAnalyzer(resolve_dependencies=False).analyze(maven_project)
        assert calls == []

    def test_gradle_wrapper_used(self, make_project, monkeypatch):
        root = make_project({'build.gradle': '', 'gradlew': '#!/bin/sh', 'build/classes/java/main/': None})
        calls = self.fake_resolution(monkeypatch, Failed(reason='exit code 1'))
        result = JavaAnalyzer().analyze(root)

        assert calls[0][0][0] == str(root / 'gradlew')
        assert codes(result) == ['JAVA-WARN-002']

    def test_gradle_cache_present(self, make_project, monkeypatch, tmp_path):
        root = make_project({'build.gradle': '', 'build/classes/java/main/': None})
        self.fake_resolution(monkeypatch, Resolved(paths=()))
        monkeypatch.setattr(JavaAnalyzer, '_gradle_cache', staticmethod(lambda: tmp_path))
        result = JavaAnalyzer().analyze(root)

        assert codes(result) == ['JAVA-WARN-003']
        assert result.warnings[0].severity == WarningSeverity.INFO
        assert result.modules == ()

    def test_gradle_without_wrapper(self, make_project, monkeypatch, tmp_path):
        root = make_project({'build.gradle.kts': '', 'build/classes/java/main/': None})
        calls = self.fake_resolution(monkeypatch, Resolved(paths=()))
        monkeypatch.setattr(JavaAnalyzer, '_gradle_cache', staticmethod(lambda: tmp_path / 'missing'))
        result = JavaAnalyzer().analyze(root)

        assert calls[0][0][0] == 'gradle'
        assert codes(result) == ['JAVA-WARN-002']


class TestJavaFailureBoundary:
    def test_unexpected_error_becomes_warning(self, analyzer, maven_project, monkeypatch):
        def explode(path):
            raise RuntimeError('boom')

        monkeypatch.setattr(java_module, 'read_text', explode)
        result = analyzer.analyze(maven_project)

        assert result.detected is True
        assert result.properties == ()
        assert codes(result) == ['JAVA-ERR-001']
        assert result.warnings[0].message == 'Error analyzing java project: boom'
