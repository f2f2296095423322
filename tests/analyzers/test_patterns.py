"""Tests for manifest extraction rules."""

import re

import pytest
from scanprep.analyzers.patterns import (
    GO_VERSION,
    GRADLE_JAVA_VERSION,
    MAVEN_JAVA_VERSION,
    PYTHON_VERSION,
    ExtractionRule,
    first_match,
    gradle_modules,
    maven_modules,
)


class TestExtractionRule:
    def test_apply(self):
        rule = ExtractionRule('digits', re.compile(r'v(\d+)'))
        assert rule.apply('release v42') == '42'
        assert rule.apply('none') is None

    def test_apply_all(self):
        rule = ExtractionRule('digits', re.compile(r'v(\d+)'))
        assert rule.apply_all('v1 v2 v3') == ['1', '2', '3']

    def test_first_match_empty_text(self):
        assert first_match(MAVEN_JAVA_VERSION, None) is None
        assert first_match(MAVEN_JAVA_VERSION, '') is None


class TestVersionTables:
    def test_maven_source_beats_target(self):
        pom = ('<maven.compiler.target>11</maven.compiler.target>'
               '<maven.compiler.source>17</maven.compiler.source>')
        assert first_match(MAVEN_JAVA_VERSION, pom) == '17'

    @pytest.mark.parametrize('gradle, version', [
        ("sourceCompatibility = 1.8", '1.8'),
        ('sourceCompatibility = "11"', '11'),
        ("sourceCompatibility = JavaVersion.VERSION_17", '17'),
        ("languageVersion.set(JavaLanguageVersion.of(21))", '21'),
    ])
    def test_gradle(self, gradle, version):
        assert first_match(GRADLE_JAVA_VERSION, gradle) == version

    @pytest.mark.parametrize('pyproject, version', [
        ('requires-python = ">=3.9"', '3.9'),
        ("requires-python = '~=3.10.2'", '3.10'),
        ('python = "^3.11"', '3.11'),
        ('python = "~3.8"', '3.8'),
    ])
    def test_python(self, pyproject, version):
        assert first_match(PYTHON_VERSION, pyproject) == version

    def test_requires_python_without_version(self):
        assert first_match(PYTHON_VERSION, 'requires-python = "*"') is None

    def test_go_directive_must_start_line(self):
        assert first_match(GO_VERSION, 'module x\n\ngo 1.22\n') == '1.22'
        assert first_match(GO_VERSION, 'module x // go 1.22') is None


class TestModuleLists:
    def test_maven_modules(self):
        pom = '<project><modules>\n<module> core </module>\n<module>web</module>\n</modules></project>'
        assert maven_modules(pom) == ['core', 'web']

    def test_maven_without_modules(self):
        assert maven_modules('<project><module>stray</module></project>') == []
        assert maven_modules(None) == []

    def test_gradle_modules(self):
        settings = "rootProject.name = 'shop'\ninclude ':api'\ninclude(\"web\")\n"
        assert gradle_modules(settings) == ['api', 'web']

    def test_gradle_without_settings(self):
        assert gradle_modules(None) == []
