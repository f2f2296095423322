"""Tests for the analyzer registry."""

import pytest
from scanprep.analyzers import AnalyzerRegistry, default_analyzer_classes, register_default
from scanprep.analyzers.languages.cpp import CppAnalyzer
from scanprep.analyzers.languages.go import GoAnalyzer
from scanprep.analyzers.languages.java import JavaAnalyzer
from scanprep.analyzers.languages.javascript import JavaScriptAnalyzer
from scanprep.analyzers.languages.python import PythonAnalyzer
from scanprep.config import Settings

from conftest import StubAnalyzer


class TestDefaults:
    def test_default_classes_in_order(self):
        assert default_analyzer_classes() == [
            JavaAnalyzer, PythonAnalyzer, JavaScriptAnalyzer, GoAnalyzer, CppAnalyzer,
        ]

    def test_register_default_is_idempotent(self):
        assert register_default(JavaAnalyzer) is JavaAnalyzer
        assert default_analyzer_classes().count(JavaAnalyzer) == 1

    def test_with_defaults_applies_settings(self):
        registry = AnalyzerRegistry.with_defaults(Settings(resolve_dependencies=False, resolution_timeout=3.0))
        java = registry.get('java')
        assert java.resolve_dependencies is False
        assert java.timeout_seconds == 3.0

    def test_with_defaults_skips_disabled(self):
        registry = AnalyzerRegistry.with_defaults(Settings(disabled_analyzers=('java', 'go')))
        assert registry.languages() == ['python', 'javascript', 'cpp']

    def test_with_defaults_without_settings(self):
        assert len(AnalyzerRegistry.with_defaults()) == 5


class TestRegistry:
    def test_empty(self):
        registry = AnalyzerRegistry()
        assert len(registry) == 0
        assert list(registry) == []
        assert registry.get('java') is None

    def test_insertion_order(self):
        registry = AnalyzerRegistry([StubAnalyzer('b'), StubAnalyzer('a')])
        assert registry.languages() == ['b', 'a']
        assert [a.language for a in registry] == ['b', 'a']

    def test_replace_keeps_position(self):
        first = StubAnalyzer('a')
        replacement = StubAnalyzer('a')
        registry = AnalyzerRegistry([first, StubAnalyzer('b')])
        registry.register(replacement)

        assert registry.languages() == ['a', 'b']
        assert registry.get('a') is replacement

    def test_unregister(self):
        registry = AnalyzerRegistry([StubAnalyzer('a')])
        assert registry.unregister('a') is True
        assert registry.unregister('a') is False
        assert 'a' not in registry

    def test_contains(self, offline_registry):
        assert 'python' in offline_registry
        assert 'rust' not in offline_registry

    def test_iteration_is_a_snapshot(self):
        registry = AnalyzerRegistry([StubAnalyzer('a'), StubAnalyzer('b')])
        for analyzer in registry:
            registry.unregister(analyzer.language)
        assert len(registry) == 0

    def test_repr(self):
        assert repr(GoAnalyzer()) == "GoAnalyzer(language='go')"


class TestContract:
    @pytest.mark.parametrize('analyzer_class', [
        JavaAnalyzer, PythonAnalyzer, JavaScriptAnalyzer, GoAnalyzer, CppAnalyzer,
    ])
    def test_nonexistent_project(self, analyzer_class, tmp_path):
        analyzer = analyzer_class.from_settings(Settings(resolve_dependencies=False))
        assert analyzer.detect(tmp_path / 'missing') is False
        result = analyzer.analyze(tmp_path / 'missing')
        assert result.detected is False
        assert result.language == analyzer.language

    @pytest.mark.parametrize('analyzer_class', [
        JavaAnalyzer, PythonAnalyzer, JavaScriptAnalyzer, GoAnalyzer, CppAnalyzer,
    ])
    def test_property_lists_are_copies(self, analyzer_class):
        analyzer = analyzer_class()
        analyzer.get_critical_properties().append('sonar.bogus')
        assert 'sonar.bogus' not in analyzer.get_critical_properties()
        assert 'sonar.sources' in analyzer.get_critical_properties()
