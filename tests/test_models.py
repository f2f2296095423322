"""Tests for scanprep data models."""

import pytest
from scanprep.models import (
    Confidence, WarningSeverity, ScanQuality, ScanErrorCategory,
    DetectedProperty, ValidationWarning, ModuleInfo, LanguageAnalysisResult,
    ExistingConfigAnalysis, PreScanValidationResult, ParsedScanError,
    LanguageShare, ProjectStructure, RecoveryAnalysis, WriteResult,
)


class TestConfidence:
    def test_values(self):
        assert Confidence.HIGH.value == "high"
        assert Confidence.MEDIUM.value == "medium"
        assert Confidence.LOW.value == "low"

    def test_priority_ordering(self):
        assert Confidence.HIGH.priority > Confidence.MEDIUM.priority > Confidence.LOW.priority


class TestScanErrorCategory:
    def test_closed_set(self):
        assert {c.name for c in ScanErrorCategory} == {
            'SOURCES_NOT_FOUND', 'MODULE_CONFIG_ERROR', 'BINARY_PATH_MISSING',
            'EXCLUSION_PATTERN_ERROR', 'LANGUAGE_NOT_DETECTED', 'PERMISSION_DENIED',
            'SCANNER_NOT_FOUND', 'UNKNOWN',
        }

    def test_value_is_name(self):
        for category in ScanErrorCategory:
            assert category.value == category.name


class TestDetectedProperty:
    def test_to_dict(self):
        p = DetectedProperty('sonar.sources', 'src', Confidence.HIGH, 'standard layout')
        assert p.to_dict() == {
            'key': 'sonar.sources',
            'value': 'src',
            'confidence': 'high',
            'source': 'standard layout',
        }

    def test_empty_source_rejected(self):
        with pytest.raises(ValueError):
            DetectedProperty('sonar.sources', 'src', Confidence.LOW, '')

    def test_immutable(self):
        p = DetectedProperty('k', 'v', Confidence.LOW, 's')
        with pytest.raises(Exception):
            p.value = 'other'


class TestValidationWarning:
    def test_suggestion_optional(self):
        w = ValidationWarning('X-1', WarningSeverity.INFO, 'message')
        assert w.suggestion is None
        assert w.to_dict()['severity'] == 'info'


class TestModuleInfo:
    def test_to_dict_lists(self):
        m = ModuleInfo(
            name='core',
            relative_path='core',
            language=('java',),
            sources_dirs=('core/src/main/java',),
            binary_dirs=('core/target/classes',),
            build_tool='maven',
        )
        data = m.to_dict()
        assert data['language'] == ['java']
        assert data['sources_dirs'] == ['core/src/main/java']
        assert data['tests_dirs'] == []
        assert data['binary_dirs'] == ['core/target/classes']

    def test_binary_dirs_none_preserved(self):
        assert ModuleInfo(name='a', relative_path='a').to_dict()['binary_dirs'] is None


class TestExistingConfigAnalysis:
    def test_score_range_enforced(self):
        with pytest.raises(ValueError):
            ExistingConfigAnalysis(exists=True, path='p', completeness_score=101)
        with pytest.raises(ValueError):
            ExistingConfigAnalysis(exists=True, path='p', completeness_score=-1)

    def test_defaults(self):
        analysis = ExistingConfigAnalysis(exists=False, path='p')
        assert analysis.properties == {}
        assert analysis.completeness_score == 0


class TestPreScanValidationResult:
    def _result(self):
        props = (
            DetectedProperty('sonar.sources', 'src', Confidence.HIGH, 'a'),
            DetectedProperty('sonar.sources', '.', Confidence.LOW, 'b'),
            DetectedProperty('sonar.tests', 'tests', Confidence.HIGH, 'c'),
        )
        warnings = (
            ValidationWarning('E', WarningSeverity.ERROR, 'bad'),
            ValidationWarning('I', WarningSeverity.INFO, 'fyi'),
        )
        return PreScanValidationResult(
            languages=(LanguageAnalysisResult(detected=True, language='python'),),
            existing_config=ExistingConfigAnalysis(exists=False, path='x'),
            detected_properties=props,
            warnings=warnings,
            scan_quality=ScanQuality.PARTIAL,
        )

    def test_get_properties_keeps_duplicates(self):
        assert [p.value for p in self._result().get_properties('sonar.sources')] == ['src', '.']

    def test_get_warnings_by_severity(self):
        errors = self._result().get_warnings_by_severity(WarningSeverity.ERROR)
        assert [w.code for w in errors] == ['E']

    def test_language_names(self):
        assert self._result().language_names == ['python']

    def test_to_dict(self):
        data = self._result().to_dict()
        assert data['scan_quality'] == 'partial'
        assert data['can_proceed'] is True
        assert data['existing_config']['exists'] is False
        assert len(data['detected_properties']) == 3

    def test_can_proceed_defaults_true(self):
        result = PreScanValidationResult(
            languages=(), existing_config=ExistingConfigAnalysis(exists=False, path='x'))
        assert result.can_proceed is True
        assert result.scan_quality == ScanQuality.DEGRADED


class TestParsedScanError:
    def test_optional_lists(self):
        error = ParsedScanError(ScanErrorCategory.UNKNOWN, 'boom')
        data = error.to_dict()
        assert data['category'] == 'UNKNOWN'
        assert data['affected_paths'] is None
        assert data['missing_parameters'] is None

    def test_lists_serialized(self):
        error = ParsedScanError(
            ScanErrorCategory.SOURCES_NOT_FOUND, 'msg',
            affected_paths=('/a',), missing_parameters=('sonar.sources',))
        assert error.to_dict()['affected_paths'] == ['/a']
        assert error.to_dict()['missing_parameters'] == ['sonar.sources']


class TestRecoveryModels:
    def test_project_structure(self):
        structure = ProjectStructure(
            root_path='/p',
            project_type='multi-module',
            detected_languages=(LanguageShare('java', 3, 100, ('.java',)),),
        )
        assert structure.is_multi_module
        assert structure.to_dict()['detected_languages'][0]['extensions'] == ['.java']

    def test_recovery_analysis_to_dict(self):
        analysis = RecoveryAnalysis(
            parsed_error=ParsedScanError(ScanErrorCategory.PERMISSION_DENIED, '403'),
            recoverable=False,
            recommendation='fix the token',
            project_structure=ProjectStructure(root_path='/p', project_type='single'),
        )
        data = analysis.to_dict()
        assert data['recoverable'] is False
        assert data['suggested_properties'] == []
        assert data['suggested_config'] is None

    def test_write_result(self):
        result = WriteResult(success=True, config_path='/p/sonar-project.properties', generated_content='x')
        assert result.to_dict()['backup_path'] is None
