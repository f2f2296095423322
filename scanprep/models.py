"""
Data models for scanprep.

This module defines all core data structures produced by the engine:

- Confidence/WarningSeverity/ScanQuality: Enums for classification
- DetectedProperty/ValidationWarning: Facts and problems found by analyzers
- ModuleInfo/LanguageAnalysisResult: Per-language analysis output
- ExistingConfigAnalysis/PreScanValidationResult: Orchestrator output
- ScanErrorCategory/ParsedScanError: Scanner failure classification
- LanguageShare/ProjectStructure/RecoveryAnalysis: Recovery output
- WriteResult: Outcome of writing a configuration file

All classes are immutable dataclasses, built fresh for every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple


class Confidence(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def priority(self) -> int:
        priorities = {
            Confidence.HIGH: 3,
            Confidence.MEDIUM: 2,
            Confidence.LOW: 1,
        }
        return priorities[self]


class WarningSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ScanQuality(Enum):
    FULL = "full"
    PARTIAL = "partial"
    DEGRADED = "degraded"


class ScanErrorCategory(Enum):
    SOURCES_NOT_FOUND = "SOURCES_NOT_FOUND"
    MODULE_CONFIG_ERROR = "MODULE_CONFIG_ERROR"
    BINARY_PATH_MISSING = "BINARY_PATH_MISSING"
    EXCLUSION_PATTERN_ERROR = "EXCLUSION_PATTERN_ERROR"
    LANGUAGE_NOT_DETECTED = "LANGUAGE_NOT_DETECTED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    SCANNER_NOT_FOUND = "SCANNER_NOT_FOUND"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class DetectedProperty:
    """A single scanner property inferred from the project tree"""
    key: str
    value: str
    confidence: Confidence
    source: str

    def __post_init__(self):
        if not self.source:
            raise ValueError(f"Property {self.key} needs a non-empty source")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'value': self.value,
            'confidence': self.confidence.value,
            'source': self.source,
        }


@dataclass(frozen=True)
class ValidationWarning:
    """A problem found while validating, never fatal"""
    code: str
    severity: WarningSeverity
    message: str
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'severity': self.severity.value,
            'message': self.message,
            'suggestion': self.suggestion,
        }


@dataclass(frozen=True)
class ModuleInfo:
    """A sub-project of a multi-module build"""
    name: str
    relative_path: str
    language: Tuple[str, ...] = ()
    sources_dirs: Tuple[str, ...] = ()
    tests_dirs: Tuple[str, ...] = ()
    binary_dirs: Optional[Tuple[str, ...]] = None
    build_file: Optional[str] = None
    build_tool: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'relative_path': self.relative_path,
            'language': list(self.language),
            'sources_dirs': list(self.sources_dirs),
            'tests_dirs': list(self.tests_dirs),
            'binary_dirs': list(self.binary_dirs) if self.binary_dirs is not None else None,
            'build_file': self.build_file,
            'build_tool': self.build_tool,
        }


@dataclass(frozen=True)
class LanguageAnalysisResult:
    """Outcome of one language analyzer"""
    detected: bool
    language: str
    version: Optional[str] = None
    build_tool: Optional[str] = None
    modules: Tuple[ModuleInfo, ...] = ()
    properties: Tuple[DetectedProperty, ...] = ()
    warnings: Tuple[ValidationWarning, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'detected': self.detected,
            'language': self.language,
            'version': self.version,
            'build_tool': self.build_tool,
            'modules': [m.to_dict() for m in self.modules],
            'properties': [p.to_dict() for p in self.properties],
            'warnings': [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class ExistingConfigAnalysis:
    """Comparison of an on-disk configuration file with detected properties"""
    exists: bool
    path: str
    properties: Dict[str, str] = field(default_factory=dict)
    missing_critical: Tuple[str, ...] = ()
    missing_recommended: Tuple[str, ...] = ()
    completeness_score: int = 0

    def __post_init__(self):
        if not 0 <= self.completeness_score <= 100:
            raise ValueError(f"Completeness score out of range: {self.completeness_score}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'exists': self.exists,
            'path': self.path,
            'properties': dict(self.properties),
            'missing_critical': list(self.missing_critical),
            'missing_recommended': list(self.missing_recommended),
            'completeness_score': self.completeness_score,
        }


@dataclass(frozen=True)
class PreScanValidationResult:
    """Aggregated verdict of every registered analyzer"""
    languages: Tuple[LanguageAnalysisResult, ...]
    existing_config: ExistingConfigAnalysis
    detected_properties: Tuple[DetectedProperty, ...] = ()
    missing_critical: Tuple[str, ...] = ()
    missing_recommended: Tuple[str, ...] = ()
    warnings: Tuple[ValidationWarning, ...] = ()
    scan_quality: ScanQuality = ScanQuality.DEGRADED
    can_proceed: bool = True

    def get_properties(self, key: str) -> List[DetectedProperty]:
        """All detected properties for a key, in aggregation order."""
        return [p for p in self.detected_properties if p.key == key]

    def get_warnings_by_severity(self, severity: WarningSeverity) -> List[ValidationWarning]:
        return [w for w in self.warnings if w.severity == severity]

    @property
    def language_names(self) -> List[str]:
        return [lang.language for lang in self.languages]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'languages': [lang.to_dict() for lang in self.languages],
            'existing_config': self.existing_config.to_dict(),
            'detected_properties': [p.to_dict() for p in self.detected_properties],
            'missing_critical': list(self.missing_critical),
            'missing_recommended': list(self.missing_recommended),
            'warnings': [w.to_dict() for w in self.warnings],
            'scan_quality': self.scan_quality.value,
            'can_proceed': self.can_proceed,
        }


@dataclass(frozen=True)
class ParsedScanError:
    """A categorized scanner failure"""
    category: ScanErrorCategory
    raw_message: str
    suggested_fix: Optional[str] = None
    affected_paths: Optional[Tuple[str, ...]] = None
    missing_parameters: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category.value,
            'raw_message': self.raw_message,
            'suggested_fix': self.suggested_fix,
            'affected_paths': list(self.affected_paths) if self.affected_paths is not None else None,
            'missing_parameters': (
                list(self.missing_parameters) if self.missing_parameters is not None else None
            ),
        }


@dataclass(frozen=True)
class LanguageShare:
    """File count of one language in a project tree"""
    name: str
    files_count: int
    percentage: int
    extensions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'files_count': self.files_count,
            'percentage': self.percentage,
            'extensions': list(self.extensions),
        }


@dataclass(frozen=True)
class ProjectStructure:
    """Structural scan of a project used for configuration recovery"""
    root_path: str
    project_type: str
    modules: Tuple[ModuleInfo, ...] = ()
    global_exclusions: Tuple[str, ...] = ()
    detected_languages: Tuple[LanguageShare, ...] = ()
    directory_tree: str = ""
    build_files: Tuple[str, ...] = ()
    config_files: Tuple[str, ...] = ()

    @property
    def is_multi_module(self) -> bool:
        return self.project_type == 'multi-module'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'root_path': self.root_path,
            'project_type': self.project_type,
            'modules': [m.to_dict() for m in self.modules],
            'global_exclusions': list(self.global_exclusions),
            'detected_languages': [lang.to_dict() for lang in self.detected_languages],
            'directory_tree': self.directory_tree,
            'build_files': list(self.build_files),
            'config_files': list(self.config_files),
        }


@dataclass(frozen=True)
class RecoveryAnalysis:
    """Classified scanner failure plus what it would take to fix it"""
    parsed_error: ParsedScanError
    recoverable: bool
    recommendation: str
    project_structure: ProjectStructure
    suggested_properties: Tuple[DetectedProperty, ...] = ()
    suggested_config: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parsed_error': self.parsed_error.to_dict(),
            'recoverable': self.recoverable,
            'recommendation': self.recommendation,
            'project_structure': self.project_structure.to_dict(),
            'suggested_properties': [p.to_dict() for p in self.suggested_properties],
            'suggested_config': self.suggested_config,
        }


@dataclass(frozen=True)
class WriteResult:
    """Outcome of writing a scanner configuration file"""
    success: bool
    config_path: str
    generated_content: str
    backup_path: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'config_path': self.config_path,
            'generated_content': self.generated_content,
            'backup_path': self.backup_path,
            'error': self.error,
        }
