"""
scanprep - Pre-scan validation and recovery for SonarQube scans.

Checks whether a project is ready for a SonarQube scan and helps recover
when a scan fails because of missing or wrong configuration.

Components:
    1. Language analyzers - Java, Python, JavaScript/TypeScript, Go, C/C++
    2. PreScanValidator - Runs the analyzers and rates scan readiness
    3. ConfigCompletenessScorer - Scores an existing sonar-project.properties
    4. ScanErrorClassifier - Categorizes raw scanner failure output
    5. RecoveryCoordinator - Proposes and writes a new configuration

Quick Start:
    >>> from scanprep import PreScanValidator
    >>> result = PreScanValidator().validate("/path/to/project")
    >>> print(result.scan_quality.value, result.missing_critical)

    >>> from scanprep import ScanErrorClassifier
    >>> error = ScanErrorClassifier().parse("Unable to find source files in /p/src")
    >>> print(error.category.value)
"""

__version__ = "0.3.0"
__author__ = "scanprep"

from .models import (
    Confidence,
    WarningSeverity,
    ScanQuality,
    ScanErrorCategory,
    DetectedProperty,
    ValidationWarning,
    ModuleInfo,
    LanguageAnalysisResult,
    ExistingConfigAnalysis,
    PreScanValidationResult,
    ParsedScanError,
    LanguageShare,
    ProjectStructure,
    RecoveryAnalysis,
    WriteResult,
)
from .exceptions import ScanprepError, ConfigurationError, PropertiesWriteError
from .config import Settings, load_settings
from .analyzers import AnalyzerRegistry, LanguageAnalyzer
from .completeness import ConfigCompletenessScorer
from .validator import PreScanValidator
from .classifier import ScanErrorClassifier
from .structure import ProjectStructureAnalyzer
from .properties import PropertiesFileManager, SonarPropertiesConfig, SonarModuleConfig
from .recovery import RecoveryCoordinator

__all__ = [
    # Models
    'Confidence',
    'WarningSeverity',
    'ScanQuality',
    'ScanErrorCategory',
    'DetectedProperty',
    'ValidationWarning',
    'ModuleInfo',
    'LanguageAnalysisResult',
    'ExistingConfigAnalysis',
    'PreScanValidationResult',
    'ParsedScanError',
    'LanguageShare',
    'ProjectStructure',
    'RecoveryAnalysis',
    'WriteResult',
    # Errors and settings
    'ScanprepError',
    'ConfigurationError',
    'PropertiesWriteError',
    'Settings',
    'load_settings',
    # Engine
    'AnalyzerRegistry',
    'LanguageAnalyzer',
    'ConfigCompletenessScorer',
    'PreScanValidator',
    'ScanErrorClassifier',
    # Recovery
    'ProjectStructureAnalyzer',
    'PropertiesFileManager',
    'SonarPropertiesConfig',
    'SonarModuleConfig',
    'RecoveryCoordinator',
]
