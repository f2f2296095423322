"""
Pre-scan validation orchestrator.

Runs every registered language analyzer against a project, aggregates
their properties and warnings, scores the existing configuration file and
computes an overall scan quality verdict.
"""

import logging
import traceback
from pathlib import Path
from typing import List, Optional, Union

from .analyzers import AnalyzerRegistry, LanguageAnalyzer
from .completeness import ConfigCompletenessScorer
from .config import Settings
from .models import (
    DetectedProperty,
    LanguageAnalysisResult,
    PreScanValidationResult,
    ScanQuality,
    ValidationWarning,
    WarningSeverity,
)

logger = logging.getLogger(__name__)


class PreScanValidator:
    """
    Validation orchestrator.

    Usage:
        validator = PreScanValidator()
        result = validator.validate("/path/to/project")
        print(result.scan_quality)
    """

    def __init__(
        self,
        registry: Optional[AnalyzerRegistry] = None,
        scorer: Optional[ConfigCompletenessScorer] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.registry = registry if registry is not None else AnalyzerRegistry.with_defaults(self.settings)
        self.scorer = scorer or ConfigCompletenessScorer(self.settings.config_file)

    def register_analyzer(self, analyzer: LanguageAnalyzer) -> None:
        """Register an analyzer, replacing any analyzer for the same language."""
        self.registry.register(analyzer)

    def registered_analyzers(self) -> List[str]:
        return self.registry.languages()

    def validate(self, project_path: Union[str, Path]) -> PreScanValidationResult:
        """
        Validate a project.

        Never raises for analyzer problems; a failing analyzer contributes
        a single ANALYZER_ERROR warning and the others still run.
        """
        logger.info(f"Validating {project_path} with analyzers: {', '.join(self.registered_analyzers())}")

        languages: List[LanguageAnalysisResult] = []
        properties: List[DetectedProperty] = []
        warnings: List[ValidationWarning] = []
        critical: List[str] = []
        recommended: List[str] = []

        for analyzer in self.registry:
            try:
                if not analyzer.detect(project_path):
                    logger.debug(f"[{analyzer.language}] not detected")
                    continue
                result = analyzer.analyze(project_path)
                if not result.detected:
                    continue

                languages.append(result)
                properties.extend(result.properties)
                warnings.extend(result.warnings)
                critical.extend(analyzer.get_critical_properties())
                recommended.extend(analyzer.get_recommended_properties())
                logger.info(
                    f"[{analyzer.language}] detected: {len(result.properties)} properties, "
                    f"{len(result.warnings)} warnings"
                )
            except Exception as e:
                logger.warning(f"Analyzer {analyzer.language} failed: {e}")
                logger.debug(traceback.format_exc())
                warnings.append(ValidationWarning(
                    code='ANALYZER_ERROR',
                    severity=WarningSeverity.WARNING,
                    message=f"Analyzer {analyzer.language} failed: {e}",
                    suggestion='Check project structure and permissions',
                ))

        existing_config = self.scorer.validate_existing_config(
            project_path, properties, critical, recommended)

        detected_keys = {p.key for p in properties}
        missing_critical = [k for k in critical if k not in detected_keys]
        missing_recommended = [k for k in recommended if k not in detected_keys]

        scan_quality = self._scan_quality(languages, missing_critical, warnings)
        logger.info(f"Scan quality for {project_path}: {scan_quality.value}")

        return PreScanValidationResult(
            languages=tuple(languages),
            existing_config=existing_config,
            detected_properties=tuple(properties),
            missing_critical=tuple(missing_critical),
            missing_recommended=tuple(missing_recommended),
            warnings=tuple(warnings),
            scan_quality=scan_quality,
            can_proceed=True,
        )

    @staticmethod
    def _scan_quality(
        languages: List[LanguageAnalysisResult],
        missing_critical: List[str],
        warnings: List[ValidationWarning],
    ) -> ScanQuality:
        if not languages:
            return ScanQuality.DEGRADED
        has_errors = any(w.severity == WarningSeverity.ERROR for w in warnings)
        if missing_critical or has_errors:
            return ScanQuality.PARTIAL
        return ScanQuality.FULL
