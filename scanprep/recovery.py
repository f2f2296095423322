"""
Recovery coordinator.

Given the text of a failed scan, decides whether regenerating the scanner
configuration can fix it and, if so, proposes the new configuration. The
error is always classified before any analyzer runs; analyzers only run
for recoverable errors.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .classifier import ScanErrorClassifier
from .config import Settings
from .library_paths import process_library_paths
from .models import DetectedProperty, ProjectStructure, RecoveryAnalysis, WriteResult
from .properties import PropertiesFileManager, SonarModuleConfig, SonarPropertiesConfig
from .structure import ProjectStructureAnalyzer
from .validator import PreScanValidator

logger = logging.getLogger(__name__)

PLACEHOLDER_PROJECT_KEY = '<YOUR_PROJECT_KEY>'

# Detected keys with a dedicated field in SonarPropertiesConfig
DEDICATED_KEYS = {
    'sonar.sources',
    'sonar.tests',
    'sonar.exclusions',
    'sonar.java.binaries',
    'sonar.java.libraries',
    'sonar.coverage.jacoco.xmlReportPaths',
}


def best_properties(properties: Sequence[DetectedProperty]) -> List[DetectedProperty]:
    """
    One property per key, the most confident one.

    Keys keep the order in which they were first seen; between equally
    confident properties the earlier one wins.
    """
    best: Dict[str, DetectedProperty] = {}
    for prop in properties:
        current = best.get(prop.key)
        if current is None or prop.confidence.priority > current.confidence.priority:
            best[prop.key] = prop
    return list(best.values())


def _merge_csv(*values: Optional[str]) -> str:
    merged: List[str] = []
    for value in values:
        for item in (value or '').split(','):
            item = item.strip()
            if item and item not in merged:
                merged.append(item)
    return ','.join(merged)


class RecoveryCoordinator:
    """
    Combines error classification, a structural scan and validation.

    Usage:
        coordinator = RecoveryCoordinator()
        analysis = coordinator.analyze(scanner_output, "/path/to/project")
        if analysis.recoverable:
            coordinator.apply(analysis, "/path/to/project", "my-project")
    """

    def __init__(
        self,
        classifier: Optional[ScanErrorClassifier] = None,
        validator: Optional[PreScanValidator] = None,
        structure_analyzer: Optional[ProjectStructureAnalyzer] = None,
        properties_manager: Optional[PropertiesFileManager] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self.classifier = classifier or ScanErrorClassifier()
        self.validator = validator or PreScanValidator(settings=self.settings)
        self.structure_analyzer = structure_analyzer or ProjectStructureAnalyzer(
            extra_exclusions=self.settings.extra_exclusions)
        self.properties_manager = properties_manager or PropertiesFileManager(self.settings.config_file)

    def analyze(self, error_text: str, project_path: Union[str, Path]) -> RecoveryAnalysis:
        parsed_error = self.classifier.parse(error_text)
        recoverable = self.classifier.is_recoverable(parsed_error)
        recommendation = self.classifier.get_recovery_recommendation(parsed_error)
        logger.info(f"Scan error category: {parsed_error.category.value} (recoverable: {recoverable})")

        structure = self.structure_analyzer.analyze(project_path)

        if not recoverable:
            return RecoveryAnalysis(
                parsed_error=parsed_error,
                recoverable=False,
                recommendation=recommendation,
                project_structure=structure,
            )

        validation = self.validator.validate(project_path)
        suggested = best_properties(validation.detected_properties)
        config = self.build_config(structure, suggested, PLACEHOLDER_PROJECT_KEY)

        return RecoveryAnalysis(
            parsed_error=parsed_error,
            recoverable=True,
            recommendation=recommendation,
            project_structure=structure,
            suggested_properties=tuple(suggested),
            suggested_config=self.properties_manager.generate_content(config),
        )

    def apply(self, analysis: RecoveryAnalysis, project_path: Union[str, Path],
              project_key: str) -> WriteResult:
        """Write the configuration proposed by analyze() into the project."""
        config_path = str(self.properties_manager.config_path(project_path))
        if not analysis.recoverable:
            return WriteResult(
                success=False,
                config_path=config_path,
                generated_content='',
                error=f"{analysis.parsed_error.category.value} cannot be fixed by regenerating configuration",
            )

        config = self.build_config(analysis.project_structure, analysis.suggested_properties, project_key)
        return self.properties_manager.write_config(project_path, config)

    def build_config(self, structure: ProjectStructure, suggested: Sequence[DetectedProperty],
                     project_key: str) -> SonarPropertiesConfig:
        values = {p.key: p.value for p in suggested}
        root = structure.root_path

        sources = values.get('sonar.sources')
        if not sources:
            first_module = structure.modules[0] if structure.modules else None
            sources = ','.join(first_module.sources_dirs) if first_module and first_module.sources_dirs else 'src'

        return SonarPropertiesConfig(
            project_key=project_key,
            project_name=Path(root).name or None,
            sources=sources,
            tests=values.get('sonar.tests'),
            exclusions=_merge_csv(','.join(structure.global_exclusions), values.get('sonar.exclusions')) or None,
            modules=self._module_configs(structure),
            java_binaries=values.get('sonar.java.binaries'),
            java_libraries=process_library_paths(
                values.get('sonar.java.libraries'), root, self.settings.library_path_strategy),
            coverage_report_paths=values.get('sonar.coverage.jacoco.xmlReportPaths'),
            additional_properties={k: v for k, v in values.items() if k not in DEDICATED_KEYS},
        )

    @staticmethod
    def _module_configs(structure: ProjectStructure):
        if not structure.is_multi_module:
            return ()

        configs = []
        used_names = set()
        for module in structure.modules:
            if module.relative_path == '.':
                continue
            name = module.name
            if name in used_names:
                name = module.relative_path.replace('/', '_')
            used_names.add(name)
            configs.append(SonarModuleConfig(
                name=name,
                base_dir=module.relative_path,
                sources=','.join(module.sources_dirs) or 'src',
                tests=','.join(module.tests_dirs) or None,
                binaries=','.join(module.binary_dirs) if module.binary_dirs else None,
            ))
        return tuple(configs)
