"""
Report generators for validation, classification and recovery results
"""

import json
import sys
from typing import Any, List, Optional, Union

from .library_paths import count_libraries, summarize_libraries
from .models import (
    ExistingConfigAnalysis,
    ModuleInfo,
    ParsedScanError,
    PreScanValidationResult,
    RecoveryAnalysis,
    WarningSeverity,
)

Reportable = Union[PreScanValidationResult, ExistingConfigAnalysis, ParsedScanError, RecoveryAnalysis]

MAX_VALUE_LENGTH = 50
MAX_MESSAGE_LENGTH = 200


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + '...'


def _display_value(key: str, value: str) -> str:
    # Classpaths are long; show a count and a few jar names instead
    if key == 'sonar.java.libraries' and count_libraries(value) > 1:
        return f"{count_libraries(value)} libraries ({summarize_libraries(value)})"
    return truncate(value, MAX_VALUE_LENGTH)


class BaseReporter:
    """Base class for reporters"""

    def report(self, result: Reportable, output: Optional[str] = None) -> str:
        """Generate report and optionally write to file"""
        raise NotImplementedError

    def _write_output(self, content: str, output: Optional[str]) -> None:
        """Write content to file or stdout"""
        if output:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(content)
        else:
            print(content)


class TextReporter(BaseReporter):
    """Plain text / terminal reporter"""

    COLORS = {
        'error': '\033[91m',    # Red
        'warning': '\033[93m',  # Yellow
        'info': '\033[90m',     # Gray
        'green': '\033[92m',
        'bold': '\033[1m',
        'reset': '\033[0m',
    }

    SEVERITY_MARKERS = {
        WarningSeverity.ERROR: '!',
        WarningSeverity.WARNING: '*',
        WarningSeverity.INFO: '-',
    }

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors and sys.stdout.isatty()

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors enabled"""
        if not self.use_colors:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def report(self, result: Reportable, output: Optional[str] = None) -> str:
        if isinstance(result, PreScanValidationResult):
            content = self.format_validation(result)
        elif isinstance(result, ExistingConfigAnalysis):
            content = self.format_config_analysis(result)
        elif isinstance(result, ParsedScanError):
            content = self.format_scan_error(result)
        elif isinstance(result, RecoveryAnalysis):
            content = self.format_recovery(result)
        else:
            raise TypeError(f"Cannot report {type(result).__name__}")

        self._write_output(content, output)
        return content

    def _header(self, title: str) -> List[str]:
        return [
            "",
            self._color("=" * 60, 'bold'),
            self._color(f"  {title}", 'bold'),
            self._color("=" * 60, 'bold'),
            "",
        ]

    def format_validation(self, result: PreScanValidationResult) -> str:
        lines = self._header("PRE-SCAN VALIDATION RESULTS")

        if not result.languages:
            lines.append("No languages detected in this project")
        else:
            lines.append(self._color("LANGUAGES DETECTED:", 'bold'))
            for lang in result.languages:
                details = [d for d in (lang.version, lang.build_tool) if d]
                suffix = f" ({', '.join(details)})" if details else ""
                lines.append(f"  - {lang.language}{suffix}")
                for module in lang.modules:
                    langs = f" ({', '.join(module.language)})" if module.language else ""
                    tool = f" - {module.build_tool}" if module.build_tool else ""
                    lines.append(f"      module {module.name} -> {module.relative_path}{langs}{tool}")
                    lines.extend(self._module_details(module, "        "))
        lines.append("")

        if result.detected_properties:
            lines.append(self._color(f"DETECTED PROPERTIES ({len(result.detected_properties)}):", 'bold'))
            for prop in result.detected_properties:
                lines.append(
                    f"  {prop.key}={_display_value(prop.key, prop.value)} "
                    f"[{prop.confidence.value}] ({prop.source})"
                )
            lines.append("")

        if result.missing_critical:
            lines.append(self._color("MISSING CRITICAL PROPERTIES:", 'error'))
            for key in result.missing_critical:
                lines.append(f"  - {key}")
            lines.append("")

        if result.missing_recommended:
            lines.append(self._color("MISSING RECOMMENDED PROPERTIES:", 'warning'))
            for key in result.missing_recommended:
                lines.append(f"  - {key}")
            lines.append("")

        if result.warnings:
            lines.append(self._color(f"WARNINGS ({len(result.warnings)}):", 'bold'))
            for warning in result.warnings:
                marker = self.SEVERITY_MARKERS[warning.severity]
                lines.append(
                    f"  {marker} [{warning.code}] "
                    f"{self._color(warning.message, warning.severity.value)}"
                )
                if warning.suggestion:
                    lines.append(f"      Suggestion: {warning.suggestion}")
            lines.append("")

        lines.append(self._color("EXISTING CONFIGURATION:", 'bold'))
        lines.extend(f"  {line}" if line else "" for line in self._config_lines(result.existing_config))
        lines.append("")

        quality_color = {'full': 'green', 'partial': 'warning', 'degraded': 'error'}[result.scan_quality.value]
        lines.append(f"Scan quality: {self._color(result.scan_quality.value.upper(), quality_color)}")
        lines.append(f"Can proceed: {'yes' if result.can_proceed else 'no'}")
        lines.append("")
        lines.append(self._color("=" * 60, 'bold'))
        return "\n".join(lines)

    @staticmethod
    def _module_details(module: ModuleInfo, indent: str) -> List[str]:
        details = []
        if module.build_file:
            details.append(f"{indent}Build file: {module.build_file}")
        if module.sources_dirs:
            details.append(f"{indent}Sources: {', '.join(module.sources_dirs)}")
        if module.tests_dirs:
            details.append(f"{indent}Tests: {', '.join(module.tests_dirs)}")
        if module.binary_dirs:
            details.append(f"{indent}Binaries: {', '.join(module.binary_dirs)}")
        return details

    def format_config_analysis(self, analysis: ExistingConfigAnalysis) -> str:
        return "\n".join(self._config_lines(analysis))

    def _config_lines(self, analysis: ExistingConfigAnalysis) -> List[str]:
        lines = []
        if not analysis.exists:
            lines.append(f"No configuration file found at {analysis.path}")
            if analysis.missing_critical:
                lines.append("")
                lines.append("Missing critical properties:")
                lines.extend(f"  - {key}" for key in analysis.missing_critical)
            if analysis.missing_recommended:
                lines.append("")
                lines.append("Missing recommended properties:")
                lines.extend(f"  - {key}" for key in analysis.missing_recommended)
            return lines

        lines.append(f"Config file: {analysis.path}")
        lines.append(f"Completeness: {analysis.completeness_score}%")
        lines.append(f"Properties defined: {len(analysis.properties)}")
        for key, value in analysis.properties.items():
            lines.append(f"  {key}={_display_value(key, value)}")

        if analysis.missing_critical:
            lines.append("")
            lines.append("Missing critical properties:")
            lines.extend(f"  - {key}" for key in analysis.missing_critical)

        if analysis.missing_recommended:
            lines.append("")
            lines.append("Recommended additions:")
            lines.extend(f"  - {key}" for key in analysis.missing_recommended)
        return lines

    def format_scan_error(self, error: ParsedScanError) -> str:
        lines = [f"Category: {error.category.value}"]
        lines.append(f"Message: {truncate(error.raw_message, MAX_MESSAGE_LENGTH)}")
        if error.suggested_fix:
            lines.append(f"Suggested fix: {error.suggested_fix}")
        if error.missing_parameters:
            lines.append(f"Missing parameters: {', '.join(error.missing_parameters)}")
        if error.affected_paths:
            lines.append(f"Affected paths: {', '.join(error.affected_paths)}")
        return "\n".join(lines)

    def format_recovery(self, analysis: RecoveryAnalysis) -> str:
        structure = analysis.project_structure
        lines = self._header("SCAN FAILURE ANALYSIS")

        lines.append(self._color("ERROR:", 'bold'))
        lines.extend(f"  {line}" for line in self.format_scan_error(analysis.parsed_error).splitlines())
        lines.append("")

        lines.append(self._color("PROJECT STRUCTURE:", 'bold'))
        lines.append(f"  Type: {structure.project_type}")
        lines.append(f"  Root: {structure.root_path}")
        if structure.build_files:
            lines.append(f"  Build files: {', '.join(structure.build_files)}")
        if structure.config_files:
            lines.append(f"  Config files: {', '.join(structure.config_files)}")
        if structure.detected_languages:
            lines.append("  Languages:")
            for share in structure.detected_languages[:5]:
                lines.append(f"    - {share.name}: {share.files_count} files ({share.percentage}%)")
        if structure.modules:
            lines.append("  Modules:")
            for module in structure.modules:
                langs = f" ({', '.join(module.language)})" if module.language else ""
                tool = f" - {module.build_tool}" if module.build_tool else ""
                lines.append(f"    - {module.name}{langs}{tool}")
                lines.extend(self._module_details(module, "      "))
        lines.append(f"  Exclusions: {', '.join(structure.global_exclusions)}")
        lines.append("")

        lines.append(self._color("DIRECTORY TREE:", 'bold'))
        lines.append(structure.directory_tree)
        lines.append("")

        lines.append(self._color("RECOVERY:", 'bold'))
        if analysis.recoverable:
            lines.append(self._color("  This error is recoverable with proper configuration.", 'green'))
        else:
            lines.append(self._color("  This error may require manual intervention.", 'warning'))
        lines.append(f"  {analysis.recommendation}")
        lines.append("")

        if analysis.suggested_properties:
            lines.append(self._color("SUGGESTED PROPERTIES:", 'bold'))
            for prop in analysis.suggested_properties:
                lines.append(
                    f"  {prop.key}={_display_value(prop.key, prop.value)} "
                    f"[{prop.confidence.value}] ({prop.source})"
                )
            lines.append("")

        if analysis.suggested_config:
            lines.append(self._color("SUGGESTED CONFIGURATION:", 'bold'))
            lines.append(analysis.suggested_config)
            lines.append("")

        lines.append(self._color("=" * 60, 'bold'))
        return "\n".join(lines)


class JSONReporter(BaseReporter):
    """JSON format reporter"""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def report(self, result: Any, output: Optional[str] = None) -> str:
        content = json.dumps(result.to_dict(), indent=self.indent)
        self._write_output(content, output)
        return content


def get_reporter(format: str, **kwargs) -> BaseReporter:
    """Get reporter instance by format name"""
    reporters = {
        'text': TextReporter,
        'json': JSONReporter,
    }

    reporter_class = reporters.get(format.lower())
    if not reporter_class:
        raise ValueError(f"Unknown format: {format}. Available: {', '.join(reporters.keys())}")

    return reporter_class(**kwargs)
