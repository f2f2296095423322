"""
Probe and construction helpers shared by every language analyzer.

Analyzers compose these functions instead of inheriting behaviour:

- file_exists/read_text/read_json: side-effect-free filesystem probes
- existing_paths/first_existing: candidate list lookups
- create_property/create_warning: value object constructors
- AnalysisDraft: append-only collector turned into a LanguageAnalysisResult
- guarded_analysis: detection check plus failure boundary for analyze()

None of the probes raise; an unreadable or missing path is simply absent.
"""

import json
import logging
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Union

from ..models import (
    Confidence,
    DetectedProperty,
    LanguageAnalysisResult,
    ModuleInfo,
    ValidationWarning,
    WarningSeverity,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def file_exists(path: PathLike) -> bool:
    """Check if a file or directory exists."""
    try:
        return Path(path).exists()
    except (OSError, ValueError):
        return False


def read_text(path: PathLike) -> Optional[str]:
    """Read a UTF-8 text file, None if it cannot be read."""
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Could not read {path}: {e}")
        return None


def read_json(path: PathLike) -> Optional[Any]:
    """Read and parse a JSON file, None if missing or malformed."""
    content = read_text(path)
    if not content:
        return None
    try:
        return json.loads(content)
    except ValueError as e:
        logger.debug(f"Invalid JSON in {path}: {e}")
        return None


def existing_paths(project_path: PathLike, candidates: Iterable[str]) -> List[str]:
    """Relative candidates that exist under project_path, in candidate order."""
    root = Path(project_path)
    return [c for c in candidates if file_exists(root / c)]


def first_existing(project_path: PathLike, candidates: Iterable[str]) -> Optional[str]:
    """First relative candidate that exists under project_path."""
    root = Path(project_path)
    for candidate in candidates:
        if file_exists(root / candidate):
            return candidate
    return None


def any_exists(project_path: PathLike, markers: Iterable[str]) -> bool:
    return first_existing(project_path, markers) is not None


def create_property(key: str, value: str, confidence: Confidence, source: str) -> DetectedProperty:
    """Helper to create a DetectedProperty."""
    return DetectedProperty(key=key, value=value, confidence=confidence, source=source)


def create_warning(
    code: str,
    severity: WarningSeverity,
    message: str,
    suggestion: Optional[str] = None,
) -> ValidationWarning:
    """Helper to create a ValidationWarning."""
    return ValidationWarning(code=code, severity=severity, message=message, suggestion=suggestion)


@dataclass
class AnalysisDraft:
    """Mutable collector used while one analyzer probes a project."""
    properties: List[DetectedProperty] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)
    modules: List[ModuleInfo] = field(default_factory=list)
    version: Optional[str] = None
    build_tool: Optional[str] = None

    def add_property(self, key: str, value: str, confidence: Confidence, source: str) -> None:
        self.properties.append(create_property(key, value, confidence, source))

    def warn(
        self,
        code: str,
        severity: WarningSeverity,
        message: str,
        suggestion: Optional[str] = None,
    ) -> None:
        self.warnings.append(create_warning(code, severity, message, suggestion))

    def freeze(self, language: str) -> LanguageAnalysisResult:
        return LanguageAnalysisResult(
            detected=True,
            language=language,
            version=self.version,
            build_tool=self.build_tool,
            modules=tuple(self.modules),
            properties=tuple(self.properties),
            warnings=tuple(self.warnings),
        )


def guarded_analysis(
    language: str,
    project_path: PathLike,
    detect: Callable[[PathLike], bool],
    body: Callable[[Path, AnalysisDraft], None],
) -> LanguageAnalysisResult:
    """
    Run an analyzer body behind a detection check and a failure boundary.

    Args:
        language: Analyzer language key, used for the error code
        project_path: Project root
        detect: The analyzer's detect function
        body: Fills an AnalysisDraft for a detected project

    Returns:
        A non-detected empty result, the frozen draft, or a result holding
        a single <LANG>-ERR-001 warning if the body raised
    """
    if not detect(project_path):
        return LanguageAnalysisResult(detected=False, language=language)

    draft = AnalysisDraft()
    try:
        body(Path(project_path), draft)
    except Exception as e:
        logger.warning(f"[{language}] Error analyzing {project_path}: {e}")
        logger.debug(traceback.format_exc())
        return LanguageAnalysisResult(
            detected=True,
            language=language,
            warnings=(create_warning(
                f"{language.upper()}-ERR-001",
                WarningSeverity.WARNING,
                f"Error analyzing {language} project: {e}",
                "Check project structure and try again",
            ),),
        )
    return draft.freeze(language)
