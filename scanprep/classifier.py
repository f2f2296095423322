"""
Scan error classifier.

Turns raw scanner output into a ParsedScanError using an ordered table of
patterns. The first matching pattern wins, so the table order is the
precedence between categories.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Pattern, Tuple

from .models import ParsedScanError, ScanErrorCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorDetails:
    """What an extractor contributes to a ParsedScanError"""
    suggested_fix: Optional[str] = None
    affected_paths: Tuple[str, ...] = ()
    missing_parameters: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ErrorPattern:
    """One row of the classification table"""
    category: ScanErrorCategory
    pattern: Pattern
    extract: Callable[[str], ErrorDetails]


MODULE_NAME = re.compile(r"""module[:\s]+['"]?([^'"]+)['"]?""", re.IGNORECASE)
EXCLUSION_PATTERN = re.compile(r"""pattern[:\s]+['"]?([^'"]+)['"]?""", re.IGNORECASE)

QUOTED_PATH = re.compile(r"""['"]([/\\][^'"]+)['"]""")
ABSOLUTE_PATH = re.compile(r'(?:/[\w.-]+)+|(?:[A-Z]:\\[\w.\\-]+)+', re.IGNORECASE)


def _fixed(suggested_fix: str, *missing_parameters: str) -> Callable[[str], ErrorDetails]:
    def extract(message: str) -> ErrorDetails:
        return ErrorDetails(suggested_fix=suggested_fix, missing_parameters=missing_parameters)
    return extract


def _with_capture(regex: Pattern, suggested_fix: str,
                  *missing_parameters: str) -> Callable[[str], ErrorDetails]:
    def extract(message: str) -> ErrorDetails:
        match = regex.search(message)
        return ErrorDetails(
            suggested_fix=suggested_fix,
            affected_paths=(match.group(1).strip(),) if match else (),
            missing_parameters=missing_parameters,
        )
    return extract


def _compile(*alternatives: str) -> Pattern:
    return re.compile('|'.join(alternatives), re.IGNORECASE)


ERROR_PATTERNS: Tuple[ErrorPattern, ...] = (
    ErrorPattern(
        ScanErrorCategory.SOURCES_NOT_FOUND,
        _compile(
            r'Unable to find source files',
            r'No sources found',
            r'sonar\.sources.*does not exist',
            r'No source files found',
        ),
        _fixed('Configure sonar.sources with the correct source directory path', 'sonar.sources'),
    ),
    ErrorPattern(
        ScanErrorCategory.BINARY_PATH_MISSING,
        _compile(
            r'Unable to find.*classes',
            r'sonar\.java\.binaries.*does not exist',
            r'No compiled classes found',
            r'Your project contains.*but sonar\.java\.binaries',
        ),
        _fixed(
            'Run the build first (mvn compile / gradle build) and configure sonar.java.binaries',
            'sonar.java.binaries',
        ),
    ),
    ErrorPattern(
        ScanErrorCategory.MODULE_CONFIG_ERROR,
        _compile(
            r'Module.*not found',
            r'Invalid module configuration',
            r'Unrecognized module',
            r'Unable to load module',
            r'sonar\.modules.*invalid',
        ),
        _with_capture(
            MODULE_NAME,
            'Review the multi-module configuration in sonar-project.properties',
            'sonar.modules',
        ),
    ),
    ErrorPattern(
        ScanErrorCategory.EXCLUSION_PATTERN_ERROR,
        _compile(
            r'Invalid exclusion pattern',
            r'Exclusion.*error',
            r'Pattern.*is not valid',
        ),
        _with_capture(
            EXCLUSION_PATTERN,
            'Fix the exclusion pattern syntax (use **/*.ext format)',
            'sonar.exclusions',
        ),
    ),
    ErrorPattern(
        ScanErrorCategory.LANGUAGE_NOT_DETECTED,
        _compile(
            r'No files nor directories matching',
            r'Unable to determine language',
            r'No analyzable files',
            r'Language not supported',
        ),
        _fixed(
            'Verify source files exist and configure language-specific parameters',
            'sonar.language', 'sonar.sources',
        ),
    ),
    ErrorPattern(
        ScanErrorCategory.PERMISSION_DENIED,
        _compile(
            r'403',
            r'Permission denied',
            r'Insufficient privileges',
            r'Access denied',
            r'Not authorized',
        ),
        _fixed('Check token permissions or regenerate the token with the required rights'),
    ),
    ErrorPattern(
        ScanErrorCategory.SCANNER_NOT_FOUND,
        _compile(
            r'sonar-scanner.*not found',
            r'command not found.*sonar',
            r'Cannot find sonar-scanner',
        ),
        _fixed(
            'Install the SonarScanner CLI: brew install sonar-scanner (macOS) '
            'or apt-get install sonar-scanner-cli (Linux)'
        ),
    ),
)

UNKNOWN_FIX = 'Review the error message and check the SonarQube documentation'

RECOVERABLE_CATEGORIES = frozenset({
    ScanErrorCategory.SOURCES_NOT_FOUND,
    ScanErrorCategory.MODULE_CONFIG_ERROR,
    ScanErrorCategory.BINARY_PATH_MISSING,
    ScanErrorCategory.EXCLUSION_PATTERN_ERROR,
    ScanErrorCategory.LANGUAGE_NOT_DETECTED,
})

RECOMMENDATIONS: Dict[ScanErrorCategory, str] = {
    ScanErrorCategory.SOURCES_NOT_FOUND:
        'Run "scanprep recover --write" to generate a configuration with the correct source paths.',
    ScanErrorCategory.MODULE_CONFIG_ERROR:
        'Run "scanprep recover --write" to regenerate the multi-module configuration from the detected modules.',
    ScanErrorCategory.BINARY_PATH_MISSING:
        'Build the project first, then run "scanprep recover --write" to configure sonar.java.binaries.',
    ScanErrorCategory.EXCLUSION_PATTERN_ERROR:
        'Run "scanprep recover --write" to regenerate the configuration with corrected exclusion patterns.',
    ScanErrorCategory.LANGUAGE_NOT_DETECTED:
        'Run "scanprep recover --write" to configure languages and sources explicitly.',
    ScanErrorCategory.PERMISSION_DENIED:
        'Regenerate the analysis token with sufficient permissions and run the scan again.',
    ScanErrorCategory.SCANNER_NOT_FOUND:
        'Install the sonar-scanner CLI tool before running the scan.',
    ScanErrorCategory.UNKNOWN:
        'Review the error details and run "scanprep validate" to check the project configuration.',
}


def extract_paths(text: str) -> List[str]:
    """
    Absolute paths mentioned in text.

    Quoted paths come first, then bare POSIX or Windows absolute paths.
    Duplicates are dropped, keeping first occurrence order.
    """
    found = QUOTED_PATH.findall(text) + ABSOLUTE_PATH.findall(text)
    paths: List[str] = []
    for path in found:
        if path not in paths:
            paths.append(path)
    return paths


class ScanErrorClassifier:
    """Classifies raw scanner failure text"""

    def __init__(self, patterns: Tuple[ErrorPattern, ...] = ERROR_PATTERNS):
        self.patterns = patterns

    def parse(self, error_message: str) -> ParsedScanError:
        """Categorize an error message. Never raises; unmatched text is UNKNOWN."""
        for entry in self.patterns:
            if not entry.pattern.search(error_message):
                continue

            details = entry.extract(error_message)
            affected = list(details.affected_paths)
            for path in extract_paths(error_message):
                if path not in affected:
                    affected.append(path)

            logger.debug(f"Classified scan error as {entry.category.value}")
            return ParsedScanError(
                category=entry.category,
                raw_message=error_message,
                suggested_fix=details.suggested_fix,
                affected_paths=tuple(affected) if affected else None,
                missing_parameters=details.missing_parameters or None,
            )

        logger.debug("Scan error did not match any known pattern")
        return ParsedScanError(
            category=ScanErrorCategory.UNKNOWN,
            raw_message=error_message,
            suggested_fix=UNKNOWN_FIX,
        )

    classify = parse

    @staticmethod
    def is_recoverable(error: ParsedScanError) -> bool:
        """True when regenerating configuration can fix the error."""
        return error.category in RECOVERABLE_CATEGORIES

    @staticmethod
    def extract_paths(text: str) -> List[str]:
        return extract_paths(text)

    @staticmethod
    def get_recovery_recommendation(error: ParsedScanError) -> str:
        return RECOMMENDATIONS[error.category]
