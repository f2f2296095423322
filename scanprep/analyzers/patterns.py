"""
Named extraction rules for build manifests.

Manifests are never fully parsed. Each fact (a language version, a module
list) is pulled out by an ordered table of ExtractionRule entries where the
first rule that yields a value wins, so precedence is visible in the table.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence


def _group(index: int = 1) -> Callable[["re.Match[str]"], Optional[str]]:
    def extract(match: "re.Match[str]") -> Optional[str]:
        value = match.group(index)
        return value.strip() if value else None
    return extract


def _minimum_version(match: "re.Match[str]") -> Optional[str]:
    # ">=3.8,<4" -> "3.8"
    version = re.search(r'(\d+\.\d+)', match.group(1))
    return version.group(1) if version else None


def _strip_colon(match: "re.Match[str]") -> Optional[str]:
    return match.group(1).strip().lstrip(':') or None


@dataclass(frozen=True)
class ExtractionRule:
    """One named regex and the function turning its match into a value."""
    purpose: str
    pattern: "re.Pattern[str]"
    extract: Callable[["re.Match[str]"], Optional[str]] = _group()

    def apply(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.extract(match)

    def apply_all(self, text: str) -> List[str]:
        values = []
        for match in self.pattern.finditer(text):
            value = self.extract(match)
            if value:
                values.append(value)
        return values


def first_match(rules: Sequence[ExtractionRule], text: Optional[str]) -> Optional[str]:
    """Value of the first rule in table order that matches text."""
    if not text:
        return None
    for rule in rules:
        value = rule.apply(text)
        if value:
            return value
    return None


MAVEN_JAVA_VERSION = (
    ExtractionRule(
        'maven compiler source property',
        re.compile(r'<maven\.compiler\.source>(\d+(?:\.\d+)?)</maven\.compiler\.source>'),
    ),
    ExtractionRule(
        'maven compiler target property',
        re.compile(r'<maven\.compiler\.target>(\d+(?:\.\d+)?)</maven\.compiler\.target>'),
    ),
    ExtractionRule(
        'java.version property',
        re.compile(r'<java\.version>(\d+(?:\.\d+)?)</java\.version>'),
    ),
)

GRADLE_JAVA_VERSION = (
    ExtractionRule(
        'sourceCompatibility assignment',
        re.compile(r'''sourceCompatibility\s*=\s*['"]?(\d+(?:\.\d+)?)['"]?'''),
    ),
    ExtractionRule(
        'JavaVersion enum constant',
        re.compile(r'JavaVersion\.VERSION_(\d+)'),
    ),
    ExtractionRule(
        'java toolchain language version',
        re.compile(r'languageVersion\.set\(JavaLanguageVersion\.of\((\d+)\)\)'),
    ),
)

MAVEN_MODULES_BLOCK = ExtractionRule(
    'maven modules block',
    re.compile(r'<modules>(.*?)</modules>', re.DOTALL),
    extract=lambda m: m.group(1),
)

MAVEN_MODULE_ENTRY = ExtractionRule(
    'maven module entry',
    re.compile(r'<module>([^<]+)</module>'),
)

GRADLE_INCLUDE = ExtractionRule(
    'gradle settings include',
    re.compile(r'''include\s*\(?['"]([^'"]+)['"]\)?'''),
    extract=_strip_colon,
)

PYTHON_VERSION = (
    ExtractionRule(
        'requires-python constraint',
        re.compile(r'''requires-python\s*=\s*["']([^"']+)["']'''),
        extract=_minimum_version,
    ),
    ExtractionRule(
        'poetry python dependency',
        re.compile(r'''python\s*=\s*["'][\^~]?(\d+\.\d+)'''),
    ),
)

GO_VERSION = (
    ExtractionRule(
        'go directive',
        re.compile(r'^go\s+(\d+\.\d+)', re.MULTILINE),
    ),
)


def maven_modules(pom_content: Optional[str]) -> List[str]:
    """Module names declared in a pom.xml <modules> block."""
    block = first_match((MAVEN_MODULES_BLOCK,), pom_content)
    if not block:
        return []
    return MAVEN_MODULE_ENTRY.apply_all(block)


def gradle_modules(settings_content: Optional[str]) -> List[str]:
    """Project names included by a settings.gradle file."""
    if not settings_content:
        return []
    return GRADLE_INCLUDE.apply_all(settings_content)
