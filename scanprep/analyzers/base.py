"""
Capability interface for scanprep language analyzers.

Every language analyzer implements the same four capabilities:
- detect: cheap marker-file checks, never raises
- analyze: deeper probing producing a LanguageAnalysisResult
- get_critical_properties: keys a scan cannot run correctly without
- get_recommended_properties: keys that improve scan quality

Shared behaviour lives in helpers.py as free functions; this module only
defines the contract.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Union, TYPE_CHECKING

from ..models import LanguageAnalysisResult

if TYPE_CHECKING:
    from ..config import Settings


class LanguageAnalyzer(ABC):
    """
    Abstract capability set for a per-language analyzer.

    Implementations must be self-contained and read-only with respect to
    the project tree. They hold no state between calls, so one instance
    can serve any number of projects.
    """

    @property
    @abstractmethod
    def language(self) -> str:
        """Registry key for this analyzer (e.g., 'java', 'python')."""
        pass

    @abstractmethod
    def detect(self, project_path: Union[str, Path]) -> bool:
        """
        Check whether the language is present in the project.

        Args:
            project_path: Project root

        Returns:
            True if one of the language's marker files exists; False for a
            nonexistent path
        """
        pass

    @abstractmethod
    def analyze(self, project_path: Union[str, Path]) -> LanguageAnalysisResult:
        """
        Probe the project for scanner properties.

        Args:
            project_path: Project root

        Returns:
            Analysis result; problems are reported as warnings
        """
        pass

    @abstractmethod
    def get_critical_properties(self) -> List[str]:
        pass

    @abstractmethod
    def get_recommended_properties(self) -> List[str]:
        pass

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LanguageAnalyzer":
        """Build the analyzer from user settings. Most analyzers take none."""
        return cls()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(language={self.language!r})"
