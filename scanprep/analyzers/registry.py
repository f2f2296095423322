"""
Analyzer registry for scanprep.

Provides:
- A decorator that records the default analyzer classes
- AnalyzerRegistry, an ordered language -> analyzer mapping used by the
  validation orchestrator
"""

from typing import Dict, Iterator, List, Optional, Type, TYPE_CHECKING
import logging

from .base import LanguageAnalyzer

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

# Default analyzer classes in registration order
_default_analyzers: List[Type[LanguageAnalyzer]] = []


def register_default(analyzer_class: Type[LanguageAnalyzer]) -> Type[LanguageAnalyzer]:
    """
    Decorator to add an analyzer class to the default set.

    Usage:
        @register_default
        class GoAnalyzer(LanguageAnalyzer):
            ...
    """
    if analyzer_class not in _default_analyzers:
        _default_analyzers.append(analyzer_class)
        logger.debug(f"Registered default analyzer: {analyzer_class.__name__}")
    return analyzer_class


def default_analyzer_classes() -> List[Type[LanguageAnalyzer]]:
    """Default analyzer classes, importing the language package to register them."""
    from . import languages  # noqa: F401
    return list(_default_analyzers)


class AnalyzerRegistry:
    """
    Ordered registry of language analyzers.

    Iteration follows insertion order. Registering an analyzer whose
    language is already present replaces the earlier one in place.
    """

    def __init__(self, analyzers: Optional[List[LanguageAnalyzer]] = None):
        self._analyzers: Dict[str, LanguageAnalyzer] = {}
        for analyzer in analyzers or []:
            self.register(analyzer)

    @classmethod
    def with_defaults(cls, settings: Optional["Settings"] = None) -> "AnalyzerRegistry":
        """
        Build a registry holding the default analyzers.

        Args:
            settings: Optional settings; disabled analyzers are skipped and
                the rest are built with from_settings()

        Returns:
            Populated registry
        """
        from ..config import Settings

        settings = settings or Settings()
        registry = cls()
        for analyzer_class in default_analyzer_classes():
            analyzer = analyzer_class.from_settings(settings)
            if analyzer.language in settings.disabled_analyzers:
                logger.info(f"Analyzer disabled by settings: {analyzer.language}")
                continue
            registry.register(analyzer)
        return registry

    def register(self, analyzer: LanguageAnalyzer) -> None:
        """Register an analyzer, replacing any analyzer for the same language."""
        if analyzer.language in self._analyzers:
            logger.debug(f"Replacing analyzer for {analyzer.language} with {analyzer!r}")
        self._analyzers[analyzer.language] = analyzer

    def unregister(self, language: str) -> bool:
        """Remove the analyzer for a language. Returns False if none was registered."""
        return self._analyzers.pop(language, None) is not None

    def get(self, language: str) -> Optional[LanguageAnalyzer]:
        return self._analyzers.get(language)

    def languages(self) -> List[str]:
        """Registered language keys in insertion order."""
        return list(self._analyzers.keys())

    def __iter__(self) -> Iterator[LanguageAnalyzer]:
        return iter(list(self._analyzers.values()))

    def __len__(self) -> int:
        return len(self._analyzers)

    def __contains__(self, language: object) -> bool:
        return language in self._analyzers
