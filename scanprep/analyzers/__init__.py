"""
scanprep analyzers package

Per-language project analyzers behind one capability interface.

Components:
- base: The LanguageAnalyzer capability interface
- helpers: Filesystem probes and value-object constructors
- patterns: Named regex tables for manifest extraction
- resolution: Timed dependency listing with a tagged result
- registry: Default analyzer set and the ordered AnalyzerRegistry
- languages: Java, Python, JavaScript/TypeScript, Go and C/C++ analyzers
"""

from .base import LanguageAnalyzer
from .registry import AnalyzerRegistry, register_default, default_analyzer_classes
from .resolution import DependencyResolution, Resolved, TimedOut, Failed

__all__ = [
    'LanguageAnalyzer',
    'AnalyzerRegistry',
    'register_default',
    'default_analyzer_classes',
    'DependencyResolution',
    'Resolved',
    'TimedOut',
    'Failed',
]
