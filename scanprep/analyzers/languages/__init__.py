"""
Language-specific project analyzers.

Each analyzer checks marker files and provides:
- Language/runtime version extraction
- Source, test and build-output directory discovery
- Coverage report discovery
- Critical and recommended scanner property lists

Import order is registration order, which is the order the validation
orchestrator runs them in.
"""

def _import_analyzers():
    """Lazy import to trigger registration."""
    from . import java
    from . import python
    from . import javascript
    from . import go
    from . import cpp

_import_analyzers()

__all__ = [
    'java',
    'python',
    'javascript',
    'go',
    'cpp',
]
