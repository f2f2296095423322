"""
Library path handling for sonar.java.libraries values.

Resolved classpaths are absolute and machine specific. Before they are
written into a configuration file they are rewritten with one of three
strategies:

- absolute: keep the paths as resolved
- relative: paths inside the project become project-relative
- glob: repository caches collapse into portable wildcard patterns
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

MAVEN_REPOSITORY_GLOB = '${user.home}/.m2/repository/**/*.jar'
GRADLE_CACHE_GLOB = '${user.home}/.gradle/caches/**/*.jar'
PROJECT_LIB_GLOB = '**/lib/**/*.jar'


def _split(libraries: Optional[str]) -> List[str]:
    if not libraries:
        return []
    return [lib.strip() for lib in libraries.split(',') if lib.strip()]


def is_under_project(file_path: str, project_path: Union[str, Path]) -> bool:
    """Check if a path is strictly inside the project directory."""
    normalized_file = os.path.normpath(file_path)
    normalized_project = os.path.normpath(str(project_path))
    prefix = os.path.join(normalized_project, '')
    return normalized_file != normalized_project and normalized_file.startswith(prefix)


def make_relative_if_possible(absolute_path: str, project_path: Union[str, Path]) -> str:
    """Project-relative form of a path inside the project, else the path unchanged."""
    if is_under_project(absolute_path, project_path):
        return os.path.relpath(os.path.normpath(absolute_path), os.path.normpath(str(project_path)))
    return absolute_path


def _to_glob_patterns(libraries: List[str], project_path: Union[str, Path]) -> str:
    patterns: List[str] = []

    def add(pattern: str) -> None:
        if pattern not in patterns:
            patterns.append(pattern)

    for lib in libraries:
        unified = lib.replace('\\', '/')
        if '.m2/repository' in unified:
            add(MAVEN_REPOSITORY_GLOB)
        elif '.gradle/caches' in unified:
            add(GRADLE_CACHE_GLOB)
        elif is_under_project(lib, project_path):
            relative = make_relative_if_possible(lib, project_path)
            parts = Path(relative).parent.parts
            if 'lib' in parts or 'libs' in parts:
                add(PROJECT_LIB_GLOB)
            else:
                add(relative)
        else:
            add(lib)

    return ','.join(patterns)


def process_library_paths(libraries: Optional[str], project_path: Union[str, Path],
                          strategy: str = 'relative') -> Optional[str]:
    """
    Rewrite a comma separated library list with the given strategy.

    Returns None when there is nothing to write.
    """
    if not libraries:
        return None
    if strategy == 'absolute':
        return libraries

    entries = _split(libraries)
    if not entries:
        return None

    if strategy == 'glob':
        return _to_glob_patterns(entries, project_path)
    if strategy != 'relative':
        raise ValueError(f"Unknown library path strategy: {strategy}")

    return ','.join(make_relative_if_possible(lib, project_path) for lib in entries)


def count_libraries(libraries: Optional[str]) -> int:
    return len(_split(libraries))


def summarize_libraries(libraries: Optional[str], max_display: int = 3) -> str:
    """Short display form: base names of the first few entries plus a remainder count."""
    entries = _split(libraries)
    if not entries:
        return 'none'

    names = [os.path.basename(lib.replace('\\', '/')) for lib in entries]
    if len(names) <= max_display:
        return ', '.join(names)
    return f"{', '.join(names[:max_display])}... (+{len(names) - max_display} more)"
