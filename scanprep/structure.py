"""
Project structure analysis for configuration recovery.

Walks the project tree (bounded depth) to find build files, turn each
build-file directory into a module, count source files per language and
render a compact directory tree.
"""

import fnmatch
import logging
import os
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .analyzers.helpers import existing_paths
from .completeness import round_half_up
from .models import LanguageShare, ModuleInfo, ProjectStructure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildFileType:
    pattern: str
    build_tool: str
    languages: Tuple[str, ...]


@dataclass(frozen=True)
class LayoutCandidates:
    sources: Tuple[str, ...]
    tests: Tuple[str, ...]
    binaries: Optional[Tuple[str, ...]] = None


BUILD_FILE_TYPES = (
    BuildFileType('pom.xml', 'maven', ('java',)),
    BuildFileType('build.gradle', 'gradle', ('java', 'kotlin')),
    BuildFileType('build.gradle.kts', 'gradle', ('kotlin', 'java')),
    BuildFileType('package.json', 'npm', ('javascript', 'typescript')),
    BuildFileType('*.csproj', 'dotnet', ('csharp',)),
    BuildFileType('*.sln', 'dotnet', ('csharp',)),
    BuildFileType('Cargo.toml', 'cargo', ('rust',)),
    BuildFileType('go.mod', 'go', ('go',)),
    BuildFileType('pyproject.toml', 'python', ('python',)),
    BuildFileType('requirements.txt', 'python', ('python',)),
    BuildFileType('setup.py', 'python', ('python',)),
    BuildFileType('CMakeLists.txt', 'cmake', ('cpp',)),
)

LAYOUTS: Dict[str, LayoutCandidates] = {
    'maven': LayoutCandidates(
        sources=('src/main/java', 'src/main/kotlin', 'src/main/scala'),
        tests=('src/test/java', 'src/test/kotlin', 'src/test/scala'),
        binaries=('target/classes',),
    ),
    'gradle': LayoutCandidates(
        sources=('src/main/java', 'src/main/kotlin', 'src/main/groovy'),
        tests=('src/test/java', 'src/test/kotlin', 'src/test/groovy'),
        binaries=('build/classes/java/main', 'build/classes/kotlin/main'),
    ),
    'npm': LayoutCandidates(sources=('src', 'lib', 'app'), tests=('test', 'tests', '__tests__', 'spec')),
    'dotnet': LayoutCandidates(sources=('.',), tests=('Tests', 'Test'), binaries=('bin/Debug', 'bin/Release')),
    'cargo': LayoutCandidates(sources=('src',), tests=('tests',)),
    'go': LayoutCandidates(sources=('.',), tests=('.',)),
    'python': LayoutCandidates(sources=('src', '.'), tests=('tests', 'test')),
    'cmake': LayoutCandidates(sources=('src', 'source', 'include'), tests=('test', 'tests')),
}

LANGUAGE_EXTENSIONS: Dict[str, Tuple[str, ...]] = {
    'java': ('.java',),
    'kotlin': ('.kt', '.kts'),
    'javascript': ('.js', '.jsx', '.mjs'),
    'typescript': ('.ts', '.tsx'),
    'python': ('.py',),
    'go': ('.go',),
    'rust': ('.rs',),
    'csharp': ('.cs',),
    'cpp': ('.cpp', '.cc', '.cxx', '.c', '.h', '.hpp'),
}

DEFAULT_EXCLUSIONS = (
    '**/node_modules/**',
    '**/target/**',
    '**/build/**',
    '**/dist/**',
    '**/out/**',
    '**/bin/**',
    '**/obj/**',
    '**/.git/**',
    '**/.idea/**',
    '**/.vscode/**',
    '**/vendor/**',
    '**/__pycache__/**',
    '**/*.min.js',
    '**/*.min.css',
)

SKIP_DIRS = {
    'node_modules', 'target', 'build', 'dist', 'out', 'bin', 'obj',
    'vendor', '__pycache__', 'coverage',
}

CONFIG_FILE_PATTERNS = (
    'sonar-project.properties',
    'tsconfig.json',
    'jsconfig.json',
    '.eslintrc*',
    '.prettierrc*',
    'pytest.ini',
    'phpunit.xml',
    'jest.config.*',
    '.scanprep.yaml',
    '.scanprep.yml',
)

TREE_FILES = {
    'pom.xml', 'build.gradle', 'build.gradle.kts', 'settings.gradle', 'package.json',
    'tsconfig.json', 'go.mod', 'Cargo.toml', 'requirements.txt', 'pyproject.toml',
    'setup.py', 'CMakeLists.txt', 'sonar-project.properties', '.gitignore', 'README.md',
}


def should_skip_directory(name: str) -> bool:
    """Build output, dependency and hidden directories are never walked."""
    return name in SKIP_DIRS or name.startswith('.')


def _build_file_type(filename: str) -> Optional[BuildFileType]:
    for build_type in BUILD_FILE_TYPES:
        if fnmatch.fnmatchcase(filename, build_type.pattern):
            return build_type
    return None


class ProjectStructureAnalyzer:
    """
    Structural scan of a project tree.

    Usage:
        structure = ProjectStructureAnalyzer().analyze("/path/to/project")
        print(structure.project_type, structure.directory_tree)
    """

    def __init__(self, max_depth: int = 5, max_tree_lines: int = 100, tree_depth: int = 3,
                 extra_exclusions: Tuple[str, ...] = ()):
        self.max_depth = max_depth
        self.max_tree_lines = max_tree_lines
        self.tree_depth = tree_depth
        self.extra_exclusions = tuple(extra_exclusions)

    def analyze(self, project_path: Union[str, Path]) -> ProjectStructure:
        root = Path(project_path).resolve()

        build_files = self._find_build_files(root)
        modules = self._detect_modules(root, build_files)
        project_type = 'multi-module' if len(modules) > 1 else 'single'
        logger.info(f"Project structure of {root}: {project_type}, {len(modules)} module(s)")

        return ProjectStructure(
            root_path=str(root),
            project_type=project_type,
            modules=tuple(modules),
            global_exclusions=self._exclusions(),
            detected_languages=tuple(self._language_shares(root)),
            directory_tree=self._directory_tree(root),
            build_files=tuple(path for path, _ in build_files),
            config_files=tuple(self._config_files(root)),
        )

    def _walk(self, root: Path) -> Iterator[Tuple[Path, List[str]]]:
        """os.walk bounded by max_depth, skipping excluded directories."""
        base_depth = len(root.parts)
        for current, dirs, filenames in os.walk(root):
            current_path = Path(current)
            depth = len(current_path.parts) - base_depth
            if depth >= self.max_depth:
                dirs[:] = []
            else:
                dirs[:] = sorted(d for d in dirs if not should_skip_directory(d))
            yield current_path, sorted(filenames)

    def _find_build_files(self, root: Path) -> List[Tuple[str, BuildFileType]]:
        found = []
        for current, filenames in self._walk(root):
            in_dir = []
            for filename in filenames:
                build_type = _build_file_type(filename)
                if build_type:
                    relative = (current / filename).relative_to(root).as_posix()
                    in_dir.append((relative, build_type))
            # Table order decides which build file of a directory comes first
            in_dir.sort(key=lambda item: BUILD_FILE_TYPES.index(item[1]))
            found.extend(in_dir)
        logger.debug(f"Found {len(found)} build files under {root}")
        return found

    def _detect_modules(self, root: Path,
                        build_files: List[Tuple[str, BuildFileType]]) -> List[ModuleInfo]:
        # First build file per directory decides the module's build tool
        by_dir: "OrderedDict[str, Tuple[str, BuildFileType]]" = OrderedDict()
        for relative, build_type in build_files:
            directory = os.path.dirname(relative) or '.'
            by_dir.setdefault(directory, (relative, build_type))

        modules = []
        for directory, (relative, build_type) in by_dir.items():
            module_root = root / directory
            layout = LAYOUTS.get(build_type.build_tool, LAYOUTS['npm'])
            sources = existing_paths(module_root, layout.sources)
            tests = existing_paths(module_root, layout.tests)
            binaries = existing_paths(module_root, layout.binaries) if layout.binaries else None

            modules.append(ModuleInfo(
                name=root.name if directory == '.' else os.path.basename(directory),
                relative_path=directory,
                language=build_type.languages,
                sources_dirs=tuple(sources) if sources else ('src',),
                tests_dirs=tuple(tests),
                binary_dirs=tuple(binaries) if binaries is not None else None,
                build_file=os.path.basename(relative),
                build_tool=build_type.build_tool,
            ))

        if not modules:
            modules.append(ModuleInfo(
                name=root.name,
                relative_path='.',
                sources_dirs=('src',),
                tests_dirs=('test', 'tests'),
            ))
        return modules

    def _language_shares(self, root: Path) -> List[LanguageShare]:
        counts: Dict[str, int] = {}
        extensions: Dict[str, List[str]] = {}
        total = 0

        for _, filenames in self._walk(root):
            for filename in filenames:
                ext = os.path.splitext(filename)[1].lower()
                for language, language_exts in LANGUAGE_EXTENSIONS.items():
                    if ext in language_exts:
                        counts[language] = counts.get(language, 0) + 1
                        seen = extensions.setdefault(language, [])
                        if ext not in seen:
                            seen.append(ext)
                        total += 1

        shares = [
            LanguageShare(
                name=language,
                files_count=count,
                percentage=round_half_up(count * 100 / total) if total else 0,
                extensions=tuple(extensions[language]),
            )
            for language, count in counts.items()
        ]
        shares.sort(key=lambda share: share.files_count, reverse=True)
        return shares

    def _config_files(self, root: Path) -> List[str]:
        try:
            entries = sorted(entry.name for entry in root.iterdir() if entry.is_file())
        except OSError as e:
            logger.debug(f"Cannot list {root}: {e}")
            return []
        return [name for name in entries
                if any(fnmatch.fnmatchcase(name, pattern) for pattern in CONFIG_FILE_PATTERNS)]

    def _directory_tree(self, root: Path) -> str:
        lines = [f"{root.name}/"]
        self._render_tree(root, '', 0, lines)
        if len(lines) >= self.max_tree_lines:
            lines = lines[:self.max_tree_lines]
            lines.append('... (truncated)')
        return '\n'.join(lines)

    def _render_tree(self, directory: Path, prefix: str, depth: int, lines: List[str]) -> None:
        if depth > self.tree_depth or len(lines) >= self.max_tree_lines:
            return
        try:
            entries = [e for e in directory.iterdir() if not (e.is_dir() and should_skip_directory(e.name))]
        except OSError as e:
            logger.debug(f"Cannot list {directory}: {e}")
            return

        # Directories first, then the files worth showing
        dirs = sorted((e for e in entries if e.is_dir()), key=lambda e: e.name)
        files = sorted((e for e in entries if e.is_file() and self._shown_in_tree(e.name)),
                       key=lambda e: e.name)
        shown = dirs + files

        for index, entry in enumerate(shown):
            if len(lines) >= self.max_tree_lines:
                return
            last = index == len(shown) - 1
            connector = '└── ' if last else '├── '
            if entry.is_dir():
                lines.append(f"{prefix}{connector}{entry.name}/")
                self._render_tree(entry, prefix + ('    ' if last else '│   '), depth + 1, lines)
            else:
                lines.append(f"{prefix}{connector}{entry.name}")

    @staticmethod
    def _shown_in_tree(name: str) -> bool:
        return name in TREE_FILES or name.endswith(('.csproj', '.sln'))

    def _exclusions(self) -> Tuple[str, ...]:
        exclusions = list(DEFAULT_EXCLUSIONS)
        for pattern in self.extra_exclusions:
            if pattern not in exclusions:
                exclusions.append(pattern)
        return tuple(exclusions)
