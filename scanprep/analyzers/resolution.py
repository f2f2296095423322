"""
Best-effort dependency resolution through a build tool's own command.

The outcome is a tagged DependencyResolution value rather than an
exception, so callers always degrade to a warning:

- Resolved: the command ran; paths holds whatever artifacts were parsed
- TimedOut: the command exceeded its timeout and was killed
- Failed: the command could not run or exited non-zero
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class Resolved:
    paths: Tuple[str, ...]
    command: str = ""


@dataclass(frozen=True)
class TimedOut:
    timeout_seconds: float
    command: str = ""


@dataclass(frozen=True)
class Failed:
    reason: str
    command: str = ""


DependencyResolution = Union[Resolved, TimedOut, Failed]


def resolve_dependencies(
    command: Sequence[str],
    cwd: Path,
    parse: Callable[[str], List[str]],
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> DependencyResolution:
    """
    Run a dependency-listing command and parse artifact paths from stdout.

    Args:
        command: Argument vector, run without a shell
        cwd: Working directory (the project root)
        parse: Turns stdout into artifact paths
        timeout_seconds: Hard limit after which the process is killed

    Returns:
        Resolved, TimedOut or Failed
    """
    display = ' '.join(command)
    logger.debug(f"Resolving dependencies with '{display}' in {cwd}")
    try:
        result = subprocess.run(
            list(command),
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        logger.warning(f"'{display}' timed out after {timeout_seconds:g}s")
        return TimedOut(timeout_seconds=timeout_seconds, command=display)
    except (OSError, ValueError) as e:
        logger.debug(f"'{display}' could not be started: {e}")
        return Failed(reason=str(e), command=display)

    if result.returncode != 0:
        stderr = (result.stderr or '').strip().splitlines()
        reason = stderr[-1] if stderr else f"exit code {result.returncode}"
        logger.debug(f"'{display}' failed: {reason}")
        return Failed(reason=reason, command=display)

    paths = parse(result.stdout or '')
    logger.debug(f"'{display}' resolved {len(paths)} artifacts")
    return Resolved(paths=tuple(paths), command=display)


def parse_classpath(stdout: str, separator: str) -> List[str]:
    """
    Extract jar paths from build-classpath output.

    Build-tool log lines ("[INFO] ..."), URLs and lines without a jar are
    dropped before the remaining text is split on the path separator.
    """
    lines = []
    for line in stdout.splitlines():
        trimmed = line.strip()
        if not trimmed:
            continue
        if trimmed.startswith('['):
            continue
        if '://' in trimmed:
            continue
        if '.jar' not in trimmed:
            continue
        lines.append(trimmed)

    if not lines:
        return []
    return [p for p in ''.join(lines).split(separator) if '.jar' in p]
