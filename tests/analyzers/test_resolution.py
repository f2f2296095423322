"""Tests for timed dependency resolution."""

import subprocess
from pathlib import Path

from scanprep.analyzers.resolution import Failed, Resolved, TimedOut, parse_classpath, resolve_dependencies


def fake_run(outcome):
    def run(args, **kwargs):
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
    return run


class TestResolveDependencies:
    def test_success(self, monkeypatch, tmp_path):
        completed = subprocess.CompletedProcess(['mvn'], 0, stdout='/r/a.jar:/r/b.jar\n', stderr='')
        monkeypatch.setattr(subprocess, 'run', fake_run(completed))

        outcome = resolve_dependencies(('mvn', 'x'), tmp_path, lambda out: parse_classpath(out, ':'))
        assert outcome == Resolved(paths=('/r/a.jar', '/r/b.jar'), command='mvn x')

    def test_run_arguments(self, monkeypatch, tmp_path):
        seen = {}

        def run(args, **kwargs):
            seen['args'] = args
            seen.update(kwargs)
            return subprocess.CompletedProcess(args, 0, stdout='', stderr='')

        monkeypatch.setattr(subprocess, 'run', run)
        resolve_dependencies(('gradle', 'deps'), tmp_path, lambda out: [], timeout_seconds=7)

        assert seen['args'] == ['gradle', 'deps']
        assert seen['cwd'] == str(tmp_path)
        assert seen['timeout'] == 7
        assert seen['capture_output'] is True

    def test_timeout(self, monkeypatch, tmp_path):
        monkeypatch.setattr(subprocess, 'run', fake_run(subprocess.TimeoutExpired('mvn', 5)))
        outcome = resolve_dependencies(('mvn',), tmp_path, lambda out: [], timeout_seconds=5)
        assert outcome == TimedOut(timeout_seconds=5, command='mvn')

    def test_nonzero_exit_uses_last_stderr_line(self, monkeypatch, tmp_path):
        completed = subprocess.CompletedProcess(['mvn'], 1, stdout='', stderr='first\nBUILD FAILURE\n')
        monkeypatch.setattr(subprocess, 'run', fake_run(completed))
        assert resolve_dependencies(('mvn',), tmp_path, lambda out: []).reason == 'BUILD FAILURE'

    def test_nonzero_exit_without_stderr(self, monkeypatch, tmp_path):
        completed = subprocess.CompletedProcess(['mvn'], 3, stdout='', stderr='')
        monkeypatch.setattr(subprocess, 'run', fake_run(completed))
        assert resolve_dependencies(('mvn',), tmp_path, lambda out: []).reason == 'exit code 3'

    def test_missing_executable(self, tmp_path):
        outcome = resolve_dependencies(('scanprep-no-such-build-tool',), tmp_path, lambda out: [])
        assert isinstance(outcome, Failed)
        assert outcome.command == 'scanprep-no-such-build-tool'

    def test_missing_working_directory(self, tmp_path):
        outcome = resolve_dependencies(('mvn',), Path(tmp_path / 'missing'), lambda out: [])
        assert isinstance(outcome, Failed)


class TestParseClasspath:
    def test_skips_log_lines(self):
        stdout = (
            "[INFO] Scanning for projects...\n"
            "Downloading from central: https://repo.maven.apache.org/a.jar\n"
            "/r/a.jar:/r/b.jar\n"
            "[INFO] BUILD SUCCESS\n"
        )
        assert parse_classpath(stdout, ':') == ['/r/a.jar', '/r/b.jar']

    def test_wrapped_lines_joined(self):
        assert parse_classpath("/r/a.jar:/r/b.jar:\n/r/c.jar\n", ':') == ['/r/a.jar', '/r/b.jar', '/r/c.jar']

    def test_windows_separator(self):
        assert parse_classpath(r"C:\r\a.jar;C:\r\b.jar", ';') == [r'C:\r\a.jar', r'C:\r\b.jar']

    def test_non_jar_entries_dropped(self):
        assert parse_classpath("/r/classes:/r/a.jar", ':') == ['/r/a.jar']

    def test_no_jars(self):
        assert parse_classpath("[INFO] nothing\n\n", ':') == []
