import sys

import pytest

from src.core import command_runner
from src.core.command_runner import CommandRunner
from src.core.errors import CommandFailedError, ErrorKind


def test_successful_command_is_recorded():
    runner = CommandRunner(use_sudo=False)

    result = runner.run([sys.executable, "-c", "print('hello')"])

    assert result.ok
    assert result.stdout.strip() == "hello"
    assert runner.history == [result]


def test_non_zero_exit_raises_by_default():
    runner = CommandRunner(use_sudo=False)

    with pytest.raises(CommandFailedError) as excinfo:
        runner.run([sys.executable, "-c", "import sys; sys.exit(3)"])

    assert excinfo.value.result.returncode == 3
    assert excinfo.value.kind == ErrorKind.COMMAND_FAILED


def test_non_zero_exit_returned_when_unchecked():
    runner = CommandRunner(use_sudo=False)

    result = runner.run([sys.executable, "-c", "import sys; sys.exit(2)"], check=False)

    assert result.returncode == 2


def test_missing_executable_reports_127():
    runner = CommandRunner(use_sudo=False)

    result = runner.run(["definitely-not-a-real-tool-xyz"], check=False)

    assert result.returncode == 127
    assert "command not found" in result.stderr


def test_dry_run_skips_mutating_commands_only():
    runner = CommandRunner(dry_run=True, use_sudo=False)

    skipped = runner.run([sys.executable, "-c", "import sys; sys.exit(1)"])
    probed = runner.run([sys.executable, "-c", "print('probe')"], read_only=True)

    assert skipped.skipped and skipped.ok
    assert not probed.skipped
    assert probed.stdout.strip() == "probe"


def test_sudo_prefix_only_when_not_root(monkeypatch):
    runner = CommandRunner(dry_run=True, use_sudo=True)

    monkeypatch.setattr(command_runner.os, "geteuid", lambda: 1000)
    assert runner.run(["apt-get", "update"], sudo=True).argv[0] == "sudo"

    monkeypatch.setattr(command_runner.os, "geteuid", lambda: 0)
    assert runner.run(["apt-get", "update"], sudo=True).argv[0] == "apt-get"


def test_filesystem_helpers_respect_dry_run(tmp_path):
    target = tmp_path / "tree"
    (target / "sub").mkdir(parents=True)
    stale = tmp_path / "stale.pin"
    stale.write_text("pin")

    CommandRunner(dry_run=True).remove_tree(target)
    CommandRunner(dry_run=True).remove_file(stale)
    assert target.exists() and stale.exists()

    CommandRunner().remove_tree(target)
    CommandRunner().remove_file(stale)
    CommandRunner().remove_file(stale)
    assert not target.exists() and not stale.exists()
