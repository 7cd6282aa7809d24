"""
Shared fixtures: a scripted command runner and test settings.
"""

from dataclasses import dataclass
from pathlib import Path
from types import SimpleNamespace
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from config.settings import Settings
from src.core.command_runner import CommandRunner
from src.core.context import ExecutionContext
from src.utils.prompt import ConfirmationGate

MB = 1024 * 1024


def _is_subsequence(pattern: Sequence[str], cmd: Sequence[str]) -> bool:
    it = iter(cmd)
    return all(any(token == part for part in it) for token in pattern)


@dataclass
class Rule:
    pattern: Tuple[str, ...]
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    effect: Optional[Callable[[List[str]], None]] = None


class FakeRunner(CommandRunner):
    """Command runner that answers from scripted rules instead of spawning processes.

    A rule matches when its tokens appear in the command in order. Rules
    added later take precedence. Unmatched commands succeed silently.
    """

    def __init__(self, dry_run: bool = False, executables: Sequence[str] = ("nvidia-smi",)):
        super().__init__(dry_run=dry_run, use_sudo=False)
        self.rules: List[Rule] = []
        self.executables = set(executables)

    def on(self, *pattern: str, returncode: int = 0, stdout: str = "", stderr: str = "",
           effect: Optional[Callable[[List[str]], None]] = None) -> "FakeRunner":
        self.rules.insert(0, Rule(tuple(pattern), returncode, stdout, stderr, effect))
        return self

    def which(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.executables else None

    def _execute(self, cmd, cwd, env, capture):
        for rule in self.rules:
            if _is_subsequence(rule.pattern, cmd):
                if rule.effect:
                    rule.effect(cmd)
                return rule.returncode, rule.stdout, rule.stderr
        return 0, "", ""

    @property
    def commands(self) -> List[List[str]]:
        return [r.argv for r in self.history]

    def ran(self, *pattern: str) -> bool:
        return any(_is_subsequence(pattern, cmd) for cmd in self.commands)

    def count(self, *pattern: str) -> int:
        return sum(1 for cmd in self.commands if _is_subsequence(pattern, cmd))


def _fake_clone(cmd: List[str]) -> None:
    dest = Path(cmd[-1])
    dest.mkdir(parents=True)
    (dest / "main.py").write_text("print('ComfyUI')\n")
    (dest / "requirements.txt").write_text("torch\nsafetensors\n")


def _fake_venv(cmd: List[str]) -> None:
    bin_dir = Path(cmd[-1]) / "bin"
    bin_dir.mkdir(parents=True)
    (bin_dir / "activate").write_text("# activate\n")
    (bin_dir / "python").write_text("")


def healthy_host(runner: FakeRunner, vram_mb: int = 12288, codename: str = "jammy") -> FakeRunner:
    """Script a supported Ubuntu host with a GPU and no CUDA toolkit yet."""
    runner.on("nvidia-smi", stdout=f"NVIDIA GeForce RTX 3060, {vram_mb}\n")
    runner.on("lsb_release", "-cs", stdout=f"{codename}\n")
    runner.on("dpkg", "-s", stdout="Package: libtinfo5\nStatus: install ok installed\n")
    runner.on("--version", returncode=127, stderr="nvcc: command not found")
    runner.on("git", "clone", effect=_fake_clone)
    runner.on("-m", "venv", effect=_fake_venv)
    return runner


@pytest.fixture
def runner() -> FakeRunner:
    return healthy_host(FakeRunner())


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        workdir=tmp_path / "work",
        apt={
            "sources_dir": tmp_path / "sources.list.d",
            "preferences_dir": tmp_path / "preferences.d"
        },
        artifacts={"enabled": False},
        logging={"file_path": None}
    )


@pytest.fixture
def make_ctx(settings):
    def _make(runner: CommandRunner, answers: Sequence[str] = (), assume_yes: bool = False,
              settings_override: Optional[Settings] = None) -> ExecutionContext:
        replies = iter(answers)
        gate = ConfirmationGate(assume_yes=assume_yes, input_fn=lambda prompt: next(replies))
        return ExecutionContext.create(settings_override or settings, runner, gate)
    return _make


@pytest.fixture(autouse=True)
def memory(monkeypatch):
    """Set the RAM and swap sizes psutil reports, in MB."""
    import src.stages.probe as probe

    def _set(ram_mb: int, swap_mb: int) -> None:
        monkeypatch.setattr(probe.psutil, "virtual_memory", lambda: SimpleNamespace(total=ram_mb * MB))
        monkeypatch.setattr(probe.psutil, "swap_memory", lambda: SimpleNamespace(total=swap_mb * MB))

    _set(32000, 2048)
    return _set


@pytest.fixture(autouse=True)
def clean_alloc_conf(monkeypatch):
    # setenv first so the value the report stage writes is undone after the test
    monkeypatch.setenv("PYTORCH_CUDA_ALLOC_CONF", "")
    monkeypatch.delenv("PYTORCH_CUDA_ALLOC_CONF")
