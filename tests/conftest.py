"""测试共享 fixture — 全局状态隔离 + 模拟命令执行器

FakeExecutor 记录所有调用；对 `go get` 按 repos 映射在 GOPATH/src 下
生成带 VCS 标记目录的工作副本，模拟真实拉取后的磁盘状态。
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from gpm.core import config as cfgmod
from gpm.utils import shell
from gpm.utils.logger import reset_logging
from gpm.utils.shell import CommandResult


class FakeExecutor:
    """可编程的 CommandExecutor 实现"""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], str, dict[str, str] | None]] = []
        self.repos: dict[str, str] = {}       # import path -> 标记目录（".git" 等，"" 表示无）
        self.failures: dict[str, tuple[int, str]] = {}  # 命令前缀 -> (rc, stderr)
        self.timeouts: list[float | None] = []  # 与 calls 一一对应

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        self.calls.append((list(cmd), cwd, env))
        self.timeouts.append(timeout)
        joined = " ".join(cmd)
        for prefix, (rc, err) in self.failures.items():
            if joined.startswith(prefix):
                return CommandResult(returncode=rc, stdout="", stderr=err)
        if cmd[:3] == ["go", "get", "-d"] and env is not None:
            pkg = cmd[3]
            dest = Path(env["GOPATH"]) / "src" / pkg
            dest.mkdir(parents=True, exist_ok=True)
            marker = self.repos.get(pkg, ".git")
            if marker:
                (dest / marker).mkdir(exist_ok=True)
        return CommandResult(returncode=0, stdout="", stderr="")

    def commands(self) -> list[list[str]]:
        return [c for c, _, _ in self.calls]


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """每个用例使用默认配置与真实执行器，结束后恢复"""
    monkeypatch.delenv("GPM_CONFIG", raising=False)
    cfgmod.reset_config()
    original = shell.get_executor()
    yield
    shell.set_executor(original)
    cfgmod.reset_config()
    reset_logging()


@pytest.fixture
def fake_executor() -> FakeExecutor:
    fake = FakeExecutor()
    shell.set_executor(fake)
    return fake
