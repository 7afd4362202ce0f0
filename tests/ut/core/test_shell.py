"""shell.py 单元测试"""

from __future__ import annotations

import os
import sys

import pytest

from gpm.core.exceptions import ExecutionError
from gpm.utils.shell import LocalExecutor, run_cmd, run_passthrough


class TestLocalExecutor:
    def test_success(self, tmp_path) -> None:
        r = LocalExecutor().execute(["echo", "hello"], cwd=str(tmp_path))
        assert r.success
        assert "hello" in r.stdout

    def test_nonzero_does_not_raise(self, tmp_path) -> None:
        r = LocalExecutor().execute(["false"], cwd=str(tmp_path))
        assert not r.success

    def test_missing_binary(self, tmp_path) -> None:
        r = LocalExecutor().execute(["gpm-no-such-binary-xyz"], cwd=str(tmp_path))
        assert r.returncode == 127

    def test_timeout(self, tmp_path) -> None:
        r = LocalExecutor().execute(["sleep", "5"], cwd=str(tmp_path), timeout=0.1)
        assert r.returncode == 124
        assert "超时" in r.stderr


class TestRunCmd:
    def test_success(self, tmp_path) -> None:
        r = run_cmd(["echo", "hello"], cwd=str(tmp_path), label="test")
        assert "hello" in r.stdout

    def test_failure_raises(self, tmp_path) -> None:
        with pytest.raises(ExecutionError, match="cmd失败"):
            run_cmd(["false"], cwd=str(tmp_path))

    def test_custom_label_in_error(self, tmp_path) -> None:
        with pytest.raises(ExecutionError, match="git checkout失败"):
            run_cmd(["false"], cwd=str(tmp_path), label="git checkout")

    def test_env_passed(self, tmp_path) -> None:
        env = {**os.environ, "MY_TEST_VAR": "42"}
        r = run_cmd(["env"], cwd=str(tmp_path), env=env, label="env_test")
        assert "MY_TEST_VAR=42" in r.stdout

    def test_injected_executor(self, fake_executor) -> None:
        run_cmd(["go", "version"], executor=fake_executor)
        assert fake_executor.commands() == [["go", "version"]]


class TestRunPassthrough:
    def test_exit_code(self) -> None:
        assert run_passthrough([sys.executable, "-c", "raise SystemExit(3)"]) == 3

    def test_missing_command(self) -> None:
        assert run_passthrough(["gpm-no-such-binary-xyz"]) == 127
