"""版本钉扎执行器 - 按清单逐个拉取依赖并检出到指定版本

每条 DependencyRecord 独立处理:

  1. 本地路径（version spec 以 "." 或 "/" 开头）:
     删除安装位置上已有的条目，创建父目录，符号链接到目标的绝对路径。
     不做任何网络访问。
  2. VCS 版本:
     a. 获取该安装位置的进程内互斥锁；若存在其他进程留下的 VCS 锁文件，
        轮询等待其消失
     b. go get -d 拉取源码（不带 -u，不升级已有版本）
     c. 识别 VCS 标记目录并执行对应的静默检出命令
     d. 未发现标记目录时不做检出（状态为 fetched，不算失败）

单个包失败只影响自身的 PinResult，其余包继续执行；
汇总结果由 PinReport 返回给调用方决定退出码。
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from gpm.core import vcs
from gpm.core.config import Config, get_config
from gpm.core.exceptions import ExecutionError
from gpm.core.models import DependencyRecord, PinReport, PinResult, PinStatus
from gpm.core.vendor import install_path, vendor_env
from gpm.utils.shell import CommandExecutor, get_executor, run_cmd

logger = logging.getLogger(__name__)


class Pinner:
    """并发版本钉扎执行器

    同一安装位置的记录通过进程内锁串行执行，不同位置之间并发执行。
    同一 import path 出现多次时，最终状态取决于最后完成的那一条。
    """

    def __init__(
        self,
        root: Path,
        executor: CommandExecutor | None = None,
        max_workers: int | None = None,
        cwd: str | Path | None = None,
        config: Config | None = None,
    ) -> None:
        self.root = Path(root)
        self.config = config or get_config()
        self.max_workers = self.config.max_workers if max_workers is None else max_workers
        self.cwd = Path(cwd or os.getcwd())
        self._executor = executor or get_executor()
        self._locks: dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # 批量执行
    # ------------------------------------------------------------------

    def pin_all(self, records: list[DependencyRecord]) -> PinReport:
        """并发钉扎全部依赖，阻塞直到全部完成，结果顺序与输入一致"""
        if not records:
            return PinReport()

        workers = self.max_workers or len(records)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pin") as pool:
            futures = [pool.submit(self.pin, r) for r in records]
            results = []
            for record, future in zip(records, futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.exception("钉扎 '%s' 时出错", record)
                    dest = install_path(self.root, record.import_path)
                    results.append(PinResult(
                        record=record, status=PinStatus.FAILED, install_path=str(dest),
                        message=f"{type(e).__name__}: {e}",
                    ))
        return PinReport(results=results)

    def pin(self, record: DependencyRecord) -> PinResult:
        """钉扎单个依赖，任何失败都折算为 FAILED 结果而不抛出"""
        dest = Path(os.path.normpath(install_path(self.root, record.import_path)))
        if not self._within_root(dest):
            return self._failed(record, dest, f"安装位置超出 {self.root / 'src'}: {dest}")

        try:
            if record.is_local:
                return self._link_local(record, dest)
            with self._path_lock(dest):
                return self._pin_revision(record, dest)
        except (ExecutionError, OSError) as e:
            return self._failed(record, dest, str(e))

    # ------------------------------------------------------------------
    # 本地路径
    # ------------------------------------------------------------------

    def _link_local(self, record: DependencyRecord, dest: Path) -> PinResult:
        target = Path(record.version_spec).expanduser()
        if not target.is_absolute():
            target = self.cwd / target
        target = target.resolve()
        if not target.exists():
            return self._failed(record, dest, f"本地路径不存在: {target}")

        with self._path_lock(dest):
            _remove_entry(dest)
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.symlink_to(target, target_is_directory=target.is_dir())

        logger.info("链接: %s -> %s", record.import_path, target)
        return PinResult(
            record=record, status=PinStatus.LINKED, install_path=str(dest),
            message=str(target),
        )

    # ------------------------------------------------------------------
    # VCS 版本
    # ------------------------------------------------------------------

    def _pin_revision(self, record: DependencyRecord, dest: Path) -> PinResult:
        revision = record.version_spec
        if not vcs.is_safe_revision(revision):
            return self._failed(record, dest, f"版本号包含非法字符: {revision}")

        if not self._wait_for_foreign_locks(dest):
            return self._failed(
                record, dest, f"等待 VCS 锁超时（{self.config.lock_wait_timeout}秒）",
            )

        logger.info("拉取: %s", record.import_path)
        run_cmd(
            [self.config.go_binary, "get", "-d", record.import_path],
            cwd=str(self.root), env=self._fetch_env(),
            timeout=self.config.timeout, label=f"go get {record.import_path}",
            executor=self._executor,
        )

        backend = vcs.detect(dest)
        if backend is None:
            logger.debug("未发现 VCS 标记目录，跳过检出: %s", dest)
            return PinResult(record=record, status=PinStatus.FETCHED, install_path=str(dest))

        run_cmd(
            backend.checkout_command(revision),
            cwd=str(dest), timeout=self.config.timeout,
            label=f"{backend.name} 检出 {record}", executor=self._executor,
        )
        logger.info("已钉扎: %s (%s)", record, backend.name)
        return PinResult(
            record=record, status=PinStatus.PINNED, install_path=str(dest),
            vcs=backend.name,
        )

    def _wait_for_foreign_locks(self, dest: Path) -> bool:
        """等待其他进程留下的 VCS 锁文件消失，超时返回 False"""
        locks = vcs.held_locks(dest)
        if not locks:
            return True
        logger.warning("检测到进行中的检出 %s: %s，等待...", dest, ", ".join(locks))
        limit = self.config.lock_wait_timeout
        start = time.monotonic()
        while vcs.held_locks(dest):
            if limit and time.monotonic() - start >= limit:
                return False
            time.sleep(self.config.lock_poll_interval)
        return True

    def _fetch_env(self) -> dict[str, str]:
        env = vendor_env(self.root)
        env["GO111MODULE"] = "off"
        return env

    # ------------------------------------------------------------------
    # 辅助
    # ------------------------------------------------------------------

    def _path_lock(self, dest: Path) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(dest, threading.Lock())

    def _within_root(self, dest: Path) -> bool:
        src = Path(os.path.normpath(self.root / "src"))
        return src in dest.parents

    @staticmethod
    def _failed(record: DependencyRecord, dest: Path, message: str) -> PinResult:
        logger.error("失败: %s - %s", record, message)
        return PinResult(
            record=record, status=PinStatus.FAILED, install_path=str(dest),
            message=message,
        )


def _remove_entry(path: Path) -> None:
    """删除路径上已有的文件、符号链接或目录"""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)
