"""版本控制系统适配

支持 git / hg / bzr / svn 四种系统：
- 通过工作副本中的标记目录（.git / .hg / .bzr / .svn）识别
- 各自提供静默、非交互的 "更新到指定版本" 命令
- git / hg / bzr 提供锁文件路径，用于检测其他进程正在进行的检出
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

_SAFE_REV_RE = re.compile(r"^[a-zA-Z0-9_.+/@~^\-]+$")


@dataclass(frozen=True)
class VcsBackend:
    """单个版本控制系统的描述"""

    name: str
    marker: str
    checkout_template: tuple[str, ...]
    lock_artifact: str = ""

    def checkout_command(self, revision: str) -> list[str]:
        """生成检出命令，{rev} 替换为目标版本"""
        return [arg.replace("{rev}", revision) for arg in self.checkout_template]

    def is_locked(self, workdir: Path) -> bool:
        return bool(self.lock_artifact) and (workdir / self.lock_artifact).exists()


GIT = VcsBackend("git", ".git", ("git", "checkout", "-q", "{rev}"), ".git/index.lock")
HG = VcsBackend("hg", ".hg", ("hg", "update", "-q", "{rev}"), ".hg/store/lock")
BZR = VcsBackend("bzr", ".bzr", ("bzr", "revert", "-q", "-r", "{rev}"), ".bzr/checkout/lock")
SVN = VcsBackend("svn", ".svn", ("svn", "update", "-q", "--non-interactive", "-r", "{rev}"))

# 检测顺序即优先级
BACKENDS: tuple[VcsBackend, ...] = (GIT, HG, BZR, SVN)


def detect(workdir: Path) -> VcsBackend | None:
    """返回管理该目录的 VCS，未发现任何标记目录时返回 None"""
    for backend in BACKENDS:
        if (workdir / backend.marker).is_dir():
            return backend
    return None


def held_locks(workdir: Path) -> list[str]:
    """返回当前存在的 VCS 锁文件（相对路径）"""
    return [b.lock_artifact for b in BACKENDS if b.is_locked(workdir)]


def is_safe_revision(revision: str) -> bool:
    """版本号只允许常见字符，且不能以 "-" 开头（避免被当作命令行选项）"""
    return bool(_SAFE_REV_RE.match(revision)) and not revision.startswith("-")
