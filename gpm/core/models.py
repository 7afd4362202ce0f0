"""核心数据模型

DependencyRecord 由清单解析产生，PinResult / PinReport 由钉扎执行器产生。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

LOCAL_PREFIXES = (".", "/")


@dataclass(frozen=True)
class DependencyRecord:
    """清单中的一条依赖 (import path, version spec)"""

    import_path: str
    version_spec: str
    line: int = 0  # 清单中的行号（从 1 开始），仅用于诊断

    @property
    def is_local(self) -> bool:
        """version spec 以 "." 或 "/" 开头时视为本地路径"""
        return self.version_spec.startswith(LOCAL_PREFIXES)

    def __str__(self) -> str:
        return f"{self.import_path}@{self.version_spec}"


class PinStatus(str, Enum):
    LINKED = "linked"    # 本地路径，已创建符号链接
    PINNED = "pinned"    # 已拉取并检出到指定版本
    FETCHED = "fetched"  # 已拉取，但未发现 VCS 标记目录，未做检出
    FAILED = "failed"


@dataclass
class PinResult:
    """单个依赖包的钉扎结果"""

    record: DependencyRecord
    status: PinStatus
    install_path: str = ""
    vcs: str = ""
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status != PinStatus.FAILED


@dataclass
class PinReport:
    """一次 install 的汇总结果，顺序与清单一致"""

    results: list[PinResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> list[PinResult]:
        return [r for r in self.results if not r.success]

    @property
    def succeeded(self) -> list[PinResult]:
        return [r for r in self.results if r.success]

    @property
    def success(self) -> bool:
        return not self.failed
