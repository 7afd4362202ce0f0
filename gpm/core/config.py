"""集中配置管理

提供统一的配置入口，支持从 YAML 文件加载 + 编程式覆盖。
配置文件路径取自 $GPM_CONFIG，默认为工作目录下的 gpm.yml，不存在则全部取默认值。
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields

import yaml

from gpm.core.exceptions import ConfigError
from gpm.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "gpm.yml"


@dataclass
class Config:
    """gpm 全局配置"""

    # 文件
    manifest: str = "Godeps"
    marker_file: str = ".gpm_vendor"

    # 执行
    max_workers: int = 0            # 0 表示每个依赖包一个 worker
    command_timeout: float = 0      # 单条外部命令超时秒数，0 表示不限制
    lock_wait_timeout: float = 0    # 等待外部 VCS 锁的上限秒数，0 表示一直等待
    lock_poll_interval: float = 0.5

    # 外部工具
    go_binary: str = "go"
    plugin_prefix: str = "gpm-"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise ConfigError(f"配置文件无法解析: {path}: {e}") from e
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(
                f"配置文件内容必须是映射: {path} (实际类型: {type(data).__name__})"
            )

        known = {f.name: f for f in fields(cls) if f.name != "extra"}
        matched = {}
        for k, v in data.items():
            if k not in known:
                continue
            default = getattr(cls, k)
            if isinstance(default, str) and not isinstance(v, str):
                raise ConfigError(f"配置项 {k} 必须是字符串: {v!r}")
            if isinstance(default, (int, float)) and (
                isinstance(v, bool) or not isinstance(v, (int, float))
            ):
                raise ConfigError(f"配置项 {k} 必须是数字: {v!r}")
            matched[k] = v
        extra = {k: v for k, v in data.items() if k not in known}

        cfg = cls(**matched)
        cfg.extra = extra
        for k in ("max_workers", "command_timeout", "lock_wait_timeout", "lock_poll_interval"):
            if getattr(cfg, k) < 0:
                raise ConfigError(f"{k} 不能为负数: {getattr(cfg, k)}")
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def timeout(self) -> float | None:
        """外部命令超时，未配置时为 None"""
        return self.command_timeout or None


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    path = path or os.getenv("GPM_CONFIG", DEFAULT_CONFIG_FILE)
    _current = Config.from_file(path)
    logger.debug("配置已加载: %s", path)
    return _current


def reset_config() -> None:
    """清除全局配置（测试用）"""
    global _current  # noqa: PLW0603
    _current = None
