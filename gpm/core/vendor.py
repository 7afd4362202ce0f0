"""安装根目录解析

优先级:
  1. 显式指定的 --path（相对路径按工作目录转为绝对路径），
     同时创建 src/pkg/bin 并写入（覆盖）vendor 标记文件
  2. 工作目录下已有的 vendor 标记文件
  3. 进程级默认根目录: $GOPATH 的第一项，未设置时为 ~/go
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from gpm.core.config import get_config
from gpm.core.exceptions import VendorError
from gpm.utils.yaml_io import atomic_write

logger = logging.getLogger(__name__)

LAYOUT_DIRS = ("src", "pkg", "bin")
ALL_PACKAGES_SUFFIX = "/..."


def default_root(env: dict[str, str] | None = None) -> Path:
    """进程级默认安装根目录"""
    env = os.environ if env is None else env
    for entry in env.get("GOPATH", "").split(os.pathsep):
        if entry:
            return Path(entry).expanduser()
    return Path.home() / "go"


def marker_path(cwd: str | Path | None = None) -> Path:
    return Path(cwd or os.getcwd()) / get_config().marker_file


def read_marker(cwd: str | Path | None = None) -> Path | None:
    """读取 vendor 标记文件，不存在或为空时返回 None"""
    p = marker_path(cwd)
    if not p.is_file():
        return None
    try:
        content = p.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise VendorError(f"无法读取 vendor 标记文件 {p}: {e}") from e
    if not content:
        logger.warning("vendor 标记文件为空，忽略: %s", p)
        return None
    return Path(content.splitlines()[0])


def create_layout(root: Path) -> None:
    """创建 src/pkg/bin 子目录（已存在时无副作用）"""
    try:
        for name in LAYOUT_DIRS:
            (root / name).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise VendorError(f"无法创建 vendor 目录 {root}: {e}") from e


def resolve_install_root(
    explicit_path: str | Path | None = None,
    cwd: str | Path | None = None,
) -> Path:
    """确定本次运行的安装根目录"""
    base = Path(cwd or os.getcwd())

    if explicit_path:
        root = Path(explicit_path).expanduser()
        if not root.is_absolute():
            root = base / root
        root = Path(os.path.normpath(root))
        create_layout(root)
        p = marker_path(base)
        try:
            atomic_write(p, f"{root}\n")
        except OSError as e:
            raise VendorError(f"无法写入 vendor 标记文件 {p}: {e}") from e
        logger.info("使用 vendor 目录: %s", root)
        return root

    marked = read_marker(base)
    if marked is not None:
        logger.info("使用已记录的 vendor 目录: %s", marked)
        return marked

    root = default_root()
    logger.debug("使用默认安装目录: %s", root)
    return root


def install_path(root: Path, import_path: str) -> Path:
    """包在安装根目录下的位置: root/src/<import path>"""
    return root / "src" / import_path.removesuffix(ALL_PACKAGES_SUFFIX)


def vendor_env(root: Path, base_env: dict[str, str] | None = None) -> dict[str, str]:
    """生成指向 vendor 目录的环境变量（GOPATH 与 PATH）"""
    env = dict(os.environ if base_env is None else base_env)
    env["GOPATH"] = str(root)
    bin_dir = str(root / "bin")
    env["PATH"] = os.pathsep.join(p for p in (bin_dir, env.get("PATH", "")) if p)
    return env
