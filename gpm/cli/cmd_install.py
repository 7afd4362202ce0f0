"""CLI — install 命令"""

from __future__ import annotations

import logging
import shutil

import click

from gpm.cli import _run_guarded
from gpm.core.config import get_config
from gpm.core.exceptions import ToolNotFoundError
from gpm.core.manifest import read_manifest
from gpm.core.models import PinReport
from gpm.core.pinner import Pinner
from gpm.core.vendor import resolve_install_root

logger = logging.getLogger(__name__)


def register(group: click.Group) -> None:
    group.add_command(install)


@click.command()
@click.argument("manifest", required=False)
@click.option(
    "--path", "vendor_path", default=None,
    help="安装到独立的 vendor 目录，并记录到标记文件供后续命令使用",
)
def install(manifest: str | None, vendor_path: str | None) -> None:
    """按清单拉取依赖并检出到指定版本（清单默认为 Godeps）

    已存在的工作副本不会从上游更新：首次拉取之后新增的标签或提交无法检出，
    需删除对应的依赖目录后重新 install。
    """
    report = _run_guarded(run_install, manifest, vendor_path)
    for r in report.failed:
        click.echo(f"  [FAIL] {r.record}: {r.message}", err=True)
    if not report.success:
        raise SystemExit(1)


def run_install(manifest: str | None, vendor_path: str | None) -> PinReport:
    """install 主体：解析清单 → 确定安装根目录 → 并发钉扎"""
    cfg = get_config()
    records = read_manifest(manifest or cfg.manifest)

    if any(not r.is_local for r in records) and shutil.which(cfg.go_binary) is None:
        raise ToolNotFoundError(f"未找到 {cfg.go_binary}，请确认已安装并位于 PATH 中")

    root = resolve_install_root(vendor_path)
    report = Pinner(root).pin_all(records)
    logger.info(
        "全部完成: %d 成功, %d 失败",
        len(report.succeeded), len(report.failed),
    )
    return report
