"""CLI — exec 命令"""

from __future__ import annotations

import logging

import click

from gpm.cli import _run_guarded
from gpm.core.vendor import read_marker, vendor_env
from gpm.utils.shell import run_passthrough

logger = logging.getLogger(__name__)


def register(group: click.Group) -> None:
    group.add_command(exec_cmd)


@click.command(
    name="exec",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def exec_cmd(ctx: click.Context, command: tuple[str, ...]) -> None:
    """在 vendor 环境（GOPATH / PATH）中执行命令，退出码透传"""
    root = _run_guarded(read_marker)
    if root is None:
        logger.warning("未找到 vendor 标记文件，使用当前环境执行")
        env = None
    else:
        logger.debug("vendor 环境: %s", root)
        env = vendor_env(root)
    ctx.exit(run_passthrough(list(command), env=env))
