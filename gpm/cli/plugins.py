"""插件委派

未知子命令 X 按约定查找 PATH 中的可执行文件 gpm-X，
找到则把剩余参数原样交给它执行，退出码透传；找不到则输出用法并以 1 退出。
"""

from __future__ import annotations

import logging
import shutil

import click

from gpm.core.config import get_config
from gpm.utils.shell import run_passthrough

logger = logging.getLogger(__name__)


def find_plugin(name: str) -> str | None:
    """查找插件可执行文件，返回其完整路径"""
    return shutil.which(f"{get_config().plugin_prefix}{name}")


def make_plugin_command(name: str) -> click.Command:
    """构造一个把全部参数转交给插件 gpm-<name> 的 click 命令

    查找在命令执行时进行，此时 main 已加载配置（插件前缀可配置）。
    """

    @click.pass_context
    def _delegate(ctx: click.Context, args: tuple[str, ...]) -> None:
        executable = find_plugin(name)
        if executable is None:
            click.echo(f"未知命令: {name}\n", err=True)
            click.echo(ctx.find_root().get_help(), err=True)
            ctx.exit(1)
        logger.debug("委派插件: %s %s", executable, " ".join(args))
        ctx.exit(run_passthrough([executable, *args]))

    return click.Command(
        name=name,
        callback=_delegate,
        params=[click.Argument(["args"], nargs=-1, type=click.UNPROCESSED)],
        context_settings={
            "ignore_unknown_options": True,
            "allow_interspersed_args": False,
            "help_option_names": [],
        },
    )


class PluginGroup(click.Group):
    """内置命令优先，其余子命令一律按命名约定回退到外部插件"""

    def resolve_command(
        self, ctx: click.Context, args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = args[0]
        if self.get_command(ctx, cmd_name) is not None or ctx.resilient_parsing:
            return super().resolve_command(ctx, args)
        return cmd_name, make_plugin_command(cmd_name), args[1:]
