"""gpm 命令行接口

CLI 按命令拆分为子模块，每个模块注册自己的命令到 main group。
未注册的子命令交给 PATH 中名为 gpm-<子命令> 的插件执行。
"""

import os
import sys
from typing import Any, Callable

import click

from gpm import __version__
from gpm.cli.plugins import PluginGroup
from gpm.core.config import init_config
from gpm.core.exceptions import GpmError
from gpm.utils.logger import setup_logging


def _run_guarded(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """执行命令主体，GpmError 统一输出为 `错误 [code]: message` 并以 1 退出"""
    try:
        return func(*args, **kwargs)
    except GpmError as e:
        click.echo(f"错误 [{e.code}]: {e}", err=True)
        sys.exit(1)


@click.group(
    cls=PluginGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(
    __version__, "-v", "--version", prog_name="gpm", message="%(prog)s %(version)s",
)
@click.pass_context
def main(ctx: click.Context) -> None:
    """gpm - 按 Godeps 清单钉扎 Go 依赖版本

    不带子命令时等同于 `gpm install`。
    """
    setup_logging(
        level=os.getenv("GPM_LOG_LEVEL", "INFO"),
        json_output=os.getenv("GPM_LOG_JSON", "") == "1",
    )
    _run_guarded(init_config)
    if ctx.invoked_subcommand is None:
        ctx.invoke(install)


# 注册各子命令
from gpm.cli.cmd_install import install, register as _reg_install  # noqa: E402
from gpm.cli.cmd_exec import register as _reg_exec  # noqa: E402
from gpm.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_install(main)
_reg_exec(main)
_reg_misc(main)
