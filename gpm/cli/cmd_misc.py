"""CLI — version / help"""

from __future__ import annotations

import click

from gpm import __version__


def register(group: click.Group) -> None:
    group.add_command(version)
    group.add_command(help_cmd)


@click.command()
def version() -> None:
    """输出版本号"""
    click.echo(f"gpm {__version__}")


@click.command(name="help")
@click.pass_context
def help_cmd(ctx: click.Context) -> None:
    """输出用法说明"""
    click.echo(ctx.find_root().get_help())
